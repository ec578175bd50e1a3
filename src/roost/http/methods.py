"""HTTP method names understood by the registrar."""

GET = "GET"
POST = "POST"
PUT = "PUT"
DELETE = "DELETE"
OPTIONS = "OPTIONS"
PATCH = "PATCH"

# Registration order used by ``any()``
STANDARD_METHODS: tuple[str, ...] = (GET, POST, PUT, DELETE, OPTIONS, PATCH)


def normalize_method(method: str) -> str:
    """Upper-case and strip a method name."""
    return method.strip().upper()
