"""Application configuration.

AppConfig is a frozen dataclass, immutable after creation, passed
explicitly to the App and its collaborators. There is no process-wide
root directory or app instance.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(root_path=Path(__file__).parent, debug=True)
    """

    # Project root; relative directories below resolve against it
    root_path: str | Path = "."

    # Debug error pages show the traceback
    debug: bool = False

    # Templates
    template_dir: str | Path = "templates"
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    @property
    def template_path(self) -> Path:
        """Absolute-or-root-relative template directory."""
        template_dir = Path(self.template_dir)
        if template_dir.is_absolute():
            return template_dir
        return Path(self.root_path) / template_dir
