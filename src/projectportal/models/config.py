"""Portal configuration loaded from YAML."""

import tempfile
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_UPLOAD_BYTES = 50 * 1024 * 1024  # 50 MiB

CONFIG_FILENAMES = (".projectportal.yaml", ".projectportal.yml")


def _default_temp_dir() -> Path:
    return Path(tempfile.gettempdir()) / "projectportal-uploads"


class PortalConfig(BaseModel):
    """Runtime settings for the portal server and CLI.

    Attributes:
        default_save_path: Root used when a client accepts the default location
        database_path: JSON file backing the record store
        upload_temp_dir: Staging area for incoming uploads
        max_upload_bytes: Per-file upload ceiling
        public_dir: Directory of static pages (package pages when unset)
        host: Interface the server binds to
        port: Port the server listens on
        log_level: Root logging level name
    """

    model_config = ConfigDict(extra="forbid")

    default_save_path: Path = Field(
        default_factory=lambda: Path.home() / "ProjectSubmissions"
    )
    database_path: Path = Path("projects.json")
    upload_temp_dir: Path = Field(default_factory=_default_temp_dir)
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    public_dir: Path | None = None
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    @field_validator("max_upload_bytes", "port")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level

    @classmethod
    def from_yaml_dict(cls, data: dict | None) -> "PortalConfig":
        """Build a config from a parsed YAML mapping (None means defaults)."""
        return cls(**(data or {}))

    @classmethod
    def load(cls, path: Path) -> "PortalConfig":
        """Load and validate a YAML config file."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_yaml_dict(yaml.safe_load(f))

    def to_yaml_dict(self) -> dict:
        return self.model_dump(mode="json")


def discover_config(cwd: Path, explicit: Path | None = None) -> PortalConfig:
    """Find the config file to use, falling back to defaults.

    Precedence: explicit path, then a config file in ``cwd``, then
    ``~/.config/projectportal/config.yaml``.

    Args:
        cwd: Directory searched for ``.projectportal.yaml``
        explicit: Path given with ``--config``

    Returns:
        Loaded PortalConfig (defaults when no file is found)
    """
    if explicit is not None:
        return PortalConfig.load(explicit)

    for name in CONFIG_FILENAMES:
        candidate = cwd / name
        if candidate.is_file():
            return PortalConfig.load(candidate)

    user_config = Path.home() / ".config" / "projectportal" / "config.yaml"
    if user_config.is_file():
        return PortalConfig.load(user_config)

    return PortalConfig()
