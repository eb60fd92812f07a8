"""Configuration management for Declutter."""

import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, ClassVar

from declutter.config.paths import default_config_path
from declutter.platform.filesystem import ensure_parent_directory
from declutter.platform.logging import logger

DEBOUNCE_MS_DEFAULT = 100
COMPARISON_WINDOW_DEFAULT = 100
UNDO_LIMIT_DEFAULT = 50
SAME_SESSION_MINUTES_DEFAULT = 5
SIMILAR_NAMES_MIN_GROUP_DEFAULT = 3
OLD_FILE_DAYS_DEFAULT = 90
LARGE_FILE_MB_DEFAULT = 50
THUMBNAIL_WORKERS_DEFAULT = 2

# Comment block written above each key in the saved file; keys without a value
# (optional paths left unset) keep only their comment.
_TOML_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("log_file", ("Log file path (optional, defaults to logs/declutter.log)",)),
    ("default_location", ("Folder to review when none is given (optional, defaults to ~/Desktop)",)),
    (
        "immediate_binning",
        (
            "Move binned files to the trash immediately (default true)",
            "Set to false to collect them for a final review instead",
        ),
    ),
    (
        "cloud_destination",
        (
            "Destination folder for the cloud decision (optional)",
            'Example: cloud_destination = "~/Library/CloudStorage/GoogleDrive/My Drive"',
        ),
    ),
    ("debounce_ms", ("Suggestion tuning",)),
    ("comparison_window", ()),
    ("same_session_minutes", ()),
    ("similar_names_min_group", ()),
    ("old_file_days", ()),
    ("large_file_mb", ()),
    ("undo_limit", ("Session limits",)),
    ("thumbnail_workers", ()),
)


def _path_field(default: Path | None = None) -> Any:
    """Create a field for Path objects with proper conversion.

    Args:
        default: Default value for the field.

    Returns:
        Field with proper metadata for path handling.
    """
    return field(default=default, metadata={"path": True})


@dataclass
class Config:
    """Application configuration."""

    # Log file path
    log_file: Path | None = _path_field()

    # Folder reviewed when the CLI is given no location (defaults to ~/Desktop)
    default_location: Path | None = _path_field()

    # Send binned files to the trash right away instead of collecting them
    immediate_binning: bool = True

    # Folder that receives files relocated with the cloud decision
    cloud_destination: Path | None = _path_field()

    # Suggestion engine tuning
    debounce_ms: int = DEBOUNCE_MS_DEFAULT
    comparison_window: int = COMPARISON_WINDOW_DEFAULT
    same_session_minutes: int = SAME_SESSION_MINUTES_DEFAULT
    similar_names_min_group: int = SIMILAR_NAMES_MIN_GROUP_DEFAULT
    old_file_days: int = OLD_FILE_DAYS_DEFAULT
    large_file_mb: int = LARGE_FILE_MB_DEFAULT

    # Session limits
    undo_limit: int = UNDO_LIMIT_DEFAULT
    thumbnail_workers: int = THUMBNAIL_WORKERS_DEFAULT

    # Singleton instance
    _instance: ClassVar["Config | None"] = None
    _loaded_from: ClassVar[Path | None] = None

    def __post_init__(self) -> None:
        """Convert string paths to ``Path`` objects using field metadata.

        Only fields flagged with ``metadata={"path": True}`` by ``_path_field``
        are converted; empty strings become ``None``.
        """
        for f in fields(self):
            if not f.metadata.get("path", False):
                continue
            value = getattr(self, f.name)
            if isinstance(value, str):
                setattr(self, f.name, Path(value).expanduser() if value.strip() else None)

    def save(self) -> None:
        """Write the configuration to the config file as commented TOML."""

        target = default_config_path()
        try:
            _ = ensure_parent_directory(target)
            _ = target.write_text(self._render_toml(asdict(self)), encoding="utf-8")
        except OSError as e:
            logger.error("Failed to save configuration to %s: %s", target, e)
            raise
        logger.info("Configuration saved to %s", target)

    def _render_toml(self, config: dict[str, Any]) -> str:
        lines = ["# Declutter Configuration File"]
        for key, comments in _TOML_SECTIONS:
            if comments:
                lines.append("")
                lines.extend(f"# {comment}" for comment in comments)
            value = config[key]
            if value is not None:
                lines.append(f"{key} = {self._format_toml_value(value)}")
        lines.append("")
        return "\n".join(lines)

    def _format_toml_value(self, value: Any) -> str:
        """Format a value for TOML serialization.

        Args:
            value: Value to format

        Returns:
            str: Formatted value
        """
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, Path)):
            return f'"{str(value)}"'
        return str(value)

    @classmethod
    def load(cls) -> "Config":
        """Return the shared configuration, reading or creating the config file once.

        Unknown keys are logged and dropped.

        Raises:
            tomllib.TOMLDecodeError: The config file is not valid TOML.
            OSError: The config file could not be read or written.
        """
        if cls._instance is not None:
            return cls._instance

        config_file = default_config_path()
        if config_file.exists():
            instance = cls(**cls._read_known_keys(config_file))
            logger.info("Configuration loaded from %s", config_file)
        else:
            instance = cls()
            instance.save()
            logger.info("Created default configuration at %s", config_file)

        cls._instance = instance
        cls._loaded_from = config_file
        return instance

    @classmethod
    def _read_known_keys(cls, config_file: Path) -> dict[str, Any]:
        try:
            with open(config_file, "rb") as f:
                raw = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error("Failed to load configuration from %s: %s", config_file, e)
            raise

        known = {f.name for f in fields(cls)}
        for key in sorted(set(raw) - known):
            logger.warning("Ignoring unknown configuration key '%s'", key)
        return {key: value for key, value in raw.items() if key in known}


# Global configuration instance
config = Config.load()
