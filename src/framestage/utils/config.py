"""Configuration management for framestage."""

import logging
from pathlib import Path
from typing import Optional, Dict, Any, List, Literal

import yaml
from pydantic import BaseModel, Field, model_validator


logger = logging.getLogger(__name__)


class SourceConfig(BaseModel):
    """Configuration for a capture source."""
    type: Literal["webcam", "video", "images", "rig"] = "webcam"
    # webcam
    device: int | str = 0
    width: Optional[int] = None
    height: Optional[int] = None
    fps: Optional[float] = None
    # video / images
    path: Optional[str] = None
    # rig
    children: List["SourceConfig"] = Field(default_factory=list)
    calibration_dir: Optional[str] = None

    model_config = {"extra": "allow"}  # Allow extra fields


SourceConfig.model_rebuild()


class ProducerConfig(BaseModel):
    """Configuration for the frame producer."""
    frame_first: int = Field(default=0, ge=0)
    frame_last: Optional[int] = Field(default=None, ge=0)  # None = unbounded
    enable_seek: bool = False
    empty_frame_threshold: int = Field(default=500, ge=1)
    queue_size: int = Field(default=8, ge=1)

    @model_validator(mode="after")
    def check_window(self) -> "ProducerConfig":
        """Reject windows that end before they start."""
        if self.frame_last is not None and self.frame_last < self.frame_first:
            raise ValueError(
                f"frame_last ({self.frame_last}) must be >= "
                f"frame_first ({self.frame_first})"
            )
        return self


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = "INFO"
    log_to_file: bool = False
    log_directory: str = "logs"
    max_log_size_mb: int = 100
    backup_count: int = 5


class FrameStageConfig(BaseModel):
    """Root configuration for framestage."""

    # System settings
    project_name: str = "framestage"
    version: str = "0.1.0"
    debug_mode: bool = False

    # Sub-configurations
    source: SourceConfig = Field(default_factory=SourceConfig)
    producer: ProducerConfig = Field(default_factory=ProducerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def setup_logging(self) -> None:
        """Configure logging based on config."""
        level_name = "DEBUG" if self.debug_mode else self.logging.level.upper()
        log_level = getattr(logging, level_name)

        handlers = []

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

        # File handler
        if self.logging.log_to_file:
            log_dir = Path(self.logging.log_directory)
            log_dir.mkdir(exist_ok=True, parents=True)

            from logging.handlers import RotatingFileHandler
            file_handler = RotatingFileHandler(
                log_dir / "framestage.log",
                maxBytes=self.logging.max_log_size_mb * 1024 * 1024,
                backupCount=self.logging.backup_count
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

        logging.basicConfig(
            level=log_level,
            handlers=handlers,
            force=True
        )

        logger.info(f"Logging configured: level={level_name}")


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> FrameStageConfig:
    """Load configuration from YAML file with optional overrides.

    Args:
        config_path: Path to YAML config file. If None, uses default.yaml
        overrides: Dictionary of config overrides (nested keys with dots)

    Returns:
        Validated FrameStageConfig instance

    Example:
        >>> config = load_config("config/default.yaml")
        >>> config = load_config(overrides={"producer.frame_last": 99})
    """
    # Find config file
    if config_path is None:
        # Look for default.yaml in config/ directory
        repo_root = Path(__file__).parent.parent.parent.parent
        config_path = repo_root / "config" / "default.yaml"
    else:
        config_path = Path(config_path)

    # Load YAML
    config_dict = {}
    if config_path.exists():
        logger.info(f"Loading config from {config_path}")
        with open(config_path) as f:
            config_dict = yaml.safe_load(f) or {}
    else:
        logger.warning(f"Config file not found: {config_path}, using defaults")

    # Apply overrides
    if overrides:
        config_dict = _apply_overrides(config_dict, overrides)

    # Create and validate config
    config = FrameStageConfig(**config_dict)
    config.setup_logging()

    return config


def _apply_overrides(
    config_dict: Dict[str, Any],
    overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """Apply nested overrides to config dictionary.

    Example:
        overrides = {"producer.enable_seek": True}
        -> config_dict["producer"]["enable_seek"] = True
    """
    for key, value in overrides.items():
        keys = key.split(".")
        d = config_dict
        for k in keys[:-1]:
            d = d.setdefault(k, {})
        d[keys[-1]] = value
    return config_dict


def parse_override(text: str) -> tuple[str, Any]:
    """Split a ``KEY=VALUE`` command-line override.

    The value is parsed as YAML so ``producer.frame_last=99`` yields an int
    and ``producer.enable_seek=true`` a bool.
    """
    key, sep, raw = text.partition("=")
    if not sep or not key:
        raise ValueError(f"Override must look like KEY=VALUE, got {text!r}")
    return key.strip(), yaml.safe_load(raw)
