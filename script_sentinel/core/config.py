"""
Script Sentinel Configuration Management

Centralized configuration system with JSON loading and validation.
"""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .constants import (
    DEFAULT_FAST_MODEL,
    DEFAULT_IMAGE_EDIT_MODEL,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_TEXT_MODEL,
    DEFAULT_VIDEO_MODEL,
    IMAGE_OUTPUT_MIME_TYPE,
    PROJECT_NAME,
    VERSION,
)
from .exceptions import ConfigurationError, InvalidConfigError

DEFAULT_CONFIG_PATH = Path("config/script_sentinel.json")
# Set by the CLI so reloaded server processes read the same file.
CONFIG_PATH_ENV = "SCRIPT_SENTINEL_CONFIG"


@dataclass
class ModelConfig:
    """Model names and sampling temperatures per call type."""
    text_model: str = DEFAULT_TEXT_MODEL
    fast_model: str = DEFAULT_FAST_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    image_edit_model: str = DEFAULT_IMAGE_EDIT_MODEL
    video_model: str = DEFAULT_VIDEO_MODEL
    stage1_temperature: float = 0.3
    stage2_temperature: float = 0.4
    stage3_temperature: float = 0.3
    scene_extraction_temperature: float = 0.1
    shot_list_temperature: float = 0.5
    script_generator_temperature: float = 0.7

    @classmethod
    def from_dict(cls, data: dict) -> 'ModelConfig':
        """Create ModelConfig from dictionary, keeping defaults for missing keys."""
        defaults = cls()
        values = {}
        for name, default in asdict(defaults).items():
            value = data.get(name, default)
            if isinstance(default, float):
                try:
                    value = float(value)
                except (TypeError, ValueError):
                    raise InvalidConfigError(f"Invalid value for models.{name}: {value!r}")
                if not 0.0 <= value <= 2.0:
                    raise InvalidConfigError(f"Temperature out of range for models.{name}: {value}")
            values[name] = value
        return cls(**values)


@dataclass
class ImageConfig:
    """Image generation settings."""
    output_mime_type: str = IMAGE_OUTPUT_MIME_TYPE
    default_aspect_ratio: str = "16:9"


@dataclass
class VideoConfig:
    """Video generation polling settings."""
    poll_interval_seconds: float = 10.0
    timeout_seconds: float = 600.0
    output_dir: Path = field(default_factory=lambda: Path("videos"))


@dataclass
class StoreConfig:
    """Project persistence settings."""
    projects_dir: Path = field(default_factory=lambda: Path("projects"))
    autosave_debounce_seconds: float = 1.5


@dataclass
class ApiConfig:
    """HTTP API settings."""
    host: str = "127.0.0.1"
    port: int = 8000
    rate_limit: str = "30/minute"
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )


@dataclass
class SentinelConfig:
    """Main configuration class for Script Sentinel."""

    project_name: str = PROJECT_NAME
    version: str = VERSION
    log_level: str = "INFO"
    logs_dir: Path = field(default_factory=lambda: Path("logs"))

    models: ModelConfig = field(default_factory=ModelConfig)
    images: ImageConfig = field(default_factory=ImageConfig)
    video: VideoConfig = field(default_factory=VideoConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    api: ApiConfig = field(default_factory=ApiConfig)

    @classmethod
    def from_dict(cls, data: dict) -> 'SentinelConfig':
        """Create SentinelConfig from dictionary."""
        config = cls()

        config.project_name = data.get('project_name', config.project_name)
        config.version = data.get('version', config.version)
        config.log_level = data.get('log_level', config.log_level)
        if 'logs_dir' in data:
            config.logs_dir = Path(data['logs_dir'])

        if 'models' in data:
            config.models = ModelConfig.from_dict(data['models'])

        if 'images' in data:
            img = data['images']
            config.images = ImageConfig(
                output_mime_type=img.get('output_mime_type', IMAGE_OUTPUT_MIME_TYPE),
                default_aspect_ratio=img.get('default_aspect_ratio', '16:9'),
            )

        if 'video' in data:
            vid = data['video']
            config.video = VideoConfig(
                poll_interval_seconds=float(vid.get('poll_interval_seconds', 10.0)),
                timeout_seconds=float(vid.get('timeout_seconds', 600.0)),
                output_dir=Path(vid.get('output_dir', 'videos')),
            )
            if config.video.poll_interval_seconds <= 0:
                raise InvalidConfigError("video.poll_interval_seconds must be positive")

        if 'store' in data:
            st = data['store']
            config.store = StoreConfig(
                projects_dir=Path(st.get('projects_dir', 'projects')),
                autosave_debounce_seconds=float(st.get('autosave_debounce_seconds', 1.5)),
            )

        if 'api' in data:
            api = data['api']
            defaults = ApiConfig()
            config.api = ApiConfig(
                host=api.get('host', defaults.host),
                port=int(api.get('port', defaults.port)),
                rate_limit=api.get('rate_limit', defaults.rate_limit),
                cors_origins=api.get('cors_origins', defaults.cors_origins),
            )

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data = asdict(self)
        data['logs_dir'] = str(self.logs_dir)
        data['video']['output_dir'] = str(self.video.output_dir)
        data['store']['projects_dir'] = str(self.store.projects_dir)
        return data


def get_default_config() -> SentinelConfig:
    """Return a configuration populated with defaults."""
    return SentinelConfig()


def load_config(config_path: Path = None) -> SentinelConfig:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to configuration file. If None, uses the path in
            SCRIPT_SENTINEL_CONFIG, then the default.

    Returns:
        Loaded SentinelConfig instance
    """
    if not config_path:
        config_path = os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        return SentinelConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"Invalid JSON in config file: {e}", {"path": str(config_path)})
    except OSError as e:
        raise ConfigurationError(f"Failed to load config: {e}", {"path": str(config_path)})

    if not isinstance(data, dict):
        raise InvalidConfigError("Config file must contain a JSON object", {"path": str(config_path)})
    return SentinelConfig.from_dict(data)


def save_config(config: SentinelConfig, config_path: Path = None) -> None:
    """Write configuration to a JSON file."""
    config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)


_config: Optional[SentinelConfig] = None


def get_config() -> SentinelConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: SentinelConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
