"""
JSON-based configuration for svg_painter.

Allows overriding writer defaults through:
1. Explicit config file path
2. .svgpainter.json in the current directory
3. ~/.svgpainter.json in the user's home directory

Example .svgpainter.json:
{
    "canvas": {
        "width": 640,
        "height": 480
    },
    "render": {
        "cullface": false,
        "light_direction": [0.0, 0.0, 1.0],
        "point_radius": 2.0,
        "background": "white"
    }
}
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from svg_painter.shading import DEFAULT_LIGHT_DIR

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".svgpainter.json"


@dataclass
class CanvasConfig:
    """Output canvas size in pixels."""
    width: int = 800
    height: int = 600


@dataclass
class RenderConfig:
    """Rendering options applied by the writer."""
    cullface: bool = True
    light_direction: Tuple[float, float, float] = DEFAULT_LIGHT_DIR
    point_radius: float = 3.0
    background: str = "white"


@dataclass
class WriterConfig:
    """Complete writer configuration."""
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        data = asdict(self)
        data['render']['light_direction'] = list(self.render.light_direction)
        return data

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WriterConfig':
        """Create configuration from dictionary. Unknown keys are ignored.

        Raises:
            ValueError: If the root or a known section is not a JSON object,
                or the light direction is not a non-zero 3-vector
        """
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be an object, got {type(data).__name__}")

        config = cls()

        for section in ('canvas', 'render'):
            values = data.get(section, {})
            if not isinstance(values, dict):
                raise ValueError(
                    f"Config section '{section}' must be an object, got {type(values).__name__}"
                )
            target = getattr(config, section)
            for key, value in values.items():
                if hasattr(target, key):
                    setattr(target, key, value)

        config.canvas.width = int(config.canvas.width)
        config.canvas.height = int(config.canvas.height)

        light = tuple(float(c) for c in config.render.light_direction)
        if len(light) != 3 or not any(light):
            raise ValueError(f"light_direction must be a non-zero 3-vector, got {list(light)}")
        config.render.light_direction = light
        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'WriterConfig':
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'WriterConfig':
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)


def find_config_file(explicit_config: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Find configuration file using search hierarchy.

    Search order:
    1. Explicit config path (if provided)
    2. .svgpainter.json in current working directory
    3. ~/.svgpainter.json in user's home directory

    Returns:
        Path to config file if found, None otherwise
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    cwd_config = Path.cwd() / CONFIG_FILENAME
    if cwd_config.exists():
        return cwd_config

    home_config = Path.home() / CONFIG_FILENAME
    if home_config.exists():
        return home_config

    return None


def load_config(explicit_config: Optional[Union[str, Path]] = None) -> WriterConfig:
    """Load configuration with fallback to defaults."""
    config_path = find_config_file(explicit_config)

    if config_path:
        try:
            return WriterConfig.load(config_path)
        except (json.JSONDecodeError, OSError, TypeError, ValueError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)

    return WriterConfig()
