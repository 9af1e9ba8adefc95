import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from blinker import Signal

from .geo.tolerance import FRACTION_TOLERANCE, SMALL_METRIC_DISTANCE

logger = logging.getLogger(__name__)


class ClipConfig:
    """Tolerances and checks used when building and querying clip trees."""

    def __init__(self):
        self.small_metric_distance = SMALL_METRIC_DISTANCE
        self.fraction_tolerance = FRACTION_TOLERANCE
        self.validate_polygons = True
        self.changed = Signal()

    def set_small_metric_distance(self, value: float):
        if value < 0.0:
            raise ValueError("small_metric_distance must not be negative")
        if self.small_metric_distance == value:
            return
        self.small_metric_distance = value
        self.changed.send(self)

    def set_fraction_tolerance(self, value: float):
        if value < 0.0:
            raise ValueError("fraction_tolerance must not be negative")
        if self.fraction_tolerance == value:
            return
        self.fraction_tolerance = value
        self.changed.send(self)

    def set_validate_polygons(self, value: bool):
        if self.validate_polygons == value:
            return
        self.validate_polygons = value
        self.changed.send(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "small_metric_distance": self.small_metric_distance,
            "fraction_tolerance": self.fraction_tolerance,
            "validate_polygons": self.validate_polygons,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClipConfig":
        config = cls()
        config.small_metric_distance = float(
            data.get("small_metric_distance", config.small_metric_distance)
        )
        config.fraction_tolerance = float(
            data.get("fraction_tolerance", config.fraction_tolerance)
        )
        config.validate_polygons = bool(
            data.get("validate_polygons", config.validate_polygons)
        )
        return config


class ConfigManager:
    def __init__(self, filepath: Path):
        self.filepath = Path(filepath)
        self.config: Optional[ClipConfig] = None

        self.load_config()

    def save(self):
        assert self.config is not None
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(self.filepath, "w") as f:
            yaml.safe_dump(self.config.to_dict(), f)
        logger.info(f"Saved clip config to {self.filepath}")

    def load_config(self) -> ClipConfig:
        if not self.filepath.exists():
            self.config = ClipConfig()  # Return a default config
            return self.config

        try:
            with open(self.filepath, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(
                f"Could not read {self.filepath}, using defaults: {e}"
            )
            data = None

        if not isinstance(data, dict):
            self.config = ClipConfig()
            return self.config

        self.config = ClipConfig.from_dict(data)
        logger.info(f"Loaded clip config from {self.filepath}")
        return self.config
