"""Engine configuration, loadable from YAML.

Example config.yml:

    engine:
      tiles: [W, O, R, D, S]
      dwell_duration: 0.42
      turn_angle_band: [20, 110]
      tap_mode: false
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

import yaml

logger = logging.getLogger("swipe_typer.config")

TAP_COMMIT_POLICIES = ("explicit", "auto")


@dataclass
class EngineConfig:
    """All engine tunables. Durations are in seconds, distances in layout units."""
    tiles: list[str] = field(default_factory=list)
    tap_mode: bool = False
    tap_commit: str = "explicit"  # "explicit" or "auto"
    smart_detection: bool = True  # False = select as soon as a tile is entered
    dwell_duration: float = 0.42
    cleanup_delay: float = 0.2
    max_trail_points: int = 69
    min_sample_distance: float = 2.0
    min_turn_segment_length: float = 10.0
    turn_angle_band: tuple[float, float] = (20.0, 110.0)
    tile_deflate_factor: float = 0.1
    unlock_margin: float = 0.0

    def __post_init__(self):
        self.tiles = [str(t) for t in self.tiles]
        self.turn_angle_band = tuple(float(a) for a in self.turn_angle_band)

    def validate(self) -> EngineConfig:
        """Raise ValueError on values the engine cannot work with."""
        if self.dwell_duration <= 0:
            raise ValueError(f"dwell_duration must be positive, got {self.dwell_duration}")
        if self.cleanup_delay < 0:
            raise ValueError(f"cleanup_delay must be >= 0, got {self.cleanup_delay}")
        if self.max_trail_points < 3:
            raise ValueError(f"max_trail_points must be >= 3, got {self.max_trail_points}")
        if self.min_sample_distance < 0 or self.min_turn_segment_length < 0:
            raise ValueError("distances must be >= 0")
        if len(self.turn_angle_band) != 2:
            raise ValueError(f"turn_angle_band needs two values, got {self.turn_angle_band}")
        low, high = self.turn_angle_band
        if not 0 <= low < high <= 180:
            raise ValueError(f"turn_angle_band must satisfy 0 <= low < high <= 180, got {self.turn_angle_band}")
        if not 0 <= self.tile_deflate_factor < 0.5:
            raise ValueError(f"tile_deflate_factor must be in [0, 0.5), got {self.tile_deflate_factor}")
        if self.tap_commit not in TAP_COMMIT_POLICIES:
            raise ValueError(f"tap_commit must be one of {TAP_COMMIT_POLICIES}, got {self.tap_commit!r}")
        return self

    def to_dict(self) -> dict:
        data = asdict(self)
        data["turn_angle_band"] = list(self.turn_angle_band)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> EngineConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_yaml(cls, path: str | Path) -> EngineConfig:
        """Load from a YAML file. Settings may sit under a top-level `engine:` key."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if "engine" in data and isinstance(data["engine"], dict):
            data = data["engine"]
        return cls.from_dict(data)

    def to_yaml(self, path: str | Path):
        with open(path, "w") as f:
            yaml.dump({"engine": self.to_dict()}, f, default_flow_style=False, sort_keys=False)

    def dump(self) -> str:
        return yaml.dump({"engine": self.to_dict()}, default_flow_style=False, sort_keys=False)
