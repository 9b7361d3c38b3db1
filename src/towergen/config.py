# src/towergen/config.py
# Generation parameters. Everything here is immutable; a request is a
# GenerationConfig value threaded through the phases, never global state.

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple, Union

from .errors import ConfigError

# Density above which placement fills cells in raster order instead of randomly.
TOO_MANY_TILES = 0.87
# Consecutive failed walker steps before the attempt is abandoned.
MAX_WALK_FAILURES = 30
# Draws allowed when picking the two braid anchors.
MAX_ENDPOINT_DRAWS = 100
# Walker raises a tower request every N successful placements.
TOWER_FREQUENCY = 20
# A bloom continues in a direction only while more than this many EMPTY cells lie ahead.
BLOOM_RUN_THRESHOLD = 4
# One in N sequential decorations is the alternate kind.
DECOR2_ODDS = 5


class MapSize(IntEnum):
    SMALL = 10
    MEDIUM = 15
    LARGE = 20


class PathLength(IntEnum):
    SHORT = 0
    MEDIUM = 1
    LONG = 2


@dataclass(frozen=True)
class LengthBand:
    minimum: int
    maximum: int

    def contains(self, length: int) -> bool:
        return self.minimum <= length < self.maximum


LENGTH_BANDS: Dict[Tuple[MapSize, PathLength], LengthBand] = {
    (MapSize.SMALL, PathLength.SHORT): LengthBand(10, 20),
    (MapSize.SMALL, PathLength.MEDIUM): LengthBand(20, 35),
    (MapSize.SMALL, PathLength.LONG): LengthBand(30, 50),
    (MapSize.MEDIUM, PathLength.SHORT): LengthBand(20, 24),
    (MapSize.MEDIUM, PathLength.MEDIUM): LengthBand(35, 50),
    (MapSize.MEDIUM, PathLength.LONG): LengthBand(50, 75),
    (MapSize.LARGE, PathLength.SHORT): LengthBand(25, 35),
    (MapSize.LARGE, PathLength.MEDIUM): LengthBand(50, 70),
    (MapSize.LARGE, PathLength.LONG): LengthBand(75, 100),
}


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value.upper()]
        except KeyError:
            pass
    else:
        try:
            return enum_cls(value)
        except ValueError:
            pass
    names = ", ".join(m.name.lower() for m in enum_cls)
    raise ConfigError(f"unknown {enum_cls.__name__} {value!r} (expected one of: {names})")


@dataclass(frozen=True)
class GenerationConfig:
    size: Union[MapSize, int, str] = MapSize.LARGE
    path_length: Union[PathLength, int, str] = PathLength.MEDIUM
    want_split: bool = False
    tower_density: float = 0.2
    decor_density: float = 0.3
    tower_frequency: int = TOWER_FREQUENCY
    max_attempts: int = 100_000
    braid_tick_limit: int = 10_000
    placement_draw_limit: int = 5_000

    def __post_init__(self) -> None:
        # Frozen: normalise through object.__setattr__.
        object.__setattr__(self, "size", _coerce(MapSize, self.size))
        object.__setattr__(self, "path_length", _coerce(PathLength, self.path_length))
        for name in ("tower_density", "decor_density"):
            v = getattr(self, name)
            if not 0.0 <= v <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {v}")
        for name in ("tower_frequency", "max_attempts", "braid_tick_limit", "placement_draw_limit"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")

    @property
    def side(self) -> int:
        return int(self.size)

    @property
    def band(self) -> LengthBand:
        return LENGTH_BANDS[(self.size, self.path_length)]

    @property
    def min_endpoint_distance(self) -> int:
        return self.side // 2


DEFAULT_CONFIG = GenerationConfig()
