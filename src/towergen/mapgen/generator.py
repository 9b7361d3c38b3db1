# src/towergen/mapgen/generator.py
# Orchestrates one map: walk -> validate -> braid -> props, restarting the
# whole attempt from an empty grid whenever a phase rejects it.

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..config import DEFAULT_CONFIG, GenerationConfig
from ..errors import GenerationFailed, MapGenerationFailed, Rejection
from ..grid import Grid, Position
from ..rng import PMRandom, fresh_seed
from ..tiles import TileKind
from .adjacency import has_invalid_adjacency
from .braid import SplitBraid, braid_split
from .carve import carve_path
from .metrics import init_metrics, rejection_tally
from .placement import PlacementReport, place_decor, place_towers
from .verify import verify_map

logger = logging.getLogger(__name__)


@dataclass
class AttemptResult:
    grid: Grid
    start: Position
    end: Position
    path_length: int
    walk_towers: int
    split: Optional[SplitBraid]
    towers: PlacementReport
    decor: PlacementReport


@dataclass
class GeneratedMap:
    """
    An accepted map. `tiles` is the read-only hand-off for display code.
    `grid` is allocated per generate_map call and the generator keeps no
    reference to it afterwards; edits to it are the caller's own.
    """
    grid: Grid
    config: GenerationConfig
    seed: int
    start: Position
    end: Position
    path_length: int
    split: Optional[SplitBraid]
    towers: PlacementReport
    decor: PlacementReport
    attempts: int
    metrics: Dict[str, int | float] = field(default_factory=dict)

    @property
    def tiles(self) -> Tuple[Tuple[TileKind, ...], ...]:
        return self.grid.as_matrix()

    @property
    def side(self) -> int:
        return self.grid.side


def attempt(config: GenerationConfig, rng: PMRandom, grid: Optional[Grid] = None) -> AttemptResult:
    """
    One full attempt on a fresh (or freshly reset) grid.
    Raises MapGenerationFailed when any phase rejects the layout.
    """
    if grid is None:
        grid = Grid.empty(config.side)
    else:
        grid.reset()

    walk = carve_path(
        grid, rng, config.band,
        tower_density=config.tower_density,
        tower_frequency=config.tower_frequency,
    )
    if has_invalid_adjacency(grid):
        raise MapGenerationFailed(Rejection.BAD_ADJACENCY)
    distance = walk.start.manhattan(walk.end)
    if distance < config.min_endpoint_distance:
        raise MapGenerationFailed(
            Rejection.ENDPOINTS_TOO_CLOSE, f"{distance} < {config.min_endpoint_distance}"
        )

    split = None
    if config.want_split:
        split = braid_split(grid, rng, tick_limit=config.braid_tick_limit)

    towers = place_towers(grid, rng, config.tower_density, config.placement_draw_limit)
    decor = place_decor(grid, rng, config.decor_density, config.placement_draw_limit)
    return AttemptResult(
        grid=grid,
        start=walk.start,
        end=walk.end,
        path_length=walk.length,
        walk_towers=walk.towers,
        split=split,
        towers=towers,
        decor=decor,
    )


def generate_map(config: GenerationConfig = DEFAULT_CONFIG, seed: Optional[int] = None) -> GeneratedMap:
    """
    Retry `attempt` until one is accepted or config.max_attempts is spent.
    Raises GenerationFailed on exhaustion and InvariantViolation if an
    accepted map turns out to be broken.
    """
    if seed is None:
        seed = fresh_seed()
    rng = PMRandom(seed)
    metrics = init_metrics()
    grid = Grid.empty(config.side)
    t0 = time.perf_counter()

    result = None
    for n in range(1, config.max_attempts + 1):
        metrics['attempts'] = n
        try:
            result = attempt(config, rng, grid)
            break
        except MapGenerationFailed as exc:
            metrics[f'rejected_{exc.reason.value}'] += 1
            logger.debug("attempt %d rejected: %s", n, exc)

    metrics['runtime_ms'] = round((time.perf_counter() - t0) * 1000, 3)
    if result is None:
        raise GenerationFailed(config.max_attempts, rejection_tally(metrics))

    verify_map(result.grid, config, result.path_length, result.split)

    metrics['walk_towers'] = result.walk_towers
    metrics['towers_placed'] = result.towers.placed
    metrics['decor_placed'] = result.decor.placed
    logger.info(
        "map %dx%d seed=%d accepted after %d attempts: length=%d towers=%d decor=%d",
        config.side, config.side, seed, metrics['attempts'], result.path_length,
        result.towers.placed, result.decor.placed,
    )
    return GeneratedMap(
        grid=result.grid,
        config=config,
        seed=seed,
        start=result.start,
        end=result.end,
        path_length=result.path_length,
        split=result.split,
        towers=result.towers,
        decor=result.decor,
        attempts=int(metrics['attempts']),
        metrics=metrics,
    )


def generate(
    size,
    path_length,
    want_split: bool = False,
    tower_density: float = 0.2,
    decor_density: float = 0.3,
    seed: Optional[int] = None,
    **overrides,
) -> GeneratedMap:
    """Convenience entry point mirroring the request fields one by one."""
    config = GenerationConfig(
        size=size,
        path_length=path_length,
        want_split=want_split,
        tower_density=tower_density,
        decor_density=decor_density,
        **overrides,
    )
    return generate_map(config, seed=seed)
