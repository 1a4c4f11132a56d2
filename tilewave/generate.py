"""
Tile map generation using Wave Function Collapse.

This module provides the main entry point: give it a tile catalog and a
config, get back a collapsed wave. Restarting after a contradiction is a
policy of this layer; the wave itself never retries.
"""

from __future__ import annotations

import random
import time
from typing import Any, Sequence

from .config import GenerationConfig
from .logging_config import get_logger, log_generation
from .tiles import load_tiles
from .wfc import Contradiction, Wave, sampled_edge_constraint
from .wfc.module import ConstraintFunc, IsPossibleFunc

logger = get_logger(__name__)


def generate(
    tiles: Sequence[Any] | None = None,
    config: GenerationConfig | None = None,
    constraint: ConstraintFunc | None = None,
    is_possible: IsPossibleFunc | None = None,
) -> Wave:
    """
    Generate a tile map.

    Args:
        tiles: Ordered tile contents. Loaded from config.tile_dir when omitted.
        config: Generation settings (defaults apply when omitted)
        constraint: Adjacency rule between tiles. Defaults to comparing
                    config.samples edge pixels.
        is_possible: Optional override of the per-candidate viability check

    Returns:
        The wave after the last attempt. With config.attempts set it may
        still hold undecided slots.

    Raises:
        ValueError: If no tiles are given and config.tile_dir is unset
        Contradiction: If the final try hits a contradiction
    """
    config = config or GenerationConfig()

    if tiles is None:
        if config.tile_dir is None:
            raise ValueError("No tiles given and no tile_dir configured")
        tiles = load_tiles(config.tile_dir)

    constraint = constraint or sampled_edge_constraint(config.samples)
    # Adjacency only depends on the tiles, so every retry can share it
    template = Wave(tiles, config.width, config.height, constraint, is_possible)

    # Seeds for retries derive from the configured one for reproducibility
    seed = config.seed if config.seed is not None else random.SystemRandom().randrange(2**32)

    retry = 0
    while True:
        wave = Wave.from_modules(template.modules, config.width, config.height, is_possible)
        wave.initialize(seed + retry)

        start = time.perf_counter()
        try:
            if config.attempts is None:
                wave.collapse_all()
            else:
                wave.collapse(config.attempts)
        except Contradiction as e:
            log_generation(
                logger, config.width, config.height, "CONTRADICTION",
                seed=seed + retry,
                details=f"try {retry + 1}/{config.max_retries + 1} | {e}",
            )
            if retry >= config.max_retries:
                raise
            retry += 1
            continue

        duration_ms = int((time.perf_counter() - start) * 1000)
        status = "COMPLETE" if wave.is_collapsed() else "PARTIAL"
        log_generation(logger, config.width, config.height, status, seed=seed + retry, duration_ms=duration_ms)
        return wave
