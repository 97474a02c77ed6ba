# steam.py
"""
The steam effect: particles rise from a single source row, spread around
the center column, and fade into density-shaded glyphs.

This module bundles the concrete motion, respawn and glyph policies that
turn a generic ParticleSystem into rising steam over a coffee cup.
"""
import logging
import numpy as np
from typing import Any, Optional

from constants import (
    DEFAULT_HEIGHT, DEFAULT_SCALE, DEFAULT_WIDTH, GLYPH_BLANK, GLYPH_DARK,
    GLYPH_LIGHT, GLYPH_MEDIUM, GLYPH_SOLID, SPEED_TIME_BASE_MS
)
from particle import ParticlePool
from simulation import ParticleParams, ParticleSystem
from utils import Clock

# Steam preset bounds
STEAM_MAX_LIFETIME_MS = 7000
STEAM_MAX_SPEED = 1.5
STEAM_PARTICLE_COUNT = 60


class SteamMotion:
    """
    Burns down lifetimes and lifts live particles straight up.

    A particle whose lifetime runs out this tick keeps its position; the
    system's boundary check respawns it right after.
    """
    def advance(self, pool: ParticlePool, delta_ms: int):
        pool.lifetimes -= delta_ms

        alive = pool.lifetimes > 0
        step = delta_ms / SPEED_TIME_BASE_MS
        pool.positions[alive, 1] += pool.speeds[alive] * step


class SteamRespawn:
    """
    Places selected particles back on the source row with fresh random
    lifetime, speed and a normally distributed column around the center.
    """
    def respawn(self, pool: ParticlePool, mask: np.ndarray, params: ParticleParams):
        n = int(np.count_nonzero(mask))
        if n == 0:
            return

        rng = params.rng
        center = params.width // 2

        pool.lifetimes[mask] = np.floor(params.max_lifetime * rng.random(n)).astype(np.int64)
        pool.speeds[mask] = params.max_speed * rng.random(n)

        offsets = np.clip(rng.standard_normal(n) * params.scale, -center, center)
        pool.positions[mask, 0] = center + offsets
        pool.positions[mask, 1] = 0.0


def glyph_for_density(count: int) -> str:
    """Maps a cell's particle count to a shade glyph."""
    if count == 0:
        return GLYPH_BLANK
    if count < 4:
        return GLYPH_LIGHT
    if count < 6:
        return GLYPH_MEDIUM
    if count < 9:
        return GLYPH_DARK
    return GLYPH_SOLID


def steam_glyph(row: int, col: int, counts: np.ndarray) -> str:
    # Steam ignores neighbour information; only the cell's own count matters.
    return glyph_for_density(int(counts[row, col]))


def make_steam_system(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    scale: float = DEFAULT_SCALE,
    max_lifetime: int = STEAM_MAX_LIFETIME_MS,
    max_speed: float = STEAM_MAX_SPEED,
    particle_count: int = STEAM_PARTICLE_COUNT,
    rng: Optional[Any] = None,
    seed: Optional[int] = None,
    clock: Optional[Clock] = None,
    declump_threshold: Optional[int] = None,
) -> ParticleSystem:
    """
    Create a steam particle system preset.

    Args:
        width (int): Grid width in cells. Must be odd.
        height (int): Grid height in cells.
        scale (float): Horizontal spread of spawn positions.
        rng: Random generator; defaults to numpy.random.default_rng(seed).
        clock (Clock): Millisecond clock; defaults to MonotonicClock.

    Raises:
        ConfigurationError: If width is even or another bound is invalid.
    """
    optional = {"clock": clock} if clock is not None else {}
    params = ParticleParams(
        max_lifetime=max_lifetime,
        max_speed=max_speed,
        particle_count=particle_count,
        width=width,
        height=height,
        scale=scale,
        motion=SteamMotion(),
        respawn=SteamRespawn(),
        glyphs=steam_glyph,
        rng=rng if rng is not None else np.random.default_rng(seed),
        declump_threshold=declump_threshold,
        **optional,
    )

    logging.info(f"Building steam effect ({width}x{height}, scale {scale}, seed {seed}).")
    return ParticleSystem(params)
