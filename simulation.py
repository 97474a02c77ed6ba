# simulation.py
"""
Handles the core simulation logic of the particle system.

This module defines the ParticleSystem class, which owns the particle pool
and the policies bound to it, and advances the pool by one tick. Motion and
respawn behavior are pluggable strategies so that alternative visual effects
can be defined without subclassing (see steam.py for one instantiation).
"""
import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol

from particle import ParticlePool
from utils import Clock, MonotonicClock
from visualization import DensityRenderer

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, params: ParticleParams):
#     - Inputs:
#       - params: ParticleParams holding grid dimensions, spawn bounds,
#         the bound policies, the random generator and the clock.
#     - Outputs: None
#     - Side Effects: Validates the configuration, allocates the pool and
#       reads the clock once to seed the first tick's delta.
#     - Raises: ConfigurationError before any particle state exists.
#
#   - start(self) -> None:
#     - Side Effects: Applies the respawn policy to every particle.
#
#   - update(self) -> int:
#     - Outputs: Number of particles respawned this tick.
#     - Side Effects: Decreases every lifetime by the elapsed milliseconds,
#       moves live particles and respawns expired or out-of-bounds ones.
#     - Invariants: Pool size is constant. After the call every particle
#       satisfies 0 <= x < width, y < height and lifetime > 0.
#
#   - display(self) -> str:
#     - Outputs: exactly `height` lines of exactly `width` glyphs.
#     - Side Effects: None (read-only with respect to particle state).


class ConfigurationError(ValueError):
    """Raised when a particle system is configured with invalid parameters."""


class MotionPolicy(Protocol):
    def advance(self, pool: ParticlePool, delta_ms: int) -> None:
        ...


class RespawnPolicy(Protocol):
    def respawn(self, pool: ParticlePool, mask: np.ndarray, params: "ParticleParams") -> None:
        ...


# Maps (row, col, density grid) to a single display character.
GlyphSelector = Callable[[int, int, np.ndarray], str]


@dataclass
class ParticleParams:
    """Configuration for one particle system instance."""
    max_lifetime: int
    max_speed: float
    particle_count: int
    width: int
    height: int
    scale: float

    motion: MotionPolicy
    respawn: RespawnPolicy
    glyphs: GlyphSelector

    rng: Any = field(default_factory=np.random.default_rng)
    clock: Clock = field(default_factory=MonotonicClock)
    declump_threshold: Optional[int] = None


def _validate(params: ParticleParams) -> None:
    problems = []
    if params.width <= 0 or params.height <= 0:
        problems.append(
            f"grid dimensions must be positive (got {params.width}x{params.height})"
        )
    if params.width % 2 == 0:
        problems.append(f"width must be odd number (got {params.width})")
    if params.particle_count <= 0:
        problems.append(f"particle_count must be positive (got {params.particle_count})")
    if params.max_lifetime < 0 or params.max_speed < 0:
        problems.append(
            f"max_lifetime and max_speed must be non-negative "
            f"(got {params.max_lifetime}, {params.max_speed})"
        )

    if problems:
        msg = "Configuration error: " + "; ".join(problems) + "."
        logging.critical(msg)
        raise ConfigurationError(msg)


class ParticleSystem:
    """
    Owns the particle pool and orchestrates the per-tick update and render.
    """
    def __init__(self, params: ParticleParams):
        """
        Initializes the particle system.

        Args:
            params (ParticleParams): Grid, spawn and policy configuration.

        Raises:
            ConfigurationError: If the parameters are invalid. Nothing is
                allocated in that case.
        """
        _validate(params)

        self.params = params
        self.width = params.width
        self.height = params.height
        self.motion = params.motion
        self.respawn = params.respawn
        self.clock = params.clock

        self.pool = ParticlePool(params.particle_count)
        self.renderer = DensityRenderer(
            params.width, params.height, params.glyphs,
            declump_threshold=params.declump_threshold
        )

        self.last_time = self.clock.now_ms()
        self.started = False
        self.tick_count = 0
        self.total_respawned = 0

        logging.info(
            f"ParticleSystem initialized with {params.particle_count} particles "
            f"on a {params.width}x{params.height} grid."
        )
        logging.debug(
            f"Spawn bounds: max_lifetime={params.max_lifetime}ms, "
            f"max_speed={params.max_speed}, scale={params.scale}"
        )

    def start(self):
        """
        Gives every particle its initial randomized state.
        """
        if self.started:
            raise RuntimeError("ParticleSystem.start() may only be called once.")

        everyone = np.ones(self.pool.particle_count, dtype=bool)
        self.respawn.respawn(self.pool, everyone, self.params)
        self.started = True
        logging.info("Particle system started.")

    def update(self) -> int:
        """
        Advances every particle by the wall-clock time elapsed since the
        previous call (or since construction, for the first call).

        Returns:
            int: The number of particles respawned this tick.
        """
        if not self.started:
            raise RuntimeError("ParticleSystem.start() must be called before update().")

        now = self.clock.now_ms()
        delta = now - self.last_time
        self.last_time = now

        # 1. Move every particle (policy also burns down lifetimes)
        self.motion.advance(self.pool, delta)

        # 2. Respawn anything that expired or left the visible region
        xs, ys = self.pool.xs, self.pool.ys
        expired = (
            (ys >= self.height)
            | (xs >= self.width)
            | (xs < 0)
            | (self.pool.lifetimes <= 0)
        )
        respawned = int(np.count_nonzero(expired))
        if respawned:
            self.respawn.respawn(self.pool, expired, self.params)

        self.tick_count += 1
        self.total_respawned += respawned
        return respawned

    def display(self) -> str:
        """
        Renders the current density grid as text.
        """
        return self.renderer.render(self.pool)

    def get_stats(self) -> Dict[str, Any]:
        lifetimes = self.pool.lifetimes
        return {
            "ticks": self.tick_count,
            "particles": self.pool.particle_count,
            "total_respawned": self.total_respawned,
            "avg_remaining_life_ms": round(float(np.mean(lifetimes)), 1),
            "avg_height": round(float(np.mean(self.pool.ys)), 3),
        }
