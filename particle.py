# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticlePool class, which is responsible for
storing particle data (remaining lifetime, speed, position) in efficient
NumPy arrays. The pool holds data only; behavior lives in the policies
bound to the ParticleSystem.
"""
import logging
import numpy as np
from typing import NamedTuple

# --- Data Contracts ---
#
# class ParticlePool:
#   - __init__(self, particle_count: int):
#     - Inputs:
#       - particle_count: int, fixed number of particles in the pool.
#     - Outputs: None
#     - Side Effects: Allocates zero-valued NumPy arrays for particle state.
#     - Invariants:
#       - self.lifetimes is a NumPy array of shape (N,) of dtype int64 (ms).
#       - self.speeds is a NumPy array of shape (N,) of dtype float64.
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64,
#         column 0 is x, column 1 is y (y grows away from the source row).
#       - N never changes after construction.


class Particle(NamedTuple):
    """Read-only snapshot of a single particle."""
    lifetime: int
    speed: float
    x: float
    y: float


class ParticlePool:
    """
    A fixed-size container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, particle_count: int):
        """
        Allocates the particle arrays. Every field starts at zero; the
        respawn policy gives particles their first real state.

        Args:
            particle_count (int): The number of particles in the pool.
        """
        self.particle_count = particle_count

        self.lifetimes = np.zeros(particle_count, dtype=np.int64)
        self.speeds = np.zeros(particle_count, dtype=np.float64)
        self.positions = np.zeros((particle_count, 2), dtype=np.float64)

        logging.debug(
            f"Particle data arrays created. "
            f"Lifetimes shape: {self.lifetimes.shape}, "
            f"Speeds shape: {self.speeds.shape}, "
            f"Positions shape: {self.positions.shape}"
        )

    def __len__(self) -> int:
        return self.particle_count

    def __getitem__(self, index: int) -> Particle:
        x, y = self.positions[index]
        return Particle(
            lifetime=int(self.lifetimes[index]),
            speed=float(self.speeds[index]),
            x=float(x),
            y=float(y),
        )

    @property
    def xs(self) -> np.ndarray:
        """View of the x column of the positions array."""
        return self.positions[:, 0]

    @property
    def ys(self) -> np.ndarray:
        """View of the y column of the positions array."""
        return self.positions[:, 1]
