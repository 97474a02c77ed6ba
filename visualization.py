# visualization.py
"""
Handles the visualization of the particle simulation as ASCII art.

The DensityRenderer turns particle positions into a per-cell count grid and
maps each count to a glyph. The TerminalVisualizer is the output driver that
clears the terminal and prints each rendered frame above a static asset.
"""
import logging
import sys
import numpy as np
from numba import jit
from typing import Callable, Optional, TextIO

from constants import CLEAR_SCREEN, CUP
from particle import ParticlePool

# --- Data Contracts ---
#
# class DensityRenderer:
#   - __init__(self, width: int, height: int, glyphs, declump_threshold=None):
#     - Inputs:
#       - width, height: int, grid dimensions in character cells.
#       - glyphs: callable (row, col, counts) -> str returning one character.
#       - declump_threshold: Optional[int]. When set, a cell is zeroed if its
#         densest neighbour holds more than this many particles.
#
#   - density(self, pool: ParticlePool) -> np.ndarray:
#     - Outputs: int64 array of shape (height, width), one count per cell.
#     - Invariants: counts sum to len(pool) before declumping. Cell indices
#       are clamped, so stale positions on the boundary never index out of
#       range.
#
#   - render(self, pool: ParticlePool) -> str:
#     - Outputs: `height` lines of `width` characters joined by "\n".
#       Row 0 (the source row) is the LAST line.
#
# class TerminalVisualizer:
#   - draw(self, frame: str) -> None:
#     - Side Effects: Clears the terminal, writes the frame and the footer.


@jit(nopython=True)
def _accumulate_density_numba(positions, counts, width, height):
    """
    Numba-jitted function to count particles per grid cell.

    Rows come from floor(y) and columns from x rounded half away from zero.
    Both are clamped into the grid.
    """
    counts[:, :] = 0
    for i in range(positions.shape[0]):
        row = int(np.floor(positions[i, 1]))
        col = int(np.floor(positions[i, 0] + 0.5))

        if row < 0:
            row = 0
        elif row >= height:
            row = height - 1
        if col < 0:
            col = 0
        elif col >= width:
            col = width - 1

        counts[row, col] += 1


@jit(nopython=True)
def _declump_numba(counts, threshold):
    """
    Numba-jitted declumping pass.

    Zeroes every cell whose densest valid 8-neighbour exceeds the threshold.
    Neighbours are read from the input grid, never from the partially
    declumped output.
    """
    height, width = counts.shape
    out = counts.copy()
    for r in range(height):
        for c in range(width):
            densest = 0
            for dr in range(-1, 2):
                for dc in range(-1, 2):
                    if dr == 0 and dc == 0:
                        continue
                    nr = r + dr
                    nc = c + dc
                    if nr < 0 or nr >= height or nc < 0 or nc >= width:
                        continue
                    if counts[nr, nc] > densest:
                        densest = counts[nr, nc]
            if densest > threshold:
                out[r, c] = 0
    return out


def declump(counts: np.ndarray, threshold: int) -> np.ndarray:
    """Returns a copy of `counts` with crowded-neighbourhood cells zeroed."""
    return _declump_numba(np.ascontiguousarray(counts, dtype=np.int64), threshold)


class DensityRenderer:
    """
    Aggregates particle positions into a density grid and renders it as text.
    """
    def __init__(
        self,
        width: int,
        height: int,
        glyphs: Callable[[int, int, np.ndarray], str],
        declump_threshold: Optional[int] = None,
    ):
        self.width = width
        self.height = height
        self.glyphs = glyphs
        self.declump_threshold = declump_threshold

        # Reused every frame; rebuilt from scratch by the density kernel.
        self.counts = np.zeros((height, width), dtype=np.int64)

        if declump_threshold is not None:
            logging.info(f"Declumping enabled with neighbour threshold {declump_threshold}.")

    def density(self, pool: ParticlePool) -> np.ndarray:
        _accumulate_density_numba(pool.positions, self.counts, self.width, self.height)
        if self.declump_threshold is not None:
            return declump(self.counts, self.declump_threshold)
        return self.counts.copy()

    def render(self, pool: ParticlePool) -> str:
        counts = self.density(pool)

        # Farthest row first so the source row ends up at the bottom
        lines = []
        for row in range(self.height - 1, -1, -1):
            lines.append("".join(self.glyphs(row, col, counts) for col in range(self.width)))
        return "\n".join(lines)


class TerminalVisualizer:
    """
    Prints rendered frames to a terminal stream, with a static footer below.
    """
    def __init__(self, stream: Optional[TextIO] = None, footer: str = CUP):
        self.stream = stream if stream is not None else sys.stdout
        self.footer = footer
        self.frames_drawn = 0
        logging.info("Terminal visualizer initialized.")

    def draw(self, frame: str):
        """Clears the screen and prints one frame followed by the footer."""
        self.stream.write(CLEAR_SCREEN)
        self.stream.write(frame)
        self.stream.write(self.footer)
        self.stream.flush()
        self.frames_drawn += 1

    def close(self):
        """Leaves the cursor on a fresh line below the last frame."""
        self.stream.write("\n")
        self.stream.flush()
        logging.info(f"Terminal visualizer closed after {self.frames_drawn} frames.")
