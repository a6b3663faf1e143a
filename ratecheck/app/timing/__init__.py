"""
Window alignment for bursts.
"""

from .window import WindowAligner, align_to_window_start, compute_wait_ms, wall_clock_ms

__all__ = [
    "WindowAligner",
    "align_to_window_start",
    "compute_wait_ms",
    "wall_clock_ms",
]
