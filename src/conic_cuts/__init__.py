"""Conic Cuts: lazy tangent-plane refinement of integer ball constraints."""

from .cuts import refine_ball_constraint
from .schemas import BallProblem, Cut, RefinerOptions, RefinerSolution

__all__ = [
    "refine_ball_constraint",
    "BallProblem",
    "Cut",
    "RefinerOptions",
    "RefinerSolution",
]
