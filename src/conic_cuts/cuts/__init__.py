"""Cutting-plane refinement of integer ball constraints."""

from .refiner import refine_ball_constraint
from .separation import BallSeparator, CandidateShapeError, CutContext, CutRecorder, supporting_hyperplane

__all__ = [
    "refine_ball_constraint",
    "BallSeparator",
    "CandidateShapeError",
    "CutContext",
    "CutRecorder",
    "supporting_hyperplane",
]
