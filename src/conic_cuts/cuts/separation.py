from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..schemas import Cut, RefinerOptions

logger = logging.getLogger(__name__)


class CandidateShapeError(RuntimeError):
    """Raised when the solver hands the separator a vector of the wrong length."""


def euclidean_norm(values: Sequence[float]) -> float:
    return float(np.linalg.norm(np.asarray(values, dtype=float)))


def snap_to_lattice(values: Sequence[float]) -> Tuple[int, ...]:
    return tuple(int(v) for v in np.rint(np.asarray(values, dtype=float)))


def supporting_hyperplane(candidate: Sequence[float], radius: float) -> Cut:
    """
    Tangent cut <N, x> <= radius * ||N|| through the ball point nearest the ray
    spanned by N. The coefficient is N itself, so N = 0 needs no special case.
    """
    coefficients = [float(v) for v in candidate]
    length = euclidean_norm(coefficients)
    return Cut(coefficients=coefficients, rhs=radius * length, norm=length)


@dataclass
class CutRecorder:
    invocations: int = 0
    cuts: List[Cut] = field(default_factory=list)

    @property
    def callback_count(self) -> int:
        return len(self.cuts)


@dataclass(frozen=True)
class CutContext:
    candidate: Tuple[float, ...]
    emit: Callable[[Cut], None]
    recorder: CutRecorder


class BallSeparator:
    """Accept candidates inside the ball, cut off the rest with one tangent plane."""

    def __init__(self, radius: float, dimension: int, options: RefinerOptions) -> None:
        self.radius = radius
        self.dimension = dimension
        self.threshold = options.threshold(radius)

    def accepts(self, candidate: Sequence[float]) -> bool:
        return euclidean_norm(candidate) <= self.threshold

    def __call__(self, context: CutContext) -> Optional[Cut]:
        context.recorder.invocations += 1
        if len(context.candidate) != self.dimension:
            raise CandidateShapeError(
                f"candidate has {len(context.candidate)} entries, model has {self.dimension}"
            )

        point = snap_to_lattice(context.candidate)
        length = euclidean_norm(point)
        if length <= self.threshold:
            return None

        cut = supporting_hyperplane(point, self.radius)
        context.emit(cut)
        context.recorder.cuts.append(cut)
        logger.debug(
            "cut %d: candidate %s has norm %.6f > %.6f",
            context.recorder.callback_count,
            point,
            length,
            self.threshold,
        )
        return cut


def cut_excludes_ball_point(cut: Cut, radius: float, point: Sequence[float], tol: float = 1e-9) -> bool:
    """True when `point` lies in the ball but violates `cut` (never expected)."""
    if euclidean_norm(point) > radius:
        return False
    return not cut.is_satisfied(list(point), tol=tol * max(1.0, math.fabs(cut.rhs)))
