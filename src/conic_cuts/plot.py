from __future__ import annotations

from typing import Optional

import matplotlib.patches as patches
import matplotlib.pyplot as plt
import numpy as np

from .schemas import BallProblem, Cut, RefinerSolution

_MAX_LATTICE_POINTS = 20_000


def plot_refinement(
    problem: BallProblem,
    solution: RefinerSolution,
    ax: Optional[plt.Axes] = None,
    max_cuts: Optional[int] = None,
) -> plt.Axes:
    """
    Draw the box relaxation, the ball, the tangent cuts and the final point.

    `max_cuts` shows only the first cuts in the order they were added, so a
    notebook slider can replay the refinement one cut at a time.
    """
    if problem.dimension != 2:
        raise ValueError(f"Only two-dimensional problems can be drawn, got n={problem.dimension}")

    if ax is None:
        _, ax = plt.subplots(1, 1, figsize=(6, 6))

    bound = problem.box_bound
    radius = problem.radius
    margin = 0.1 * radius

    ax.add_patch(
        patches.Rectangle((-bound, -bound), 2 * bound, 2 * bound, fill=False, ec="k", lw=1, ls="--")
    )
    ax.add_patch(patches.Circle((0, 0), radius, color="C0", alpha=0.15))
    ax.add_patch(patches.Circle((0, 0), radius, fill=False, ec="C0", lw=1.5))

    if (2 * bound + 1) ** 2 <= _MAX_LATTICE_POINTS:
        grid = np.arange(-bound, bound + 1)
        xx, yy = np.meshgrid(grid, grid)
        inside = xx**2 + yy**2 <= radius**2
        ax.plot(xx[inside], yy[inside], "k.", ms=1, alpha=0.3)

    cuts = solution.cuts if max_cuts is None else solution.cuts[:max_cuts]
    for idx, cut in enumerate(cuts):
        _draw_cut(ax, cut, radius, span=2 * radius + margin, label="cuts" if idx == 0 else None)

    if solution.x is not None:
        ax.plot(*solution.x, "C3o", ms=8, label=f"x = {tuple(solution.x)}")
        ax.arrow(0, 0, *_unit(problem.c) * 0.25 * radius, color="C2", width=0.005 * radius, label="c")

    ax.set_xlim(-radius - margin, radius + margin)
    ax.set_ylim(-radius - margin, radius + margin)
    ax.set_aspect(1)
    ax.set_title(f"radius {radius:g}: {len(cuts)} of {len(solution.cuts)} cuts")
    ax.legend(loc="lower left")
    return ax


def _unit(vector) -> np.ndarray:
    arr = np.asarray(vector, dtype=float)
    length = np.linalg.norm(arr)
    return arr / length if length > 0 else arr


def _draw_cut(ax: plt.Axes, cut: Cut, radius: float, span: float, label: Optional[str]) -> None:
    normal = _unit(cut.coefficients)
    tangent_point = normal * radius
    direction = np.array([-normal[1], normal[0]])
    ends = np.vstack([tangent_point - span * direction, tangent_point + span * direction])
    ax.plot(ends[:, 0], ends[:, 1], "C1-", lw=0.8, alpha=0.8, label=label, gid="cut")
    ax.plot(*tangent_point, "C1.", ms=4)
