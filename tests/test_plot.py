import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from conic_cuts.cuts.separation import supporting_hyperplane
from conic_cuts.plot import plot_refinement
from conic_cuts.schemas import BallProblem, RefinerSolution


def make_solution() -> RefinerSolution:
    cuts = [supporting_hyperplane(point, 5.0) for point in ([5, 5], [5, 2], [2, 5])]
    return RefinerSolution(
        status="optimal",
        x=[4, 3],
        norm=5.0,
        objective_value=7.0,
        callback_count=len(cuts),
        invocations=len(cuts) + 1,
        cuts=cuts,
    )


def test_plot_draws_every_cut():
    problem = BallProblem(c=[1.0, 1.0], radius=5.0)
    ax = plot_refinement(problem, make_solution())

    cut_lines = [line for line in ax.get_lines() if line.get_gid() == "cut"]
    assert len(cut_lines) == 3
    assert "3 of 3 cuts" in ax.get_title()
    plt.close(ax.figure)


def test_plot_replays_a_prefix_of_the_cuts():
    problem = BallProblem(c=[1.0, 1.0], radius=5.0)
    fig, ax = plt.subplots()
    returned = plot_refinement(problem, make_solution(), ax=ax, max_cuts=1)

    assert returned is ax
    assert "1 of 3 cuts" in ax.get_title()
    plt.close(fig)


def test_plot_requires_two_dimensions():
    problem = BallProblem(c=[1.0, 1.0, 1.0], radius=5.0)
    solution = make_solution()

    with pytest.raises(ValueError):
        plot_refinement(problem, solution)
