import math

import pytest
from pydantic import ValidationError

from conic_cuts.schemas import BallProblem, Cut, RefinerOptions


@pytest.mark.parametrize("radius", [0.0, -1.0, math.inf, math.nan])
def test_problem_rejects_bad_radius(radius):
    with pytest.raises(ValidationError):
        BallProblem(c=[1.0], radius=radius)


def test_problem_rejects_empty_objective():
    with pytest.raises(ValidationError):
        BallProblem(c=[], radius=1.0)


def test_problem_derived_fields():
    problem = BallProblem(c=[0.59, 0.22], radius=7.9)

    assert problem.dimension == 2
    assert problem.box_bound == 7


def test_options_defaults_and_threshold():
    opts = RefinerOptions()

    assert opts.tol == pytest.approx(1e-6)
    assert opts.backend == "lazy"
    assert opts.threshold(50.0) == pytest.approx(50.000001)
    assert RefinerOptions(tolerance_mode="relative", tol=0.1).threshold(50.0) == pytest.approx(55.0)


def test_options_reject_non_positive_tolerance():
    with pytest.raises(ValidationError):
        RefinerOptions(tol=0.0)


def test_lazy_backend_requires_scip():
    with pytest.raises(ValidationError):
        RefinerOptions(backend="lazy", solver="cbc")

    assert RefinerOptions(backend="resolve", solver="cbc").solver == "cbc"


def test_options_round_trip_through_json():
    opts = RefinerOptions.model_validate({"tol": 1e-4, "backend": "resolve", "time_limit": 2.5})

    assert opts.backend == "resolve"
    assert opts.time_limit == pytest.approx(2.5)


def test_cut_activity():
    cut = Cut(coefficients=[3.0, 4.0], rhs=25.0, norm=5.0)

    assert cut.activity([3.0, 4.0]) == pytest.approx(25.0)
    assert cut.is_satisfied([3.0, 4.0])
    assert not cut.is_satisfied([4.0, 4.0])


def test_cut_requires_coefficients():
    with pytest.raises(ValidationError):
        Cut(coefficients=[], rhs=0.0, norm=0.0)
