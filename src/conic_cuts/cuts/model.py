from __future__ import annotations

from typing import Any, List, Tuple

from ortools.linear_solver import pywraplp
from ortools.math_opt.python import mathopt

from ..schemas import BallProblem, Cut

_PYWRAPLP_BACKENDS = {"scip": "SCIP", "cbc": "CBC"}


class SolverUnavailableError(RuntimeError):
    pass


def build_mathopt_model(problem: BallProblem) -> Tuple[mathopt.Model, List[mathopt.Variable]]:
    """Box relaxation of the ball: integer x in [-radius, radius]^n, maximize <c, x>."""
    model = mathopt.Model(name="ball-box-relaxation")
    bound = problem.box_bound
    variables = [
        model.add_integer_variable(lb=-bound, ub=bound, name=f"x[{idx}]")
        for idx in range(problem.dimension)
    ]
    model.maximize(mathopt.fast_sum(coef * var for coef, var in zip(problem.c, variables)))
    return model, variables


def mathopt_cut(cut: Cut, variables: List[mathopt.Variable]) -> Any:
    return mathopt.fast_sum(coef * var for coef, var in zip(cut.coefficients, variables)) <= cut.rhs


def build_pywraplp_model(problem: BallProblem, solver_name: str) -> Tuple[pywraplp.Solver, List[Any]]:
    backend = _PYWRAPLP_BACKENDS[solver_name]
    solver = pywraplp.Solver.CreateSolver(backend)
    if solver is None:
        raise SolverUnavailableError(f"Failed to create OR-Tools {backend} solver")

    bound = problem.box_bound
    variables = [solver.IntVar(-bound, bound, f"x[{idx}]") for idx in range(problem.dimension)]
    solver.Maximize(solver.Sum(coef * var for coef, var in zip(problem.c, variables)))
    return solver, variables


def add_pywraplp_cut(solver: pywraplp.Solver, cut: Cut, variables: List[Any]) -> None:
    lhs = solver.Sum(coef * var for coef, var in zip(cut.coefficients, variables))
    solver.Add(lhs <= cut.rhs)
