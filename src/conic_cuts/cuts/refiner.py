from __future__ import annotations

import datetime
import logging
import math
import time
from typing import Dict, List, Optional, Sequence

from ortools.gscip import gscip_pb2
from ortools.linear_solver import pywraplp
from ortools.math_opt.python import mathopt

from ..schemas import BallProblem, RefinerOptions, RefinerSolution, Status
from .model import (
    SolverUnavailableError,
    add_pywraplp_cut,
    build_mathopt_model,
    build_pywraplp_model,
    mathopt_cut,
)
from .separation import BallSeparator, CutContext, CutRecorder, euclidean_norm, snap_to_lattice

logger = logging.getLogger(__name__)

_TERMINATION_MAP: Dict[mathopt.TerminationReason, Status] = {
    mathopt.TerminationReason.OPTIMAL: "optimal",
    mathopt.TerminationReason.FEASIBLE: "feasible",
    mathopt.TerminationReason.NO_SOLUTION_FOUND: "limit_reached",
    mathopt.TerminationReason.INFEASIBLE: "infeasible",
    mathopt.TerminationReason.INFEASIBLE_OR_UNBOUNDED: "infeasible",
    mathopt.TerminationReason.UNBOUNDED: "unbounded",
    mathopt.TerminationReason.IMPRECISE: "error",
    mathopt.TerminationReason.NUMERICAL_ERROR: "error",
    mathopt.TerminationReason.OTHER_ERROR: "error",
}

_PYWRAPLP_STATUS_MAP: Dict[int, Status] = {
    pywraplp.Solver.OPTIMAL: "optimal",
    pywraplp.Solver.FEASIBLE: "feasible",
    pywraplp.Solver.INFEASIBLE: "infeasible",
    pywraplp.Solver.UNBOUNDED: "unbounded",
    pywraplp.Solver.ABNORMAL: "error",
    pywraplp.Solver.MODEL_INVALID: "error",
    pywraplp.Solver.NOT_SOLVED: "limit_reached",
}

# Cuts live outside SCIP's view of the model, so dual presolve must not fix
# variables at the bound the objective prefers.
_SCIP_LAZY_SAFE_PARAMS = {
    "misc/allowstrongdualreds": False,
    "misc/allowweakdualreds": False,
}


def refine_ball_constraint(problem: BallProblem, options: Optional[RefinerOptions] = None) -> RefinerSolution:
    """
    Maximize <c, x> over integer x with ||x|| <= radius by cutting planes.

    The ball is relaxed to the box [-radius, radius]^n and every integer
    candidate the solver proposes is checked against the norm bound; violators
    are cut off by the tangent hyperplane at the ball point on their ray.
    """
    opts = options or RefinerOptions()
    separator = BallSeparator(problem.radius, problem.dimension, opts)
    recorder = CutRecorder()

    try:
        if opts.backend == "resolve":
            solution = _solve_by_resolving(problem, opts, separator, recorder)
        else:
            solution = _solve_with_lazy_callback(problem, opts, separator, recorder)
    except SolverUnavailableError as exc:
        solution = _finish(problem, "error", None, recorder, str(exc))

    logger.info(
        "ball refinement finished: status=%s cuts=%d invocations=%d",
        solution.status,
        solution.callback_count,
        solution.invocations,
    )
    return solution


def _solve_with_lazy_callback(
    problem: BallProblem,
    opts: RefinerOptions,
    separator: BallSeparator,
    recorder: CutRecorder,
) -> RefinerSolution:
    model, variables = build_mathopt_model(problem)

    def on_mip_solution(data: mathopt.CallbackData) -> mathopt.CallbackResult:
        result = mathopt.CallbackResult()
        if data.event != mathopt.Event.MIP_SOLUTION or data.solution is None:
            return result
        context = CutContext(
            candidate=tuple(data.solution[var] for var in variables),
            emit=lambda cut: result.add_lazy_constraint(mathopt_cut(cut, variables)),
            recorder=recorder,
        )
        separator(context)
        return result

    params = mathopt.SolveParameters(
        enable_output=opts.enable_output,
        threads=opts.threads,
        random_seed=opts.seed,
        node_limit=opts.node_limit,
        time_limit=datetime.timedelta(seconds=opts.time_limit) if opts.time_limit else None,
        gscip=gscip_pb2.GScipParameters(bool_params=_SCIP_LAZY_SAFE_PARAMS),
    )
    result = mathopt.solve(
        model,
        mathopt.SolverType.GSCIP,
        params=params,
        callback_reg=mathopt.CallbackRegistration(
            events={mathopt.Event.MIP_SOLUTION},
            add_lazy_constraints=True,
        ),
        cb=on_mip_solution,
    )

    status = _TERMINATION_MAP.get(result.termination.reason, "error")
    detail = result.termination.detail or result.termination.reason.name
    if status in {"optimal", "feasible"} and result.has_primal_feasible_solution():
        values = result.variable_values(variables)
        return _accept(problem, status, values, separator, recorder, f"SCIP terminated: {detail}")
    if status == "feasible":
        status = "limit_reached"
    return _finish(problem, status, None, recorder, f"SCIP terminated without a solution: {detail}")


def _solve_by_resolving(
    problem: BallProblem,
    opts: RefinerOptions,
    separator: BallSeparator,
    recorder: CutRecorder,
) -> RefinerSolution:
    """
    Outer approximation without callbacks: solve, separate the optimum, add the
    cut and solve again until the optimum lies in the ball.
    """
    solver, variables = build_pywraplp_model(problem, opts.solver)
    solver.SetNumThreads(opts.threads)
    if opts.enable_output:
        solver.EnableOutput()
    if opts.solver == "scip":
        settings = [f"randomization/randomseedshift = {opts.seed}"]
        if opts.node_limit is not None:
            settings.append(f"limits/nodes = {opts.node_limit}")
        solver.SetSolverSpecificParametersAsString("\n".join(settings) + "\n")

    deadline = time.perf_counter() + opts.time_limit if opts.time_limit else None

    for round_no in range(opts.max_rounds):
        if deadline is not None:
            remaining_ms = int((deadline - time.perf_counter()) * 1000)
            if remaining_ms <= 0:
                return _finish(problem, "limit_reached", None, recorder, "Time limit reached between rounds.")
            solver.SetTimeLimit(remaining_ms)

        status = _PYWRAPLP_STATUS_MAP.get(solver.Solve(), "error")
        if status not in {"optimal", "feasible"}:
            return _finish(problem, status, None, recorder, f"OR-Tools returned status {status} in round {round_no}")

        candidate = tuple(var.solution_value() for var in variables)
        context = CutContext(
            candidate=candidate,
            emit=lambda cut: add_pywraplp_cut(solver, cut, variables),
            recorder=recorder,
        )
        if separator(context) is None:
            return _accept(
                problem, status, candidate, separator, recorder, f"Accepted after {round_no + 1} solve(s)"
            )

    return _finish(
        problem,
        "limit_reached",
        None,
        recorder,
        f"No candidate inside the ball after {opts.max_rounds} rounds",
    )


def _accept(
    problem: BallProblem,
    status: Status,
    values: Sequence[float],
    separator: BallSeparator,
    recorder: CutRecorder,
    message: str,
) -> RefinerSolution:
    point = snap_to_lattice(values)
    if not separator.accepts(point):
        return _finish(
            problem,
            "error",
            None,
            recorder,
            f"Solver returned {list(point)} outside the ball (norm {euclidean_norm(point):.6f})",
        )
    return _finish(problem, status, list(point), recorder, message)


def _finish(
    problem: BallProblem,
    status: Status,
    x: Optional[List[int]],
    recorder: CutRecorder,
    message: str,
) -> RefinerSolution:
    return RefinerSolution(
        status=status,
        x=x,
        norm=euclidean_norm(x) if x is not None else None,
        objective_value=math.fsum(coef * v for coef, v in zip(problem.c, x)) if x is not None else None,
        callback_count=recorder.callback_count,
        invocations=recorder.invocations,
        cuts=list(recorder.cuts),
        message=message,
    )
