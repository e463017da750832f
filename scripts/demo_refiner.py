#!/usr/bin/env python3
import argparse
import logging
from pathlib import Path

from conic_cuts.cuts.refiner import refine_ball_constraint
from conic_cuts.schemas import BallProblem, RefinerOptions


def main() -> None:
    parser = argparse.ArgumentParser(description="Maximize <c, x> over integer points of a ball with lazy cuts.")
    parser.add_argument("--c", type=float, nargs="+", default=[0.59, 0.22], help="Objective coefficients")
    parser.add_argument("--radius", type=float, default=50.0, help="Ball radius")
    parser.add_argument("--tol", type=float, default=1e-6, help="Norm tolerance")
    parser.add_argument("--relative", action="store_true", help="Treat --tol as relative to the radius")
    parser.add_argument("--backend", choices=["lazy", "resolve"], default="lazy")
    parser.add_argument("--solver", choices=["scip", "cbc"], default="scip")
    parser.add_argument("--time-limit", type=float, default=None, help="Wall-clock budget in seconds")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--plot", type=Path, default=None, help="Write the 2D refinement figure here")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(name)s: %(message)s")

    problem = BallProblem(c=args.c, radius=args.radius)
    options = RefinerOptions(
        tol=args.tol,
        tolerance_mode="relative" if args.relative else "absolute",
        backend=args.backend,
        solver=args.solver,
        time_limit=args.time_limit,
        seed=args.seed,
    )
    solution = refine_ball_constraint(problem, options)

    if solution.x is None:
        print(f"no solution: {solution.status} ({solution.message})")
        return
    print((solution.x, solution.norm, solution.callback_count))

    if args.plot is not None:
        import matplotlib

        matplotlib.use("Agg")
        from conic_cuts.plot import plot_refinement

        ax = plot_refinement(problem, solution)
        ax.figure.savefig(args.plot, dpi=150)


if __name__ == "__main__":
    main()
