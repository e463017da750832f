#!/usr/bin/env python3
import time

from conic_cuts.cuts.refiner import refine_ball_constraint
from conic_cuts.schemas import BallProblem, RefinerOptions
from scripts.generate_instances import generate_random_problem


def main() -> None:
    cases = [("notebook", BallProblem(c=[0.59, 0.22], radius=50.0))]
    for seed in range(3):
        cases.append((f"random-{seed}", generate_random_problem(3, 15.0, seed)))

    print("name,backend,status,objective,cuts,invocations,time_ms")
    for name, problem in cases:
        for backend in ("lazy", "resolve"):
            start = time.perf_counter()
            solution = refine_ball_constraint(problem, RefinerOptions(backend=backend))
            elapsed_ms = (time.perf_counter() - start) * 1000
            print(
                f"{name},{backend},{solution.status},{solution.objective_value},"
                f"{solution.callback_count},{solution.invocations},{elapsed_ms:.2f}"
            )


if __name__ == "__main__":
    main()
