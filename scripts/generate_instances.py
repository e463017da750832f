#!/usr/bin/env python3
import argparse
import json
import random
from pathlib import Path
from typing import Optional, Tuple

from conic_cuts.schemas import BallProblem


def generate_random_problem(
    dimension: int,
    radius: float,
    seed: Optional[int] = None,
    c_range: Tuple[float, float] = (-1.0, 1.0),
    decimals: int = 2,
) -> BallProblem:
    rng = random.Random(seed)
    low, high = c_range
    c = [round(rng.uniform(low, high), decimals) for _ in range(dimension)]
    return BallProblem(c=c, radius=radius)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random ball-constrained instances.")
    parser.add_argument("--dim", type=int, default=2, help="Number of variables")
    parser.add_argument("--radius", type=float, nargs="+", default=[20.0], help="One instance set per radius")
    parser.add_argument("--c-range", type=float, nargs=2, default=(-1.0, 1.0), metavar=("LOW", "HIGH"))
    parser.add_argument("--decimals", type=int, default=2, help="Rounding of objective coefficients")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Instances per radius")
    parser.add_argument("--out", type=Path, default=None, help="Optional output file")
    args = parser.parse_args()

    if args.c_range[0] > args.c_range[1]:
        parser.error("--c-range LOW must not exceed HIGH")

    payload = []
    for radius in args.radius:
        for idx in range(args.count):
            problem = generate_random_problem(
                args.dim, radius, args.seed + idx, tuple(args.c_range), args.decimals
            )
            payload.append({"radius": radius, "seed": args.seed + idx, "problem": problem.model_dump()})

    text = json.dumps(payload, indent=2)
    if args.out:
        args.out.write_text(text)
    else:
        print(text)


if __name__ == "__main__":
    main()
