from __future__ import annotations

import os
from typing import List

import numpy as np
from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from .cuts.refiner import refine_ball_constraint as _refine
from .cuts.separation import BallSeparator, CutContext, CutRecorder, cut_excludes_ball_point
from .schemas import BallProblem, Cut, RefinerOptions

mcp = FastMCP("Conic Cuts")


@mcp.tool()
def refine_ball_constraint(problem: BallProblem, options: RefinerOptions | None = None) -> dict:
    "Maximize <c, x> over integer x with ||x|| <= radius using lazy tangent cuts."
    return _refine(problem, options or RefinerOptions()).model_dump()


@mcp.tool()
def separate_candidate(candidate: List[float], radius: float, options: RefinerOptions | None = None) -> dict:
    "Check one integer candidate against the ball and return the tangent cut if it is outside."
    opts = options or RefinerOptions()
    problem = BallProblem(c=[0.0] * len(candidate), radius=radius)
    separator = BallSeparator(problem.radius, problem.dimension, opts)
    recorder = CutRecorder()
    cut = separator(CutContext(candidate=tuple(candidate), emit=lambda _: None, recorder=recorder))
    return {
        "accepted": cut is None,
        "threshold": separator.threshold,
        "cut": cut.model_dump() if cut is not None else None,
    }


@mcp.tool()
def check_cut_validity(cut: Cut, radius: float, samples: int = 1000, seed: int = 0) -> dict:
    "Sample points of the ball and report any the cut would wrongly exclude."
    rng = np.random.default_rng(seed)
    dim = len(cut.coefficients)
    directions = rng.normal(size=(samples, dim))
    directions /= np.linalg.norm(directions, axis=1, keepdims=True)
    scales = radius * rng.random(samples) ** (1.0 / dim)
    points = directions * scales[:, None]
    # the tangent point itself is the tightest case
    if cut.norm > 0:
        points = np.vstack([points, np.asarray(cut.coefficients) * radius / cut.norm])
    excluded = [p.tolist() for p in points if cut_excludes_ball_point(cut, radius, p)]
    return {"valid": not excluded, "checked": len(points), "excluded": excluded[:10]}


if __name__ == "__main__":
    transport = os.environ.get("MCP_TRANSPORT", "stdio")

    if transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.settings.host = os.environ.get("HOST", "0.0.0.0")
        mcp.settings.port = int(os.environ.get("PORT", "8081"))
        mcp.settings.streamable_http_path = "/mcp"
        mcp.settings.transport_security = TransportSecuritySettings(
            enable_dns_rebinding_protection=False,
            allowed_hosts=["*"],
            allowed_origins=["*"],
        )
        mcp.run(transport="streamable-http")
