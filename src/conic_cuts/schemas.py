from __future__ import annotations

import math
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

Backend = Literal["lazy", "resolve"]
SolverName = Literal["scip", "cbc"]
ToleranceMode = Literal["absolute", "relative"]
Status = Literal["optimal", "feasible", "infeasible", "unbounded", "limit_reached", "error"]


class BallProblem(BaseModel):
    c: List[float] = Field(min_length=1)
    radius: float = Field(gt=0.0)

    @field_validator("radius")
    @classmethod
    def _finite_radius(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("radius must be finite")
        return value

    @field_validator("c")
    @classmethod
    def _finite_objective(cls, value: List[float]) -> List[float]:
        if not all(math.isfinite(coef) for coef in value):
            raise ValueError("objective coefficients must be finite")
        return value

    @property
    def dimension(self) -> int:
        return len(self.c)

    @property
    def box_bound(self) -> int:
        """Largest integer inside [-radius, radius]."""
        return int(math.floor(self.radius))


class RefinerOptions(BaseModel):
    tol: float = Field(default=1e-6, gt=0.0)
    tolerance_mode: ToleranceMode = "absolute"
    backend: Backend = "lazy"
    solver: SolverName = "scip"
    time_limit: Optional[float] = Field(default=None, gt=0.0)
    node_limit: Optional[int] = Field(default=None, gt=0)
    max_rounds: int = Field(default=1000, gt=0)
    seed: int = Field(default=0, ge=0)
    threads: int = Field(default=1, ge=1)
    enable_output: bool = False

    @model_validator(mode="after")
    def _solver_matches_backend(self) -> "RefinerOptions":
        if self.backend == "lazy" and self.solver != "scip":
            raise ValueError("the lazy backend only supports the scip solver")
        return self

    def threshold(self, radius: float) -> float:
        if self.tolerance_mode == "relative":
            return radius * (1.0 + self.tol)
        return radius + self.tol


class Cut(BaseModel):
    coefficients: List[float] = Field(min_length=1)
    rhs: float
    norm: float

    def activity(self, x: List[float]) -> float:
        return math.fsum(a * v for a, v in zip(self.coefficients, x))

    def is_satisfied(self, x: List[float], tol: float = 1e-9) -> bool:
        return self.activity(x) <= self.rhs + tol


class RefinerSolution(BaseModel):
    status: Status
    x: Optional[List[int]]
    norm: Optional[float]
    objective_value: Optional[float]
    callback_count: int
    invocations: int
    cuts: List[Cut] = Field(default_factory=list)
    message: str = ""
