"""Cumulative cost tracking against an optional run budget."""

from __future__ import annotations


class CostTracker:
    """Running total of USD spent across every trial of a run.

    The budget is a soft ceiling: it is checked before each trial, so a
    trial that starts under budget is allowed to finish over it. With
    ``max_cost=None`` spend is unlimited; with ``max_cost=0`` every
    trial is over budget.
    """

    def __init__(self, max_cost: float | None = None) -> None:
        self.max_cost = max_cost
        self.total_cost = 0.0

    def is_exceeded(self) -> bool:
        return self.max_cost is not None and self.total_cost >= self.max_cost

    def add(self, cost_usd: float) -> None:
        self.total_cost += cost_usd

    @property
    def remaining(self) -> float | None:
        if self.max_cost is None:
            return None
        return max(0.0, self.max_cost - self.total_cost)
