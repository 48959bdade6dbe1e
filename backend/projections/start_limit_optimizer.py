#!/usr/bin/env python3
"""
Weekly Start Limit Optimizer.

ESPN H2H leagues can cap the number of player-starts a team may use in a
scoring week (default 32). Given how many starts the daily optimizer found
for each remaining day, this module spends the remaining budget day by day:

    remaining_budget = max(0, weekly_cap - elapsed_starts)
    for each remaining day (ascending date):
        used      = min(optimized_starts, remaining_budget)
        overflow  = optimized_starts - used
        remaining_budget -= used

Guarantees:
- remaining_budget never increases and never goes negative
- total used never exceeds weekly_cap - elapsed_starts
- once the budget hits 0, every later day is entirely overflow
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Any, List, Sequence, Tuple

from backend.models import DayAllocation, DEFAULT_WEEKLY_STARTS_CAP

logger = logging.getLogger(__name__)


@dataclass
class StartAllocation:
    """Result of spending the weekly start budget over the remaining days."""
    weekly_cap: int
    elapsed_starts: int
    initial_budget: int
    allocations: List[DayAllocation] = field(default_factory=list)

    @property
    def total_used(self) -> int:
        return sum(a.used for a in self.allocations)

    @property
    def total_overflow(self) -> int:
        return sum(a.overflow for a in self.allocations)

    @property
    def remaining_budget(self) -> int:
        if not self.allocations:
            return self.initial_budget
        return self.allocations[-1].remaining_budget

    @property
    def cap_reached_on(self):
        """First date whose allocation exhausted the budget, if any."""
        for allocation in self.allocations:
            if allocation.remaining_budget == 0 and allocation.used > 0:
                return allocation.game_date
        return None

    def to_dict(self) -> Dict[str, Any]:
        cap_date = self.cap_reached_on
        return {
            'weekly_cap': self.weekly_cap,
            'elapsed_starts': self.elapsed_starts,
            'initial_budget': self.initial_budget,
            'total_used': self.total_used,
            'total_overflow': self.total_overflow,
            'remaining_budget': self.remaining_budget,
            'cap_reached_on': cap_date.isoformat() if cap_date else None,
            'allocations': [a.to_dict() for a in self.allocations],
        }


class StartLimitOptimizer:
    """
    Spends a weekly start cap across the remaining days of a matchup week.

    Days are consumed in date order; the optimizer does not move starts
    between days (only per-day lineups are optimized).
    """

    def __init__(self, weekly_cap: int = DEFAULT_WEEKLY_STARTS_CAP):
        # Negative or missing cap clamps to 0
        self.weekly_cap = max(0, int(weekly_cap or 0))

    def allocate(
        self,
        day_starts: Sequence[Tuple[date, int]],
        elapsed_starts: int = 0,
    ) -> StartAllocation:
        """
        Allocate the remaining budget.

        Args:
            day_starts: (date, optimized starts) for each remaining day
            elapsed_starts: Starts already used this week

        Returns:
            StartAllocation with one DayAllocation per remaining day
        """
        elapsed_starts = max(0, int(elapsed_starts or 0))
        budget = max(0, self.weekly_cap - elapsed_starts)
        result = StartAllocation(
            weekly_cap=self.weekly_cap,
            elapsed_starts=elapsed_starts,
            initial_budget=budget,
        )

        for game_date, optimized in sorted(day_starts, key=lambda item: item[0]):
            if optimized < 0:
                raise ValueError(f'Optimized starts for {game_date} cannot be negative')

            used = min(optimized, budget)
            budget -= used
            result.allocations.append(DayAllocation(
                game_date=game_date,
                optimized_starts=optimized,
                used=used,
                overflow=optimized - used,
                remaining_budget=budget,
            ))

        if result.total_overflow:
            logger.info(
                f"Weekly cap {self.weekly_cap} blocks {result.total_overflow} starts "
                f"(elapsed {elapsed_starts}, budget {result.initial_budget})"
            )
        return result
