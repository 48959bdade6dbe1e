#!/usr/bin/env python3
"""
Daily Lineup Optimizer.

Picks the starting lineup for one date from a fantasy roster:

1. Build the candidate pool: not in a reserve (IR) slot, playing minutes,
   not OUT, and the player's NBA team has a game that date
2. Score every candidate (category urgency x weights x injury, blended
   with base rating) and sort by score, ties kept in roster order
3. Walk the 8 lineup slots in their fixed order (PG, SG, SF, PF, C, G,
   F/C, UTIL); each slot takes the best unassigned candidate eligible for it
4. A slot with no eligible candidate is recorded as unfilled
5. Unassigned candidates go to the bench list; core players (top 6 by base
   rating) are marked MONITOR if DTD, HOLD otherwise, never BENCH

The default greedy pass is the legacy behavior and is not a guaranteed
maximum matching: with a skewed position mix a different visiting order can
occasionally fill one more slot. The 'matching' strategy runs augmenting
paths over the same score order and always fills the maximum number of
slots.

Identical inputs always produce identical output.
"""

import logging
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from backend.models import (
    BenchAction,
    BenchedPlayer,
    CategoryUrgency,
    DayResult,
    ExcludedPlayer,
    ExclusionReason,
    Game,
    LineupSettings,
    LineupSlot,
    Player,
    RosterEntry,
    ScoredPlayer,
    SlotAssignment,
    STANDARD_LINEUP_SLOTS,
)
from backend.projections.injury import InjuryStatus, classify_status, injury_multiplier
from backend.projections.player_impact import rank_scored_players, score_player
from backend.projections.schedule import resolve_availability

logger = logging.getLogger(__name__)


class CandidatePool:
    """Roster split for one date: candidates, exclusions and idle players."""

    def __init__(self):
        self.candidates: List[Tuple[RosterEntry, InjuryStatus, str]] = []  # (entry, status, opponent)
        self.excluded: List[ExcludedPlayer] = []
        self.idle: List[str] = []

    def exclude(self, player: Player, reason: ExclusionReason, team_code: Optional[str] = None):
        self.excluded.append(ExcludedPlayer(
            player_id=player.player_id,
            name=player.name,
            reason=reason,
            team_code=team_code or player.team_code,
            positions=player.positions,
        ))


def build_candidate_pool(roster: Sequence[RosterEntry], games: Sequence[Game]) -> CandidatePool:
    """
    Split a roster into today's candidates, exclusions and idle players.

    Exclusions are checked in order: reserve slot, no positions, unresolved
    team code, OUT. OUT is checked whether or not injury weighting is on.
    Players with no game or no minutes are idle, not excluded.
    """
    pool = CandidatePool()

    for entry in roster:
        player = entry.player

        if entry.is_reserve:
            pool.exclude(player, ExclusionReason.IR_SLOT)
            continue

        if not player.positions:
            pool.exclude(player, ExclusionReason.NO_POSITIONS)
            continue

        availability = resolve_availability(player.team_code, games)
        if not availability.resolved:
            logger.info(f"Unresolved team code {player.team_code!r} for {player.name}")
            pool.exclude(player, ExclusionReason.MISSING_TEAM)
            continue

        status = classify_status(player.status)
        if status == InjuryStatus.OUT:
            pool.exclude(player, ExclusionReason.OUT, availability.team_code)
            continue

        if not availability.has_game or player.minutes <= 0:
            pool.idle.append(player.player_id)
            continue

        pool.candidates.append((entry, status, availability.opponent))

    return pool


# =============================================================================
# Slot Assignment
# =============================================================================

def assign_greedy(
    ranked: Sequence[ScoredPlayer],
    slots: Sequence[LineupSlot],
) -> Tuple[Dict[int, ScoredPlayer], List[int]]:
    """
    Legacy slot-order-first assignment.

    Returns:
        (slot index -> assigned player, unfilled slot indices)
    """
    assigned: Dict[int, ScoredPlayer] = {}
    used: Set[str] = set()
    unfilled: List[int] = []

    for slot_idx, slot in enumerate(slots):
        best = next(
            (p for p in ranked
             if p.player_id not in used and slot.accepts(p.player.positions)),
            None
        )
        if best is None:
            unfilled.append(slot_idx)
            continue
        assigned[slot_idx] = best
        used.add(best.player_id)

    return assigned, unfilled


def assign_matching(
    ranked: Sequence[ScoredPlayer],
    slots: Sequence[LineupSlot],
) -> Tuple[Dict[int, ScoredPlayer], List[int]]:
    """
    Maximum bipartite matching via augmenting paths.

    Players are offered slots in score order, so among all maximum matchings
    the one kept prefers higher-scored players. Each player tries slots in
    lineup order.
    """
    eligible = [
        [s_idx for s_idx, slot in enumerate(slots) if slot.accepts(p.player.positions)]
        for p in ranked
    ]
    slot_match: List[int] = [-1] * len(slots)

    def try_augment(p_idx: int, visited: List[bool]) -> bool:
        for s_idx in eligible[p_idx]:
            if visited[s_idx]:
                continue
            visited[s_idx] = True
            if slot_match[s_idx] == -1 or try_augment(slot_match[s_idx], visited):
                slot_match[s_idx] = p_idx
                return True
        return False

    for p_idx in range(len(ranked)):
        if -1 not in slot_match:
            break
        try_augment(p_idx, [False] * len(slots))

    assigned = {s_idx: ranked[p_idx] for s_idx, p_idx in enumerate(slot_match) if p_idx != -1}
    unfilled = [s_idx for s_idx, p_idx in enumerate(slot_match) if p_idx == -1]
    return assigned, unfilled


ASSIGNERS: Dict[str, Callable] = {
    'greedy': assign_greedy,
    'matching': assign_matching,
}


# =============================================================================
# Optimizer
# =============================================================================

class LineupOptimizer:
    """
    Per-day lineup optimizer.

    Stateless apart from its settings: every call builds a fresh DayResult
    from the roster and schedule snapshot it is given.
    """

    def __init__(
        self,
        settings: Optional[LineupSettings] = None,
        slots: Sequence[LineupSlot] = STANDARD_LINEUP_SLOTS,
    ):
        self.settings = settings or LineupSettings()
        self.slots = tuple(slots)
        self._assign = ASSIGNERS[self.settings.assignment_strategy]

    def score_candidates(
        self,
        pool: CandidatePool,
        urgencies: Sequence[CategoryUrgency],
        rating: Callable[[Player], float],
        core_ids: Iterable[str],
    ) -> List[ScoredPlayer]:
        """Score each candidate and rank by score (ties keep roster order)."""
        core = set(core_ids)
        settings = self.settings
        scored = []
        for entry, status, opponent in pool.candidates:
            multiplier = injury_multiplier(
                status,
                apply_multipliers=settings.apply_injury_multipliers,
                dtd_multiplier=settings.dtd_multiplier,
                gtd_multiplier=settings.gtd_multiplier,
            )
            scored.append(score_player(
                entry,
                urgencies,
                settings.category_weights,
                base_rating=rating(entry.player),
                injury_status=status,
                multiplier=multiplier,
                is_core=entry.player_id in core,
                opponent=opponent,
            ))
        return rank_scored_players(scored)

    def optimize_day(
        self,
        game_date: date,
        roster: Sequence[RosterEntry],
        games: Sequence[Game],
        urgencies: Sequence[CategoryUrgency],
        rating: Callable[[Player], float],
        core_ids: Iterable[str] = (),
    ) -> DayResult:
        """
        Optimize one date's lineup.

        Args:
            game_date: Date being optimized
            roster: Full fantasy roster (reserve slots included)
            games: NBA games on that date
            urgencies: Category urgency for the matchup
            rating: Base-rating function (CRI / wCRI)
            core_ids: Player ids protected from a full-bench recommendation

        Returns:
            DayResult with assignments (in slot order), unfilled slots, bench,
            exclusions and idle players
        """
        pool = build_candidate_pool(roster, games)
        ranked = self.score_candidates(pool, urgencies, rating, core_ids)

        assigned, unfilled_idx = self._assign(ranked, self.slots)

        assignments = [
            SlotAssignment(slot=self.slots[s_idx].label, player=assigned[s_idx])
            for s_idx in sorted(assigned)
        ]
        assigned_ids = {a.player_id for a in assignments}

        benched = [
            BenchedPlayer(player=p, action=self._bench_action(p))
            for p in ranked
            if p.player_id not in assigned_ids
        ]

        result = DayResult(
            game_date=game_date,
            candidate_count=len(ranked),
            assignments=assignments,
            unfilled_slots=[self.slots[s_idx].label for s_idx in unfilled_idx],
            benched=benched,
            excluded=pool.excluded,
            idle=pool.idle,
            slot_count=len(self.slots),
        )

        logger.debug(
            f"{game_date}: {result.candidate_count} candidates, "
            f"{result.starts}/{len(self.slots)} slots filled, "
            f"unfilled={result.unfilled_slots}, excluded={len(result.excluded)}"
        )
        return result

    @staticmethod
    def _bench_action(player: ScoredPlayer) -> BenchAction:
        if not player.is_core:
            return BenchAction.BENCH
        if player.injury_status == InjuryStatus.DTD.value:
            return BenchAction.MONITOR
        return BenchAction.HOLD
