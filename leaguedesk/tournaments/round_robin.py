"""
Round Robin tournament — every team meets every other team once per turn.

Fixtures come from the circle (Berger) method:
- Pad an odd team list with an empty slot; whoever faces it has a bye.
- Pair slot i with slot M-1-i, then rotate every slot except slot 0.
- The slot-0 pair swaps home and away on odd rounds so the fixed team is
  not at home for every match; the other pairs keep their slot order.
- Double round appends a mirrored turn with home and away swapped.
"""

from __future__ import annotations

import logging
from typing import Sequence

from leaguedesk.models import Match, Round, StandingsRow, Team
from leaguedesk.tournaments.base import IdFactory, Tournament, new_id
from leaguedesk.tournaments.standings import compute_standings

logger = logging.getLogger(__name__)


class RoundRobinTournament(Tournament):
    """Single or double round robin over a fixed team list."""

    def __init__(self, teams: Sequence[Team], double_round: bool = True) -> None:
        super().__init__(teams)
        self.double_round = double_round

    def schedule(self, id_factory: IdFactory | None = None) -> tuple[Round, ...]:
        return generate_schedule(self.teams, self.double_round, id_factory=id_factory)

    def standings(self, rounds: Sequence[Round]) -> list[StandingsRow]:
        return compute_standings(self.teams, rounds)

    @property
    def total_rounds(self) -> int:
        per_turn = rounds_per_turn(len(self.teams))
        return per_turn * 2 if self.double_round else per_turn


def rounds_per_turn(team_count: int) -> int:
    """Rounds needed for every pair to meet once: N-1 if N is even, N if odd."""
    if team_count < 2:
        return 0
    return team_count - 1 if team_count % 2 == 0 else team_count


def generate_schedule(
    teams: Sequence[Team],
    double_round: bool,
    *,
    id_factory: IdFactory | None = None,
) -> tuple[Round, ...]:
    """
    Build the fixture list for a round-robin league.

    Args:
        teams:        participants in seeding order; order fixes the pairings.
        double_round: append a return turn with home and away swapped.
        id_factory:   source of fixture ids (defaults to random uuid hex).

    Returns an empty tuple for fewer than two teams.  Every match is unplayed.
    """
    if len(teams) < 2:
        return ()

    make_id = id_factory or new_id

    # None marks the bye slot; it is never emitted as a match side.
    slots: list[Team | None] = list(teams)
    if len(slots) % 2 == 1:
        slots.append(None)

    size = len(slots)
    half = size // 2
    first_turn: list[Round] = []

    for round_idx in range(size - 1):
        matches: list[Match] = []
        for i in range(half):
            team_a = slots[i]
            team_b = slots[size - 1 - i]
            if team_a is None or team_b is None:
                continue
            if i == 0 and round_idx % 2 == 1:
                home, away = team_b, team_a
            else:
                home, away = team_a, team_b
            matches.append(Match(id=make_id(), home_team_id=home.id, away_team_id=away.id))

        first_turn.append(Round(number=round_idx + 1, matches=tuple(matches)))

        # Keep slot 0 fixed; the last slot moves to position 1.
        slots = [slots[0], slots[-1], *slots[1:-1]]

    rounds = list(first_turn)
    if double_round:
        offset = len(first_turn)
        for rnd in first_turn:
            rounds.append(
                Round(
                    number=rnd.number + offset,
                    matches=tuple(
                        Match(id=make_id(), home_team_id=m.away_team_id, away_team_id=m.home_team_id)
                        for m in rnd.matches
                    ),
                )
            )

    logger.debug(
        "Generated %d rounds for %d teams (double_round=%s)",
        len(rounds), len(teams), double_round,
    )
    return tuple(rounds)
