"""
Tournament package.

create_tournament() is the single entry point for instantiating a format.
generate_schedule() and compute_standings() are the two pure engines the
rest of the application (workflow, CLI, web API) is built on.
"""

from __future__ import annotations

from typing import Sequence

from leaguedesk.models import Team
from leaguedesk.tournaments.base import (
    POINTS_DRAW,
    POINTS_LOSS,
    POINTS_WIN,
    IdFactory,
    Tournament,
    TournamentType,
)
from leaguedesk.tournaments.round_robin import (
    RoundRobinTournament,
    generate_schedule,
    rounds_per_turn,
)
from leaguedesk.tournaments.standings import (
    SORT_KEYS,
    SortKey,
    Zone,
    classify,
    compute_standings,
    sort_standings,
)

__all__ = [
    # Base types
    "IdFactory",
    "Tournament",
    "TournamentType",
    "POINTS_WIN",
    "POINTS_DRAW",
    "POINTS_LOSS",
    # Engines
    "generate_schedule",
    "rounds_per_turn",
    "compute_standings",
    "sort_standings",
    "classify",
    "SORT_KEYS",
    "SortKey",
    "Zone",
    # Implementations
    "RoundRobinTournament",
    # Factory
    "create_tournament",
]


def create_tournament(
    tournament_type: TournamentType,
    teams: Sequence[Team],
    double_round: bool = True,
) -> Tournament:
    """
    Instantiate the correct Tournament subclass.

    Args:
        tournament_type: "round_robin"
        teams:           participants in seeding order
        double_round:    play a return turn with home/away swapped
    """
    match tournament_type:
        case "round_robin":
            return RoundRobinTournament(teams, double_round=double_round)
        case _:
            raise ValueError(
                f"Unknown tournament type: {tournament_type!r}. "
                "Valid types: round_robin"
            )
