"""
Standings engine — folds recorded results into a ranked league table.

compute_standings() is a pure function of (teams, rounds): it builds a fresh
team-id → tally map on every call, folds each played match into it, and sorts
the frozen rows it produces.  Matches without both scores are skipped, and so
are matches naming a team that is not in the list (stale persisted data).

Default ranking:
  1) points (desc)
  2) wins (desc)
  3) goal difference (desc)
  4) goals for (desc)
  5) team name (asc, accent- and case-insensitive)
  6) team id (asc); only separates teams with identical names
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Callable, Literal, Sequence, get_args

from leaguedesk.models import Round, StandingsRow, Team
from leaguedesk.tournaments.base import POINTS_DRAW, POINTS_LOSS, POINTS_WIN

logger = logging.getLogger(__name__)

SortKey = Literal[
    "points",
    "won",
    "drawn",
    "lost",
    "played",
    "goal_difference",
    "goals_for",
    "goals_against",
    "efficiency",
    "team_name",
]
SORT_KEYS: tuple[str, ...] = get_args(SortKey)

Zone = Literal["leader", "relegation"] | None

# (column, descending) in precedence order.
DEFAULT_ORDER: tuple[tuple[str, bool], ...] = (
    ("points", True),
    ("won", True),
    ("goal_difference", True),
    ("goals_for", True),
    ("team_name", False),
)


@dataclass
class _Tally:
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0

    def add(self, scored: int, conceded: int) -> None:
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if scored > conceded:
            self.won += 1
            self.points += POINTS_WIN
        elif scored < conceded:
            self.lost += 1
            self.points += POINTS_LOSS
        else:
            self.drawn += 1
            self.points += POINTS_DRAW


def compute_standings(teams: Sequence[Team], rounds: Sequence[Round]) -> list[StandingsRow]:
    """Return one row per team, sorted by the default ranking."""
    tallies: dict[str, _Tally] = {team.id: _Tally() for team in teams}

    for rnd in rounds:
        for match in rnd.matches:
            if not match.is_played:
                continue
            home = tallies.get(match.home_team_id)
            away = tallies.get(match.away_team_id)
            if home is None or away is None:
                logger.warning(
                    "Skipping match %s in round %d: unknown team reference (%s vs %s)",
                    match.id, rnd.number, match.home_team_id, match.away_team_id,
                )
                continue
            home.add(match.home_score, match.away_score)
            away.add(match.away_score, match.home_score)

    rows: list[StandingsRow] = []
    for team in teams:
        t = tallies[team.id]
        rows.append(
            StandingsRow(
                team_id=team.id,
                team_name=team.name,
                played=t.played,
                won=t.won,
                drawn=t.drawn,
                lost=t.lost,
                goals_for=t.goals_for,
                goals_against=t.goals_against,
                goal_difference=t.goals_for - t.goals_against,
                points=t.points,
            )
        )
    return _ordered(rows, DEFAULT_ORDER)


def sort_standings(
    rows: Sequence[StandingsRow],
    key: str = "points",
    descending: bool = True,
) -> list[StandingsRow]:
    """
    Re-sort standings by a single column.

    Ties on that column fall back through the default ranking (minus the
    column already used), so the order stays total under every key.

    Raises:
        ValueError: key is not one of SORT_KEYS.
    """
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {key!r}. Valid keys: {', '.join(SORT_KEYS)}")
    chain = ((key, descending),) + tuple(item for item in DEFAULT_ORDER if item[0] != key)
    return _ordered(rows, chain)


def classify(rows: Sequence[StandingsRow], relegation_count: int) -> list[Zone]:
    """
    Annotate ranked rows: index 0 is the leader, the bottom relegation_count
    rows are the relegation zone.  The count is clamped, not validated.
    """
    total = len(rows)
    threshold = total - max(0, min(relegation_count, total))
    zones: list[Zone] = []
    for i in range(total):
        if i == 0:
            zones.append("leader")
        elif relegation_count > 0 and i >= threshold:
            zones.append("relegation")
        else:
            zones.append(None)
    return zones


def name_sort_key(name: str) -> tuple[str, str]:
    """Collation key: accent-stripped casefolded text, then the raw text."""
    decomposed = unicodedata.normalize("NFKD", name)
    folded = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    return folded, name


# ------------------------------------------------------------------ #
# Internal                                                             #
# ------------------------------------------------------------------ #

def _column(key: str) -> Callable[[StandingsRow], object]:
    if key == "team_name":
        return lambda row: name_sort_key(row.team_name)
    return lambda row: getattr(row, key)


def _ordered(
    rows: Sequence[StandingsRow],
    chain: Sequence[tuple[str, bool]],
) -> list[StandingsRow]:
    # Stable sorts applied from the least to the most significant key.
    out = sorted(rows, key=lambda row: row.team_id)
    for key, descending in reversed(chain):
        out.sort(key=_column(key), reverse=descending)
    return out
