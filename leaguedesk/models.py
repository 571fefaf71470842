"""
League data model — teams, matches, rounds and the project record that owns them.

Every type is a frozen dataclass holding tuples, so a schedule handed to the
standings engine can never be mutated underneath it.  Result entry produces a
new Project via dataclasses.replace() instead of editing in place.

to_dict() / from_dict() speak the persisted JSON shape (camelCase keys), which
is also what the web API and import/export files use.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

MatchOutcome = Literal["win", "draw", "loss", "pending"]


@dataclass(frozen=True)
class Team:
    """A participant.  Ids are opaque and must be unique within a project."""

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Team:
        try:
            return cls(id=str(data["id"]), name=str(data["name"]))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Invalid team record: {exc}") from exc


@dataclass(frozen=True)
class Match:
    """
    A fixture between two distinct teams.

    Scores are both None until a result is recorded, then both set.
    """

    id: str
    home_team_id: str
    away_team_id: str
    home_score: int | None = None
    away_score: int | None = None

    @property
    def is_played(self) -> bool:
        return self.home_score is not None and self.away_score is not None

    def involves(self, team_id: str) -> bool:
        return team_id in (self.home_team_id, self.away_team_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "homeTeamId": self.home_team_id,
            "awayTeamId": self.away_team_id,
            "homeScore": self.home_score,
            "awayScore": self.away_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Match:
        try:
            return cls(
                id=str(data["id"]),
                home_team_id=str(data["homeTeamId"]),
                away_team_id=str(data["awayTeamId"]),
                home_score=_optional_score(data.get("homeScore")),
                away_score=_optional_score(data.get("awayScore")),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Invalid match record: {exc}") from exc


@dataclass(frozen=True)
class Round:
    """A 1-based round number and its fixtures, in emission order."""

    number: int
    matches: tuple[Match, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"number": self.number, "matches": [m.to_dict() for m in self.matches]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Round:
        try:
            return cls(
                number=int(data["number"]),
                matches=tuple(Match.from_dict(m) for m in data.get("matches") or []),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Invalid round record: {exc}") from exc


@dataclass(frozen=True)
class ProjectSettings:
    double_round: bool = True       # "turno e returno"
    relegation_count: int = 4
    teams: tuple[Team, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "doubleRound": self.double_round,
            "relegationCount": self.relegation_count,
            "teams": [t.to_dict() for t in self.teams],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectSettings:
        try:
            return cls(
                double_round=_strict_bool(data.get("doubleRound", True), "doubleRound"),
                relegation_count=_strict_int(data.get("relegationCount", 4), "relegationCount"),
                teams=tuple(Team.from_dict(t) for t in data.get("teams") or []),
            )
        except (TypeError, AttributeError) as exc:
            raise ValueError(f"Invalid settings record: {exc}") from exc


@dataclass(frozen=True)
class Project:
    """One championship instance: its settings plus the generated schedule."""

    id: str
    name: str
    created_at: int                 # epoch milliseconds
    is_configured: bool = False
    settings: ProjectSettings = field(default_factory=ProjectSettings)
    rounds: tuple[Round, ...] = ()

    @property
    def teams(self) -> tuple[Team, ...]:
        return self.settings.teams

    def team_name(self, team_id: str, default: str = "Unknown") -> str:
        for team in self.settings.teams:
            if team.id == team_id:
                return team.name
        return default

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at,
            "isConfigured": self.is_configured,
            "settings": self.settings.to_dict(),
            "rounds": [r.to_dict() for r in self.rounds],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Project:
        if not isinstance(data, dict):
            raise ValueError(f"Invalid project record: expected an object, got {type(data).__name__}")
        try:
            return cls(
                id=str(data["id"]),
                name=str(data["name"]),
                created_at=int(data.get("createdAt", 0)),
                is_configured=bool(data.get("isConfigured", False)),
                settings=ProjectSettings.from_dict(data.get("settings") or {}),
                rounds=tuple(Round.from_dict(r) for r in data.get("rounds") or []),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Invalid project record: {exc}") from exc


@dataclass(frozen=True)
class StandingsRow:
    """Derived per-team aggregate.  Recomputed on every call, never stored."""

    team_id: str
    team_name: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0

    @property
    def efficiency(self) -> float:
        """Share of available points taken, as a percentage."""
        if self.played == 0:
            return 0.0
        return self.points / (self.played * 3) * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "played": self.played,
            "points": self.points,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "goalsFor": self.goals_for,
            "goalsAgainst": self.goals_against,
            "goalDifference": self.goal_difference,
            "efficiency": round(self.efficiency, 1),
        }


def _optional_score(value: object) -> int | None:
    if value is None:
        return None
    return _strict_int(value, "score")


def _strict_int(value: object, field: str) -> int:
    # bool is an int subclass; floats and numeric strings would be coerced.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field} must be an integer, got {value!r}")
    return value


def _strict_bool(value: object, field: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{field} must be true or false, got {value!r}")
    return value
