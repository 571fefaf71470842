"""
Championship workflow — create, configure, record results, read back.

Every function takes a Project and returns a new one; nothing here touches
storage.  This is also where configuration is validated, so the schedule and
standings engines only ever see input they can handle.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, replace
from typing import Sequence

from leaguedesk.models import Match, MatchOutcome, Project, ProjectSettings, Round, StandingsRow, Team
from leaguedesk.tournaments import IdFactory, compute_standings, create_tournament, sort_standings

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Rejected project settings or result input."""


@dataclass(frozen=True)
class HistoryEntry:
    """One match seen from a single team's side."""

    round_number: int
    match: Match
    opponent_name: str
    is_home: bool
    team_score: int | None
    opponent_score: int | None
    outcome: MatchOutcome


# --------------------------------------------------------------------------- #
# Creation & configuration                                                     #
# --------------------------------------------------------------------------- #

def create_project(
    name: str,
    *,
    settings: ProjectSettings | None = None,
    now: int | None = None,
) -> Project:
    """Create an unconfigured project with no schedule yet."""
    name = name.strip()
    if not name:
        raise ConfigurationError("Project name must not be empty.")
    project = Project(
        id=str(uuid.uuid4()),
        name=name,
        created_at=now if now is not None else int(time.time() * 1000),
        is_configured=False,
        settings=settings or ProjectSettings(),
        rounds=(),
    )
    logger.info("Created project %s (%r)", project.id, project.name)
    return project


def parse_team_list(text: str) -> list[Team]:
    """One team per non-blank line; surrounding whitespace is dropped."""
    return [
        Team(id=str(uuid.uuid4()), name=line.strip())
        for line in text.splitlines()
        if line.strip()
    ]


def validate_settings(settings: ProjectSettings) -> None:
    """
    Raises:
        ConfigurationError: the settings cannot produce a valid championship.
    """
    teams = settings.teams
    if len(teams) < 2:
        raise ConfigurationError("Add at least 2 teams.")
    if settings.relegation_count < 0:
        raise ConfigurationError("Relegation count must be >= 0.")
    if settings.relegation_count >= len(teams):
        raise ConfigurationError(
            f"Relegation count ({settings.relegation_count}) must be lower than "
            f"the number of teams ({len(teams)})."
        )
    seen: set[str] = set()
    for team in teams:
        if not team.name.strip():
            raise ConfigurationError(f"Team {team.id!r} has an empty name.")
        if team.id in seen:
            raise ConfigurationError(f"Duplicate team id: {team.id!r}")
        seen.add(team.id)


def configure_project(
    project: Project,
    settings: ProjectSettings,
    *,
    id_factory: IdFactory | None = None,
) -> Project:
    """Validate the settings and replace the project's schedule with a fresh one."""
    validate_settings(settings)
    tournament = create_tournament("round_robin", settings.teams, double_round=settings.double_round)
    rounds = tournament.schedule(id_factory)
    logger.info(
        "Configured project %s: %d teams, %d rounds, double_round=%s, relegation=%d",
        project.id, len(settings.teams), len(rounds),
        settings.double_round, settings.relegation_count,
    )
    return replace(project, is_configured=True, settings=settings, rounds=rounds)


# --------------------------------------------------------------------------- #
# Results                                                                      #
# --------------------------------------------------------------------------- #

def record_result(
    project: Project,
    match_id: str,
    home_score: int | None,
    away_score: int | None,
) -> Project:
    """
    Set (or clear, with two Nones) the score of one match.

    Raises:
        ConfigurationError: exactly one score given, or a negative score.
        KeyError: no match with that id.
    """
    if (home_score is None) != (away_score is None):
        raise ConfigurationError("Both scores must be given, or neither to clear the result.")
    for score in (home_score, away_score):
        if score is not None and score < 0:
            raise ConfigurationError(f"Scores must be >= 0, got {score}.")

    found = False
    rounds: list[Round] = []
    for rnd in project.rounds:
        matches: list[Match] = []
        for match in rnd.matches:
            if match.id == match_id:
                match = replace(match, home_score=home_score, away_score=away_score)
                found = True
            matches.append(match)
        rounds.append(replace(rnd, matches=tuple(matches)))

    if not found:
        raise KeyError(f"Match not found: {match_id}")

    logger.info("Project %s: match %s set to %s-%s", project.id, match_id, home_score, away_score)
    return replace(project, rounds=tuple(rounds))


# --------------------------------------------------------------------------- #
# Read-side helpers                                                            #
# --------------------------------------------------------------------------- #

def project_standings(
    project: Project,
    sort_key: str = "points",
    descending: bool = True,
) -> list[StandingsRow]:
    rows = compute_standings(project.teams, project.rounds)
    if sort_key == "points" and descending:
        return rows
    return sort_standings(rows, sort_key, descending)


def find_round(project: Project, number: int) -> Round:
    for rnd in project.rounds:
        if rnd.number == number:
            return rnd
    raise KeyError(f"Round not found: {number}")


def find_team(project: Project, team_id: str) -> Team:
    for team in project.teams:
        if team.id == team_id:
            return team
    raise KeyError(f"Team not found: {team_id}")


def team_history(project: Project, team_id: str) -> list[HistoryEntry]:
    """Every fixture of one team across all rounds, in round order."""
    find_team(project, team_id)
    entries: list[HistoryEntry] = []
    for rnd in project.rounds:
        for match in rnd.matches:
            if not match.involves(team_id):
                continue
            is_home = match.home_team_id == team_id
            opponent_id = match.away_team_id if is_home else match.home_team_id
            team_score = match.home_score if is_home else match.away_score
            opponent_score = match.away_score if is_home else match.home_score
            entries.append(
                HistoryEntry(
                    round_number=rnd.number,
                    match=match,
                    opponent_name=project.team_name(opponent_id),
                    is_home=is_home,
                    team_score=team_score,
                    opponent_score=opponent_score,
                    outcome=_outcome(team_score, opponent_score),
                )
            )
    return entries


def played_count(rounds: Sequence[Round]) -> tuple[int, int]:
    """(played, total) match counts across a schedule."""
    total = sum(len(r.matches) for r in rounds)
    played = sum(1 for r in rounds for m in r.matches if m.is_played)
    return played, total


def _outcome(team_score: int | None, opponent_score: int | None) -> MatchOutcome:
    if team_score is None or opponent_score is None:
        return "pending"
    if team_score > opponent_score:
        return "win"
    if team_score < opponent_score:
        return "loss"
    return "draw"
