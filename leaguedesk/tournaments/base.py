"""
Tournament abstractions — shared types and the Tournament base class.

A tournament format is two pure operations over a fixed team list: build the
schedule once, and rank the teams against whatever results that schedule has
collected since.  Neither operation keeps state between calls, so the same
instance can serve any number of concurrent callers.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import Callable, Literal, Sequence

from leaguedesk.models import Round, StandingsRow, Team

TournamentType = Literal["round_robin"]

# Type alias: a zero-argument callable returning a fresh, unique fixture id.
# Tests pass a counter so generated schedules compare equal across runs.
IdFactory = Callable[[], str]

POINTS_WIN = 3
POINTS_DRAW = 1
POINTS_LOSS = 0


def new_id() -> str:
    return uuid.uuid4().hex


class Tournament(ABC):
    """Abstract base class for all tournament formats."""

    def __init__(self, teams: Sequence[Team]) -> None:
        self.teams: tuple[Team, ...] = tuple(teams)

    @abstractmethod
    def schedule(self, id_factory: IdFactory | None = None) -> tuple[Round, ...]:
        """Return the full fixture list, rounds numbered from 1."""
        ...  # pragma: no cover

    @abstractmethod
    def standings(self, rounds: Sequence[Round]) -> list[StandingsRow]:
        """Return current standings in ranking order."""
        ...  # pragma: no cover
