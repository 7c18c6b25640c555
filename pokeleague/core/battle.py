"""Battle records and their lifecycle.

A battle is created between two trainers and always starts InProgress:

    InProgress -> Completed | Draw | Cancelled

The three outcomes are terminal. Rounds can only be recorded while the
battle is still in progress.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from pokeleague.core.errors import StateError
from pokeleague.utils.helpers import get_now


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BattleResult(str, Enum):
    """Lifecycle status of a battle."""

    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    DRAW = "Draw"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not BattleResult.IN_PROGRESS


# Results that count towards a trainer's record
SCORED_RESULTS = frozenset({BattleResult.COMPLETED, BattleResult.DRAW})

DRAW_LABEL = "Draw"
NO_OPPONENT = "None"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class BattleRound(BaseModel):
    """One recorded confrontation between two Pokemon.

    Pokemon ids and names are snapshots taken when the round is recorded.
    """

    round_number: int
    pokemon1_id: int
    pokemon1_name: str
    pokemon2_id: int
    pokemon2_name: str
    winner_pokemon_id: int | None = None
    winner_pokemon_name: str | None = None
    description: str = ""


class Battle(BaseModel):
    """A battle between two trainers."""

    id: int | None = None
    trainer1_id: int
    trainer1_name: str
    trainer2_id: int
    trainer2_name: str
    winner_id: int | None = None
    winner_name: str | None = None
    battle_date: datetime = Field(default_factory=get_now)
    location: str = ""
    rounds: list[BattleRound] = Field(default_factory=list)
    notes: str = ""
    result: BattleResult = BattleResult.IN_PROGRESS

    @property
    def next_round_number(self) -> int:
        return len(self.rounds) + 1

    def involves(self, trainer_id: int) -> bool:
        return trainer_id in (self.trainer1_id, self.trainer2_id)

    def opponent_name(self, trainer_id: int) -> str:
        """Name of the trainer facing ``trainer_id`` in this battle."""
        return self.trainer2_name if self.trainer1_id == trainer_id else self.trainer1_name

    def trainer_name(self, trainer_id: int) -> str | None:
        if trainer_id == self.trainer1_id:
            return self.trainer1_name
        if trainer_id == self.trainer2_id:
            return self.trainer2_name
        return None

    def ensure_in_progress(self, message: str = "This battle has already ended.") -> None:
        if self.result.is_terminal:
            raise StateError(message)

    def add_round(self, round_: BattleRound) -> None:
        self.ensure_in_progress("Cannot add a round to a battle that has ended.")
        self.rounds.append(round_)

    def set_winner(self, winner_id: int, winner_name: str) -> None:
        self.ensure_in_progress()
        self.winner_id = winner_id
        self.winner_name = winner_name
        self.result = BattleResult.COMPLETED

    def set_draw(self) -> None:
        self.ensure_in_progress()
        self.winner_id = None
        self.winner_name = DRAW_LABEL
        self.result = BattleResult.DRAW

    def cancel(self) -> None:
        self.ensure_in_progress("Only a battle in progress can be cancelled.")
        self.result = BattleResult.CANCELLED

    def __str__(self) -> str:
        status = {
            BattleResult.COMPLETED: f"Won by {self.winner_name}",
            BattleResult.DRAW: "Draw",
            BattleResult.IN_PROGRESS: "In progress",
            BattleResult.CANCELLED: "Cancelled",
        }[self.result]
        return (
            f"Battle {self.id}: {self.trainer1_name} vs {self.trainer2_name}"
            f" - {status} ({self.battle_date:%d/%m/%Y})"
        )


# ---------------------------------------------------------------------------
# Derived read models
# ---------------------------------------------------------------------------

class BattleStatistics(BaseModel):
    """A trainer's record over completed and drawn battles."""

    trainer_id: int
    trainer_name: str
    total_battles: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    win_rate: float = 0.0
    last_battle_date: datetime | None = None
    favorite_opponent: str = NO_OPPONENT


class BattleSummary(BaseModel):
    """League-wide battle counts by result."""

    total_battles: int = 0
    completed_battles: int = 0
    draw_battles: int = 0
    cancelled_battles: int = 0
    in_progress_battles: int = 0
    completion_rate: float = 0.0  # Percent of battles completed with a winner


def compute_statistics(trainer_id: int, trainer_name: str, battles: list[Battle]) -> BattleStatistics:
    """Aggregate a trainer's record from a snapshot of battles.

    Only battles the trainer took part in with a Completed or Draw result
    are counted. The favorite opponent is the most frequent opponent name;
    ties go to whichever name was seen first.
    """
    counted = [b for b in battles if b.involves(trainer_id) and b.result in SCORED_RESULTS]
    total = len(counted)

    wins = sum(1 for b in counted if b.winner_id == trainer_id)
    losses = sum(1 for b in counted if b.winner_id is not None and b.winner_id != trainer_id)
    draws = sum(1 for b in counted if b.result is BattleResult.DRAW)

    opponent_counts: dict[str, int] = {}
    for b in counted:
        name = b.opponent_name(trainer_id)
        opponent_counts[name] = opponent_counts.get(name, 0) + 1

    favorite = NO_OPPONENT
    best = 0
    for name, count in opponent_counts.items():  # dicts keep first-seen order
        if count > best:
            favorite, best = name, count

    return BattleStatistics(
        trainer_id=trainer_id,
        trainer_name=trainer_name,
        total_battles=total,
        wins=wins,
        losses=losses,
        draws=draws,
        win_rate=wins / total if total else 0.0,
        last_battle_date=max((b.battle_date for b in counted), default=None),
        favorite_opponent=favorite,
    )


def compute_summary(battles: list[Battle]) -> BattleSummary:
    """Count battles per result across the whole league."""
    total = len(battles)
    completed = sum(1 for b in battles if b.result is BattleResult.COMPLETED)
    return BattleSummary(
        total_battles=total,
        completed_battles=completed,
        draw_battles=sum(1 for b in battles if b.result is BattleResult.DRAW),
        cancelled_battles=sum(1 for b in battles if b.result is BattleResult.CANCELLED),
        in_progress_battles=sum(1 for b in battles if b.result is BattleResult.IN_PROGRESS),
        completion_rate=completed / total * 100 if total else 0.0,
    )
