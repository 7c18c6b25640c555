"""Battle lifecycle and statistics.

Every mutation loads the battle, applies one transition and writes it back
while holding the battle repository lock, so concurrent requests cannot
interleave a read-modify-write sequence.
"""

from __future__ import annotations

from datetime import timedelta

from pokeleague.core.battle import (
    Battle,
    BattleResult,
    BattleRound,
    BattleStatistics,
    BattleSummary,
    compute_statistics,
    compute_summary,
)
from pokeleague.core.errors import NotFoundError, ValidationError
from pokeleague.data.repositories import BattleRepository, PokemonRepository, TrainerRepository
from pokeleague.utils.helpers import get_now
from pokeleague.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_RECENT_DAYS = 30


class BattleService:
    """Creates battles, records rounds and settles outcomes."""

    def __init__(
        self,
        battles: BattleRepository,
        trainers: TrainerRepository,
        pokemon: PokemonRepository,
    ):
        self.battles = battles
        self.trainers = trainers
        self.pokemon = pokemon

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all(self) -> list[Battle]:
        return self.battles.get_all()

    def get_by_id(self, battle_id: int) -> Battle:
        battle = self.battles.get_by_id(battle_id)
        if battle is None:
            raise NotFoundError(f"Battle with ID {battle_id} not found.")
        return battle

    def get_by_trainer(self, trainer_id: int) -> list[Battle]:
        return self.battles.get_by_trainer(trainer_id)

    def get_history(self, trainer1_id: int, trainer2_id: int) -> list[Battle]:
        """All battles between two trainers, whichever side each was on."""
        return self.battles.get_between(trainer1_id, trainer2_id)

    def get_by_result(self, result: BattleResult) -> list[Battle]:
        return self.battles.get_by_result(result)

    def get_recent_battles(self, days: int = DEFAULT_RECENT_DAYS) -> list[Battle]:
        """Battles dated within the last ``days`` calendar days, today included."""
        if days < 0:
            raise ValidationError("The number of days cannot be negative.")
        now = get_now()
        return self.battles.get_by_date_range(now - timedelta(days=days), now)

    def get_statistics(self, trainer_id: int) -> BattleStatistics:
        trainer = self.trainers.get_by_id(trainer_id)
        if trainer is None:
            raise NotFoundError(f"Trainer with ID {trainer_id} not found.")
        # get_all takes a single snapshot under the repository lock
        return compute_statistics(trainer_id, trainer.name, self.battles.get_all())

    def get_summary(self) -> BattleSummary:
        return compute_summary(self.battles.get_all())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_battle(self, trainer1_id: int, trainer2_id: int, location: str = "") -> Battle:
        """Open a new battle between two distinct, existing trainers."""
        if trainer1_id == trainer2_id:
            raise ValidationError("A trainer cannot battle against themselves.")

        trainer1 = self.trainers.get_by_id(trainer1_id)
        if trainer1 is None:
            raise NotFoundError(f"Trainer with ID {trainer1_id} not found.")
        trainer2 = self.trainers.get_by_id(trainer2_id)
        if trainer2 is None:
            raise NotFoundError(f"Trainer with ID {trainer2_id} not found.")

        battle = self.battles.add(
            Battle(
                trainer1_id=trainer1_id,
                trainer1_name=trainer1.name,
                trainer2_id=trainer2_id,
                trainer2_name=trainer2.name,
                location=location,
                battle_date=get_now(),
            )
        )
        logger.info(
            "Battle created",
            battle_id=battle.id,
            trainer1_id=trainer1_id,
            trainer2_id=trainer2_id,
            location=location,
        )
        return battle

    def start_battle(self, battle_id: int) -> Battle:
        """Confirm a battle can proceed. Battles are in progress from creation."""
        battle = self.get_by_id(battle_id)
        battle.ensure_in_progress("This battle has already ended or was cancelled.")
        logger.info("Battle started", battle_id=battle_id)
        return battle

    def add_round(
        self,
        battle_id: int,
        pokemon1_id: int,
        pokemon2_id: int,
        winner_pokemon_id: int | None = None,
        description: str = "",
    ) -> Battle:
        """Record the next round of a battle in progress.

        The round number is the current round count plus one. A winner, when
        given, must be one of the two Pokemon in the round.
        """
        with self.battles.locked():
            battle = self.get_by_id(battle_id)
            battle.ensure_in_progress("Cannot add a round to a battle that has ended.")

            pokemon1 = self.pokemon.get_by_id(pokemon1_id)
            pokemon2 = self.pokemon.get_by_id(pokemon2_id)
            if pokemon1 is None or pokemon2 is None:
                missing = pokemon1_id if pokemon1 is None else pokemon2_id
                raise NotFoundError(f"Pokemon with ID {missing} not found.")

            round_ = BattleRound(
                round_number=battle.next_round_number,
                pokemon1_id=pokemon1.id,
                pokemon1_name=pokemon1.name,
                pokemon2_id=pokemon2.id,
                pokemon2_name=pokemon2.name,
                description=description,
            )
            if winner_pokemon_id is not None:
                if winner_pokemon_id not in (pokemon1_id, pokemon2_id):
                    raise ValidationError("The winning Pokemon must be one of the two round participants.")
                winner = pokemon1 if winner_pokemon_id == pokemon1_id else pokemon2
                round_.winner_pokemon_id = winner.id
                round_.winner_pokemon_name = winner.name

            battle.add_round(round_)
            self.battles.update(battle)

        logger.info(
            "Battle round added",
            battle_id=battle_id,
            round_number=round_.round_number,
            winner_pokemon_id=winner_pokemon_id,
        )
        return battle

    def set_winner(self, battle_id: int, winner_id: int) -> Battle:
        """Complete a battle with one of its two trainers as winner."""
        with self.battles.locked():
            battle = self.get_by_id(battle_id)
            battle.ensure_in_progress()
            winner_name = battle.trainer_name(winner_id)
            if winner_name is None:
                raise ValidationError("The winner ID must match one of the battle participants.")
            battle.set_winner(winner_id, winner_name)
            self.battles.update(battle)
        logger.info("Battle completed", battle_id=battle_id, winner_id=winner_id)
        return battle

    def set_draw(self, battle_id: int) -> Battle:
        with self.battles.locked():
            battle = self.get_by_id(battle_id)
            battle.set_draw()
            self.battles.update(battle)
        logger.info("Battle ended in a draw", battle_id=battle_id)
        return battle

    def cancel(self, battle_id: int) -> Battle:
        with self.battles.locked():
            battle = self.get_by_id(battle_id)
            battle.cancel()
            self.battles.update(battle)
        logger.info("Battle cancelled", battle_id=battle_id)
        return battle

    def add_notes(self, battle_id: int, notes: str) -> Battle:
        """Replace a battle's notes. Allowed in any state."""
        with self.battles.locked():
            battle = self.get_by_id(battle_id)
            battle.notes = notes
            self.battles.update(battle)
        logger.info("Battle notes updated", battle_id=battle_id)
        return battle

    def delete(self, battle_id: int) -> None:
        if not self.battles.delete(battle_id):
            raise NotFoundError(f"Battle with ID {battle_id} not found.")
        logger.info("Battle deleted", battle_id=battle_id)
