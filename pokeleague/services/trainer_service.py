"""Trainer roster and team management."""

from pokeleague.core.errors import NotFoundError, ValidationError
from pokeleague.core.trainer import Trainer
from pokeleague.data.repositories import PokemonRepository, TrainerRepository
from pokeleague.utils.helpers import is_blank, normalize_name
from pokeleague.utils.logging import get_logger

logger = get_logger(__name__)


def _validate(name: str, age: int, badge_count: int) -> None:
    if is_blank(name):
        raise ValidationError("Trainer name cannot be empty.")
    if age < 0:
        raise ValidationError("Trainer age cannot be negative.")
    if badge_count < 0:
        raise ValidationError("Badge count cannot be negative.")


class TrainerService:
    """CRUD over trainers plus team assignment.

    A team never holds more than six Pokemon; assignment copies the Pokemon
    by value, so later changes to the registry do not reach the team.
    """

    def __init__(self, trainers: TrainerRepository, pokemon: PokemonRepository):
        self.trainers = trainers
        self.pokemon = pokemon

    def get_all(self) -> list[Trainer]:
        return self.trainers.get_all()

    def get_by_id(self, trainer_id: int) -> Trainer:
        trainer = self.trainers.get_by_id(trainer_id)
        if trainer is None:
            raise NotFoundError(f"Trainer with ID {trainer_id} not found.")
        return trainer

    def get_by_name(self, name: str) -> Trainer:
        trainer = self.trainers.get_by_name(name)
        if trainer is None:
            raise NotFoundError(f"Trainer '{name}' not found.")
        return trainer

    def get_by_region(self, region: str) -> list[Trainer]:
        if is_blank(region):
            return []
        key = normalize_name(region)
        return self.trainers.find(lambda t: normalize_name(t.region) == key)

    def create(self, name: str, age: int = 0, region: str = "", badge_count: int = 0) -> Trainer:
        _validate(name, age, badge_count)
        trainer = self.trainers.add(
            Trainer(name=name.strip(), age=age, region=region, badge_count=badge_count)
        )
        logger.info("Trainer created", trainer_id=trainer.id, name=trainer.name)
        return trainer

    def update(self, trainer_id: int, name: str, age: int, region: str, badge_count: int) -> Trainer:
        _validate(name, age, badge_count)
        with self.trainers.locked():
            trainer = self.get_by_id(trainer_id)
            trainer.name = name.strip()
            trainer.age = age
            trainer.region = region
            trainer.badge_count = badge_count
            self.trainers.update(trainer)
        logger.info("Trainer updated", trainer_id=trainer_id)
        return trainer

    def delete(self, trainer_id: int) -> None:
        if not self.trainers.delete(trainer_id):
            raise NotFoundError(f"Trainer with ID {trainer_id} not found.")
        logger.info("Trainer deleted", trainer_id=trainer_id)

    def assign_pokemon(self, trainer_id: int, pokemon_id: int) -> Trainer:
        """Add a registered Pokemon to a trainer's team.

        Raises:
            NotFoundError: unknown trainer or Pokemon.
            StateError: the team already holds six Pokemon.
        """
        pokemon = self.pokemon.get_by_id(pokemon_id)
        if pokemon is None:
            raise NotFoundError(f"Pokemon with ID {pokemon_id} not found.")

        with self.trainers.locked():
            trainer = self.get_by_id(trainer_id)
            trainer.add_pokemon(pokemon)
            self.trainers.update(trainer)

        logger.info(
            "Pokemon assigned to trainer",
            trainer_id=trainer_id,
            pokemon_id=pokemon_id,
            team_size=trainer.team_size,
        )
        return trainer

    def remove_pokemon(self, trainer_id: int, pokemon_id: int) -> Trainer:
        with self.trainers.locked():
            trainer = self.get_by_id(trainer_id)
            if trainer.remove_pokemon(pokemon_id) is None:
                raise NotFoundError(
                    f"Pokemon with ID {pokemon_id} is not on the team of trainer {trainer_id}."
                )
            self.trainers.update(trainer)
        logger.info("Pokemon removed from trainer", trainer_id=trainer_id, pokemon_id=pokemon_id)
        return trainer
