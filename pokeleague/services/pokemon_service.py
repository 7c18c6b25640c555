"""Pokemon registry operations."""

from pokeleague.core.errors import NotFoundError, ValidationError
from pokeleague.core.pokemon import MAX_LEVEL, MIN_LEVEL, Pokemon
from pokeleague.data.repositories import PokemonRepository
from pokeleague.utils.helpers import is_blank, normalize_name
from pokeleague.utils.logging import get_logger

logger = get_logger(__name__)


def _validate(name: str, level: int) -> None:
    if is_blank(name):
        raise ValidationError("Pokemon name cannot be empty.")
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise ValidationError(f"Pokemon level must be between {MIN_LEVEL} and {MAX_LEVEL}.")


class PokemonService:
    """CRUD and queries over the Pokemon repository."""

    def __init__(self, repository: PokemonRepository):
        self.repository = repository

    def get_all(self) -> list[Pokemon]:
        return self.repository.get_all()

    def get_by_id(self, pokemon_id: int) -> Pokemon:
        pokemon = self.repository.get_by_id(pokemon_id)
        if pokemon is None:
            raise NotFoundError(f"Pokemon with ID {pokemon_id} not found.")
        return pokemon

    def get_by_name(self, name: str) -> Pokemon:
        pokemon = self.repository.get_by_name(name)
        if pokemon is None:
            raise NotFoundError(f"Pokemon '{name}' not found.")
        return pokemon

    def create(self, name: str, type: str = "", level: int = MIN_LEVEL, ability: str = "") -> Pokemon:
        _validate(name, level)
        pokemon = self.repository.add(Pokemon(name=name.strip(), type=type, level=level, ability=ability))
        logger.info("Pokemon created", pokemon_id=pokemon.id, name=pokemon.name)
        return pokemon

    def update(self, pokemon_id: int, name: str, type: str, level: int, ability: str) -> Pokemon:
        _validate(name, level)
        with self.repository.locked():
            pokemon = self.get_by_id(pokemon_id)
            pokemon.name = name.strip()
            pokemon.type = type
            pokemon.level = level
            pokemon.ability = ability
            self.repository.update(pokemon)
        logger.info("Pokemon updated", pokemon_id=pokemon_id)
        return pokemon

    def delete(self, pokemon_id: int) -> None:
        if not self.repository.delete(pokemon_id):
            raise NotFoundError(f"Pokemon with ID {pokemon_id} not found.")
        logger.info("Pokemon deleted", pokemon_id=pokemon_id)

    def get_by_type(self, type: str) -> list[Pokemon]:
        if is_blank(type):
            return []
        key = normalize_name(type)
        return self.repository.find(lambda p: normalize_name(p.type) == key)

    def get_by_level(self, min_level: int, max_level: int) -> list[Pokemon]:
        if min_level > max_level:
            raise ValidationError("Minimum level cannot be greater than maximum level.")
        return self.repository.find(lambda p: min_level <= p.level <= max_level)

    def get_by_ability(self, ability: str) -> list[Pokemon]:
        if is_blank(ability):
            return []
        key = normalize_name(ability)
        return self.repository.find(lambda p: normalize_name(p.ability) == key)

    def level_up(self, pokemon_id: int) -> Pokemon:
        """Raise a Pokemon's level by one. Fails with StateError at the cap."""
        with self.repository.locked():
            pokemon = self.get_by_id(pokemon_id)
            pokemon.level_up()
            self.repository.update(pokemon)
        logger.info("Pokemon levelled up", pokemon_id=pokemon_id, level=pokemon.level)
        return pokemon

    def change_ability(self, pokemon_id: int, new_ability: str) -> Pokemon:
        if is_blank(new_ability):
            raise ValidationError("The new ability cannot be empty.")
        with self.repository.locked():
            pokemon = self.get_by_id(pokemon_id)
            pokemon.ability = new_ability
            self.repository.update(pokemon)
        logger.info("Pokemon ability changed", pokemon_id=pokemon_id, ability=new_ability)
        return pokemon
