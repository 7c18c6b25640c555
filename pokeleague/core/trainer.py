"""Trainer profile model."""

from datetime import datetime

from pydantic import BaseModel, Field

from pokeleague.core.errors import StateError
from pokeleague.core.pokemon import Pokemon
from pokeleague.utils.helpers import get_now

MAX_TEAM_SIZE = 6


class Trainer(BaseModel):
    """A league trainer and the Pokemon on their team."""

    id: int | None = None
    name: str
    age: int = 0
    region: str = ""
    badge_count: int = 0
    pokemon_team: list[Pokemon] = Field(default_factory=list)
    start_date: datetime = Field(default_factory=get_now)

    @property
    def team_size(self) -> int:
        return len(self.pokemon_team)

    @property
    def is_team_full(self) -> bool:
        """Check if the team already holds the maximum number of Pokemon."""
        return len(self.pokemon_team) >= MAX_TEAM_SIZE

    def has_pokemon(self, pokemon_id: int) -> bool:
        return any(p.id == pokemon_id for p in self.pokemon_team)

    def add_pokemon(self, pokemon: Pokemon) -> None:
        """Append a copy of the Pokemon to the team."""
        if self.is_team_full:
            raise StateError(f"A trainer cannot have more than {MAX_TEAM_SIZE} Pokemon on their team.")
        self.pokemon_team.append(pokemon.model_copy())

    def remove_pokemon(self, pokemon_id: int) -> Pokemon | None:
        """Remove Pokemon from team by ID."""
        for i, p in enumerate(self.pokemon_team):
            if p.id == pokemon_id:
                return self.pokemon_team.pop(i)
        return None
