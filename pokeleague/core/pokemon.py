"""Pokemon model and related logic."""

from pydantic import BaseModel

from pokeleague.core.errors import StateError

MIN_LEVEL = 1
MAX_LEVEL = 100


class Pokemon(BaseModel):
    """A Pokemon registered in the league."""

    id: int | None = None  # Assigned by the repository
    name: str
    type: str = ""
    level: int = MIN_LEVEL
    ability: str = ""

    @property
    def display(self) -> str:
        """One-line summary used by logs and the CLI."""
        return f"{self.name} (ID: {self.id}, Type: {self.type}, Level: {self.level}, Ability: {self.ability})"

    @property
    def is_max_level(self) -> bool:
        return self.level >= MAX_LEVEL

    def level_up(self) -> int:
        """Raise level by one, returns the new level."""
        if self.is_max_level:
            raise StateError(f"{self.name} has already reached the maximum level ({MAX_LEVEL}).")
        self.level += 1
        return self.level
