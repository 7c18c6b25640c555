"""Composition root for in-memory state.

A ``Store`` is built once per application and handed to the services that
need it. Nothing in the package keeps repositories at module level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from pokeleague.core.auth import DEFAULT_ROUNDS, get_password_hash
from pokeleague.core.battle import Battle, BattleRound
from pokeleague.core.pokemon import Pokemon
from pokeleague.core.trainer import Trainer
from pokeleague.core.user import User, UserRole
from pokeleague.data.repositories import (
    BattleRepository,
    PokemonRepository,
    TrainerRepository,
    UserRepository,
)
from pokeleague.utils.helpers import get_now, utcnow

SAMPLE_POKEMON = [
    ("Pikachu", "Electric", 25, "Static"),
    ("Charizard", "Fire", 50, "Blaze"),
    ("Blastoise", "Water", 45, "Torrent"),
    ("Venusaur", "Grass", 40, "Overgrow"),
    ("Raichu", "Electric", 35, "Static"),
    ("Psyduck", "Water", 20, "Damp"),
]

SAMPLE_TRAINERS = [
    ("Ash Ketchum", 16, "Kanto", 8),
    ("Misty", 12, "Kanto", 4),
    ("Brock", 15, "Kanto", 2),
    ("Gary Oak", 16, "Kanto", 10),
    ("May", 14, "Hoenn", 3),
    ("Dawn", 13, "Sinnoh", 5),
    ("Serena", 14, "Kalos", 2),
    ("Chloe", 12, "Galar", 1),
]

# username, email, password, role, account age in days
SAMPLE_USERS = [
    ("admin", "admin@pokeleague.dev", "admin123", UserRole.ADMIN, 30),
    ("trainer", "trainer@pokeleague.dev", "trainer123", UserRole.TRAINER, 15),
]


@dataclass
class Store:
    """One repository per entity."""

    pokemon: PokemonRepository = field(default_factory=PokemonRepository)
    trainers: TrainerRepository = field(default_factory=TrainerRepository)
    battles: BattleRepository = field(default_factory=BattleRepository)
    users: UserRepository = field(default_factory=UserRepository)

    @classmethod
    def seeded(cls, password_rounds: int = DEFAULT_ROUNDS) -> Store:
        """Create a store pre-filled with the sample league."""
        store = cls()
        store.seed(password_rounds)
        return store

    def seed(self, password_rounds: int = DEFAULT_ROUNDS) -> None:
        pokemon = {
            name: self.pokemon.add(Pokemon(name=name, type=type_, level=level, ability=ability))
            for name, type_, level, ability in SAMPLE_POKEMON
        }

        trainers = {}
        for name, age, region, badges in SAMPLE_TRAINERS:
            trainer = Trainer(name=name, age=age, region=region, badge_count=badges)
            if name == "Ash Ketchum":
                trainer.add_pokemon(pokemon["Pikachu"])
            trainers[name] = self.trainers.add(trainer)

        now = get_now()
        ash, misty, gary = trainers["Ash Ketchum"], trainers["Misty"], trainers["Gary Oak"]
        pikachu = pokemon["Pikachu"]

        gym = Battle(
            trainer1_id=ash.id, trainer1_name=ash.name,
            trainer2_id=misty.id, trainer2_name=misty.name,
            location="Cerulean City Gym", battle_date=now,
        )
        psyduck = pokemon["Psyduck"]
        gym.add_round(BattleRound(
            round_number=1,
            pokemon1_id=pikachu.id, pokemon1_name=pikachu.name,
            pokemon2_id=psyduck.id, pokemon2_name=psyduck.name,
            winner_pokemon_id=pikachu.id, winner_pokemon_name=pikachu.name,
            description="Super effective electric attack",
        ))
        gym.set_winner(ash.id, ash.name)
        gym.notes = "Ash's first gym battle"
        self.battles.add(gym)

        rivalry = Battle(
            trainer1_id=ash.id, trainer1_name=ash.name,
            trainer2_id=gary.id, trainer2_name=gary.name,
            location="Route 22", battle_date=now - timedelta(days=7),
        )
        blastoise = pokemon["Blastoise"]
        rivalry.add_round(BattleRound(
            round_number=1,
            pokemon1_id=pikachu.id, pokemon1_name=pikachu.name,
            pokemon2_id=blastoise.id, pokemon2_name=blastoise.name,
            winner_pokemon_id=blastoise.id, winner_pokemon_name=blastoise.name,
            description="Water type held out against electric",
        ))
        rivalry.set_winner(gary.id, gary.name)
        rivalry.notes = "Legendary rivalry"
        self.battles.add(rivalry)

        may, serena = trainers["May"], trainers["Serena"]
        contest = Battle(
            trainer1_id=may.id, trainer1_name=may.name,
            trainer2_id=serena.id, trainer2_name=serena.name,
            location="Contest Hall", battle_date=now - timedelta(days=3),
        )
        contest.set_draw()
        contest.notes = "Coordinator battle, perfect tie"
        self.battles.add(contest)

        for username, email, password, role, age_days in SAMPLE_USERS:
            self.users.add(User(
                username=username,
                email=email,
                password_hash=get_password_hash(password, rounds=password_rounds),
                role=role,
                created_at=utcnow() - timedelta(days=age_days),
            ))
