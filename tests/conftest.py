"""Shared fixtures for PokeLeague tests."""

import pytest
from fastapi.testclient import TestClient

from pokeleague.core.battle import Battle, BattleRound
from pokeleague.core.pokemon import Pokemon
from pokeleague.core.trainer import Trainer
from pokeleague.core.user import User, UserRole
from pokeleague.data.store import Store
from pokeleague.server import create_app
from pokeleague.services.auth_service import AuthService
from pokeleague.services.battle_service import BattleService
from pokeleague.services.pokemon_service import PokemonService
from pokeleague.services.token_service import TokenService
from pokeleague.services.trainer_service import TrainerService
from pokeleague.utils.config import Settings

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


# Settings / store fixtures
@pytest.fixture
def settings():
    """Settings tuned for fast tests: cheap hashing and no login delay."""
    return Settings(
        jwt_secret_key=TEST_SECRET,
        jwt_issuer="PokeLeagueTests",
        jwt_audience="PokeLeagueTestClients",
        jwt_expiry_minutes=60,
        bcrypt_rounds=4,
        login_delay_min_ms=0,
        login_delay_max_ms=0,
        seed_sample_data=False,
        log_level="WARNING",
    )


@pytest.fixture
def store():
    """An empty in-memory store."""
    return Store()


@pytest.fixture
def seeded_store():
    """The sample league, hashed with the cheapest bcrypt cost."""
    return Store.seeded(password_rounds=4)


# Service fixtures
@pytest.fixture
def pokemon_service(store):
    return PokemonService(store.pokemon)


@pytest.fixture
def trainer_service(store):
    return TrainerService(store.trainers, store.pokemon)


@pytest.fixture
def battle_service(store):
    return BattleService(store.battles, store.trainers, store.pokemon)


@pytest.fixture
def token_service(settings):
    return TokenService(settings)


@pytest.fixture
def auth_service(store, token_service, settings):
    return AuthService(store.users, token_service, settings)


# Model fixtures
@pytest.fixture
def sample_pokemon():
    """A registered Pikachu."""
    return Pokemon(id=1, name="Pikachu", type="Electric", level=25, ability="Static")


@pytest.fixture
def sample_trainer():
    """A trainer with an empty team."""
    return Trainer(id=1, name="Ash", age=10, region="Kanto", badge_count=0)


@pytest.fixture
def sample_battle():
    """A battle in progress between trainers 1 and 2."""
    return Battle(
        id=1,
        trainer1_id=1,
        trainer1_name="Ash",
        trainer2_id=2,
        trainer2_name="Misty",
        location="Gym",
    )


@pytest.fixture
def sample_round():
    return BattleRound(
        round_number=1,
        pokemon1_id=1,
        pokemon1_name="Pikachu",
        pokemon2_id=2,
        pokemon2_name="Psyduck",
    )


@pytest.fixture
def sample_user():
    return User(id=1, username="ash", email="ash@example.com", role=UserRole.TRAINER)


@pytest.fixture
def league(pokemon_service, trainer_service):
    """Two trainers and two Pokemon: trainer ids 1 and 2, Pokemon ids 1 and 2."""
    ash = trainer_service.create("Ash", 10, "Kanto", 0)
    misty = trainer_service.create("Misty", 12, "Kanto", 2)
    pikachu = pokemon_service.create("Pikachu", "Electric", 25, "Static")
    psyduck = pokemon_service.create("Psyduck", "Water", 20, "Damp")
    return {"ash": ash, "misty": misty, "pikachu": pikachu, "psyduck": psyduck}


# HTTP fixtures
@pytest.fixture
def app(settings, seeded_store):
    return create_app(settings, seeded_store)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def login(client, username: str, password: str) -> str:
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    """Bearer header for the sample admin account."""
    return auth_header(login(client, "admin", "admin123"))


@pytest.fixture
def trainer_headers(client):
    """Bearer header for the sample trainer account."""
    return auth_header(login(client, "trainer", "trainer123"))


@pytest.fixture
def user_headers(client):
    """Bearer header for a freshly registered User-role account."""
    resp = client.post(
        "/api/auth/register",
        json={
            "username": "brock",
            "password": "onix1234",
            "confirm_password": "onix1234",
            "email": "brock@example.com",
        },
    )
    assert resp.status_code == 200, resp.text
    return auth_header(resp.json()["token"])
