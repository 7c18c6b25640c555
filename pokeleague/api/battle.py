"""Battle endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel

from pokeleague.api.deps import ServicesDep, get_current_user
from pokeleague.core.battle import Battle, BattleSummary
from pokeleague.services.battle_service import DEFAULT_RECENT_DAYS

router = APIRouter(prefix="/api/battle", tags=["battle"], dependencies=[Depends(get_current_user)])


class BattleCreate(BaseModel):
    trainer1_id: int
    trainer2_id: int
    location: str = ""


class RoundCreate(BaseModel):
    pokemon1_id: int
    pokemon2_id: int
    winner_pokemon_id: int | None = None
    description: str = ""


class WinnerRequest(BaseModel):
    winner_id: int


class NotesRequest(BaseModel):
    notes: str = ""


@router.get("", response_model=list[Battle])
def list_battles(services: ServicesDep):
    return services.battles.get_all()


@router.get("/recent", response_model=list[Battle])
def recent_battles(services: ServicesDep, days: int = Query(DEFAULT_RECENT_DAYS)):
    return services.battles.get_recent_battles(days)


@router.get("/statistics", response_model=BattleSummary)
def battle_summary(services: ServicesDep):
    return services.battles.get_summary()


@router.get("/{battle_id}", response_model=Battle)
def get_battle(battle_id: int, services: ServicesDep):
    return services.battles.get_by_id(battle_id)


@router.post("", response_model=Battle, status_code=status.HTTP_201_CREATED)
def create_battle(body: BattleCreate, services: ServicesDep):
    return services.battles.create_battle(body.trainer1_id, body.trainer2_id, body.location)


@router.patch("/{battle_id}/start", response_model=Battle)
def start_battle(battle_id: int, services: ServicesDep):
    return services.battles.start_battle(battle_id)


@router.post("/{battle_id}/rounds", response_model=Battle)
def add_round(battle_id: int, body: RoundCreate, services: ServicesDep):
    return services.battles.add_round(
        battle_id,
        body.pokemon1_id,
        body.pokemon2_id,
        body.winner_pokemon_id,
        body.description,
    )


@router.patch("/{battle_id}/winner", response_model=Battle)
def set_winner(battle_id: int, body: WinnerRequest, services: ServicesDep):
    return services.battles.set_winner(battle_id, body.winner_id)


@router.patch("/{battle_id}/draw", response_model=Battle)
def set_draw(battle_id: int, services: ServicesDep):
    return services.battles.set_draw(battle_id)


@router.patch("/{battle_id}/cancel", response_model=Battle)
def cancel_battle(battle_id: int, services: ServicesDep):
    return services.battles.cancel(battle_id)


@router.patch("/{battle_id}/notes", response_model=Battle)
def add_notes(battle_id: int, body: NotesRequest, services: ServicesDep):
    return services.battles.add_notes(battle_id, body.notes)


@router.delete("/{battle_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_battle(battle_id: int, services: ServicesDep):
    services.battles.delete(battle_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
