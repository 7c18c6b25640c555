"""Trainer endpoints, including team management and battle records."""

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from pokeleague.api.deps import ServicesDep, TrainerOrAdmin, get_current_user
from pokeleague.core.battle import Battle, BattleStatistics
from pokeleague.core.trainer import Trainer

router = APIRouter(prefix="/api/trainer", tags=["trainer"], dependencies=[Depends(get_current_user)])


class TrainerIn(BaseModel):
    name: str
    age: int = 0
    region: str = ""
    badge_count: int = 0


class PokemonAssignment(BaseModel):
    pokemon_id: int


@router.get("", response_model=list[Trainer])
def list_trainers(user: TrainerOrAdmin, services: ServicesDep):
    return services.trainers.get_all()


@router.get("/name/{name}", response_model=Trainer)
def get_by_name(name: str, services: ServicesDep):
    return services.trainers.get_by_name(name)


@router.get("/region/{region}", response_model=list[Trainer])
def get_by_region(region: str, services: ServicesDep):
    return services.trainers.get_by_region(region)


@router.get("/{trainer_id}", response_model=Trainer)
def get_trainer(trainer_id: int, services: ServicesDep):
    return services.trainers.get_by_id(trainer_id)


@router.post("", response_model=Trainer, status_code=status.HTTP_201_CREATED)
def create_trainer(body: TrainerIn, services: ServicesDep):
    return services.trainers.create(body.name, body.age, body.region, body.badge_count)


@router.put("/{trainer_id}", response_model=Trainer)
def update_trainer(trainer_id: int, body: TrainerIn, services: ServicesDep):
    return services.trainers.update(trainer_id, body.name, body.age, body.region, body.badge_count)


@router.delete("/{trainer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trainer(trainer_id: int, services: ServicesDep):
    services.trainers.delete(trainer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{trainer_id}/pokemon", response_model=Trainer)
def assign_pokemon(trainer_id: int, body: PokemonAssignment, services: ServicesDep):
    return services.trainers.assign_pokemon(trainer_id, body.pokemon_id)


@router.delete("/{trainer_id}/pokemon/{pokemon_id}", response_model=Trainer)
def remove_pokemon(trainer_id: int, pokemon_id: int, services: ServicesDep):
    return services.trainers.remove_pokemon(trainer_id, pokemon_id)


@router.get("/{trainer_id}/statistics", response_model=BattleStatistics)
def get_statistics(trainer_id: int, services: ServicesDep):
    return services.battles.get_statistics(trainer_id)


@router.get("/{trainer_id}/battles", response_model=list[Battle])
def get_battles(trainer_id: int, services: ServicesDep):
    services.trainers.get_by_id(trainer_id)
    return services.battles.get_by_trainer(trainer_id)


@router.get("/{trainer1_id}/battles/{trainer2_id}", response_model=list[Battle])
def get_history(trainer1_id: int, trainer2_id: int, services: ServicesDep):
    return services.battles.get_history(trainer1_id, trainer2_id)
