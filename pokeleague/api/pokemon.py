"""Pokemon registry endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel

from pokeleague.api.deps import ServicesDep, get_current_user
from pokeleague.core.pokemon import MIN_LEVEL, Pokemon

router = APIRouter(prefix="/api/pokemon", tags=["pokemon"], dependencies=[Depends(get_current_user)])


class PokemonIn(BaseModel):
    name: str
    type: str = ""
    level: int = MIN_LEVEL
    ability: str = ""


class AbilityChange(BaseModel):
    ability: str


@router.get("", response_model=list[Pokemon])
def list_pokemon(services: ServicesDep):
    return services.pokemon.get_all()


@router.get("/name/{name}", response_model=Pokemon)
def get_by_name(name: str, services: ServicesDep):
    return services.pokemon.get_by_name(name)


@router.get("/type/{type}", response_model=list[Pokemon])
def get_by_type(type: str, services: ServicesDep):
    return services.pokemon.get_by_type(type)


@router.get("/level", response_model=list[Pokemon])
def get_by_level(
    services: ServicesDep,
    min_level: int = Query(1, alias="min"),
    max_level: int = Query(100, alias="max"),
):
    return services.pokemon.get_by_level(min_level, max_level)


@router.get("/ability/{ability}", response_model=list[Pokemon])
def get_by_ability(ability: str, services: ServicesDep):
    return services.pokemon.get_by_ability(ability)


@router.get("/{pokemon_id}", response_model=Pokemon)
def get_pokemon(pokemon_id: int, services: ServicesDep):
    return services.pokemon.get_by_id(pokemon_id)


@router.post("", response_model=Pokemon, status_code=status.HTTP_201_CREATED)
def create_pokemon(body: PokemonIn, services: ServicesDep):
    return services.pokemon.create(body.name, body.type, body.level, body.ability)


@router.put("/{pokemon_id}", response_model=Pokemon)
def update_pokemon(pokemon_id: int, body: PokemonIn, services: ServicesDep):
    return services.pokemon.update(pokemon_id, body.name, body.type, body.level, body.ability)


@router.delete("/{pokemon_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pokemon(pokemon_id: int, services: ServicesDep):
    services.pokemon.delete(pokemon_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{pokemon_id}/level-up", response_model=Pokemon)
def level_up(pokemon_id: int, services: ServicesDep):
    return services.pokemon.level_up(pokemon_id)


@router.patch("/{pokemon_id}/ability", response_model=Pokemon)
def change_ability(pokemon_id: int, body: AbilityChange, services: ServicesDep):
    return services.pokemon.change_ability(pokemon_id, body.ability)
