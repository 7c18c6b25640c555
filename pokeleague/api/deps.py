"""Request-scoped dependencies: services, the current user and role checks."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from pokeleague.core.errors import ForbiddenError
from pokeleague.core.user import User, UserRole
from pokeleague.data.store import Store
from pokeleague.middleware import RequestStatistics
from pokeleague.services.auth_service import AuthService
from pokeleague.services.battle_service import BattleService
from pokeleague.services.pokemon_service import PokemonService
from pokeleague.services.token_service import TokenClaims, TokenService
from pokeleague.services.trainer_service import TrainerService
from pokeleague.utils.config import Settings


@dataclass
class Services:
    """Everything a route handler may need, built once per app."""

    settings: Settings
    store: Store
    pokemon: PokemonService
    trainers: TrainerService
    battles: BattleService
    tokens: TokenService
    auth: AuthService
    statistics: RequestStatistics

    @classmethod
    def build(cls, settings: Settings, store: Store) -> Services:
        tokens = TokenService(settings)
        return cls(
            settings=settings,
            store=store,
            pokemon=PokemonService(store.pokemon),
            trainers=TrainerService(store.trainers, store.pokemon),
            battles=BattleService(store.battles, store.trainers, store.pokemon),
            tokens=tokens,
            auth=AuthService(store.users, tokens, settings),
            statistics=RequestStatistics(),
        )


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def get_services(request: Request) -> Services:
    return request.app.state.services


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_claims(
    token: Annotated[str, Depends(oauth2_scheme)],
    services: Annotated[Services, Depends(get_services)],
) -> TokenClaims:
    claims = services.tokens.validate_token(token)
    if claims is None:
        raise _credentials_exception()
    return claims


def get_current_user(
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
    services: Annotated[Services, Depends(get_services)],
) -> User:
    user = services.auth.get_user_by_id(claims.user_id)
    if user is None or not user.is_active:
        raise _credentials_exception()
    return user


def require_roles(*roles: UserRole) -> Callable[[User], User]:
    """Dependency factory admitting only users holding one of ``roles``."""

    def checker(user: Annotated[User, Depends(get_current_user)]) -> User:
        if user.role not in roles:
            raise ForbiddenError("You do not have permission to perform this action")
        return user

    return checker


ServicesDep = Annotated[Services, Depends(get_services)]
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_roles(UserRole.ADMIN))]
TrainerOrAdmin = Annotated[User, Depends(require_roles(UserRole.TRAINER, UserRole.ADMIN))]
