"""PokeLeague HTTP API.

``create_app`` wires settings, the in-memory store and the services into a
FastAPI application. ``app`` is the process-level instance served by uvicorn.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from pokeleague import __version__
from pokeleague.api import auth, battle, monitoring, pokemon, trainer
from pokeleague.api.deps import Services
from pokeleague.core.errors import PokeLeagueError
from pokeleague.data.store import Store
from pokeleague.middleware import RequestStatisticsMiddleware
from pokeleague.utils.config import Settings, get_settings
from pokeleague.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, store: Store | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    if store is None:
        store = Store.seeded(settings.bcrypt_rounds) if settings.seed_sample_data else Store()

    services = Services.build(settings, store)

    app = FastAPI(title="PokeLeague API", version=__version__)
    app.state.services = services
    app.add_middleware(RequestStatisticsMiddleware, statistics=services.statistics)

    @app.exception_handler(PokeLeagueError)
    async def domain_error_handler(request: Request, exc: PokeLeagueError):
        if exc.http_status >= 500:
            logger.error("Internal error", path=request.url.path, error=exc.message)
        else:
            logger.warning(
                "Request rejected",
                path=request.url.path,
                error=type(exc).__name__,
                detail=exc.message,
            )
        headers = {"WWW-Authenticate": "Bearer"} if exc.http_status == status.HTTP_401_UNAUTHORIZED else None
        return JSONResponse(status_code=exc.http_status, content={"detail": exc.message}, headers=headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    for module in (auth, pokemon, trainer, battle, monitoring):
        app.include_router(module.router)

    logger.info(
        "Application created",
        pokemon=len(store.pokemon),
        trainers=len(store.trainers),
        battles=len(store.battles),
        users=len(store.users),
    )
    return app


app = create_app()
