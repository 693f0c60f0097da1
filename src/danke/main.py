# danke/main.py
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.engine import Engine

from danke.database import init_db, verify_database_connection
from danke.dependencies import get_db_engine
from danke.exceptions import DankeException
from danke.routers import (
    boards_router,
    moderators_router,
    notifications_router,
    posts_router,
    users_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Danke", lifespan=lifespan)

    app.include_router(boards_router.router)
    app.include_router(posts_router.router)
    app.include_router(moderators_router.router)
    app.include_router(notifications_router.router)
    app.include_router(users_router.router)

    @app.exception_handler(DankeException)
    async def danke_exception_handler(request: Request, exc: DankeException):
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.get("/health")
    def health(engine: Engine = Depends(get_db_engine)):
        if not verify_database_connection(engine):
            return JSONResponse(status_code=503, content={"status": "unavailable"})
        return {"status": "ok"}

    return app


app = create_app()
