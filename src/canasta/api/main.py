"""
FastAPI application entry point for Canasta.

This module wires the record store, the identity gateway and the per-user
controllers into an HTTP API for managing a roster, recording shots and
reading shooting statistics.

To run the server:

    uvicorn canasta.api.main:app --reload

or ``python -m canasta``.  The automatic documentation is served at
http://localhost:8000/docs
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ..auth import SqlIdentityGateway
from ..config import Settings, load_settings
from ..db import SqlRecordStore, create_db_engine, init_db
from . import auth, routes

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application.  Tables are created when the app starts up."""
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    db_engine = create_db_engine(settings.database_url, settings.database_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_db(db_engine)
        logger.info("Database ready at %s", settings.database_url)
        yield
        for controller in list(app.state.controllers.values()):
            await controller.close()
        await db_engine.dispose()

    app = FastAPI(title="Canasta API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = SqlRecordStore(db_engine)
    app.state.gateway = SqlIdentityGateway(db_engine, settings.code_ttl_seconds)
    app.state.controllers = {}
    app.state.controllers_lock = asyncio.Lock()

    @app.get("/health", tags=["System"])
    def health_check() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    app.include_router(auth.router)
    app.include_router(routes.router)
    return app


app = create_app()
