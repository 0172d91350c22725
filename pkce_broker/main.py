"""
PKCE Broker - Backend for Frontend OAuth2 service
"""
import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config.settings import Settings, settings as default_settings
from .middleware.error_handler import ErrorHandlerMiddleware
from .middleware.logging_config import setup_logging, get_logger
from .routers import auth, health
from .services.auth_service import AuthService
from .services.provider_client import ProviderClient
from .utils.state_store import InMemoryTransactionStore, TransactionStore, sweep_expired


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[TransactionStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """Build the application with its own transaction store and provider client."""
    settings = settings or default_settings
    if store is None:
        store = InMemoryTransactionStore(ttl_seconds=settings.state_ttl_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        setup_logging(settings.log_level)
        logger = get_logger("main")
        logger.info(f"Starting {settings.app_name}")
        sweeper = asyncio.create_task(sweep_expired(store, settings.state_sweep_interval_seconds))

        yield

        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
        logger.info(f"Shutting down {settings.app_name}")

    app = FastAPI(
        title=settings.app_name,
        description="OAuth2 Authorization Code + PKCE broker for single-page apps",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.store = store
    app.state.auth_service = AuthService(
        store=store,
        provider=ProviderClient(settings, transport=transport),
        settings=settings,
    )

    app.add_middleware(ErrorHandlerMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(health.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("pkce_broker.main:app", host="127.0.0.1", port=3000, reload=default_settings.debug)
