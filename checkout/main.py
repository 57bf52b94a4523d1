import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from checkout import routes, webhooks
from checkout.config import Settings
from checkout.database import Base, create_db_engine, create_session_factory
from checkout.errors import ApiError, api_error_handler, validation_error_handler
from checkout.logging_config import setup_logging
from checkout.stripe_service import StripeGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    settings.validate()
    setup_logging(settings.log_level)

    engine = create_db_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)

    app.state.session_factory = create_session_factory(engine)
    app.state.stripe_gateway = StripeGateway(
        api_key=settings.stripe_secret_key,
        webhook_secret=settings.stripe_webhook_secret,
    )
    logger.info("Checkout service started", extra={"currency": settings.currency})

    try:
        yield
    finally:
        engine.dispose()
        logger.info("Checkout service stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="Checkout Service", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(routes.router)
    app.include_router(webhooks.router)
    return app


def run() -> None:
    # Also servable with: uvicorn --factory checkout.main:create_app
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
