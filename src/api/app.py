import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.error import ClientError
from src.api.middleware import RequestLoggingMiddleware
from src.api.routes import (
    analytics,
    contracts,
    payments,
    reservations,
    reviews,
    statistics,
    subscriptions,
    users,
    vehicles,
)

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        config: ApplicationConfig (or any object with the same attributes)
    """
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Rental Marketplace Service",
        description="Vehicle inventory, reservations, payments and agency subscriptions",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if config.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)

    @app.exception_handler(ClientError)
    async def client_error_handler(request: Request, exc: ClientError):
        if exc.status_code >= 500:
            logger.error(
                f"{request.method} {request.url.path} failed: "
                f"{exc.error.code} {exc.error.reason or exc.error.message}"
            )
        elif exc.error.reason:
            logger.info(f"{request.method} {request.url.path}: {exc.error.code} ({exc.error.reason})")
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": {"code": "INVALID_INPUT", "message": details or "Invalid request"}},
        )

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    app.include_router(users.router)
    app.include_router(vehicles.router)
    app.include_router(reservations.router)
    app.include_router(contracts.router)
    app.include_router(payments.router)
    app.include_router(subscriptions.plans_router)
    app.include_router(subscriptions.router)
    app.include_router(statistics.router)
    app.include_router(reviews.router)
    app.include_router(analytics.router)

    return app
