from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from src.domain.errors import DomainError
from .error import status_code_for
import logging

logger = logging.getLogger(__name__)


async def handle_domain_error(request: Request, exc: DomainError):
    error_dict = {"code": exc.code, "message": exc.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=status_code_for(exc), content={"error": error_dict})


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Sponsorship API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import sponsorship

    app.include_router(sponsorship.router, tags=["Sponsorships"])

    app.add_exception_handler(DomainError, handle_domain_error)

    return app
