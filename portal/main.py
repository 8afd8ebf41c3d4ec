"""
Client Portal - Backend API
FastAPI application factory
"""
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.api.v1 import activities, auth, finance, messages, projects, support, tasks, users
from portal.config import Settings
from portal.config import settings as default_settings
from portal.errors import PortalError, ValidationFailed, field_errors
from portal.repository import Repository, create_repository
from portal.sessions import SessionManager

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    body = {"detail": exc.detail}
    if isinstance(exc, ValidationFailed):
        body["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=body)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=ValidationFailed.status_code,
        content={"detail": ValidationFailed.default_detail, "errors": field_errors(exc)},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": PortalError.default_detail},
    )


def create_app(repository: Optional[Repository] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around an explicit repository instance.

    When no repository is given one is built from ``settings``
    (``STORAGE_BACKEND`` / ``DATABASE_URL``) and seeded with the demo users.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)
    if repository is None:
        repository = create_repository(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("%s %s started on the %s repository", settings.APP_NAME, settings.APP_VERSION, repository.backend_name)
        app.state.sessions.purge_expired()
        yield

    app = FastAPI(
        title=settings.APP_NAME,
        description="Projects, tasks, messages, finance and support for agency clients",
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository
    app.state.sessions = SessionManager(repository, ttl=timedelta(minutes=settings.SESSION_TTL_MINUTES))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
    app.include_router(messages.router, prefix="/api/messages", tags=["Messages"])
    app.include_router(activities.router, prefix="/api/activities", tags=["Activities"])
    app.include_router(finance.router, prefix="/api/finance-documents", tags=["Finance"])
    app.include_router(support.router, prefix="/api/support-tickets", tags=["Support"])

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "version": settings.APP_VERSION, "storage": repository.backend_name}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host=default_settings.HOST, port=default_settings.PORT)
