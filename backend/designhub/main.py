from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from designhub.core.contractors.router import router as contractors_router
from designhub.core.distribution.router import router as distribution_router
from designhub.core.drawings.router import router as drawings_router
from designhub.core.errors import DomainError
from designhub.core.files.router import router as files_router
from designhub.core.projects.router import router as projects_router
from designhub.core.recipients.router import router as recipients_router
from designhub.core.transmittals.router import router as transmittals_router
from designhub.logging_config import setup_logging
from designhub.settings import get_settings

settings = get_settings()


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    body = {"detail": exc.detail, "error": exc.__class__.__name__}
    if exc.retryable:
        body["retryable"] = True
    return JSONResponse(status_code=exc.status_code, content=body)


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    app = FastAPI(
        title="DesignHub API",
        version="0.1.0",
        docs_url="/docs" if settings.APP_DEBUG else None,
        redoc_url="/redoc" if settings.APP_DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_DEBUG else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DomainError, domain_error_handler)

    app.include_router(projects_router)
    app.include_router(contractors_router)
    app.include_router(files_router)
    app.include_router(drawings_router)
    app.include_router(transmittals_router)
    app.include_router(recipients_router)
    app.include_router(distribution_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
