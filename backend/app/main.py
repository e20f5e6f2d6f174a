from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api.errors import register_exception_handlers
from backend.app.api.routes.applications import router as applications_router
from backend.app.api.routes.cv_tools import router as cv_tools_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.jobs import router as jobs_router
from backend.app.api.routes.profile import router as profile_router
from backend.app.config import settings
from backend.app.db import init_db
from backend.app.utils.logging_setup import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(title="Job Application Assistant API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(applications_router)
    app.include_router(cv_tools_router)
    app.include_router(jobs_router)
    app.include_router(profile_router)
    return app


app = create_app()
