import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from pixperfect import __version__
from pixperfect.api import create_api_router
from pixperfect.core.config import Settings, get_settings
from pixperfect.core.container import get_container
from pixperfect.infrastructure.database import dispose_engine, init_db
from pixperfect.interfaces.http.errors import register_exception_handlers


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    get_container()
    await init_db()
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.project_name,
        description="Image upload, transform and overlay storage service",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_exception_handlers(app)

    if settings.storage.backend == "local":
        upload_dir = settings.upload_dir.resolve()
        upload_dir.mkdir(parents=True, exist_ok=True)
        app.mount(
            settings.storage.local.public_path,
            StaticFiles(directory=str(upload_dir)),
            name="uploads",
        )

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        return f"{settings.project_name} backend is running!"

    return app
