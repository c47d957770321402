import uvicorn
from fastapi import FastAPI

from lootpacks.api.routes.health import router as health_router
from lootpacks.api.routes.internal_lootpacks import router as internal_lootpacks_router
from lootpacks.api.routes.lootpacks import router as lootpacks_router
from lootpacks.core.config import get_settings
from lootpacks.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Lootpacks API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.include_router(health_router)
    app.include_router(lootpacks_router)
    app.include_router(internal_lootpacks_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "lootpacks.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
