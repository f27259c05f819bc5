import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from graph_calendar.config import settings
from graph_calendar.routes import calendar, health
from graph_calendar.constants import APP_SETTINGS

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s"
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=APP_SETTINGS.APP_NAME,
        version=APP_SETTINGS.VERSION,
        description=APP_SETTINGS.DESCRIPTION
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event():
        """Validate configuration on startup"""
        from graph_calendar.config import validate_required_keys
        try:
            validate_required_keys()
            logger.info("Configuration validation passed")
        except Exception as e:
            logger.error("Configuration validation failed: %s", e)
            raise

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down")

    @app.get("/")
    async def root():
        return {"message": f"Welcome to {APP_SETTINGS.APP_NAME}"}

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(calendar.router, prefix="/calendar", tags=["Calendar"])
    # Tab clients call the controller route with its original casing
    app.include_router(calendar.router, prefix="/Calendar", include_in_schema=False)

    return app


app = create_app()


def main():
    import uvicorn

    uvicorn.run(
        "graph_calendar.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.APP_ENV == "development"
    )


if __name__ == "__main__":
    main()
