# streetfood_connect/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from streetfood_connect import __version__
from streetfood_connect.config import settings
from streetfood_connect.gateway import Gateway, GatewayError, create_gateway
from streetfood_connect.middleware.exceptions import register_exception_handlers
from streetfood_connect.routers.app_router import app_router
from streetfood_connect.services.session_service import SessionStore

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(gateway: Optional[Gateway] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        owned = gateway is None
        app.state.gateway = gateway or create_gateway()
        app.state.sessions = SessionStore(app.state.gateway)
        logger.info(f"{settings.APP_NAME} {__version__} starting ({settings.GATEWAY_BACKEND} gateway)")
        try:
            app.state.gateway.get_users_by_role("supplier")
            logger.info("Gateway reachable")
        except GatewayError as e:
            logger.error(f"Gateway check failed: {e.message}")
        yield
        # Shutdown
        logger.info("Shutting down")
        app.state.sessions.clear()
        if owned:
            app.state.gateway.close()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Marketplace connecting street-food vendors with raw material suppliers",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    def health():
        status = {
            "status": "healthy",
            "service": "streetfood-connect",
            "version": __version__,
            "gateway": settings.GATEWAY_BACKEND,
            "sessions": len(app.state.sessions),
        }
        try:
            app.state.gateway.get_users_by_role("supplier")
            status["gateway_status"] = "connected"
        except GatewayError as e:
            status["gateway_status"] = f"error: {e.code}"
            status["status"] = "degraded"
        return status

    app.include_router(app_router)

    return app


def run() -> None:
    import uvicorn

    configure_logging()
    uvicorn.run(
        "streetfood_connect.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    run()
