# main.py - Punto de entrada principal de la aplicación FastAPI
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable, Optional

import logfire
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, load_settings
from routes import metrics_routes, reference_routes, report_routes
from services.cloudinary_client import MediaClient
from services.content_store import ContentStore
from services.email_client import Mailer
from services.firebase_client import init_firestore
from services.notifications import NotificationDispatcher
from services.report_repository import ReportRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Conecta Firestore al iniciar si no se inyectó un repositorio."""
    if getattr(app.state, "repository", None) is None:
        db = init_firestore(app.state.settings)
        store = ContentStore(db, clock=app.state.clock)
        app.state.repository = ReportRepository(store, clock=app.state.clock)
    yield


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[ReportRepository] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    media: Optional[MediaClient] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings)

    # Configuración de la aplicación FastAPI con metadatos descriptivos
    app = FastAPI(
        title=settings.app_name,
        description="Backend de CivicReporter: reportes ciudadanos geolocalizados de incidencias urbanas, seguimiento por el personal municipal y estadísticas para el panel.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.clock = clock or _utcnow
    app.state.repository = repository
    app.state.dispatcher = dispatcher or NotificationDispatcher(Mailer(settings))
    app.state.media = media or MediaClient(settings)

    # Observabilidad con Logfire solo si hay token
    if settings.logfire_token:
        logfire.configure(token=settings.logfire_token)
        logfire.instrument_fastapi(app)

    # Configuración de CORS para comunicación con el frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Registro de todos los routers con sus respectivos prefijos de ruta
    app.include_router(report_routes.router, prefix="/reports", tags=["reports"])
    app.include_router(metrics_routes.router, prefix="/metrics", tags=["metrics"])
    app.include_router(reference_routes.router)

    # Endpoint de verificación de salud del servidor
    @app.get("/")
    async def root():
        return {"message": "CivicReporter backend activo"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
