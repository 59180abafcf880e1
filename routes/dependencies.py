# Dependencias compartidas por los routers; los servicios viven en app.state
from datetime import datetime
from typing import Callable

from fastapi import Request

from config import Settings
from services.cloudinary_client import MediaClient
from services.notifications import NotificationDispatcher
from services.report_repository import ReportRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> ReportRepository:
    return request.app.state.repository


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def get_media_client(request: Request) -> MediaClient:
    return request.app.state.media


def get_clock(request: Request) -> Callable[[], datetime]:
    return request.app.state.clock
