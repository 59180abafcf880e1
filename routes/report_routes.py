# report_routes.py
import logging
from typing import Callable, List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import ValidationError

from models.comment import CommentCreate
from models.enums import DateRange, IssueCategory, IssuePriority, IssueStatus, SortOrder
from models.report import ReportCreate, StatusUpdate
from routes.dependencies import get_clock, get_dispatcher, get_media_client, get_repository
from services.cloudinary_client import MediaClient
from services.errors import InvalidInput, NotFound, StoreFailure
from services.notifications import NotificationDispatcher
from services.report_filters import filter_reports, sort_reports, to_map_markers
from services.report_repository import ReportRepository

logger = logging.getLogger(__name__)

# Configuración del router
router = APIRouter(tags=["Reports"])


def _parse_float(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _invalid_fields(error: ValidationError) -> str:
    fields = sorted({str(err["loc"][0]) for err in error.errors() if err.get("loc")})
    return f"Invalid fields: {', '.join(fields)}"


# Endpoint para creación de nuevos reportes desde el formulario ciudadano
@router.post("")
def create_report(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    reporter_email: Optional[str] = Form(None),
    reporter_name: Optional[str] = Form(None),
    reporter_phone: Optional[str] = Form(None),
    location_lat: Optional[str] = Form(None),
    location_lng: Optional[str] = Form(None),
    location_address: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    repository: ReportRepository = Depends(get_repository),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    media: MediaClient = Depends(get_media_client),
):
    latitude = _parse_float(location_lat)
    longitude = _parse_float(location_lng)

    # Validación de campos requeridos
    if not description or not category or not reporter_email or latitude is None or longitude is None:
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        fields = ReportCreate(
            title=title or None,
            description=description,
            category=category,
            location_coordinates=(latitude, longitude),
            location_address=location_address or None,
            reporter_email=reporter_email,
            reporter_name=reporter_name or None,
            reporter_phone=reporter_phone or None,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_invalid_fields(e))

    # La foto es opcional: si la subida falla el reporte se crea sin ella
    if photo is not None and photo.filename and photo.size:
        photo_data = media.upload_photo(photo.file, photo.filename)
        if photo_data:
            fields = fields.model_copy(update={"photo": photo_data})

    try:
        report = repository.create_report(fields)
    except StoreFailure:
        logger.exception("Error creando reporte")
        raise HTTPException(status_code=500, detail="Failed to create report")

    dispatcher.send_confirmation(report)

    return {"success": True, "report": report, "slug": report.slug}


# Endpoint para listar reportes (más recientes primero) con filtros opcionales
@router.get("")
def list_reports(
    search: Optional[str] = Query(None),
    status: Optional[IssueStatus] = Query(None),
    category: Optional[List[IssueCategory]] = Query(None),
    priority: Optional[List[IssuePriority]] = Query(None),
    date_range: DateRange = Query(DateRange.ALL, alias="range"),
    sort: SortOrder = Query(SortOrder.NEWEST),
    near_lat: Optional[float] = Query(None),
    near_lng: Optional[float] = Query(None),
    radius_km: Optional[float] = Query(None, gt=0),
    repository: ReportRepository = Depends(get_repository),
    clock: Callable = Depends(get_clock),
):
    try:
        reports = repository.list_reports()
    except StoreFailure:
        logger.exception("Error listando reportes")
        raise HTTPException(status_code=500, detail="Failed to fetch reports")

    near = (near_lat, near_lng) if near_lat is not None and near_lng is not None else None
    reports = filter_reports(
        reports,
        search=search,
        status=status,
        categories=category,
        priorities=priority,
        date_range=date_range,
        near=near,
        radius_km=radius_km,
        now=clock(),
    )
    return {"reports": sort_reports(reports, sort)}


# Endpoint con los marcadores para el mapa de incidencias
@router.get("/markers")
def list_markers(repository: ReportRepository = Depends(get_repository)):
    try:
        reports = repository.list_reports()
    except StoreFailure:
        logger.exception("Error listando marcadores")
        raise HTTPException(status_code=500, detail="Failed to fetch reports")

    return {"markers": to_map_markers(reports)}


# Endpoint para obtener un reporte por su slug
@router.get("/{slug}")
def get_report(slug: str, repository: ReportRepository = Depends(get_repository)):
    try:
        report = repository.get_report_by_slug(slug)
    except StoreFailure:
        logger.exception("Error obteniendo reporte %s", slug)
        raise HTTPException(status_code=500, detail="Failed to fetch report")

    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")

    return {"report": report}


# Endpoint para que el personal actualice el estado de un reporte
@router.put("/{report_id}/status")
def update_report_status(
    report_id: str,
    update: Optional[StatusUpdate] = Body(None),
    repository: ReportRepository = Depends(get_repository),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    update = update or StatusUpdate()
    try:
        report = repository.update_status(report_id, update)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound:
        raise HTTPException(status_code=404, detail="Report not found")
    except StoreFailure:
        logger.exception("Error actualizando estado del reporte %s", report_id)
        raise HTTPException(status_code=500, detail="Failed to update report status")

    dispatcher.send_status_update(
        report,
        report.metadata.status,
        assigned_to=update.assigned_to,
        notes=update.resolution_notes,
        estimated_date=update.estimated_resolution_date,
    )

    return {"success": True, "report": report}


# Endpoint para listar comentarios (los internos solo si se piden)
@router.get("/{report_id}/comments")
def list_comments(
    report_id: str,
    include_internal: bool = Query(False),
    repository: ReportRepository = Depends(get_repository),
):
    try:
        comments = repository.list_comments_for_report(report_id)
    except StoreFailure:
        logger.exception("Error listando comentarios del reporte %s", report_id)
        raise HTTPException(status_code=500, detail="Failed to fetch comments")

    if not include_internal:
        comments = [c for c in comments if not c.metadata.is_internal]

    return {"comments": comments}


# Endpoint para agregar un comentario a un reporte
@router.post("/{report_id}/comments")
def add_comment(
    report_id: str,
    payload: CommentCreate,
    repository: ReportRepository = Depends(get_repository),
):
    try:
        comment = repository.add_comment(
            report_id,
            payload.content,
            payload.author_name,
            payload.author_email,
            is_internal=payload.is_internal,
        )
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound:
        raise HTTPException(status_code=404, detail="Report not found")
    except StoreFailure:
        logger.exception("Error agregando comentario al reporte %s", report_id)
        raise HTTPException(status_code=500, detail="Failed to add comment")

    return {"success": True, "comment": comment}
