# reference_routes.py - Datos de referencia de solo lectura
import logging

from fastapi import APIRouter, Depends, HTTPException

from routes.dependencies import get_repository
from services.errors import StoreFailure
from services.report_repository import ReportRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reference data"])


@router.get("/departments")
def list_departments(repository: ReportRepository = Depends(get_repository)):
    try:
        return {"departments": repository.list_departments()}
    except StoreFailure:
        logger.exception("Error listando departamentos")
        raise HTTPException(status_code=500, detail="Failed to fetch departments")


@router.get("/staff")
def list_staff(repository: ReportRepository = Depends(get_repository)):
    try:
        return {"staff": repository.list_staff()}
    except StoreFailure:
        logger.exception("Error listando personal")
        raise HTTPException(status_code=500, detail="Failed to fetch staff members")


@router.get("/categories")
def list_categories(repository: ReportRepository = Depends(get_repository)):
    try:
        return {"categories": repository.list_categories()}
    except StoreFailure:
        logger.exception("Error listando categorías")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")
