from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional, Tuple, Literal, Union
from datetime import datetime
from models.base import StoredObject, Photo
from models.department import StaffMember
from models.enums import IssueCategory, IssuePriority, IssueStatus
from utils.validation import is_valid_coordinates, is_valid_email, is_valid_phone

def _check_coordinates(value: Tuple[float, float]) -> Tuple[float, float]:
    latitude, longitude = value
    if not is_valid_coordinates(latitude, longitude):
        raise ValueError("Coordenadas fuera de rango")
    return value

def _check_email(value: str) -> str:
    if not is_valid_email(value):
        raise ValueError("Correo electrónico inválido")
    return value

class IssueReportMetadata(BaseModel):
    description: str
    category: IssueCategory = IssueCategory.OTHER
    priority: IssuePriority = IssuePriority.MEDIUM
    status: IssueStatus = IssueStatus.REPORTED

    location_coordinates: Tuple[float, float]  # (latitud, longitud)
    location_address: Optional[str] = None

    reporter_email: str
    reporter_name: Optional[str] = None
    reporter_phone: Optional[str] = None

    department: str
    # StaffMember expandido con depth=1, o el valor guardado si no corresponde a uno
    assigned_to: Optional[Union[StaffMember, str]] = None
    photo: Optional[Photo] = None

    created_date: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    estimated_resolution_date: Optional[str] = None  # Fecha libre que indica el personal
    actual_resolution_date: Optional[datetime] = None
    resolution_notes: Optional[str] = None

    @field_validator("location_coordinates")
    @classmethod
    def check_coordinates(cls, value):
        return _check_coordinates(value)

    @field_validator("reporter_email")
    @classmethod
    def check_email(cls, value):
        return _check_email(value)

# Reporte ciudadano tal como vive en el almacén
class IssueReport(StoredObject):
    type: Literal["issue-reports"] = "issue-reports"
    metadata: IssueReportMetadata

# Lo que envía el formulario del frontend
class ReportCreate(BaseModel):
    title: Optional[str] = None  # Se deriva de la categoría si no viene
    description: str = Field(..., min_length=1)
    category: IssueCategory
    location_coordinates: Tuple[float, float]
    location_address: Optional[str] = None
    reporter_email: str
    reporter_name: Optional[str] = None
    reporter_phone: Optional[str] = None
    photo: Optional[Photo] = None

    @field_validator("location_coordinates")
    @classmethod
    def check_coordinates(cls, value):
        return _check_coordinates(value)

    @field_validator("reporter_email")
    @classmethod
    def check_email(cls, value):
        return _check_email(value)

    @field_validator("reporter_phone")
    @classmethod
    def check_phone(cls, value: Optional[str]) -> Optional[str]:
        if value and not is_valid_phone(value):
            raise ValueError("Teléfono inválido")
        return value or None

# Cambios de estado que hace el personal. El estado se valida en el repositorio
# para poder responder 400 en vez de un error de esquema.
class StatusUpdate(BaseModel):
    status: Optional[Any] = None
    assigned_to: Optional[str] = None
    resolution_notes: Optional[str] = None
    estimated_resolution_date: Optional[str] = None

# Marcador para el mapa de incidencias
class MapMarker(BaseModel):
    id: str
    slug: str
    position: Tuple[float, float]
    title: str
    description: Optional[str] = None
    category: IssueCategory
    status: IssueStatus
    priority: IssuePriority
    color: str
    created_at: datetime
