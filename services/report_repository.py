"""
Repositorio de reportes sobre el almacén de contenido.

Reglas de errores:
- un 404 del almacén es "vacío" en listados y `None` en búsquedas puntuales;
- cualquier otro error del almacén sale como `StoreFailure`;
- entradas inválidas salen como `InvalidInput` antes de tocar el almacén.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Type, TypeVar

from pydantic import ValidationError

from models.comment import Comment
from models.department import Category, Department, StaffMember
from models.enums import IssueCategory, IssueStatus, ObjectType
from models.objects import parse_object
from models.report import IssueReport, ReportCreate, StatusUpdate
from services.content_store import ContentStore, StoreError
from services.errors import InvalidInput, NotFound, StoreFailure
from services.rules import (
    category_label,
    compute_priority,
    department_for_category,
    is_valid_status,
)
from utils.formatting import as_utc, truncate_text
from utils.validation import is_valid_email

logger = logging.getLogger(__name__)

T = TypeVar("T")

OBJECT_PROPS = ["id", "title", "slug", "type", "metadata", "created_at", "modified_at"]


def derive_title(fields: ReportCreate) -> str:
    label = category_label(fields.category)
    if fields.location_address:
        return f"{label} issue at {fields.location_address}"
    return f"{label}: {truncate_text(fields.description, 60)}"


class ReportRepository:
    def __init__(self, store: ContentStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Validación en la frontera del almacén
    # ------------------------------------------------------------------
    def _parse(self, document: dict, model: Type[T]) -> T:
        try:
            obj = parse_object(document)
        except ValidationError as e:
            logger.error("Objeto inválido en el almacén (%s): %s", model.__name__, e)
            raise StoreFailure(f"Malformed {model.__name__} in content store") from e
        if not isinstance(obj, model):
            raise StoreFailure(f"Expected {model.__name__}, got {type(obj).__name__}")
        return obj

    def _parse_many(self, documents: List[dict], model: Type[T]) -> List[T]:
        objects = []
        for document in documents:
            try:
                objects.append(self._parse(document, model))
            except StoreFailure:
                logger.warning("Se omite objeto inválido: %s", document.get("id"))
        return objects

    def _find(self, object_type: ObjectType, action: str, query: Optional[dict] = None,
              depth: int = 0) -> List[dict]:
        try:
            return self.store.find(object_type.value, query=query, props=OBJECT_PROPS, depth=depth)
        except StoreError as e:
            if e.status == 404:
                return []
            logger.error("Error del almacén al %s: %s", action, e)
            raise StoreFailure(f"Failed to {action}") from e

    def _find_one(self, object_type: ObjectType, action: str, query: dict,
                  depth: int = 1) -> Optional[dict]:
        try:
            return self.store.find_one(object_type.value, query, depth=depth)
        except StoreError as e:
            if e.status == 404:
                return None
            logger.error("Error del almacén al %s: %s", action, e)
            raise StoreFailure(f"Failed to {action}") from e

    # ------------------------------------------------------------------
    # Reportes
    # ------------------------------------------------------------------
    def list_reports(self) -> List[IssueReport]:
        documents = self._find(ObjectType.ISSUE_REPORT, "fetch issue reports", depth=1)
        reports = self._parse_many(documents, IssueReport)
        return sorted(reports, key=lambda r: as_utc(r.created_at), reverse=True)

    def get_report_by_slug(self, slug: str) -> Optional[IssueReport]:
        document = self._find_one(ObjectType.ISSUE_REPORT, "fetch issue report", {"slug": slug})
        if document is None or not document.get("metadata"):
            return None
        return self._parse(document, IssueReport)

    def get_report(self, report_id: str) -> Optional[IssueReport]:
        document = self._find_one(ObjectType.ISSUE_REPORT, "fetch issue report", {"id": report_id})
        if document is None or not document.get("metadata"):
            return None
        return self._parse(document, IssueReport)

    def create_report(self, fields: ReportCreate) -> IssueReport:
        # Prioridad y departamento se calculan antes de guardar
        priority = compute_priority(fields.category, fields.description)
        department = department_for_category(fields.category)
        now = self.clock()

        metadata = {
            "description": fields.description,
            "category": fields.category.value,
            "priority": priority.value,
            "status": IssueStatus.REPORTED.value,
            "location_coordinates": list(fields.location_coordinates),
            "location_address": fields.location_address or "",
            "reporter_email": fields.reporter_email,
            "reporter_name": fields.reporter_name or "",
            "reporter_phone": fields.reporter_phone or "",
            "department": department,
            "photo": fields.photo.model_dump() if fields.photo else None,
            "created_date": now,
            "last_updated": now,
        }

        try:
            document = self.store.insert_one(
                ObjectType.ISSUE_REPORT.value, fields.title or derive_title(fields), metadata
            )
        except StoreError as e:
            logger.error("Error creando reporte: %s", e)
            raise StoreFailure("Failed to create issue report") from e

        return self._parse(document, IssueReport)

    def update_status(self, report_id: str, update: StatusUpdate) -> IssueReport:
        if not update.status or not is_valid_status(update.status):
            raise InvalidInput("Invalid status value")
        status = IssueStatus(update.status)

        if self.get_report(report_id) is None:
            raise NotFound("Report not found")

        now = self.clock()
        changes = {"status": status.value, "last_updated": now}
        if update.assigned_to:
            changes["assigned_to"] = update.assigned_to
        if update.resolution_notes:
            changes["resolution_notes"] = update.resolution_notes
        if update.estimated_resolution_date:
            changes["estimated_resolution_date"] = update.estimated_resolution_date

        # Se sella en cada actualización a "resolved", aunque ya estuviera resuelto
        if status == IssueStatus.RESOLVED:
            changes["actual_resolution_date"] = now

        try:
            document = self.store.update_one(ObjectType.ISSUE_REPORT.value, report_id, changes)
        except StoreError as e:
            if e.status == 404:
                raise NotFound("Report not found") from e
            logger.error("Error actualizando reporte %s: %s", report_id, e)
            raise StoreFailure("Failed to update issue report") from e

        return self._parse(document, IssueReport)

    # ------------------------------------------------------------------
    # Datos de referencia
    # ------------------------------------------------------------------
    def list_departments(self) -> List[Department]:
        documents = self._find(ObjectType.DEPARTMENT, "fetch departments")
        return self._parse_many(documents, Department)

    def department_for(self, category: IssueCategory) -> Optional[Department]:
        for department in self.list_departments():
            if category in department.metadata.categories:
                return department
        return None

    def list_staff(self) -> List[StaffMember]:
        documents = self._find(ObjectType.STAFF_MEMBER, "fetch staff members", depth=1)
        return self._parse_many(documents, StaffMember)

    def list_categories(self) -> List[Category]:
        documents = self._find(ObjectType.CATEGORY, "fetch categories", depth=1)
        return self._parse_many(documents, Category)

    # ------------------------------------------------------------------
    # Comentarios
    # ------------------------------------------------------------------
    def list_comments_for_report(self, report_id: str) -> List[Comment]:
        documents = self._find(
            ObjectType.COMMENT, "fetch comments", query={"metadata.issue_report": report_id}
        )
        comments = self._parse_many(documents, Comment)
        return sorted(comments, key=lambda c: as_utc(c.created_at))

    def add_comment(self, report_id: str, content: str, author_name: str,
                    author_email: str, is_internal: bool = False) -> Comment:
        if not content or not content.strip():
            raise InvalidInput("Comment content is required")
        if not author_name or not is_valid_email(author_email):
            raise InvalidInput("Valid author name and email are required")
        if self.get_report(report_id) is None:
            raise NotFound("Report not found")

        metadata = {
            "content": content,
            "author_name": author_name,
            "author_email": author_email,
            "issue_report": report_id,
            "is_internal": is_internal,
            "created_date": self.clock(),
        }

        try:
            document = self.store.insert_one(
                ObjectType.COMMENT.value, f"Comment on {report_id}", metadata
            )
        except StoreError as e:
            logger.error("Error agregando comentario: %s", e)
            raise StoreFailure("Failed to add comment") from e

        return self._parse(document, Comment)
