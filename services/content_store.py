"""
Almacén de contenido sobre Firestore.

Cada tipo de objeto vive en su propia colección y se guarda con la forma
`{id, slug, title, type, created_at, modified_at, metadata}`. Las operaciones
imitan un API de contenido: `find`/`find_one` con proyección de campos y
expansión de relaciones (depth), `insert_one` y `update_one`.

Los errores salen siempre como `StoreError` con un código de estado tipo HTTP;
un 404 significa "no existe", no un fallo grave.
"""
import logging
import re
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from models.enums import ObjectType

logger = logging.getLogger(__name__)

# Campos de metadata que referencian a otro tipo de objeto
RELATIONS: Dict[str, Dict[str, str]] = {
    ObjectType.ISSUE_REPORT.value: {"assigned_to": ObjectType.STAFF_MEMBER.value},
    ObjectType.STAFF_MEMBER.value: {"department": ObjectType.DEPARTMENT.value},
    ObjectType.CATEGORY.value: {"department": ObjectType.DEPARTMENT.value},
    ObjectType.COMMENT.value: {"issue_report": ObjectType.ISSUE_REPORT.value},
}


class StoreError(Exception):
    def __init__(self, message: str, status: int = 500):
        super().__init__(message)
        self.status = status


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return slug or "object"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def project(document: dict, props: Optional[List[str]]) -> dict:
    if not props:
        return dict(document)
    return {key: value for key, value in document.items() if key in props}


@contextmanager
def translate_errors(action: str):
    # Convierte los errores del SDK de Google en StoreError con su código HTTP
    try:
        yield
    except google_exceptions.GoogleAPICallError as e:
        status = int(e.code) if e.code else 500
        raise StoreError(f"{action}: {e}", status=status) from e


class ContentStore:
    def __init__(self, db, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.clock = clock or _utcnow

    def _collection(self, object_type: str):
        return self.db.collection(object_type)

    def _get_document(self, object_type: str, object_id: str) -> Optional[dict]:
        snapshot = self._collection(object_type).document(object_id).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    def _expand(self, object_type: str, document: dict, depth: int) -> dict:
        if depth < 1:
            return document

        metadata = dict(document.get("metadata") or {})
        for field, related_type in RELATIONS.get(object_type, {}).items():
            value = metadata.get(field)
            if not isinstance(value, str) or not value:
                continue
            # Solo se reemplaza si el valor es el id de un objeto existente
            related = self._get_document(related_type, value)
            if related is not None:
                metadata[field] = self._expand(related_type, related, depth - 1)

        expanded = dict(document)
        expanded["metadata"] = metadata
        return expanded

    def find(
        self,
        object_type: str,
        query: Optional[dict] = None,
        props: Optional[List[str]] = None,
        depth: int = 0,
    ) -> List[dict]:
        with translate_errors(f"find {object_type}"):
            ref = self._collection(object_type)
            for field, value in (query or {}).items():
                ref = ref.where(filter=FieldFilter(field, "==", value))

            documents = []
            for doc in ref.stream():
                document = self._expand(object_type, doc.to_dict(), depth)
                documents.append(project(document, props))

        logger.debug("find %s -> %d objetos", object_type, len(documents))
        return documents

    def find_one(self, object_type: str, query: dict, depth: int = 0) -> dict:
        with translate_errors(f"find_one {object_type}"):
            if "id" in query:
                document = self._get_document(object_type, query["id"])
            else:
                ref = self._collection(object_type)
                for field, value in query.items():
                    ref = ref.where(filter=FieldFilter(field, "==", value))
                matches = [doc.to_dict() for doc in ref.limit(1).stream()]
                document = matches[0] if matches else None

            if document is None:
                raise StoreError(f"{object_type} no encontrado: {query}", status=404)

            return self._expand(object_type, document, depth)

    def insert_one(self, object_type: str, title: str, metadata: dict) -> dict:
        now = self.clock()
        object_id = uuid.uuid4().hex
        document = {
            "id": object_id,
            "slug": f"{slugify(title)}-{object_id[:8]}",
            "title": title,
            "type": object_type,
            "metadata": metadata,
            "created_at": now,
            "modified_at": now,
        }

        with translate_errors(f"insert_one {object_type}"):
            self._collection(object_type).document(object_id).set(document)

        logger.info("Objeto %s creado: %s", object_type, object_id)
        return document

    def update_one(self, object_type: str, object_id: str, metadata: dict) -> dict:
        # Actualización parcial: solo se tocan las claves de metadata recibidas
        changes = {f"metadata.{key}": value for key, value in metadata.items()}
        changes["modified_at"] = self.clock()

        with translate_errors(f"update_one {object_type}"):
            doc_ref = self._collection(object_type).document(object_id)
            doc_ref.update(changes)
            document = doc_ref.get().to_dict()

        logger.info("Objeto %s actualizado: %s", object_type, object_id)
        return document
