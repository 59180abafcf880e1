import logging

import firebase_admin
from firebase_admin import credentials, firestore

from config import Settings

logger = logging.getLogger(__name__)


def init_firestore(settings: Settings):
    """
    Inicializa la app de Firebase (una sola vez por proceso) y devuelve el cliente
    de Firestore que usa el almacén de contenido.
    """
    if not firebase_admin._apps:
        try:
            cred = credentials.Certificate(settings.firebase_credentials)
            firebase_admin.initialize_app(cred)
            logger.info("Conexión a Firebase exitosa.")
        except Exception:
            logger.exception("Error al conectar con Firebase")
            raise

    return firestore.client()
