# Errores del dominio; las rutas los traducen a códigos HTTP


class CivicReporterError(Exception):
    pass


class InvalidInput(CivicReporterError):
    """Campos requeridos ausentes o con formato inválido (400)."""


class NotFound(CivicReporterError):
    """El reporte u objeto referenciado no existe (404)."""


class StoreFailure(CivicReporterError):
    """Cualquier otro error del almacén de contenido (500)."""


class NotificationFailure(CivicReporterError):
    """Fallo al enviar un correo. Solo se registra, nunca llega al cliente."""
