# config.py - Configuración de la aplicación cargada una sola vez al arrancar
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel


class Settings(BaseModel):
    app_name: str = "CivicReporter API"
    log_level: str = "INFO"
    timezone: str = "UTC"
    logfire_token: Optional[str] = None

    # Credenciales de Firestore (cuenta de servicio de firebase-admin)
    firebase_credentials: dict = {}

    # Cloudinary para fotos de reportes
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_folder: str = "civicreporter/reports"

    # Servidor SMTP para correos a los reportantes
    email_address: Optional[str] = None
    email_password: Optional[str] = None
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    mail_from: str = "noreply@civicreporter.com"

    @property
    def mail_enabled(self) -> bool:
        return bool(self.email_address and self.email_password)

    @property
    def media_enabled(self) -> bool:
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret
        )


def _firebase_credentials_from_env() -> dict:
    private_key = os.getenv("FIREBASE_PRIVATE_KEY")
    return {
        "type": os.getenv("FIREBASE_TYPE"),
        "project_id": os.getenv("FIREBASE_PROJECT_ID"),
        "private_key_id": os.getenv("FIREBASE_PRIVATE_KEY_ID"),
        "private_key": private_key.replace("\\n", "\n") if private_key else None,
        "client_email": os.getenv("FIREBASE_CLIENT_EMAIL"),
        "client_id": os.getenv("FIREBASE_CLIENT_ID"),
        "auth_uri": os.getenv("FIREBASE_AUTH_URI"),
        "token_uri": os.getenv("FIREBASE_TOKEN_URI"),
        "auth_provider_x509_cert_url": os.getenv("FIREBASE_AUTH_PROVIDER_X509_CERT_URL"),
        "client_x509_cert_url": os.getenv("FIREBASE_CLIENT_X509_CERT_URL"),
        "universe_domain": os.getenv("FIREBASE_UNIVERSE_DOMAIN"),
    }


def load_settings() -> Settings:
    """
    Construye la configuración a partir de variables de entorno (y del .env si existe).
    Se llama una sola vez al iniciar el proceso; el resultado se pasa a cada servicio.
    """
    load_dotenv()

    return Settings(
        app_name=os.getenv("APP_NAME", "CivicReporter API"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        timezone=os.getenv("APP_TIMEZONE", "UTC"),
        logfire_token=os.getenv("LOGFIRE_TOKEN"),
        firebase_credentials=_firebase_credentials_from_env(),
        cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME"),
        cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY"),
        cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET"),
        cloudinary_folder=os.getenv("CLOUDINARY_FOLDER", "civicreporter/reports"),
        email_address=os.getenv("EMAIL_ADDRESS"),
        email_password=os.getenv("EMAIL_PASSWORD"),
        smtp_server=os.getenv("SMTP_SERVER", "smtp.gmail.com"),
        smtp_port=int(os.getenv("SMTP_PORT", 587)),
        mail_from=os.getenv("MAIL_FROM", "noreply@civicreporter.com"),
    )
