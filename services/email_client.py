import logging
import smtplib
from email.message import EmailMessage

from config import Settings
from services.errors import NotificationFailure

logger = logging.getLogger(__name__)


class Mailer:
    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return self.settings.mail_enabled

    def send_email(self, to_email: str, subject: str, body: str) -> None:
        """
        Envía un correo electrónico usando SMTP.
        :param to_email: destinatario
        :param subject: asunto del correo
        :param body: contenido HTML
        :raises NotificationFailure: si el servidor rechaza o falla la conexión
        """
        msg = EmailMessage()
        msg["From"] = self.settings.mail_from
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(body, subtype="html")

        try:
            with smtplib.SMTP(self.settings.smtp_server, self.settings.smtp_port) as smtp:
                smtp.starttls()  # cifrado TLS
                smtp.login(self.settings.email_address, self.settings.email_password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationFailure(f"No se pudo enviar el correo a {to_email}: {e}") from e

        logger.info("Correo enviado a %s", to_email)
