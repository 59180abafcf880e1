"""
Correos al vecino que reportó: confirmación al crear y aviso de cada cambio de estado.

El envío es best-effort. Se hace después de guardar en el almacén y un fallo
solo se registra en el log; la operación que lo disparó sigue siendo exitosa.
"""
import logging
from html import escape
from typing import Optional, Union

from models.enums import IssueStatus
from models.report import IssueReport
from services.email_client import Mailer
from services.errors import NotificationFailure
from services.rules import category_label

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    IssueStatus.REPORTED: "Your report has been received",
    IssueStatus.ACKNOWLEDGED: "Your report has been acknowledged by city staff",
    IssueStatus.IN_PROGRESS: "Work has started on your report",
    IssueStatus.RESOLVED: "Your report has been resolved",
    IssueStatus.CLOSED: "Your report has been closed",
}


def render_confirmation(report: IssueReport) -> tuple:
    meta = report.metadata
    category = category_label(meta.category)
    subject = f"Report Confirmation - {category} Issue"
    body = f"""
<h2>Thank you for your report</h2>
<p>Dear {escape(meta.reporter_name or "Resident")},</p>
<p>We have received your report about a {escape(category.lower())} issue. Here are the details:</p>
<ul>
  <li><strong>Report ID:</strong> {escape(report.id)}</li>
  <li><strong>Category:</strong> {escape(meta.category.value)}</li>
  <li><strong>Priority:</strong> {escape(meta.priority.value)}</li>
  <li><strong>Status:</strong> Reported</li>
  <li><strong>Department:</strong> {escape(meta.department)}</li>
</ul>
<p><strong>Description:</strong> {escape(meta.description)}</p>
<p>We will keep you updated on the progress of your report.</p>
<p>Best regards,<br>CivicReporter Team</p>
"""
    return subject, body


def render_status_update(
    report: IssueReport,
    new_status: IssueStatus,
    assigned_to: Optional[str] = None,
    notes: Optional[str] = None,
    estimated_date: Optional[str] = None,
) -> tuple:
    meta = report.metadata
    subject = f"Report Update - {category_label(meta.category)} Issue"

    details = [
        f"<li><strong>Report ID:</strong> {escape(report.id)}</li>",
        f"<li><strong>Category:</strong> {escape(meta.category.value)}</li>",
        f"<li><strong>New Status:</strong> {escape(new_status.value)}</li>",
    ]
    if assigned_to:
        details.append(f"<li><strong>Assigned To:</strong> {escape(assigned_to)}</li>")
    if estimated_date:
        details.append(f"<li><strong>Estimated Resolution:</strong> {escape(estimated_date)}</li>")
    notes_html = f"<p><strong>Notes:</strong> {escape(notes)}</p>" if notes else ""

    body = f"""
<h2>Report Status Update</h2>
<p>Dear {escape(meta.reporter_name or "Resident")},</p>
<p>{STATUS_MESSAGES[new_status]}.</p>
<ul>
  {"".join(details)}
</ul>
{notes_html}
<p>Thank you for helping make our community better.</p>
<p>Best regards,<br>CivicReporter Team</p>
"""
    return subject, body


class NotificationDispatcher:
    def __init__(self, mailer: Mailer):
        self.mailer = mailer

    def _deliver(self, to_email: str, subject: str, body: str) -> bool:
        if not self.mailer.enabled:
            logger.debug("Correo deshabilitado, no se envía '%s' a %s", subject, to_email)
            return False
        try:
            self.mailer.send_email(to_email=to_email, subject=subject, body=body)
        except NotificationFailure as e:
            logger.error("Fallo de notificación: %s", e)
            return False
        except Exception:
            logger.exception("Error inesperado enviando correo a %s", to_email)
            return False
        return True

    def send_confirmation(self, report: IssueReport) -> bool:
        subject, body = render_confirmation(report)
        return self._deliver(report.metadata.reporter_email, subject, body)

    def send_status_update(
        self,
        report: IssueReport,
        new_status: Union[IssueStatus, str],
        assigned_to: Optional[str] = None,
        notes: Optional[str] = None,
        estimated_date: Optional[str] = None,
    ) -> bool:
        subject, body = render_status_update(
            report, IssueStatus(new_status), assigned_to, notes, estimated_date
        )
        return self._deliver(report.metadata.reporter_email, subject, body)
