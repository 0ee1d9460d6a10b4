from __future__ import annotations

import html
import logging
import smtplib
from dataclasses import dataclass
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

from ..core.enums import LeaveStatus
from ..leaves.model import LeaveRequest
from ..users.model import User

logger = logging.getLogger(__name__)


class LeaveNotifier(Protocol):
    def notify_status_change(self, user: User, request: LeaveRequest, remaining_balance: Optional[int]) -> None:
        """Deliver a status-change message. Must never raise."""

        raise NotImplementedError


@dataclass(frozen=True)
class MailConfig:
    server: str
    port: int
    username: Optional[str]
    password: Optional[str]
    sender_name: str = "HR Management System"
    use_tls: bool = True

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password)


@dataclass(frozen=True)
class LeaveStatusMessage:
    subject: str
    text: str
    html: str


_STATUS_COPY = {
    LeaveStatus.APPROVED: (
        "Leave Request Approved",
        "We are pleased to inform you that your leave request has been approved.",
        "#48bb78",
    ),
    LeaveStatus.REJECTED: (
        "Leave Request Update",
        "Your leave request has been reviewed and was not approved at this time.",
        "#e53e3e",
    ),
}


def _fmt_date(value: date) -> str:
    return value.strftime("%a, %b %d, %Y")


def render_status_message(user: User, request: LeaveRequest, remaining_balance: Optional[int]) -> LeaveStatusMessage:
    subject, message, color = _STATUS_COPY.get(
        request.status, ("Leave Request Update", f"Your leave request is now {request.status.value}.", "#718096")
    )
    duration = f"{request.total_days} Day{'s' if request.total_days > 1 else ''}"

    rows = [
        ("Leave Type", request.leave_type.value),
        ("Duration", duration),
        ("Start Date", _fmt_date(request.start_date)),
        ("End Date", _fmt_date(request.end_date)),
    ]
    if remaining_balance is not None:
        rows.append(("Remaining Balance", f"{remaining_balance} Days"))

    text_lines = [f"Hello {user.full_name},", "", message, ""]
    text_lines += [f"{label}: {value}" for label, value in rows]
    text_lines += ["", f"Your leave status has been updated to: {request.status.value}"]

    table = "".join(
        f"<tr><td style=\"color:#718096\">{html.escape(label)}</td>"
        f"<td style=\"text-align:right;font-weight:600\">{html.escape(value)}</td></tr>"
        for label, value in rows
    )
    body = (
        "<html><body style=\"font-family:Segoe UI,Arial,sans-serif;color:#333\">"
        f"<h2>HR Notification</h2><p>Hello {html.escape(user.full_name)},</p>"
        f"<p style=\"color:{color};font-weight:700;text-transform:uppercase\">{request.status.value}</p>"
        f"<p>{html.escape(message)}</p>"
        f"<table style=\"width:100%;border-collapse:collapse\">{table}</table>"
        "<p style=\"color:#718096;font-size:13px\">This is an automated message. "
        "Please do not reply directly to this email.</p>"
        "</body></html>"
    )
    return LeaveStatusMessage(subject=subject, text="\n".join(text_lines), html=body)


class SmtpLeaveNotifier(LeaveNotifier):
    """Best-effort email sender; failures are logged, never raised."""

    def __init__(self, config: MailConfig):
        self._config = config

    def _send(self, recipient: str, message: LeaveStatusMessage) -> None:
        msg = MIMEMultipart("alternative")
        msg["From"] = f"\"{self._config.sender_name}\" <{self._config.username}>"
        msg["To"] = recipient
        msg["Subject"] = message.subject
        msg.attach(MIMEText(message.text, "plain"))
        msg.attach(MIMEText(message.html, "html"))

        with smtplib.SMTP(self._config.server, self._config.port, timeout=10) as server:
            if self._config.use_tls:
                server.starttls()
            server.login(self._config.username, self._config.password)
            server.sendmail(self._config.username, recipient, msg.as_string())

    def notify_status_change(self, user: User, request: LeaveRequest, remaining_balance: Optional[int]) -> None:
        if not self._config.is_configured:
            logger.warning("Email credentials not configured. Skipping email send.")
            return
        if not user.email:
            return

        try:
            self._send(user.email, render_status_message(user, request, remaining_balance))
            logger.info("Email sent successfully to %s", user.email)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending email to %s: %s", user.email, e)


class NullLeaveNotifier(LeaveNotifier):
    def notify_status_change(self, user: User, request: LeaveRequest, remaining_balance: Optional[int]) -> None:
        logger.debug("Notification disabled; request_id=%s status=%s", request.request_id, request.status.value)
