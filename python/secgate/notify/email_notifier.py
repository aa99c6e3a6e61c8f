"""Email notification of gate verdicts."""

import logging
import mimetypes
import smtplib
from email.message import EmailMessage
from pathlib import Path
from typing import List, Optional

from ..config.settings import NotifyConfig
from ..errors import NotificationError
from ..gate.result import GateResult

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Sends the verdict summary with reports attached over SMTP."""

    def __init__(self, config: NotifyConfig):
        self.config = config

    def should_notify(self, result: GateResult) -> bool:
        if not self.config.enabled or not self.config.recipients:
            return False
        if self.config.only_on_failure and result.passed:
            return False
        return True

    def subject(self, result: GateResult) -> str:
        verdict = result.verdict
        return (
            f"[secgate] {verdict.status}: "
            f"{len(verdict.failures)} failure(s), {len(verdict.warnings)} warning(s)"
        )

    def body(self, result: GateResult) -> str:
        summary = result.get_summary()
        lines = [
            result.verdict.summary(),
            "",
            f"Run ID: {result.id}",
            f"Policy: {result.policy_source or 'none'} ({result.policy_rule_count} rules)",
            f"Findings: {summary['total_findings']} "
            f"(ignored {summary['ignored']}, duplicates filtered {result.duplicates_filtered})",
        ]
        for source in result.sources:
            lines.append(f"  {source['name']}: {source['findings']}")
        return "\n".join(lines) + "\n"

    def build_message(self, result: GateResult, attachments: Optional[List[str]] = None) -> EmailMessage:
        """
        Build the notification message.

        Args:
            result: Gate result to announce
            attachments: Report file paths to attach

        Returns:
            Message ready for sending
        """
        message = EmailMessage()
        message["Subject"] = self.subject(result)
        message["From"] = self.config.sender
        message["To"] = ", ".join(self.config.recipients)
        message.set_content(self.body(result))

        for attachment in attachments or []:
            path = Path(attachment)
            ctype, _ = mimetypes.guess_type(path.name)
            maintype, subtype = (ctype or "application/octet-stream").split("/", 1)
            message.add_attachment(
                path.read_bytes(),
                maintype=maintype,
                subtype=subtype,
                filename=path.name,
            )

        return message

    def send(self, result: GateResult, attachments: Optional[List[str]] = None) -> EmailMessage:
        """Build and deliver the notification."""
        message = self.build_message(result, attachments)
        cfg = self.config

        try:
            with smtplib.SMTP(cfg.smtp_host, cfg.smtp_port, timeout=cfg.timeout) as smtp:
                if cfg.use_tls:
                    smtp.starttls()
                if cfg.username:
                    smtp.login(cfg.username, cfg.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Could not send notification via {cfg.smtp_host}: {e}") from e

        logger.info(f"Notification sent to {message['To']}")
        return message
