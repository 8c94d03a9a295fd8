"""Email notifications for story submissions and reviews.

Messages are rendered from Jinja2 templates in templates/emails. The first
line of a rendered template is the subject, the rest is the body. Delivery
is best effort: notify_* methods log failures and never raise.
"""

import logging
import smtplib
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import jinja2
from fastapi import BackgroundTasks

import config
from core.exceptions import NotificationError
from schemas.story import Story

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "Subject:"


class Notifier:
    """Renders and delivers notification emails."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        use_tls: bool = True,
        mail_from: str = "stories@localhost",
        admin_email: Optional[str] = None,
        site_name: str = "Stories",
        template_dir: Path = config.TEMPLATE_DIR,
        timeout: float = 10.0,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.use_tls = use_tls
        self.mail_from = mail_from
        self.admin_email = admin_email
        self.site_name = site_name
        self.timeout = timeout
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
        )

    @classmethod
    def from_config(cls) -> "Notifier":
        return cls(
            smtp_host=config.SMTP_HOST,
            smtp_port=config.SMTP_PORT,
            smtp_username=config.SMTP_USERNAME,
            smtp_password=config.SMTP_PASSWORD,
            use_tls=config.SMTP_USE_TLS,
            mail_from=config.MAIL_FROM,
            admin_email=config.ADMIN_NOTIFY_EMAIL,
            site_name=config.SITE_NAME,
            timeout=config.SMTP_TIMEOUT,
        )

    def render(self, kind: str, context: Dict[str, Any]) -> Tuple[str, str]:
        """Render a notification template.

        Args:
            kind: Template name without extension, e.g. "story_approved".
            context: Template variables.

        Returns:
            (subject, body) tuple.
        """
        template = self.env.get_template(f"emails/{kind}.txt.j2")
        rendered = template.render(site_name=self.site_name, **context)
        first_line, _, body = rendered.partition("\n")
        subject = first_line
        if subject.startswith(SUBJECT_PREFIX):
            subject = subject[len(SUBJECT_PREFIX):]
        return subject.strip(), body.lstrip("\n")

    def send_email(self, to: str, subject: str, body: str) -> None:
        """Deliver one message over SMTP.

        Without an SMTP host the message is only logged.

        Raises:
            NotificationError: If delivery fails.
        """
        if not self.smtp_host:
            logger.info("SMTP not configured; would send to %s: %s", to, subject)
            logger.debug("Message body:\n%s", body)
            return

        message = EmailMessage()
        message["From"] = self.mail_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.smtp_username:
                    smtp.login(self.smtp_username, self.smtp_password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Failed to send email to {to}: {e}") from e

        logger.info("Sent email to %s: %s", to, subject)

    def _dispatch(self, kind: str, to: Optional[str], story: Story, **extra) -> bool:
        if not to:
            logger.debug("No recipient for %s notification of story %s", kind, story.id)
            return False
        try:
            subject, body = self.render(kind, {"story": story, **extra})
            self.send_email(to, subject, body)
            return True
        except Exception as e:
            logger.error(
                "Notification %s for story %s failed: %s", kind, story.id, e,
                exc_info=True,
            )
            return False

    def notify_submission_received(self, story: Story) -> bool:
        return self._dispatch("submission_received", story.email, story)

    def notify_admin_new_submission(self, story: Story) -> bool:
        return self._dispatch("admin_new_submission", self.admin_email, story)

    def notify_story_approved(self, story: Story) -> bool:
        return self._dispatch("story_approved", story.email, story)

    def notify_story_rejected(self, story: Story) -> bool:
        return self._dispatch(
            "story_rejected", story.email, story, reason=story.rejection_reason
        )


def schedule_notification(
    background_tasks: Optional[BackgroundTasks], func, story: Story
) -> None:
    """Queue a notify_* call to run after the response, or run it now."""
    if background_tasks is not None:
        background_tasks.add_task(func, story)
    else:
        func(story)
