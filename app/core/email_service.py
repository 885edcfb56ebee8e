import smtplib
import ssl
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List, Optional
from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        self.smtp_server = settings.SMTP_SERVER
        self.smtp_port = settings.SMTP_PORT
        self.username = settings.SMTP_USERNAME
        self.password = settings.SMTP_PASSWORD
        self.from_email = settings.FROM_EMAIL
        self.from_name = settings.FROM_NAME

    def send_email(
        self,
        to_emails: List[str],
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """Send an email over SMTP. Never raises; returns whether delivery succeeded"""

        if not settings.SEND_EMAILS:
            logger.info(f"📧 Email sending disabled. Would send: {subject} to {to_emails}")
            return True

        try:
            message = MIMEMultipart("alternative")
            message["Subject"] = subject
            message["From"] = f"{self.from_name} <{self.from_email}>"
            message["To"] = ", ".join(to_emails)

            if text_content:
                message.attach(MIMEText(text_content, "plain"))
            message.attach(MIMEText(html_content, "html"))

            context = ssl.create_default_context()

            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=settings.EMAIL_TIMEOUT) as server:
                server.starttls(context=context)
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.sendmail(self.from_email, to_emails, message.as_string())

            logger.info(f"✅ Email sent successfully to {to_emails}")
            return True

        except Exception as e:
            logger.error(f"❌ Failed to send email '{subject}' to {to_emails}: {str(e)}")
            return False

    def _layout(self, heading: str, color: str, body: str, button_text: str = None, button_url: str = None) -> str:
        button = ""
        if button_text and button_url:
            button = f"""
                <div style="text-align: center; margin: 30px 0;">
                    <a href="{button_url}"
                       style="background: {color}; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; display: inline-block;">
                        {button_text}
                    </a>
                </div>
            """
        return f"""
        <!DOCTYPE html>
        <html>
        <head><meta charset="utf-8"><title>{heading}</title></head>
        <body>
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <div style="background: {color}; color: white; padding: 30px; text-align: center;">
                    <h1>{heading}</h1>
                </div>
                <div style="padding: 30px; background: #f9f9f9;">
                    {body}
                    {button}
                </div>
                <div style="text-align: center; padding: 20px; color: #6b7280; font-size: 14px;">
                    <p>{self.from_name} - Caribbean dance events</p>
                </div>
            </div>
        </body>
        </html>
        """

    def send_welcome_email(self, to_email: str, name: str, is_organizer: bool = False) -> bool:
        organizer_item = "<li>Create and manage your own events</li>" if is_organizer else ""
        body = f"""
            <h2>Hi {name}!</h2>
            <p>Thanks for joining our community of Caribbean dance lovers.</p>
            <div style="background: white; padding: 20px; border-radius: 8px; margin: 20px 0;">
                <h3>🕺 What you can do now:</h3>
                <ul>
                    <li>Explore salsa, bachata and kizomba events</li>
                    <li>Save your favourite events</li>
                    <li>Follow organizers and other dancers</li>
                    <li>Comment on and rate events</li>
                    {organizer_item}
                </ul>
            </div>
        """
        html = self._layout(
            "🎵 Welcome to RitmoCaribe!", "#667eea", body,
            "Explore events", f"{settings.FRONTEND_URL}/events",
        )
        return self.send_email([to_email], "Welcome to RitmoCaribe! 🎵", html)

    def send_event_approved_email(self, to_email: str, organizer_name: str, event) -> bool:
        when = event.date_time.strftime("%d/%m/%Y %H:%M") if event.date_time else ""
        body = f"""
            <h2>Great news, {organizer_name}!</h2>
            <p>Your event <strong>"{event.title}"</strong> has been approved and is now visible to everyone.</p>
            <div style="background: white; padding: 20px; border-radius: 8px; margin: 20px 0;">
                <p><strong>When:</strong> {when} UTC</p>
                <p><strong>Where:</strong> {event.venue}, {event.city}</p>
                <p><strong>Style:</strong> {event.dance_style.value if event.dance_style else ""}</p>
            </div>
        """
        html = self._layout(
            "✅ Event approved!", "#27ae60", body,
            "View event", f"{settings.FRONTEND_URL}/events/{event.id}",
        )
        return self.send_email([to_email], f'✅ Your event "{event.title}" has been approved!', html)

    def send_event_rejected_email(self, to_email: str, organizer_name: str, event, reason: Optional[str] = None) -> bool:
        reason_block = ""
        if reason:
            reason_block = f"""
            <div style="background: #fff3cd; border: 1px solid #ffeaa7; padding: 15px; border-radius: 5px; margin: 20px 0;">
                <h4>💡 Reason:</h4>
                <p>{reason}</p>
            </div>
            """
        body = f"""
            <h2>Hi {organizer_name},</h2>
            <p>Your event <strong>"{event.title}"</strong> needs some changes before it can be published.</p>
            {reason_block}
            <ol>
                <li>Open your personal area</li>
                <li>Edit the event following the notes above</li>
                <li>Submit it again for approval</li>
            </ol>
        """
        html = self._layout(
            "⚠️ Event needs review", "#e74c3c", body,
            "Edit event", f"{settings.FRONTEND_URL}/my-ritmo",
        )
        return self.send_email([to_email], f'❌ Your event "{event.title}" needs changes', html)

    def send_custom_email(self, to_email: str, name: str, subject: str, message: str, action_url: Optional[str] = None) -> bool:
        body = f"""
            <h2>Hi {name},</h2>
            <div style="color: #4b5563; line-height: 1.6;">{message}</div>
        """
        button_url = f"{settings.FRONTEND_URL}{action_url}" if action_url else None
        html = self._layout(subject, "#667eea", body, "Open RitmoCaribe" if button_url else None, button_url)
        return self.send_email([to_email], subject, html, text_content=message)


email_service = EmailService()
