"""
Отправка сообщений с контактной формы владельцу сайта через SMTP.

send_contact_email никогда не бросает: при любой ошибке пишет в лог и возвращает False.
"""
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from portfolio_api.core.config import settings
from portfolio_api.schemas.contact import ContactForm

logger = logging.getLogger(__name__)


def _subject(form: ContactForm) -> str:
    if form.subject:
        return f"Portfolio Contact: {form.subject}"
    return f"Portfolio Contact from {form.name}"


def _plain_body(form: ContactForm) -> str:
    lines = [
        "New Contact Form Submission",
        "",
        f"Name: {form.name}",
        f"Email: {form.email}",
    ]
    if form.subject:
        lines.append(f"Subject: {form.subject}")
    lines += ["", "Message:", form.message, "", f"Reply directly to this email to respond to {form.name}."]
    return "\n".join(lines)


def _html_body(form: ContactForm) -> str:
    name = html.escape(form.name)
    email = html.escape(str(form.email))
    subject = f"<p><strong>Subject:</strong> {html.escape(form.subject)}</p>" if form.subject else ""
    message = html.escape(form.message).replace("\n", "<br>")
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333; border-bottom: 2px solid #007bff; padding-bottom: 10px;">New Contact Form Submission</h2>
  <div style="background-color: #f8f9fa; padding: 20px; border-radius: 5px; margin: 20px 0;">
    <p><strong>Name:</strong> {name}</p>
    <p><strong>Email:</strong> {email}</p>
    {subject}
  </div>
  <div style="margin: 20px 0;">
    <h3 style="color: #333;">Message:</h3>
    <div style="background-color: #ffffff; padding: 15px; border-left: 4px solid #007bff;">{message}</div>
  </div>
  <div style="margin-top: 30px; color: #6c757d; font-size: 14px;">
    <p>This message was sent from your portfolio website contact form.</p>
    <p>Reply directly to this email to respond to {name} at {email}</p>
  </div>
</div>
"""


def build_contact_message(form: ContactForm) -> MIMEMultipart:
    """Письмо владельцу: plain + html, Reply-To — отправитель формы."""
    msg = MIMEMultipart("alternative")
    msg["Subject"] = _subject(form)
    msg["From"] = settings.FROM_EMAIL
    msg["To"] = settings.contact_recipient()
    msg["Reply-To"] = str(form.email)
    msg.attach(MIMEText(_plain_body(form), "plain"))
    msg.attach(MIMEText(_html_body(form), "html"))
    return msg


def send_contact_email(form: ContactForm) -> bool:
    """Отправить сообщение. True — письмо принято SMTP-сервером."""
    if not all([settings.SMTP_HOST, settings.FROM_EMAIL, settings.contact_recipient()]):
        logger.warning("SMTP is not configured, contact message from %s dropped", form.email)
        return False

    msg = build_contact_message(form)
    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT) as server:
            if settings.SMTP_USE_TLS:
                server.starttls()
            if settings.SMTP_USER:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("Error sending contact email from %s: %s", form.email, exc)
        return False

    logger.info("Contact email from %s relayed to %s", form.email, msg["To"])
    return True
