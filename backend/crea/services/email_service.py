"""
Email Service for the CREA portal
=================================
Sends:
- OTP verification codes on signup
- Membership welcome emails after activation
- Donation thank-you emails

Transports (EMAIL_PROVIDER):
- smtp: username/password over STARTTLS
- oauth2: Gmail XOAUTH2 with a refresh token exchanged for an access token
- sendgrid: SendGrid web API
"""

import asyncio
import base64
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional, Tuple

import aiosmtplib
import httpx
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To, Content, Attachment, FileContent, FileName, FileType, Disposition

from crea.core.config import settings
from crea.core.logging_config import logger

# (filename, bytes, mime type)
EmailAttachment = Tuple[str, bytes, str]


class EmailService:
    """Async email service using SMTP, Gmail OAuth2 or SendGrid"""

    def __init__(self):
        self.provider = settings.EMAIL_PROVIDER.lower()
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.from_email = settings.EMAIL_FROM
        self.from_name = settings.EMAIL_FROM_NAME
        self.frontend_url = settings.FRONTEND_URL

    @property
    def is_configured(self) -> bool:
        """Check if the selected transport has credentials"""
        if self.provider == "sendgrid":
            return bool(settings.SENDGRID_API_KEY)
        if self.provider == "oauth2":
            return bool(
                settings.OAUTH_CLIENT_ID and settings.OAUTH_CLIENT_SECRET
                and settings.OAUTH_REFRESH_TOKEN and settings.OAUTH_USER
            )
        return bool(settings.SMTP_USER and settings.SMTP_PASSWORD)

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        attachments: Optional[List[EmailAttachment]] = None,
    ) -> bool:
        """
        Send an email asynchronously.

        Returns True if successful, False otherwise. Delivery failures never
        abort the request that triggered them.
        """
        if not self.is_configured:
            logger.warning(f"[Email] Email service not configured, skipping '{subject}' to {to_email}")
            return False

        try:
            if self.provider == "sendgrid":
                return await self._send_via_sendgrid(to_email, subject, html_content, text_content, attachments)
            message = self._build_mime(to_email, subject, html_content, text_content, attachments)
            if self.provider == "oauth2":
                await self._send_via_oauth2(message)
            else:
                await aiosmtplib.send(
                    message,
                    hostname=self.smtp_host,
                    port=self.smtp_port,
                    username=settings.SMTP_USER,
                    password=settings.SMTP_PASSWORD,
                    start_tls=True,
                )
            logger.info(f"[Email/{self.provider}] Sent '{subject}' to {to_email}")
            return True
        except (aiosmtplib.SMTPException, httpx.HTTPError, OSError) as e:
            logger.error(f"[Email/{self.provider}] Failed to send email to {to_email}: {e}")
            return False

    def _build_mime(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str],
        attachments: Optional[List[EmailAttachment]],
    ) -> MIMEMultipart:
        message = MIMEMultipart("mixed")
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = to_email
        message["Subject"] = subject

        body = MIMEMultipart("alternative")
        if text_content:
            body.attach(MIMEText(text_content, "plain"))
        body.attach(MIMEText(html_content, "html"))
        message.attach(body)

        for filename, data, mime_type in attachments or []:
            part = MIMEApplication(data, _subtype=mime_type.split("/")[-1])
            part.add_header("Content-Disposition", "attachment", filename=filename)
            message.attach(part)
        return message

    async def _fetch_oauth_access_token(self) -> str:
        """Exchange the long-lived refresh token for a Gmail access token"""
        async with httpx.AsyncClient(timeout=15) as client:
            response = await client.post(
                settings.OAUTH_TOKEN_URL,
                data={
                    "client_id": settings.OAUTH_CLIENT_ID,
                    "client_secret": settings.OAUTH_CLIENT_SECRET,
                    "refresh_token": settings.OAUTH_REFRESH_TOKEN,
                    "grant_type": "refresh_token",
                },
            )
            response.raise_for_status()
            return response.json()["access_token"]

    async def _send_via_oauth2(self, message: MIMEMultipart) -> None:
        access_token = await self._fetch_oauth_access_token()
        auth_string = f"user={settings.OAUTH_USER}\x01auth=Bearer {access_token}\x01\x01"
        smtp = aiosmtplib.SMTP(hostname=self.smtp_host, port=self.smtp_port, start_tls=True)
        async with smtp:
            response = await smtp.execute_command(
                b"AUTH", b"XOAUTH2", base64.b64encode(auth_string.encode())
            )
            if response.code != 235:
                raise aiosmtplib.SMTPAuthenticationError(response.code, response.message)
            await smtp.send_message(message)

    async def _send_via_sendgrid(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str],
        attachments: Optional[List[EmailAttachment]],
    ) -> bool:
        message = Mail(
            from_email=Email(self.from_email, self.from_name),
            to_emails=To(to_email),
            subject=subject,
            html_content=Content("text/html", html_content),
        )
        if text_content:
            message.add_content(Content("text/plain", text_content))
        for filename, data, mime_type in attachments or []:
            message.add_attachment(Attachment(
                FileContent(base64.b64encode(data).decode()),
                FileName(filename),
                FileType(mime_type),
                Disposition("attachment"),
            ))

        sg = SendGridAPIClient(settings.SENDGRID_API_KEY)
        # SendGrid's client is synchronous
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(None, sg.send, message)

        if response.status_code in (200, 201, 202):
            logger.info(f"[Email/SendGrid] Sent '{subject}' to {to_email}")
            return True
        logger.error(f"[Email/SendGrid] Failed with status {response.status_code}: {response.body}")
        return False

    # ==================== Templates ====================

    async def send_otp_email(self, to_email: str, code: str, name: Optional[str] = None) -> bool:
        greeting = f"Hello {name}," if name else "Hello,"
        minutes = settings.OTP_EXPIRE_MINUTES
        html = f"""
        <div style="font-family: Arial, sans-serif; max-width: 480px; margin: 0 auto;">
            <h2 style="color: #1e3a8a;">CREA verification code</h2>
            <p>{greeting}</p>
            <p>Use the code below to verify your email address:</p>
            <p style="font-size: 28px; letter-spacing: 6px; font-weight: bold;">{code}</p>
            <p>This code expires in {minutes} minutes. If you did not request it, ignore this email.</p>
            <p>Central Railway Engineers Association</p>
        </div>
        """
        text = f"{greeting}\n\nYour CREA verification code is {code}. It expires in {minutes} minutes."
        return await self.send_email(to_email, "CREA verification code", html, text)

    async def send_membership_welcome_email(
        self,
        to_email: str,
        name: str,
        member_id: Optional[str],
        membership_id: str,
        plan: str,
        valid_until: Optional[str],
        receipt: Optional[bytes] = None,
    ) -> bool:
        validity = "Lifetime" if plan == "lifetime" else (valid_until or "-")
        html = f"""
        <div style="font-family: Arial, sans-serif; max-width: 560px; margin: 0 auto;">
            <h2 style="color: #1e3a8a;">Welcome to CREA, {name}!</h2>
            <p>Your {plan} membership is now active.</p>
            <table style="border-collapse: collapse;">
                <tr><td style="padding: 4px 12px;">Membership ID</td><td><b>{membership_id}</b></td></tr>
                <tr><td style="padding: 4px 12px;">Member ID</td><td><b>{member_id or '-'}</b></td></tr>
                <tr><td style="padding: 4px 12px;">Valid until</td><td>{validity}</td></tr>
            </table>
            <p>You can sign in at <a href="{self.frontend_url}">{self.frontend_url}</a>.</p>
            <p>Central Railway Engineers Association</p>
        </div>
        """
        text = (
            f"Welcome to CREA, {name}!\n\nYour {plan} membership is active.\n"
            f"Membership ID: {membership_id}\nMember ID: {member_id or '-'}\nValid until: {validity}\n"
        )
        attachments = [(f"membership-receipt-{membership_id}.pdf", receipt, "application/pdf")] if receipt else None
        return await self.send_email(to_email, "Welcome to CREA - Membership Activated", html, text, attachments)

    async def send_donation_thank_you_email(
        self,
        to_email: str,
        name: str,
        amount: int,
        donation_id: str,
        receipt: Optional[bytes] = None,
    ) -> bool:
        html = f"""
        <div style="font-family: Arial, sans-serif; max-width: 560px; margin: 0 auto;">
            <h2 style="color: #1e3a8a;">Thank you, {name}!</h2>
            <p>We have received your donation of <b>&#8377;{amount:,}</b>.</p>
            <p>Receipt number: {donation_id}</p>
            <p>Central Railway Engineers Association</p>
        </div>
        """
        text = f"Thank you, {name}! We received your donation of Rs. {amount:,}. Receipt number: {donation_id}"
        attachments = [(f"donation-receipt-{donation_id}.pdf", receipt, "application/pdf")] if receipt else None
        return await self.send_email(to_email, "Thank you for your donation to CREA", html, text, attachments)


# Singleton instance
email_service = EmailService()
