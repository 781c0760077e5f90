# ==================== USERS/SERVICES.PY ====================
import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import transaction
from django.utils import timezone

from utils.exceptions import OTPVerificationFailed
from .models import EmailOTP
from .tasks import send_email

logger = logging.getLogger(__name__)

OTP_EMAIL_TEMPLATE = '''
<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #333; text-align: center;">{title}</h1>
  <p>{intro}</p>
  <div style="background-color: #f4f4f4; padding: 12px; border-radius: 4px; text-align: center; font-size: 24px; letter-spacing: 4px;">
    <strong>{otp}</strong>
  </div>
  <p>This code will expire in {minutes} minutes.</p>
</div>
'''


class OTPService:
    """Issue and verify email one-time codes"""

    @staticmethod
    def generate_otp():
        return f"{secrets.randbelow(900000) + 100000}"

    @staticmethod
    def store_otp(email, otp):
        """Store the hashed code, replacing any previous one for this email"""
        expires_at = timezone.now() + timedelta(minutes=settings.OTP_EXPIRY_MINUTES)
        record, _ = EmailOTP.objects.update_or_create(
            email=email,
            defaults={'otp_hash': make_password(otp), 'expires_at': expires_at, 'verified': False},
        )
        return record

    @staticmethod
    def verify_otp(email, provided_otp):
        """Mark the email verified when the code matches and has not expired"""
        record = EmailOTP.objects.filter(email=email).first()
        if not record:
            raise OTPVerificationFailed()

        if record.is_expired:
            record.delete()
            raise OTPVerificationFailed('Verification code has expired. Please request a new one.')

        if not check_password(provided_otp, record.otp_hash):
            raise OTPVerificationFailed('Invalid verification code.')

        record.verified = True
        record.save(update_fields=['verified'])
        logger.info(f"Email verified: {email}")
        return record

    @staticmethod
    def is_email_verified(email):
        return EmailOTP.objects.filter(email=email, verified=True, expires_at__gt=timezone.now()).exists()

    @staticmethod
    def cleanup(email):
        EmailOTP.objects.filter(email=email).delete()


class EmailService:
    """Compose and dispatch account emails"""

    @staticmethod
    def _send_otp(email, subject, title, intro):
        otp = OTPService.generate_otp()
        OTPService.store_otp(email, otp)
        html = OTP_EMAIL_TEMPLATE.format(
            title=title, intro=intro, otp=otp, minutes=settings.OTP_EXPIRY_MINUTES
        )
        transaction.on_commit(lambda: send_email.delay(subject, html, [email]))
        return otp

    @staticmethod
    def send_verification_email(email):
        return EmailService._send_otp(
            email, 'Email Verification Code', 'Verify Your Email', 'Your verification code is:'
        )

    @staticmethod
    def send_password_reset_email(email):
        return EmailService._send_otp(
            email, 'Password Reset Code', 'Reset Your Password', 'Your password reset code is:'
        )

    @staticmethod
    def forward_contact_message(message):
        html = (
            f"<p><strong>From:</strong> {message.name} &lt;{message.email}&gt;</p>"
            f"<p>{message.message}</p>"
        )
        transaction.on_commit(
            lambda: send_email.delay(f"Contact: {message.subject}", html, [settings.CONTACT_INBOX_EMAIL])
        )
