# ==================== USERS/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone
from django.utils.html import strip_tags
import logging

logger = logging.getLogger(__name__)


@shared_task
def send_email(subject, html, recipients):
    """Send an HTML email with a plain-text alternative"""
    try:
        send_mail(
            subject,
            strip_tags(html),
            settings.DEFAULT_FROM_EMAIL,
            recipients,
            html_message=html,
            fail_silently=False,
        )
    except Exception as e:
        logger.error(f"Error sending email '{subject}' to {recipients}: {str(e)}")
        raise


@shared_task
def purge_expired_otps():
    """Remove one-time codes that can no longer be used"""
    from .models import EmailOTP

    deleted, _ = EmailOTP.objects.filter(expires_at__lte=timezone.now()).delete()
    logger.info(f"Purged {deleted} expired OTP records")
    return deleted
