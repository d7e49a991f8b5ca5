import httpx
import structlog

from bagtag.core.config import settings

logger = structlog.get_logger(__name__)


async def send_verification(email: str, token: str, display_name: str | None = None) -> None:
    """Post a new account's verification token to the configured webhook.

    Skipped with a warning when ``VERIFICATION_WEBHOOK_URL`` is unset. Delivery
    failures are logged and never fail the sign-up itself.
    """
    webhook_url = settings.verification_webhook_url
    if not webhook_url:
        logger.warning("verification_webhook_unset", email=email)
        return

    payload = {
        "event": "email_verification",
        "email": email,
        "display_name": display_name,
        "token": token,
    }

    async with httpx.AsyncClient() as client:
        try:
            response = await client.post(webhook_url, json=payload, timeout=10.0)
            response.raise_for_status()
            logger.info("verification_sent", email=email)
        except httpx.HTTPError as exc:
            logger.error("verification_send_failed", email=email, error=str(exc))
