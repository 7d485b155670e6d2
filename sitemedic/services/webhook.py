import httpx
import asyncio
import logging
import time
from sitemedic.core.config import settings
from sitemedic.core.metrics import webhook_deliveries, webhook_duration

logger = logging.getLogger(__name__)


async def send_webhook(payload: dict, retries: int | None = None) -> bool:
    """POST a handoff notification, retrying with exponential backoff."""
    if not settings.WEBHOOK_URL:
        logger.debug("WEBHOOK_URL not configured; skipping notification")
        return False

    if retries is None:
        retries = settings.WEBHOOK_RETRIES

    backoff = 1.0
    handoff_id = payload.get("handoff_id")

    for attempt in range(1, retries + 1):
        start_time = time.time()
        try:
            async with httpx.AsyncClient(timeout=settings.WEBHOOK_TIMEOUT) as client:
                response = await client.post(settings.WEBHOOK_URL, json=payload)

                if 200 <= response.status_code < 300:
                    webhook_deliveries.labels(status="success").inc()
                    webhook_duration.labels(status="success").observe(time.time() - start_time)
                    logger.info(f"Webhook delivery succeeded for handoff {handoff_id}")
                    return True
                else:
                    logger.warning(
                        f"Webhook delivery failed (attempt {attempt}/{retries}): "
                        f"Status {response.status_code} for handoff {handoff_id}"
                    )
        except httpx.TimeoutException:
            logger.warning(
                f"Webhook timeout (attempt {attempt}/{retries}) for handoff {handoff_id}"
            )
        except httpx.HTTPError as e:
            logger.warning(
                f"Webhook delivery error (attempt {attempt}/{retries}): {e} "
                f"for handoff {handoff_id}"
            )

        webhook_deliveries.labels(status="retry" if attempt < retries else "failed").inc()
        webhook_duration.labels(status="failed").observe(time.time() - start_time)

        if attempt < retries:
            await asyncio.sleep(backoff)
            backoff *= 2.0

    logger.error(f"Webhook delivery failed after {retries} attempts for handoff {handoff_id}")
    return False
