"""
Vote notification side-channel.

Runs as a FastAPI background task after the 201 has been sent. The vote is
already committed by then, so nothing here can fail the request: errors are
logged and dropped, and there is no retry.
"""

from __future__ import annotations

import logging
from typing import Any

from core import settings, webhook

logger = logging.getLogger(__name__)


async def notify_vote_background(payload: dict[str, Any]) -> None:
    """
    BackgroundTasks entrypoint. Never raises.
    """
    url = settings.webhook_url()
    vote_id = payload.get("voteId")
    if not url:
        logger.debug("vote_notification_disabled vote_id=%s", vote_id)
        return None

    try:
        status_code = await webhook.post_json(
            url=url,
            payload=payload,
            timeout_s=settings.webhook_timeout_s(),
        )
        logger.info("vote_notification_sent vote_id=%s status=%s", vote_id, status_code)
    except Exception:
        logger.exception("vote_notification_failed vote_id=%s", vote_id)
