"""
Outbound webhook client.

The vote notification target (mail / spreadsheet automation) accepts a JSON
POST and usually answers with a redirect to its result page, so redirects
are followed and any 2xx after that counts as delivered.
"""

from __future__ import annotations

from typing import Any

import httpx


# Webhook failures are explicit and separable from other runtime errors.
class WebhookError(RuntimeError):
    pass


def _normalize_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise WebhookError("Webhook URL is empty.")
    return url


async def post_json(
    *,
    url: str,
    payload: dict[str, Any],
    timeout_s: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """
    POST `payload` to `url` and return the final status code.
    """
    url = _normalize_url(url)

    try:
        async with httpx.AsyncClient(
            timeout=timeout_s,
            follow_redirects=True,
            transport=transport,
        ) as client:
            resp = await client.post(url, json=payload)
    except httpx.HTTPError as exc:
        raise WebhookError(f"Webhook request failed: {exc}") from exc

    if not resp.is_success:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:300]
        raise WebhookError(f"Webhook responded with {resp.status_code}: {body}")

    return resp.status_code
