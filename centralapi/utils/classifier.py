"""Best-effort image classification via an external HTTP endpoint.

Runs as a background task after an upload. The endpoint receives the raw
image bytes and answers ``{"tag": "...", "confidence": 0.0-1.0}``. Any
failure is logged and dropped; classification never affects the upload.
"""

from __future__ import annotations

import httpx
import structlog
from pydantic import ValidationError

from centralapi.config import settings
from centralapi.database import get_session_factory
from centralapi.models.contracts import ClassificationResult
from centralapi.services.images import record_classification

logger = structlog.get_logger()


async def request_classification(
    client: httpx.AsyncClient, data: bytes, content_type: str
) -> ClassificationResult | None:
    """POST the bytes to the classifier. Returns None on any failure."""
    try:
        response = await client.post(
            settings.classifier_url,
            content=data,
            headers={"Content-Type": content_type},
            timeout=settings.classifier_timeout_seconds,
        )
    except httpx.TimeoutException:
        logger.warning("classifier_timeout", url=settings.classifier_url)
        return None
    except httpx.RequestError as exc:
        logger.warning("classifier_request_failed", error_type=type(exc).__name__)
        return None

    if response.status_code >= 400:
        logger.warning("classifier_http_error", status_code=response.status_code)
        return None

    try:
        return ClassificationResult.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        logger.warning("classifier_bad_response", error=str(exc)[:200])
        return None


async def classify_image(image_pk: int, data: bytes, content_type: str) -> None:
    """Classify an uploaded image and store the prediction on its row."""
    if not settings.classifier_url:
        logger.debug("classifier_skipped", image_pk=image_pk, reason="classifier_url not set")
        return

    async with httpx.AsyncClient() as client:
        result = await request_classification(client, data, content_type)
    if result is None:
        return

    try:
        async with get_session_factory()() as session:
            image = await record_classification(session, image_pk, result)
    except Exception:
        logger.exception("classifier_store_failed", image_pk=image_pk)
        return

    if image is None:
        logger.info("classifier_image_gone", image_pk=image_pk)
        return
    logger.info(
        "image_classified", image_pk=image_pk, tag=result.tag, confidence=result.confidence
    )
