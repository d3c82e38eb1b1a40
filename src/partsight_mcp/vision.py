"""Async client for the label/text detection vision service."""

from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .config import (
    MAX_RETRIES,
    VISION_API_KEY,
    VISION_API_URL,
    VISION_MAX_LABELS,
    VISION_MIN_CONFIDENCE,
    VISION_REQUEST_TIMEOUT,
)
from .identify import IdentificationResult, interpret_detections

logger = logging.getLogger(__name__)


class VisionAPIError(Exception):
    """Vision service rejected the request or returned an unusable body."""

    def __init__(self, status_code: int | None, message: str):
        self.status_code = status_code
        super().__init__(f"Vision API error [{status_code}]: {message}" if status_code else f"Vision API error: {message}")


@dataclass(frozen=True)
class ImageSource:
    """Either an object in a bucket or inline image bytes."""
    bucket: str | None = None
    key: str | None = None
    data: bytes | None = None


def build_image_param(source: ImageSource) -> dict[str, Any]:
    """Build the "Image" request field. Bucket objects take precedence over bytes."""
    if source.bucket and source.key:
        return {"S3Object": {"Bucket": source.bucket, "Name": source.key}}
    if source.data:
        return {"Bytes": base64.b64encode(source.data).decode("ascii")}
    raise ValueError("Invalid image source. Provide either S3 object or bytes.")


class VisionClient:
    """Fetches labels and text for an image; identification happens locally."""

    def __init__(
        self,
        base_url: str = VISION_API_URL,
        api_key: str = VISION_API_KEY,
        min_confidence: float = VISION_MIN_CONFIDENCE,
        max_labels: int = VISION_MAX_LABELS,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self.min_confidence = min_confidence
        self.max_labels = max_labels
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._client = httpx.AsyncClient(timeout=VISION_REQUEST_TIMEOUT, headers=headers)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST with retries on network errors and 5xx. 4xx is not retried."""
        url = f"{self._base_url}{path}"
        last_error: Exception | None = None

        for attempt in range(MAX_RETRIES):
            try:
                response = await self._get_client().post(url, json=body)
            except httpx.HTTPError as e:
                last_error = e
                logger.warning(f"Vision request {path} failed (attempt {attempt + 1}): {type(e).__name__}")
            else:
                if response.status_code < 400:
                    try:
                        data = response.json()
                    except ValueError:
                        raise VisionAPIError(response.status_code, "response is not JSON")
                    if not isinstance(data, dict):
                        raise VisionAPIError(response.status_code, "unexpected response body")
                    return data
                if response.status_code < 500:
                    raise VisionAPIError(response.status_code, f"request to {path} rejected")
                last_error = VisionAPIError(response.status_code, f"server error on {path}")
                logger.warning(f"Vision request {path} returned HTTP {response.status_code} (attempt {attempt + 1})")

            if attempt < MAX_RETRIES - 1:
                await asyncio.sleep(0.5 * (2 ** attempt))  # Exponential backoff

        logger.warning(f"Vision request {path} failed after {MAX_RETRIES} attempts: {last_error}")
        raise VisionAPIError(None, f"{path} failed after {MAX_RETRIES} attempts")

    async def detect_labels(self, source: ImageSource) -> list[dict[str, Any]]:
        """Object labels at or above min_confidence, at most max_labels."""
        data = await self._post("/detect-labels", {
            "Image": build_image_param(source),
            "MinConfidence": self.min_confidence,
            "MaxLabels": self.max_labels,
        })
        return data.get("Labels") or []

    async def detect_text(self, source: ImageSource) -> list[dict[str, Any]]:
        """Text detections at both LINE and WORD granularity."""
        data = await self._post("/detect-text", {"Image": build_image_param(source)})
        return data.get("TextDetections") or []

    async def analyze_component(self, source: ImageSource) -> IdentificationResult:
        """Fetch labels and text concurrently, then identify the component.

        Raises:
            ValueError: If source has neither a bucket object nor bytes
            VisionAPIError: If either detection call fails
        """
        build_image_param(source)  # Validate before issuing any request
        labels, text = await asyncio.gather(
            self.detect_labels(source),
            self.detect_text(source),
        )
        logger.debug(f"Vision returned {len(labels)} labels, {len(text)} text detections")
        return interpret_detections(labels, text)
