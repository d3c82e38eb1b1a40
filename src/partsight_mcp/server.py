"""PartSight MCP Server - Identify electronic components from vision analysis output."""

import base64
import binascii
import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from . import __version__
from .config import (
    HTTP_PORT,
    MAX_DETECTIONS,
    MAX_IMAGE_BYTES,
    MAX_TEXT_LENGTH,
    RATE_LIMIT_REQUESTS,
    VISION_API_URL,
)
from .identify import IdentificationResult, generate_identification_summary, interpret_detections
from .vision import ImageSource, VisionAPIError, VisionClient

logger = logging.getLogger(__name__)

# Global state
_vision_client: VisionClient | None = None

MALFORMED_DETECTION_ERROR = (
    "Malformed detection. Labels need Name and Confidence; "
    "text detections need DetectedText, Confidence and Type."
)


@asynccontextmanager
async def lifespan(app):
    """Create the vision client on startup if a vision service is configured."""
    global _vision_client
    if VISION_API_URL:
        _vision_client = VisionClient()
        logger.info(f"Vision client initialized ({VISION_API_URL})")
    else:
        logger.info("VISION_API_URL not set, image identification disabled")

    yield

    if _vision_client:
        await _vision_client.close()
        _vision_client = None


mcp = FastMCP(
    name="partsight",
    instructions="Electronic component identification. Pass object labels and detected text from a vision service to identify_component, or an image reference to identify_component_image when a vision service is configured. Returns the most likely component type, ranked alternatives, and extracted values (resistance, capacitance/voltage, IC part numbers).",
    lifespan=lifespan,
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding one-minute request window per client IP.

    Memory is bounded by MAX_TRACKED_IPS: stale IPs are swept once a minute,
    or early when a new IP arrives at the cap. New IPs are refused while the
    table is still full after the sweep.
    """

    MAX_TRACKED_IPS = 10_000

    def __init__(self, app, requests_per_minute: int = RATE_LIMIT_REQUESTS):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.request_counts: dict[str, list[float]] = {}
        self._last_cleanup = time.time()

    def _get_client_ip(self, request) -> str:
        """Rightmost X-Forwarded-For entry (set by our proxy), else the peer address."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            ips = [ip.strip() for ip in forwarded.split(",")]
            return ips[-1] if ips else "unknown"
        return request.client.host if request.client else "unknown"

    def _cleanup_stale_ips(self, now: float) -> None:
        window_start = now - 60
        for ip in [ip for ip, stamps in self.request_counts.items() if not stamps or stamps[-1] < window_start]:
            del self.request_counts[ip]

    def _check_rate_limit(self, client_ip: str) -> bool:
        """Record a request and return True if client_ip is over the limit."""
        now = time.time()
        is_new = client_ip not in self.request_counts
        if now - self._last_cleanup > 60 or (is_new and len(self.request_counts) >= self.MAX_TRACKED_IPS):
            self._cleanup_stale_ips(now)
            self._last_cleanup = now
            if is_new and len(self.request_counts) >= self.MAX_TRACKED_IPS:
                return True

        stamps = [t for t in self.request_counts.get(client_ip, []) if t > now - 60]
        limited = len(stamps) >= self.requests_per_minute
        if not limited:
            stamps.append(now)
        self.request_counts[client_ip] = stamps
        return limited

    async def dispatch(self, request, call_next):
        if request.url.path == "/health":
            return await call_next(request)

        if self._check_rate_limit(self._get_client_ip(request)):
            return JSONResponse(
                status_code=429,
                content={"error": "Rate limit exceeded", "retry_after": 60},
                headers={"Retry-After": "60"},
            )
        return await call_next(request)


def _parse_detections_param(value: list[dict[str, Any]] | str | None) -> list[dict[str, Any]] | None:
    """Accept a list of dicts, or the same list serialized as a JSON string.

    Some MCP clients send array parameters as JSON strings. Returns None when
    the value is neither.
    """
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            logger.debug(f"Failed to parse detections parameter as JSON: {value[:100]!r}")
            return None
    if isinstance(value, list) and all(isinstance(item, dict) for item in value):
        return value
    return None


def _has_oversized_text(items: list[dict[str, Any]]) -> bool:
    return any(isinstance(v, str) and len(v) > MAX_TEXT_LENGTH for item in items for v in item.values())


def _format_result(result: IdentificationResult, include_summary: bool) -> dict[str, Any]:
    data = result.to_dict()
    if include_summary:
        data["summary"] = generate_identification_summary(result)
    return data


# Tools

async def identify_component(
    labels: list[dict[str, Any]] | str | None = None,
    text_detections: list[dict[str, Any]] | str | None = None,
    include_summary: bool = True,
) -> dict:
    """Identify an electronic component from vision labels and detected text.

    Args:
        labels: Object labels, e.g. [{"Name": "Resistor", "Confidence": 97.2}].
            Apply any minimum-confidence cut before calling; none is applied here.
        text_detections: Text detections, e.g.
            [{"DetectedText": "10K", "Confidence": 99.1, "Type": "LINE"}].
            Only LINE entries are used; WORD entries are ignored.
        include_summary: Add a human-readable "summary" field (default True)

    Returns:
        type, confidence, possible_types (ranked), detected_labels, detected_text,
        analysis ({"resistor": ...}, {"capacitor": ...} or {"ic": ...}), summary.
        Unrecognized input gives type "unknown" with confidence 0.
    """
    parsed_labels = _parse_detections_param(labels)
    parsed_text = _parse_detections_param(text_detections)
    if parsed_labels is None:
        return {"error": "labels must be a list of objects with Name and Confidence"}
    if parsed_text is None:
        return {"error": "text_detections must be a list of objects with DetectedText, Confidence and Type"}
    if len(parsed_labels) > MAX_DETECTIONS or len(parsed_text) > MAX_DETECTIONS:
        return {"error": f"Too many detections (max {MAX_DETECTIONS} labels and {MAX_DETECTIONS} text detections)"}
    if _has_oversized_text(parsed_labels) or _has_oversized_text(parsed_text):
        return {"error": f"Detection text too long (max {MAX_TEXT_LENGTH} characters)"}

    try:
        result = interpret_detections(parsed_labels, parsed_text)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.info(f"Rejected malformed detections: {type(e).__name__}: {e}")
        return {"error": MALFORMED_DETECTION_ERROR}

    return _format_result(result, include_summary)


async def identify_component_image(
    bucket: str | None = None,
    key: str | None = None,
    image_base64: str | None = None,
    include_summary: bool = True,
) -> dict:
    """Identify an electronic component from an image via the vision service.

    Args:
        bucket: Storage bucket holding the image (use with key)
        key: Object key of the image in bucket
        image_base64: Base64-encoded image bytes (used when bucket/key not given)
        include_summary: Add a human-readable "summary" field (default True)

    One of bucket+key or image_base64 must be provided.

    Returns:
        Same shape as identify_component.
    """
    if not _vision_client:
        return {"error": "Vision service not configured. Set VISION_API_URL to enable image identification."}

    data = None
    if not (bucket and key):
        if not image_base64:
            return {"error": "Must provide either bucket and key, or image_base64"}
        try:
            data = base64.b64decode(image_base64, validate=True)
        except (binascii.Error, ValueError):
            return {"error": "image_base64 is not valid base64"}
        if len(data) > MAX_IMAGE_BYTES:
            return {"error": f"Image too large (max {MAX_IMAGE_BYTES} bytes)"}

    try:
        result = await _vision_client.analyze_component(ImageSource(bucket=bucket, key=key, data=data))
    except ValueError as e:
        return {"error": str(e)}
    except VisionAPIError as e:
        logger.error(f"Vision analysis failed: {e}")
        return {"error": "Vision analysis failed. Check server logs for details."}
    except Exception as e:
        logger.error(f"Component identification failed: {type(e).__name__}: {e}")
        return {"error": "Component identification failed. Check server logs for details."}

    return _format_result(result, include_summary)


# Registered without rebinding; the module names stay plain coroutines
mcp.tool(
    annotations=ToolAnnotations(
        title="Identify Component (Detections)",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)(identify_component)

mcp.tool(
    annotations=ToolAnnotations(
        title="Identify Component (Image)",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    )
)(identify_component_image)


# Health check endpoint
async def health(request):
    return JSONResponse({
        "status": "healthy",
        "service": "partsight-mcp",
        "version": __version__,
        "vision_enabled": bool(VISION_API_URL),
    })


def create_app():
    """Create the ASGI application."""
    middleware = [
        Middleware(RateLimitMiddleware, requests_per_minute=RATE_LIMIT_REQUESTS),
    ]

    # stateless_http=True: clients do not reliably forward session cookies
    app = mcp.http_app(
        path="/mcp",
        middleware=middleware,
        transport="streamable-http",
        stateless_http=True,
    )
    app.routes.append(Route("/health", health))
    return app


app = create_app()


class _HealthFilterLog(logging.Filter):
    """Suppress /health access logs from container healthchecks."""

    def filter(self, record: logging.LogRecord) -> bool:
        return "/health" not in record.getMessage()


def main():
    """Run the server."""
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("uvicorn.access").addFilter(_HealthFilterLog())

    uvicorn.run(
        "partsight_mcp.server:app",
        host="0.0.0.0",
        port=HTTP_PORT,
        lifespan="on",
    )


if __name__ == "__main__":
    main()
