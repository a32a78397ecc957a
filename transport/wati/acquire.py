"""
Wati Payload Acquisition

Resolves the event body of a webhook delivery.

Wati deliveries reach us through proxies that disagree on what they do
with the body: it may already be parsed, still sitting in the request
stream, or attached to the request object as bytes or text. Strategies
are tried in a fixed order and the first usable result wins:

1. Pre-parsed body
2. Drain and parse the raw stream
3. Direct body field
4. Diagnostic record describing the empty delivery

Never raises. Every delivery yields a body.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

from .request import BodyField, InboundRequest

logger = logging.getLogger(__name__)

CONTENT_TYPE_NOT_SET = "not set"


async def acquire_payload(request: InboundRequest) -> dict[str, Any]:
    """
    Resolve the event body of a delivery.

    Args:
        request: Inbound delivery, via a host adapter

    Returns:
        The decoded body, ``{"rawData": text}`` for non-JSON content,
        or a diagnostic record when nothing could be recovered.
    """

    body = _from_parsed_body(request)
    if body is not None:
        return body

    body = await _from_raw_stream(request)
    if body is not None:
        return body

    body = _from_direct_body_field(request)
    if body is not None:
        logger.debug("Webhook body recovered from direct body field")
        return body

    return _diagnostic_body(request)


# ============================================================================
# STRATEGIES
# ============================================================================

def _from_parsed_body(request: InboundRequest) -> Optional[dict[str, Any]]:
    try:
        parsed = request.get_parsed_body()
    except Exception as e:
        logger.debug(f"Parsed body unavailable: {e}")
        return None

    # Buffers are handled by the raw strategies
    if isinstance(parsed, (bytes, bytearray, str)):
        return None
    if isinstance(parsed, Mapping) and parsed:
        return dict(parsed)
    return None


async def _from_raw_stream(request: InboundRequest) -> Optional[dict[str, Any]]:
    try:
        raw = await request.get_raw_bytes()
    except Exception as e:
        # Already consumed, client disconnected, ...
        logger.debug(f"Raw request stream unavailable: {e}")
        return None

    return _decode(raw)


def _from_direct_body_field(request: InboundRequest) -> Optional[dict[str, Any]]:
    try:
        raw = request.get_direct_body_field()
    except Exception as e:
        logger.debug(f"Direct body field unavailable: {e}")
        return None

    return _decode(raw)


def _diagnostic_body(request: InboundRequest) -> dict[str, Any]:
    headers = _safe_call(request.get_headers, {})
    content_type = headers.get("content-type") if headers else None
    method = _safe_call(request.get_method, "")
    query = _safe_call(request.get_query, {})

    logger.warning(
        "Webhook received with empty body",
        extra={"content_type": content_type, "method": method},
    )

    return {
        "_webhookReceived": True,
        "_bodyEmpty": True,
        "_contentType": content_type or CONTENT_TYPE_NOT_SET,
        "_method": method,
        "_query": dict(query or {}),
    }


# ============================================================================
# DECODING
# ============================================================================

def _decode(raw: BodyField) -> Optional[dict[str, Any]]:
    """
    Decode raw content into a body.

    Returns None when there is nothing usable (no content, zero-length
    content, or an empty JSON object).
    """

    if raw is None:
        return None
    if isinstance(raw, (bytes, bytearray)):
        text = bytes(raw).decode("utf-8", errors="replace")
    elif isinstance(raw, str):
        text = raw
    else:
        return None

    if not text:
        return None

    try:
        decoded = json.loads(text)
    except ValueError:
        return {"rawData": text}

    if isinstance(decoded, dict):
        return decoded or None

    # Arrays and scalars are not event objects
    return {"rawData": text}


def _safe_call(getter, default):
    try:
        return getter()
    except Exception:
        logger.debug("Request accessor failed", exc_info=True)
        return default
