"""Gong request signing."""

import base64
import hashlib
import hmac
import json
from typing import Any


def serialize_payload(payload: Any) -> str:
    """Serialize a request body or query mapping the way it is signed and sent.

    ``None`` serializes to the empty string; anything else to compact JSON.
    """
    if payload is None:
        return ""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def sign_request(
    method: str,
    path: str,
    timestamp: str,
    payload: Any,
    secret: str,
) -> str:
    """Return the base64 HMAC-SHA256 signature for a Gong request.

    The signed string is ``METHOD\\nPATH\\nTIMESTAMP\\nPAYLOAD`` where
    PAYLOAD is :func:`serialize_payload` of the body (or the query
    parameters for reads).
    """
    string_to_sign = f"{method}\n{path}\n{timestamp}\n{serialize_payload(payload)}"
    digest = hmac.new(
        secret.encode("utf-8"), string_to_sign.encode("utf-8"), hashlib.sha256
    ).digest()
    return base64.b64encode(digest).decode("ascii")
