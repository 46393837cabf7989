"""HMAC-SHA256 signatures in the ``X-Hub-Signature-256`` format."""

from __future__ import annotations

import hashlib
import hmac

from alert_relay.core.errors import SignatureError

SIGNATURE_HEADER = "x-hub-signature-256"
SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, body: bytes) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: str | None, body: bytes, signature: str | None) -> None:
    """Raise ``SignatureError`` unless ``signature`` matches the body's HMAC.

    A missing signature or a missing secret is reported as ``Unauthorized``;
    a present but wrong signature as ``Signature mismatch``.
    """
    if not signature or not secret:
        raise SignatureError("Unauthorized")

    expected = compute_signature(secret, body)
    if not hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8")):
        raise SignatureError("Signature mismatch")
