from __future__ import annotations

import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Relay-Signature-256"


def sign_body(body: bytes, secret: str) -> str:
    """Header value the gateway relay is expected to send for ``body``."""
    return "sha256=" + hmac.new(secret.encode("utf-8"), body, "sha256").hexdigest()


def verify_relay_signature(body: bytes, signature_header: str | None, secret: str | None, env: str) -> bool:
    if not signature_header or not secret:
        if env.lower() in {"dev", "local"}:
            logger.warning("Unsigned relay request; accepting in dev mode")
            return True
        if not secret:
            logger.error("Missing relay secret for signature verification")
        return False

    try:
        algo, signature = signature_header.split("=", 1)
    except ValueError:
        return False

    if algo.lower() != "sha256":
        return False

    expected = hmac.new(secret.encode("utf-8"), body, "sha256").hexdigest()
    return hmac.compare_digest(expected, signature)
