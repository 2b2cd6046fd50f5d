"""Webhook signature validation (HMAC SHA-256)."""

import hashlib
import hmac


def verify_signature(raw_body: bytes, header: str | None, secret: str | None) -> bool:
    """Return true when the ``X-Hub-Signature-256`` header matches the body.

    Validation is skipped when no app secret is configured.
    """
    if not secret:
        return True
    if not header or not header.startswith("sha256="):
        return False
    expected = header.split("=", 1)[1]
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(digest, expected)
