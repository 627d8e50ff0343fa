"""Webhook signature: hex HMAC-SHA256 over the raw request body.

The gateway may send the hex digest in either case; comparison is
case-insensitive and constant-time.
"""

import hashlib
import hmac


def compute_signature(raw_body: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), raw_body, hashlib.sha256).hexdigest()


def verify_signature(raw_body: bytes, signature: str, secret: str | None) -> bool:
    if not signature or not secret:
        return False
    expected = compute_signature(raw_body, secret)
    return hmac.compare_digest(signature.strip().lower(), expected.lower())
