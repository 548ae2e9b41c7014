"""Shared-secret HMAC check for content-mirror webhooks."""
import hashlib
import hmac
import logging
from typing import Optional

from core.domain.exceptions import InvalidSignatureError


logger = logging.getLogger(__name__)


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of the raw body."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify_mirror_signature(raw_body: bytes, signature: Optional[str], secret: Optional[str]) -> None:
    """
    Verify an `x-sanity-signature` header over the exact raw bytes.

    Without a configured secret verification is skipped (development mode).
    With a secret, a missing or different signature is rejected.

    Raises:
        InvalidSignatureError: If the signature is missing or does not match
    """
    if not secret:
        logger.warning("No webhook secret configured - skipping signature verification")
        return

    if not signature:
        raise InvalidSignatureError("Missing signature")

    expected = compute_signature(raw_body, secret)
    if not hmac.compare_digest(expected, signature.strip().lower()):
        raise InvalidSignatureError("Invalid signature")
