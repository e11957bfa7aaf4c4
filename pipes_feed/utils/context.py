"""
Request context token decoding

The player sends a ``ctx`` query parameter: a base64url encoded JSON object
carrying values such as ``timeZoneOffset`` and ``userToken``.
"""
import base64
import binascii
import json
import logging

logger = logging.getLogger(__name__)


def parse_context(ctx: str | None, log_error: bool = True) -> dict:
    """
    Decode a ctx token

    Args:
        ctx: base64url encoded JSON object (padding optional)
        log_error: Log decoding failures

    Returns:
        The decoded object, or an empty dict when ctx is absent or malformed
    """
    if not ctx:
        return {}

    try:
        padded = ctx + "=" * (-len(ctx) % 4)
        decoded = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError) as e:
        if log_error:
            logger.warning(f"Could not decode ctx token: {e}")
        return {}

    if not isinstance(decoded, dict):
        if log_error:
            logger.warning("ctx token does not contain a JSON object")
        return {}

    return decoded


def encode_context(payload: dict) -> str:
    """Encode a ctx token (unpadded base64url)"""
    raw = base64.urlsafe_b64encode(json.dumps(payload).encode("utf-8"))
    return raw.decode("ascii").rstrip("=")
