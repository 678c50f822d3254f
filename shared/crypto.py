"""
Cryptographic helpers for OTP codes.

Codes are hashed with SHA-256 before storage so the plaintext is never
persisted, and compared in constant time on verification.
"""

from __future__ import annotations

import hashlib
import hmac


def hash_otp(code: str) -> str:
    """Return the hex-encoded SHA-256 digest of *code*.

    Returns:
        64-character lowercase hex string.
    """
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def otp_matches(code: str, otp_hash: str) -> bool:
    """Return True if *code* hashes to *otp_hash* (constant-time compare)."""
    return hmac.compare_digest(hash_otp(code), otp_hash)
