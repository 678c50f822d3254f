"""
Random code and identifier generators — pure, side-effect-free functions.

All generators use cryptographically secure sources.
"""

from __future__ import annotations

import secrets
import uuid

OTP_MIN = 100000
OTP_MAX = 999999


def generate_otp_code() -> str:
    """Generate a 6-digit OTP drawn uniformly from [100000, 999999]."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def generate_id() -> str:
    """Generate a random UUID4 string for record primary keys."""
    return str(uuid.uuid4())
