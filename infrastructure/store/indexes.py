"""Index setup for the users and otps collections, run once at startup."""

from __future__ import annotations

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from config import DatabaseSettings
from shared.logging import get_logger

log = get_logger(__name__)


async def ensure_indexes(db, settings: DatabaseSettings) -> None:
    """Create the indexes the service relies on.

    Failures are logged and swallowed: the service still works without them,
    only expired OTPs are not purged automatically.
    """
    otps = db[settings.otps_collection]
    users = db[settings.users_collection]
    try:
        # purgeAt mirrors expiresAt as a BSON date so MongoDB can expire it
        await otps.create_index([("purgeAt", ASCENDING)], expireAfterSeconds=0)
        await otps.create_index([("target", ASCENDING)])

        # Lookups only; identity uniqueness is not enforced on these
        await users.create_index([("mobile", ASCENDING)], sparse=True)
        await users.create_index([("email", ASCENDING)], sparse=True)
    except PyMongoError as e:
        log.error(
            "ensure_indexes_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        return

    log.info(
        "indexes_ensured",
        otps_collection=settings.otps_collection,
        users_collection=settings.users_collection,
    )
