"""
Password derivation for stored credentials.

Hashes are PBKDF2-HMAC-SHA512 keyed by a salt derived from the username, so a
stored hash can be re-verified without keeping the salt anywhere.
"""

import asyncio
import hashlib
import hmac

ITERATIONS = 10000
KEY_LENGTH = 64
DIGEST = "sha512"


def username_salt(username: str) -> bytes:
    """Lowercase hex MD5 of the username, used as the PBKDF2 salt"""
    return hashlib.md5(username.encode("utf-8")).hexdigest().encode("ascii")


def derive(username: str, password: str) -> str:
    """Derive the hex-encoded hash for a username/password pair (blocking)"""
    derived_key = hashlib.pbkdf2_hmac(
        DIGEST,
        password.encode("utf-8"),
        username_salt(username),
        ITERATIONS,
        dklen=KEY_LENGTH,
    )
    return derived_key.hex()


async def derive_async(username: str, password: str) -> str:
    """Derive the hash without blocking the event loop"""
    return await asyncio.to_thread(derive, username, password)


def verify(username: str, password: str, password_hash: str) -> bool:
    """Check a password against a stored hash in constant time"""
    return hmac.compare_digest(derive(username, password), password_hash)
