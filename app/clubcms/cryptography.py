import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_secret(secret: str) -> str:
    if not secret:
        raise ValueError("secret_blank")
    return _pwd.hash(secret)


def verify_secret(plain_secret, hashed_secret) -> bool:
    if not plain_secret or not hashed_secret:
        return False
    try:
        return _pwd.verify(plain_secret, hashed_secret)
    except ValueError as e:
        # Unknown or corrupted hash format in configuration.
        logger.error("Could not verify admin secret: %s", e)
        return False
