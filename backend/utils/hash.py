from passlib.context import CryptContext

from config.constants import MAX_BCRYPT_BYTES
from config.env import BCRYPT_ROUNDS

# bcrypt configuration
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """
    Hash a password safely using bcrypt.
    Enforces bcrypt 72-byte limit.
    """
    if len(password.encode("utf-8")) > MAX_BCRYPT_BYTES:
        raise ValueError("Password too long (max 72 bytes)")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify password safely.
    Unreadable stored digests count as a mismatch; backend failures propagate.
    """
    if len(plain_password.encode("utf-8")) > MAX_BCRYPT_BYTES:
        return False
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def dummy_verify() -> None:
    """Spend one verification so unknown accounts cost the same as wrong passwords."""
    pwd_context.dummy_verify()
