"""Share password hashing. Plaintext passwords are never stored or logged."""

from passlib.context import CryptContext

from sharelink.config import PASSWORD_HASH_ROUNDS

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=PASSWORD_HASH_ROUNDS,
)


def is_hashable(password: str) -> bool:
    # bcrypt refuses NUL bytes
    return "\x00" not in password


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed hash in the database
        return False
