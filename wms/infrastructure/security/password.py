"""bcrypt password hashing"""
import bcrypt

from wms.infrastructure.config.settings import get_settings

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    return encoded


def get_password_hash(password: str) -> str:
    """Salted bcrypt hash at the configured cost; hashing the same input twice differs"""
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("ascii")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time check; malformed hashes and over-long input simply fail"""
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("ascii"))
    except ValueError:
        return False


def needs_rehash(hashed_password: str) -> bool:
    """True when the hash was made with a cost other than BCRYPT_ROUNDS"""
    # Modular crypt format: $2b$<cost>$<salt+digest>
    parts = hashed_password.split("$")
    if len(parts) != 4 or not parts[2].isdigit():
        return True
    return int(parts[2]) != get_settings().bcrypt_rounds
