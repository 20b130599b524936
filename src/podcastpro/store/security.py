"""Password hashing with scrypt.

Hashes are self-describing strings so parameters can change later without
invalidating stored credentials::

    scrypt$<n>$<r>$<p>$<salt b64>$<hash b64>

Hashes migrated from legacy data are stored as ``legacy$h_<base36>`` and
replaced by a scrypt hash the first time the password is verified.
"""

import base64
import hmac
import secrets

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

SCHEME = "scrypt"
SALT_BYTES = 16
KEY_LENGTH = 32
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1

# Stored for accounts whose credential is unknown; never matches any password
UNUSABLE_PASSWORD = "!"

# Prefix for hashes carried over from legacy data; upgraded to scrypt on login
LEGACY_PREFIX = "legacy$"


def _b64encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _b64decode(text: str) -> bytes:
    return base64.b64decode(text.encode("ascii"))


def hash_password(password: str) -> str:
    """Hash a password with a random salt.

    Args:
        password: Plaintext password

    Returns:
        Encoded hash string
    """
    salt = secrets.token_bytes(SALT_BYTES)
    kdf = Scrypt(salt=salt, length=KEY_LENGTH, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)
    digest = kdf.derive(password.encode("utf-8"))
    return "$".join(
        [SCHEME, str(SCRYPT_N), str(SCRYPT_R), str(SCRYPT_P), _b64encode(salt), _b64encode(digest)]
    )


def verify_password(password: str, encoded: str | None) -> bool:
    """Check a password against an encoded hash.

    Malformed or unusable hashes simply fail to verify.

    Args:
        password: Plaintext password to check
        encoded: Stored hash string

    Returns:
        True if the password matches
    """
    if not encoded or encoded == UNUSABLE_PASSWORD:
        return False

    if encoded.startswith(LEGACY_PREFIX):
        expected_legacy = encoded[len(LEGACY_PREFIX) :]
        return hmac.compare_digest(
            legacy_digest(password).encode("utf-8"), expected_legacy.encode("utf-8")
        )

    parts = encoded.split("$")
    if len(parts) != 6 or parts[0] != SCHEME:
        return False

    try:
        n, r, p = int(parts[1]), int(parts[2]), int(parts[3])
        salt = _b64decode(parts[4])
        expected = _b64decode(parts[5])
    except ValueError:
        return False

    kdf = Scrypt(salt=salt, length=len(expected), n=n, r=r, p=p)
    try:
        kdf.verify(password.encode("utf-8"), expected)
    except InvalidKey:
        return False
    return True


def needs_rehash(encoded: str) -> bool:
    """Check if a verified hash should be replaced with a current scrypt hash."""
    if encoded.startswith(LEGACY_PREFIX):
        return True
    parts = encoded.split("$")
    return parts[0] == SCHEME and parts[1:4] != [str(SCRYPT_N), str(SCRYPT_R), str(SCRYPT_P)]


def legacy_digest(password: str) -> str:
    """Digest used by legacy browser data (``h_`` + base36 of a 32-bit rolling hash).

    Not a password hash in any real sense. It is only checked once, at the
    first login after migrating, before the credential is re-hashed.
    """
    raw = password.encode("utf-16-le")
    value = 0
    for i in range(0, len(raw), 2):
        unit = int.from_bytes(raw[i : i + 2], "little")
        value = (value * 31 + unit) & 0xFFFFFFFF

    if value >= 2**31:
        value -= 2**32
    return "h_" + _base36(abs(value))


def _base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(digits[rem])
    return "".join(reversed(out))
