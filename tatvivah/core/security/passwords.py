"""
bcrypt hashing for passwords and stored refresh tokens.
"""

import bcrypt

PASSWORD_ROUNDS = 12
REFRESH_TOKEN_ROUNDS = 10

# bcrypt ignores (newer releases reject) input beyond 72 bytes
_BCRYPT_MAX_BYTES = 72


def _encode(value: str) -> bytes:
    return value.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def _hash(value: str, rounds: int) -> str:
    return bcrypt.hashpw(_encode(value), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def _compare(value: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_encode(value), hashed.encode("utf-8"))
    except ValueError:
        return False


def hash_password(password: str) -> str:
    return _hash(password, PASSWORD_ROUNDS)


def compare_password(password: str, hashed: str) -> bool:
    return _compare(password, hashed)


def hash_refresh_token(token: str) -> str:
    """Hash a refresh token before it is stored on a login session.

    Every JWT signed with the same header shares its leading bytes, so only
    the signature segment is fed to bcrypt.
    """
    return _hash(_token_fingerprint(token), REFRESH_TOKEN_ROUNDS)


def compare_refresh_token(token: str, hashed: str) -> bool:
    return _compare(_token_fingerprint(token), hashed)


def _token_fingerprint(token: str) -> str:
    return token.rsplit(".", 1)[-1]
