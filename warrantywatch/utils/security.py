"""Security utilities: JWT decoding for tenant resolution."""

import jwt


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> dict:
    """Decode and validate a JWT token. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, secret, algorithms=[algorithm])
