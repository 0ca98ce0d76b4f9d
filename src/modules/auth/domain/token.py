"""Access token inspection.

Only the ``exp`` claim is read; the signature is checked by the data service,
never locally.
"""

import jwt


def read_token_expiry(token: str) -> float | None:
    """Return the ``exp`` claim in epoch seconds, None for a malformed token."""
    if not isinstance(token, str) or token.count(".") != 2:
        return None
    try:
        payload = jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": False},
        )
    except (jwt.PyJWTError, ValueError):
        return None

    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, int | float):
        return None
    return float(exp)


def is_token_valid(token: str, now: float, margin_sec: float) -> bool:
    """A token is usable only while more than ``margin_sec`` remain before expiry."""
    expires_at = read_token_expiry(token)
    if expires_at is None:
        return False
    return expires_at - now > margin_sec
