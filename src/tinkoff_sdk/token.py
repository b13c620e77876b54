import hashlib
import hmac
from collections.abc import Mapping


def render_uint(value: int) -> str:
    return str(value)


def render_bool(value: bool) -> str:
    return "true" if value else "false"


def concatenate_values(fields: Mapping[str, str]) -> str:
    """Join the values ordered by their key, with no separator."""
    return "".join(fields[key] for key in sorted(fields))


def generate_token(fields: Mapping[str, str]) -> str:
    """
    Compute the request token: SHA-256 over the values concatenated in
    ascending key order, rendered as lowercase hex.

    The caller is expected to include ``TerminalKey`` and ``Password`` in
    ``fields``.
    """
    message = concatenate_values(fields).encode("utf-8")
    return hashlib.sha256(message).hexdigest()


def tokens_match(expected: str, received: str) -> bool:
    return hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8"))
