"""Commit-reveal hashing.

The byte layout (field order, ``:`` separator, decimal nonce) is part of the
public contract: independent verifiers rebuild these strings themselves.
"""
import hashlib
import secrets

from plinko_api.services.errors import ValidationError

SERVER_SEED_BYTES = 32


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def check_seed(field: str, value) -> str:
    if not isinstance(value, str):
        raise ValidationError(field, f"expected a string, got {type(value).__name__}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationError(field, "not encodable as UTF-8") from None
    return value


def check_nonce(nonce) -> int:
    # bool is an int subclass; True would hash as "True"
    if isinstance(nonce, bool) or not isinstance(nonce, int):
        raise ValidationError("nonce", f"expected an integer, got {type(nonce).__name__}")
    if nonce < 0:
        raise ValidationError("nonce", "must be non-negative")
    return nonce


def generate_server_seed() -> str:
    """New secret server seed: 64 lowercase hex chars."""
    return secrets.token_hex(SERVER_SEED_BYTES)


def commit(server_seed: str, nonce: int) -> str:
    """Commitment published before the client seed is known."""
    check_seed("server_seed", server_seed)
    check_nonce(nonce)
    return sha256_hex(f"{server_seed}:{nonce}")


def combine(server_seed: str, client_seed: str, nonce: int) -> str:
    """Combined seed that drives every random draw of a round."""
    check_seed("server_seed", server_seed)
    check_seed("client_seed", client_seed)
    check_nonce(nonce)
    return sha256_hex(f"{server_seed}:{client_seed}:{nonce}")
