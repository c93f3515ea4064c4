"""Deterministic xorshift32 generator seeded from a combined-seed digest.

Not a cryptographic generator: unpredictability comes from the secret server
seed, reproducibility from the fixed recurrence below.
"""
from plinko_api.services.errors import ValidationError

UINT32_MASK = 0xFFFFFFFF
UINT32_SCALE = float(1 << 32)

# xorshift32 never leaves a zero state, so a zero seed is remapped.
ZERO_STATE_REPLACEMENT = 0xA5366B4D


def seed_from_hex(seed_hex: str) -> int:
    """First 4 digest bytes as a big-endian unsigned 32-bit integer."""
    try:
        head = bytes.fromhex(seed_hex[:8])
    except (TypeError, ValueError):
        raise ValidationError("combined_seed", "expected a hex digest") from None
    if len(head) != 4:
        raise ValidationError("combined_seed", "digest shorter than 4 bytes")
    return int.from_bytes(head, "big")


class XorShift32:
    """One generator per round evaluation; never shared between rounds."""

    def __init__(self, state: int):
        state &= UINT32_MASK
        if state == 0:
            state = ZERO_STATE_REPLACEMENT
        self._state = state

    @classmethod
    def from_seed_hex(cls, seed_hex: str) -> "XorShift32":
        return cls(seed_from_hex(seed_hex))

    @property
    def state(self) -> int:
        return self._state

    def next_u32(self) -> int:
        x = self._state
        x ^= (x << 13) & UINT32_MASK
        x ^= x >> 17
        x ^= (x << 5) & UINT32_MASK
        self._state = x
        return x

    def next(self) -> float:
        """Advance the state and return it scaled to [0, 1)."""
        return self.next_u32() / UINT32_SCALE
