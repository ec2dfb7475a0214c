"""
Fiat-Shamir transcript over SHA3.

Folding challenges are squeezed from a hash chain that has absorbed the
public parameters and every Merkle root committed so far, so prover and
verifier derive the same challenges from the same commitments.
"""
import hashlib
from typing import Iterable

from .field import FieldElement, byte_length

# Extra bytes squeezed beyond the modulus width so reduction bias is < 2^-128
_SQUEEZE_MARGIN = 16


class Transcript:
    """
    Hash-chain transcript.

    Attributes:
        state: Running SHA3-256 chaining value
        pending: Absorbed bytes not yet folded into state
        out_cursor: Number of squeezes since the last absorb
    """

    def __init__(self, label: bytes = b"basefold"):
        self.state = hashlib.sha3_256(b"transcript:" + bytes(label)).digest()
        self.pending = bytearray()
        self.out_cursor = 0

    def put(self, data: bytes) -> None:
        """Absorb a length-prefixed byte string."""
        data = bytes(data)
        self.pending += len(data).to_bytes(8, "big")
        self.pending += data
        self.out_cursor = 0

    def put_ints(self, values: Iterable[int]) -> None:
        """Absorb non-negative integers as length-prefixed big-endian bytes."""
        for v in values:
            v = int(v)
            self.put(v.to_bytes(max(1, (v.bit_length() + 7) // 8), "big"))

    def _update_state(self) -> None:
        self.state = hashlib.sha3_256(self.state + bytes(self.pending)).digest()
        self.pending = bytearray()

    def _squeeze(self, n_bytes: int) -> bytes:
        if self.pending:
            self._update_state()
        shake = hashlib.shake_256(self.state + self.out_cursor.to_bytes(8, "big"))
        self.out_cursor += 1
        return shake.digest(n_bytes)

    def get_field(self, modulus: int) -> FieldElement:
        """Squeeze one challenge in GF(modulus)."""
        raw = self._squeeze(byte_length(modulus) + _SQUEEZE_MARGIN)
        return FieldElement(int.from_bytes(raw, "big") % modulus, modulus)

    def get_state(self) -> bytes:
        """Current chaining value (flushes pending input)."""
        if self.pending:
            self._update_state()
        return self.state
