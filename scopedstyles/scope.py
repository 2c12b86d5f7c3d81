"""Scope class names appended to selectors."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _seed_bytes_from_u64(state: int) -> bytes:
    mul = 6364136223846793005
    inc = 11634580027462260723
    out = bytearray()
    for _ in range(8):
        state = (state * mul + inc) & _MASK64
        xorshifted = (((state >> 18) ^ state) >> 27) & _MASK32
        rot = state >> 59
        word = ((xorshifted >> rot) | (xorshifted << ((32 - rot) & 31))) & _MASK32
        out += word.to_bytes(4, "little")
    return bytes(out)


def _rotl(value: int, count: int) -> int:
    return ((value << count) | (value >> (32 - count))) & _MASK32


def _chacha8_first_word(key: bytes) -> int:
    constants = [0x61707865, 0x3320646E, 0x79622D32, 0x6B206574]
    key_words = [int.from_bytes(key[i:i + 4], "little") for i in range(0, 32, 4)]
    state = constants + key_words + [0, 0, 0, 0]
    x = list(state)

    def quarter(a: int, b: int, c: int, d: int) -> None:
        x[a] = (x[a] + x[b]) & _MASK32
        x[d] = _rotl(x[d] ^ x[a], 16)
        x[c] = (x[c] + x[d]) & _MASK32
        x[b] = _rotl(x[b] ^ x[c], 12)
        x[a] = (x[a] + x[b]) & _MASK32
        x[d] = _rotl(x[d] ^ x[a], 8)
        x[c] = (x[c] + x[d]) & _MASK32
        x[b] = _rotl(x[b] ^ x[c], 7)

    for _ in range(4):
        quarter(0, 4, 8, 12)
        quarter(1, 5, 9, 13)
        quarter(2, 6, 10, 14)
        quarter(3, 7, 11, 15)
        quarter(0, 5, 10, 15)
        quarter(1, 6, 11, 12)
        quarter(2, 7, 8, 13)
        quarter(3, 4, 9, 14)
    return (x[0] + state[0]) & _MASK32


def _prefixed(number: int) -> str:
    digits = str(number)
    if len(digits) < 6:
        raise ValueError(f"value {digits} too short to form a class name")
    return f"l-{digits[:6]}"


@dataclass(frozen=True)
class Scope:
    """A class name used to scope CSS selectors."""

    value: str

    @staticmethod
    def random() -> "Scope":
        """Return a scope with an unpredictable name."""
        while True:
            number = _random.getrandbits(64)
            if number >= 100000:
                return Scope(_prefixed(number))

    @staticmethod
    def from_seed(content: str) -> "Scope":
        """Return a scope derived from the count of non-whitespace characters."""
        count = sum(1 for ch in content if not ch.isspace())
        word = _chacha8_first_word(_seed_bytes_from_u64(count))
        signed = word - (1 << 32) if word & 0x80000000 else word
        return Scope(_prefixed(signed))

    def name(self) -> str:
        return self.value

    def selector(self) -> str:
        return f".{self.value}"