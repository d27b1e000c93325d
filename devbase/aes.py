"""AES-128 block cipher and the zero-padded buffer helpers built on it."""

from __future__ import annotations

BLOCK_SIZE = 16
KEY_SIZE = 16
_ROUNDS = 10

DEFAULT_KEY = bytes(
    [88, 126, 21, 22, 40, 174, 21, 16, 71, 247, 21, 16, 9, 27, 79, 60]
)

_RCON = (0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80, 0x1B, 0x36)


def _xtime(value: int) -> int:
    value <<= 1
    return value ^ 0x11B if value & 0x100 else value


def _gmul(a: int, b: int) -> int:
    result = 0
    while b:
        if b & 1:
            result ^= a
        a = _xtime(a)
        b >>= 1
    return result


def _rotl8(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (8 - shift))) & 0xFF


def _build_sbox() -> bytes:
    exp = []
    value = 1
    for _ in range(255):
        exp.append(value)
        value ^= _xtime(value)  # multiply by the generator 3
    log = {element: power for power, element in enumerate(exp)}

    def substitute(x: int) -> int:
        inverse = 0 if x == 0 else exp[(255 - log[x]) % 255]
        return (
            inverse
            ^ _rotl8(inverse, 1)
            ^ _rotl8(inverse, 2)
            ^ _rotl8(inverse, 3)
            ^ _rotl8(inverse, 4)
            ^ 0x63
        )

    return bytes(substitute(x) for x in range(256))


_SBOX = _build_sbox()
_INV_SBOX = bytes(
    index for _, index in sorted((s, i) for i, s in enumerate(_SBOX))
)
_MUL = {n: bytes(_gmul(x, n) for x in range(256)) for n in (2, 3, 9, 11, 13, 14)}


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def _sub_bytes(state: bytes, box: bytes) -> bytes:
    return bytes(box[b] for b in state)


def _shift_rows(state: bytes) -> bytes:
    return bytes(state[((c + r) % 4) * 4 + r] for c in range(4) for r in range(4))


def _inv_shift_rows(state: bytes) -> bytes:
    return bytes(state[((c - r) % 4) * 4 + r] for c in range(4) for r in range(4))


def _mix(state: bytes, coefficients: tuple[int, int, int, int]) -> bytes:
    tables = [_MUL[n] if n != 1 else None for n in coefficients]

    def mul(table, value):
        return value if table is None else table[value]

    out = bytearray()
    for c in range(0, 16, 4):
        column = state[c : c + 4]
        for row in range(4):
            acc = 0
            for k, value in enumerate(column):
                acc ^= mul(tables[(k - row) % 4], value)
            out.append(acc)
    return bytes(out)


def _mix_columns(state: bytes) -> bytes:
    return _mix(state, (2, 3, 1, 1))


def _inv_mix_columns(state: bytes) -> bytes:
    return _mix(state, (14, 11, 13, 9))


class Aes128:
    """AES with a 128-bit key, working on single blocks or zero-padded buffers."""

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != KEY_SIZE:
            raise ValueError(f"AES-128 key must be {KEY_SIZE} bytes, got {len(key)}")
        self._round_keys = self._expand_key(key)

    @staticmethod
    def _expand_key(key: bytes) -> list[bytes]:
        words = [list(key[i : i + 4]) for i in range(0, KEY_SIZE, 4)]
        for rcon in _RCON:
            last = words[-1]
            temp = [_SBOX[b] for b in last[1:] + last[:1]]
            temp[0] ^= rcon
            for _ in range(4):
                temp = [a ^ b for a, b in zip(words[-4], temp)]
                words.append(temp)
        return [
            bytes(b for word in words[r * 4 : r * 4 + 4] for b in word)
            for r in range(_ROUNDS + 1)
        ]

    @staticmethod
    def _check_block(block: bytes) -> bytes:
        block = bytes(block)
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")
        return block

    def encrypt_block(self, block: bytes) -> bytes:
        """Encrypt one 16-byte block."""
        keys = self._round_keys
        state = _xor(self._check_block(block), keys[0])
        for round_key in keys[1:_ROUNDS]:
            state = _mix_columns(_shift_rows(_sub_bytes(state, _SBOX)))
            state = _xor(state, round_key)
        return _xor(_shift_rows(_sub_bytes(state, _SBOX)), keys[_ROUNDS])

    def decrypt_block(self, block: bytes) -> bytes:
        """Decrypt one 16-byte block."""
        keys = self._round_keys
        state = _xor(self._check_block(block), keys[_ROUNDS])
        for round_key in reversed(keys[1:_ROUNDS]):
            state = _sub_bytes(_inv_shift_rows(state), _INV_SBOX)
            state = _inv_mix_columns(_xor(state, round_key))
        return _xor(_sub_bytes(_inv_shift_rows(state), _INV_SBOX), keys[0])

    @staticmethod
    def _blocks(data: bytes):
        data = bytes(data)
        for start in range(0, len(data), BLOCK_SIZE):
            yield data[start : start + BLOCK_SIZE].ljust(BLOCK_SIZE, b"\0")

    def encrypt(self, data: bytes) -> bytes:
        """Encrypt block by block; a short last block is padded with zero bytes."""
        return b"".join(self.encrypt_block(block) for block in self._blocks(data))

    def decrypt(self, data: bytes) -> bytes:
        """Decrypt block by block; a short last block is padded with zero bytes."""
        return b"".join(self.decrypt_block(block) for block in self._blocks(data))


_cipher_key: bytes = DEFAULT_KEY


def set_key(key: str | bytes) -> None:
    """Overwrite the shared key with at most 15 bytes of text and a NUL.

    Bytes past the terminating NUL keep their previous values.
    """
    raw = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    raw = raw.split(b"\0", 1)[0][: KEY_SIZE - 1] + b"\0"
    global _cipher_key
    updated = bytearray(_cipher_key)
    updated[: len(raw)] = raw
    _cipher_key = bytes(updated)


def get_key() -> bytes:
    """Return the 16-byte key used by encrypt() and decrypt()."""
    return _cipher_key


def encrypt(data: bytes) -> bytes:
    """Encrypt with the shared key; output length is rounded up to 16 bytes."""
    return Aes128(_cipher_key).encrypt(data)


def decrypt(data: bytes) -> bytes:
    """Decrypt with the shared key; output length is rounded up to 16 bytes."""
    return Aes128(_cipher_key).decrypt(data)