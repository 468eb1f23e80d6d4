"""Node hashers for rendezvous scoring.
- Type-tagged, length-prefixed serialization of item + node id
- SHA-256 default engine (first 8 digest bytes, big-endian)
- xxh3_64 alternative engine over the same byte stream
- Values may serialize themselves via write_hash(state)
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable
import hashlib
import logging
import struct

try:
    import xxhash
except ImportError as e:
    raise RuntimeError("xxhash is required. Install with: pip install xxhash") from e

log = logging.getLogger(__name__)

MAX_UINT64 = (1 << 64) - 1
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

TAG_HASH_WRITER = 1
TAG_STRING = 2
TAG_BYTES = 3
TAG_BOOL = 4
TAG_INT64 = 5
TAG_UINT64 = 6
TAG_FLOAT64 = 7
TAG_STRINGER = 8
TAG_FALLBACK = 9


class UnhashableItemError(TypeError):
    """Raised when a value has no canonical serialization."""


@runtime_checkable
class HashWriter(Protocol):
    def write_hash(self, state: Any) -> None: ...


@runtime_checkable
class NodeHasher(Protocol):
    def hash(self, node_id: Any, item: Any) -> int: ...


def _u64(v: int) -> bytes:
    return struct.pack("<Q", v & MAX_UINT64)


def _write_sized(state: Any, tag: int, payload: bytes) -> None:
    state.update(bytes((tag,)))
    state.update(_u64(len(payload)))
    state.update(payload)


def _has_own_str(v: Any) -> bool:
    return type(v).__str__ is not object.__str__


def write_hash(state: Any, v: Any, allow_fallback: bool = False) -> None:
    """Feed the canonical encoding of ``v`` into ``state``.

    ``state`` is anything with ``update(bytes)`` (hashlib / xxhash objects).
    Integers are widened to 64 bits so equal values always hash alike.
    """
    if isinstance(v, HashWriter) and not isinstance(v, type):
        state.update(bytes((TAG_HASH_WRITER,)))
        v.write_hash(state)
        return

    if isinstance(v, str):
        _write_sized(state, TAG_STRING, v.encode("utf-8", "surrogatepass"))
    elif isinstance(v, (bytes, bytearray, memoryview)):
        _write_sized(state, TAG_BYTES, bytes(v))
    elif isinstance(v, bool):
        state.update(bytes((TAG_BOOL, 1 if v else 0)))
    elif isinstance(v, int):
        if _INT64_MIN <= v <= _INT64_MAX:
            state.update(bytes((TAG_INT64,)) + _u64(v))
        elif 0 <= v <= MAX_UINT64:
            state.update(bytes((TAG_UINT64,)) + _u64(v))
        else:
            raise UnhashableItemError(f"integer {v} does not fit in 64 bits")
    elif isinstance(v, float):
        state.update(bytes((TAG_FLOAT64,)) + struct.pack("<d", v))
    elif _has_own_str(v):
        _write_sized(state, TAG_STRINGER, str(v).encode("utf-8", "surrogatepass"))
    elif allow_fallback:
        log.debug("fallback serialization for type=%s", type(v).__qualname__)
        text = f"{type(v).__qualname__}:{v!r}"
        _write_sized(state, TAG_FALLBACK, text.encode("utf-8", "surrogatepass"))
    else:
        raise UnhashableItemError(
            f"cannot hash value of type {type(v).__qualname__}; "
            "implement write_hash(state) or enable allow_fallback"
        )


class DefaultNodeHasher:
    """SHA-256 over (item, node_id); the score is the first 8 digest bytes."""
    def __init__(self, allow_fallback: bool = False):
        self.allow_fallback = allow_fallback

    def _new_state(self):
        return hashlib.sha256()

    def _digest(self, state) -> int:
        return int.from_bytes(state.digest()[:8], "big")

    def hash(self, node_id: Any, item: Any) -> int:
        state = self._new_state()
        write_hash(state, item, self.allow_fallback)
        write_hash(state, node_id, self.allow_fallback)
        return self._digest(state)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(allow_fallback={self.allow_fallback})"


class XXHashNodeHasher(DefaultNodeHasher):
    """Same encoding as DefaultNodeHasher, digested with xxh3_64."""
    def __init__(self, seed: int = 0, allow_fallback: bool = False):
        super().__init__(allow_fallback=allow_fallback)
        self.seed = seed

    def _new_state(self):
        return xxhash.xxh3_64(seed=self.seed)

    def _digest(self, state) -> int:
        return state.intdigest()

    def __repr__(self) -> str:
        return f"XXHashNodeHasher(seed={self.seed}, allow_fallback={self.allow_fallback})"
