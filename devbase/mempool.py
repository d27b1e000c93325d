"""Pool of fixed-size byte blocks that grows when it runs dry."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field

MEM_POOL_SIZE = 1500

_log = logging.getLogger(__name__)


@dataclass(eq=False)
class Block:
    """A reusable buffer of ``size`` bytes."""

    size: int
    data: bytearray = field(init=False)

    def __post_init__(self) -> None:
        self.data = bytearray(self.size)

    def clear(self) -> None:
        self.data[:] = bytes(self.size)


class MemoryPool:
    """Hands out zeroed blocks; adds ``grow_size`` more whenever it empties."""

    def __init__(self, block_size: int, init_size: int, grow_size: int) -> None:
        if not init_size or not grow_size:
            raise ValueError("init_size and grow_size must both be non-zero")
        if block_size < 0:
            raise ValueError("block_size must not be negative")
        self.block_size = block_size
        self.init_size = init_size
        self.grow_size = grow_size
        self._free: deque[Block] = deque()
        self._created = 0
        self._lock = threading.Lock()
        self._create(init_size)

    def _create(self, count: int) -> None:
        for _ in range(count):
            self._free.append(Block(self.block_size))
            self._created += 1

    @property
    def free_count(self) -> int:
        """Blocks waiting in the pool."""
        return len(self._free)

    @property
    def total_count(self) -> int:
        """Blocks created since the pool was made."""
        return self._created

    def acquire(self) -> Block:
        """Take a block; the pool grows when this leaves it empty."""
        with self._lock:
            if not self._free:
                self._create(self.grow_size)
            block = self._free.popleft()
            if not self._free:
                self._create(self.grow_size)
                _log.debug("pool grew by %d blocks", self.grow_size)
            return block

    def release(self, block: Block) -> None:
        """Zero ``block`` and put it back."""
        block.clear()
        with self._lock:
            self._free.append(block)

    def is_empty(self) -> bool:
        return not self._free

    def destroy(self) -> int:
        """Drop every pooled block and return how many were dropped."""
        with self._lock:
            count = len(self._free)
            self._free.clear()
        if count == self._created:
            _log.info("memory pool destroyed: %d blocks", count)
        else:
            _log.warning(
                "memory pool destroyed with blocks outstanding: released %d of %d",
                count,
                self._created,
            )
        return count