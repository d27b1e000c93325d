import threading

import pytest

from devbase.mempool import Block, MemoryPool


def test_rejects_zero_sizes():
    with pytest.raises(ValueError):
        MemoryPool(100, 0, 2)
    with pytest.raises(ValueError):
        MemoryPool(100, 2, 0)


def test_initial_blocks():
    pool = MemoryPool(100, 2, 2)
    assert pool.free_count == 2
    assert pool.total_count == 2
    assert not pool.is_empty()


def test_acquired_block_is_zeroed_and_sized():
    pool = MemoryPool(100, 2, 2)
    block = pool.acquire()
    assert block.size == 100
    assert block.data == bytearray(100)


def test_pool_grows_and_never_empties():
    pool = MemoryPool(100, 2, 2)
    taken = [pool.acquire() for _ in range(5)]
    assert not pool.is_empty()
    assert pool.free_count + len(taken) == pool.total_count
    assert len({id(b) for b in taken}) == len(taken)


def test_release_zeroes_and_returns():
    pool = MemoryPool(20, 2, 2)
    block = pool.acquire()
    block.data[:10] = b"test pool "
    before = pool.free_count
    pool.release(block)
    assert block.data == bytearray(20)
    assert pool.free_count == before + 1


def test_destroy_counts_free_blocks():
    pool = MemoryPool(10, 3, 2)
    block = pool.acquire()
    pool.release(block)
    free = pool.free_count
    assert pool.destroy() == free
    assert pool.is_empty()


def test_block_clear():
    block = Block(4)
    block.data[:] = b"abcd"
    block.clear()
    assert block.data == bytearray(4)


def test_concurrent_use_keeps_count():
    pool = MemoryPool(8, 2, 2)

    def worker():
        for _ in range(100):
            b = pool.acquire()
            b.data[:3] = b"xyz"
            pool.release(b)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert pool.free_count == pool.total_count