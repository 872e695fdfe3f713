# tests/test_rwlock.py

import threading
import pytest
from kvcache.services.rwlock import ReadWriteLock

def test_readers_share_the_lock():
    lock = ReadWriteLock()
    # Both readers must be inside the read section at the same time to pass the barrier
    barrier = threading.Barrier(2, timeout=2)
    errors = []

    def reader():
        with lock.read():
            try:
                barrier.wait()
            except threading.BrokenBarrierError as ex:
                errors.append(ex)

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    assert errors == []

def test_writer_excludes_readers():
    lock = ReadWriteLock()
    entered = threading.Event()

    def reader():
        with lock.read():
            entered.set()

    lock.acquire_write()
    t = threading.Thread(target=reader)
    t.start()
    try:
        assert not entered.wait(timeout=0.1)
    finally:
        lock.release_write()
    assert entered.wait(timeout=2)
    t.join(timeout=2)

def test_waiting_writer_blocks_new_readers():
    lock = ReadWriteLock()
    writer_done = threading.Event()
    late_reader_in = threading.Event()

    def writer():
        with lock.write():
            writer_done.set()

    def late_reader():
        with lock.read():
            # Writer queued first, so it must have run already
            assert writer_done.is_set()
            late_reader_in.set()

    lock.acquire_read()
    w = threading.Thread(target=writer)
    w.start()
    # Give the writer time to start waiting
    threading.Event().wait(0.05)
    r = threading.Thread(target=late_reader)
    r.start()
    assert not late_reader_in.wait(timeout=0.05)
    lock.release_read()
    w.join(timeout=2)
    r.join(timeout=2)
    assert writer_done.is_set() and late_reader_in.is_set()

def test_unbalanced_release_raises():
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
