import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from ccprims.seqlock import RawSeqLock, SeqLock, UpgradeError


def _interrupt(lock):
    """Run an empty write critical section."""
    lock.write_lock().release()


def test_raw_write_lock_sequence_numbers():
    raw = RawSeqLock()
    first = raw.write_lock()
    raw.write_unlock(first)
    assert (first, raw.write_lock()) == (0, 2)


def test_raw_read_validate():
    raw = RawSeqLock()
    seq = raw.read_begin()
    checks = [raw.read_validate(seq)]
    writer_seq = raw.write_lock()
    checks.append(raw.read_validate(seq))
    raw.write_unlock(writer_seq)
    checks.append(raw.read_validate(seq))
    checks.append(raw.read_validate(raw.read_begin()))
    assert checks == [True, False, False, True]


def test_raw_upgrade_success_and_failure():
    raw = RawSeqLock()
    seq = raw.read_begin()
    raw.upgrade(seq)
    with pytest.raises(UpgradeError):
        raw.upgrade(seq)
    raw.write_unlock(seq)
    with pytest.raises(UpgradeError):
        raw.upgrade(seq)


def test_raw_upgrade_rejects_odd_sequence():
    with pytest.raises(ValueError):
        RawSeqLock().upgrade(1)


def test_write_then_read():
    lock = SeqLock("old")
    with lock.write_lock() as guard:
        guard.value = "new"
    assert lock.read(lambda v: v) == "new"


def test_read_returns_none_when_writer_intervenes():
    lock = SeqLock([1])

    def reader(value):
        _interrupt(lock)
        return value[0]

    assert lock.read(reader) is None


def test_read_guard_finish_and_reuse():
    guard = SeqLock(3).read_lock()
    assert (guard.value, guard.validate(), guard.finish()) == (3, True, True)
    with pytest.raises(RuntimeError):
        guard.finish()


def test_read_guard_restart_revalidates():
    lock = SeqLock(0)
    guard = lock.read_lock()
    with lock.write_lock() as writer:
        writer.value = 5
    assert guard.validate() is False
    guard.restart()
    assert (guard.validate(), guard.value, guard.finish()) == (True, 5, True)


def test_upgrade_gives_writer():
    lock = SeqLock("a")
    writer = lock.read_lock().upgrade()
    writer.value = "b"
    writer.release()
    assert lock.read(lambda v: v) == "b"
    with pytest.raises(RuntimeError):
        writer.release()


def test_upgrade_fails_after_write():
    lock = SeqLock("a")
    guard = lock.read_lock()
    _interrupt(lock)
    with pytest.raises(UpgradeError):
        guard.upgrade()
    with pytest.raises(RuntimeError):
        guard.validate()


def test_concurrent_reads_see_consistent_pairs():
    lock = SeqLock([0, 0])
    finished = threading.Event()

    def writer():
        try:
            for i in range(1, 300):
                with lock.write_lock() as guard:
                    guard.value[0] = i
                    time.sleep(0)
                    guard.value[1] = i
        finally:
            finished.set()

    def reader():
        torn = []
        while not finished.is_set():
            pair = lock.read(lambda v: (v[0], v[1]))
            if pair is not None and pair[0] != pair[1]:
                torn.append(pair)
        return torn

    with ThreadPoolExecutor(max_workers=3) as pool:
        readers = [pool.submit(reader) for _ in range(2)]
        pool.submit(writer).result()
        torn = [pair for future in readers for pair in future.result()]
    assert torn == []
    assert lock.read(tuple) == (299, 299)