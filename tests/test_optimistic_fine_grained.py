import random
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from ccprims.optimistic_fine_grained import OptimisticFineGrainedListSet, ValidationError


def _run_all(*fns):
    with ThreadPoolExecutor(max_workers=len(fns)) as pool:
        futures = [pool.submit(fn) for fn in fns]
        return [future.result() for future in futures]


def test_smoke():
    s = OptimisticFineGrainedListSet()
    assert s.insert(1)
    assert s.insert(2)
    assert s.insert(3)
    assert s.remove(2)
    pairs = list(zip(s.iter(), [1, 3]))
    assert pairs == [(1, 1), (3, 3)]
    assert s.remove(3)
    assert list(s.iter()) == [1]


def test_insert_duplicate_and_remove_missing():
    s = OptimisticFineGrainedListSet()
    assert s.insert(5)
    assert not s.insert(5)
    assert not s.remove(6)
    assert s.contains(5)
    assert not s.contains(6)
    assert 5 in s


def test_read_no_block():
    s = OptimisticFineGrainedListSet()
    assert s.insert(1)
    assert s.insert(2)

    it = s.iter()
    assert next(it) == 1

    finished = threading.Event()

    def writer():
        for v in range(3, 100):
            s.insert(v)
        finished.set()

    thread = threading.Thread(target=writer)
    thread.start()
    assert finished.wait(3), "Read should not block other operations"
    thread.join()

    assert next(it) == 2


def test_iter_invalidate_end():
    s = OptimisticFineGrainedListSet()
    assert s.insert(1)
    assert s.insert(2)
    it = s.iter()
    assert next(it) == 1
    assert next(it) == 2
    assert s.insert(3)
    with pytest.raises(ValidationError):
        next(it)


def test_iter_invalidate_deleted():
    s = OptimisticFineGrainedListSet()
    assert s.insert(1)
    assert s.insert(2)
    assert s.insert(3)
    it = s.iter()
    assert next(it) == 1
    assert s.remove(1)
    assert s.remove(2)
    with pytest.raises(ValidationError):
        next(it)


def test_iter_ends_after_last_element():
    s = OptimisticFineGrainedListSet()
    assert s.insert(4)
    it = s.iter()
    assert next(it) == 4
    with pytest.raises(StopIteration):
        next(it)


def test_stress_sequential():
    rng = random.Random(431)
    s = OptimisticFineGrainedListSet()
    model = set()
    for _ in range(4096):
        key = rng.randrange(256)
        op = rng.randrange(3)
        if op == 0:
            assert s.insert(key) == (key not in model)
            model.add(key)
        elif op == 1:
            assert s.remove(key) == (key in model)
            model.discard(key)
        else:
            assert s.contains(key) == (key in model)
    assert list(s.iter()) == sorted(model)


def test_stress_concurrent_disjoint_keys():
    threads = 8
    s = OptimisticFineGrainedListSet()

    def worker(tid):
        def run():
            rng = random.Random(tid)
            model = set()
            mismatches = 0
            for _ in range(3000):
                key = rng.randrange(256 // threads) * threads + tid
                op = rng.randrange(3)
                if op == 0:
                    mismatches += s.insert(key) != (key not in model)
                    model.add(key)
                elif op == 1:
                    mismatches += s.remove(key) != (key in model)
                    model.discard(key)
                else:
                    mismatches += s.contains(key) != (key in model)
            return mismatches, model

        return run

    results = _run_all(*(worker(t) for t in range(threads)))
    assert all(mismatches == 0 for mismatches, _ in results)
    expected = sorted(set().union(*(model for _, model in results)))
    assert list(s.iter()) == expected


def test_concurrent_inserts_succeed_once_per_key():
    s = OptimisticFineGrainedListSet()
    keys = list(range(200))

    def worker(seed):
        def run():
            order = keys[:]
            random.Random(seed).shuffle(order)
            return sum(s.insert(k) for k in order)

        return run

    successes = _run_all(*(worker(i) for i in range(6)))
    assert sum(successes) == len(keys)
    assert list(s.iter()) == keys

    removed = _run_all(*(lambda: sum(s.remove(k) for k in keys) for _ in range(4)))
    assert sum(removed) == len(keys)
    assert list(s.iter()) == []


def test_iter_consistent():
    threads = 4
    steps = 3000
    s = OptimisticFineGrainedListSet()
    for i in reversed(range(0, 100, 2)):
        assert s.insert(i)
    evens = set(s.iter())
    done = threading.Event()

    def mutator(seed):
        def run():
            rng = random.Random(seed)
            for _ in range(steps):
                key = 2 * rng.randrange(50) + 1
                if rng.random() < 0.5:
                    s.insert(key)
                else:
                    s.remove(key)
            done.set()
            return True

        return run

    def checker():
        failures = 0
        rounds = 0
        while not done.is_set() or rounds == 0:
            rounds += 1
            snapshot = []
            try:
                for v in s.iter():
                    snapshot.append(v)
            except ValidationError:
                pass
            if any(a > b for a, b in zip(snapshot, snapshot[1:])):
                failures += 1
            largest = snapshot[-1] if snapshot else 0
            if not {x for x in evens if x <= largest} <= set(snapshot):
                failures += 1
        return failures

    results = _run_all(*(mutator(t) for t in range(threads)), checker)
    assert results[-1] == 0