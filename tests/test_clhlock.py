import threading
import time
from concurrent.futures import ThreadPoolExecutor

from ccprims.clhlock import ClhLock


class _Room:
    """Counts entries and tracks how many visitors are inside at once."""

    def __init__(self):
        self.entries = 0
        self.occupants = 0
        self.most = 0

    def visit(self):
        self.occupants += 1
        self.most = max(self.most, self.occupants)
        seen = self.entries
        time.sleep(0)
        self.entries = seen + 1
        self.occupants -= 1


def _crowd(lock, visitors=4, visits=200):
    room = _Room()

    def visitor(_):
        for _ in range(visits):
            held = lock.lock()
            room.visit()
            lock.unlock(held)

    with ThreadPoolExecutor(max_workers=visitors) as pool:
        list(pool.map(visitor, range(visitors)))
    return room.entries, room.most


def _handoff(lock):
    """Report whether a second locker got in before and after the first released."""
    first = lock.lock()
    entered = threading.Event()

    def waiter():
        mine = lock.lock()
        entered.set()
        lock.unlock(mine)

    thread = threading.Thread(target=waiter, daemon=True)
    thread.start()
    early = entered.wait(0.2)
    lock.unlock(first)
    late = entered.wait(5)
    thread.join(5)
    return early, late


def test_smoke():
    assert _crowd(ClhLock()) == (4 * 200, 1)


def test_second_locker_waits_for_release():
    assert _handoff(ClhLock()) == (False, True)