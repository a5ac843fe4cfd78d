import threading

from ccprims.stack import Stack


def test_push_concurrent():
    stack = Stack()
    failures = []

    def worker():
        for i in range(10_000):
            stack.push(i)
            if stack.pop() is None:
                failures.append(i)

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert failures == []
    assert stack.is_empty()


def test_pop_empty_returns_none():
    stack = Stack()
    assert stack.is_empty()
    assert stack.pop() is None


def test_lifo_order():
    stack = Stack()
    for value in range(5):
        stack.push(value)
    assert not stack.is_empty()
    assert [stack.pop() for _ in range(5)] == [4, 3, 2, 1, 0]
    assert stack.is_empty()
    assert stack.pop() is None


def test_concurrent_pushes_all_popped_once():
    stack = Stack()

    def pusher(base):
        for i in range(500):
            stack.push(base + i)

    threads = [threading.Thread(target=pusher, args=(n * 1000,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    popped = []
    while (value := stack.pop()) is not None:
        popped.append(value)
    expected = sorted(n * 1000 + i for n in range(4) for i in range(500))
    assert sorted(popped) == expected
    assert stack.is_empty()