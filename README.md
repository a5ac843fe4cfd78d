# ccprims

Concurrency primitives and concurrent data structures for threaded Python
code. Everything is pure Python with no dependencies outside the standard
library.

## Building blocks

`ccprims.atomic`:

- `Atomic(value)`: a cell with `load()`, `store(value)`, `swap(value)`,
  `compare_exchange(current, new)` (returns `(succeeded, previous)`; the
  comparison succeeds on identity or equality) and `fetch_add(delta)`.
- `Backoff`: exponential backoff for spin loops, with `snooze()`, `reset()`
  and the `is_completed` property.

## Locks

Each lock has `lock()`, which returns a token, and `unlock(token)`, which
takes that token back.

- `ccprims.spinlock.SpinLock`: test-and-set spin lock; `try_lock()` returns
  whether the lock was taken. Its token is `None`.
- `ccprims.ticketlock.TicketLock`: first-come, first-served ticket lock; the
  token is the ticket number.
- `ccprims.clhlock.ClhLock`: CLH queue lock; each waiter spins on its
  predecessor's node.
- `ccprims.mcslock.McsLock`: MCS queue lock; each waiter spins on its own node.
- `ccprims.mcsparkinglock.McsParkingLock`: MCS lock whose waiters block on an
  event until their predecessor wakes them.

## Sequence locks

`ccprims.seqlock`:

- `RawSeqLock`: a sequence counter, odd while a writer holds it.
  `write_lock()` returns the even sequence it started from, `write_unlock(seq)`
  releases it, `read_begin()` waits for an even sequence and returns it,
  `read_validate(seq)` says whether no writer has run since, and
  `upgrade(seq)` turns a read into a writer's lock or raises `UpgradeError`
  (`ValueError` if `seq` is odd).
- `SeqLock(data)`: guards one value.
  - `write_lock()` returns a `WriteGuard`, usable in a `with` block or released
    with `release()`; its `value` property can be read and assigned.
  - `read_lock()` returns a `ReadGuard` with `value`, `validate()`,
    `restart()`, `finish()` (ends the read, returns whether it was valid) and
    `upgrade()` (returns a `WriteGuard` or raises `UpgradeError`). A guard that
    has been finished, upgraded or released raises `RuntimeError` when used.
  - `read(f)` calls `f` on the value and returns its result, or `None` if a
    writer intervened.

## Data structures

- `ccprims.linked_list.LinkedList`: doubly-linked list. `push_front`,
  `push_back`, `pop_front`, `pop_back`, `front`, `back` (the last four return
  `None` on an empty list), `append(other)` and `prepend(other)` (splice
  another list on in constant time, leaving it empty), `is_empty`, `clear`,
  `len()`, `in`, lexicographic comparison and equality, and a list-like
  `repr`. `iter()` gives a double-ended `Iter` (`next()` and `next_back()`,
  which can be copied); `iter_mut()` gives an `IterMut` that also has
  `replace(value)`, `insert_next(element)`, `peek_next()` and
  `replace_next(value)`.
- `ccprims.stack.Stack`: Treiber stack with `push`, `pop` (returns `None`
  when empty) and `is_empty`.
- `ccprims.queue.Queue`: Michael-Scott queue with `push`, `try_pop` (returns
  `None` when empty), `pop` (waits until a value arrives) and `is_empty`.
- `ccprims.lockfree_list.List`: sorted lock-free map with three search
  strategies: `harris_lookup`, `harris_insert`, `harris_delete`,
  `harris_michael_lookup`, `harris_michael_insert`, `harris_michael_delete`
  and `harris_herlihy_shavit_lookup`. Inserts return `False` when the key is
  already present; lookups and deletes return the value or `None`. `head()`
  gives a `Cursor` for working at a lower level; its operations raise
  `CursorInvalidated` when the list changed under it.
- `ccprims.fine_grained.FineGrainedListSet`: sorted set with hand-over-hand
  locking (`contains`, `insert`, `remove`, `iter`, `in`). An iterator that is
  only partly consumed holds a lock and blocks writers behind it until it is
  closed.
- `ccprims.optimistic_fine_grained.OptimisticFineGrainedListSet`: sorted set
  whose links are guarded by sequence locks (`contains`, `insert`, `remove`,
  `iter`, `in`). Reads take no locks and never block writers; the iterator
  raises `ValidationError` when a concurrent write invalidates it, and the
  caller must start a new iteration.

## Example

```python
from ccprims.ticketlock import TicketLock
from ccprims.queue import Queue

lock = TicketLock()
ticket = lock.lock()
try:
    pass  # critical section
finally:
    lock.unlock(ticket)

q = Queue()
q.push(37)
q.push(48)
assert q.try_pop() == 37
assert q.pop() == 48
assert q.is_empty()
```

## What it does not do

This is a library only: there is no command-line tool. The structures do
their own locking or atomic updates between Python threads; they are not
shared between processes.

## Running the tests

```
pip install -e .[test]
pytest
```