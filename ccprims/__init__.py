"""Concurrency primitives: atomic cells, locks, sequence locks and concurrent data structures."""

__version__ = "0.1.0"

__all__ = [
    "atomic",
    "spinlock",
    "ticketlock",
    "clhlock",
    "mcslock",
    "mcsparkinglock",
    "seqlock",
    "linked_list",
    "lockfree_list",
    "stack",
    "queue",
    "fine_grained",
    "optimistic_fine_grained",
]