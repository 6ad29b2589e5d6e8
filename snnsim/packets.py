"""Data packages, FIFOs and point-to-point connections between components."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

from .stats import ConnectionStats, FifoStats
from .types import OperandType, TrafficType

T = TypeVar("T")


@dataclass(kw_only=True)
class DataPackage:
    """A value travelling through the accelerator together with its routing data."""

    size_package: int = 4
    data: int = 0
    data_type: OperandType = OperandType.WEIGHT
    source: int = 0
    traffic_type: TrafficType = TrafficType.UNICAST
    unicast_dest: int = 0
    dests: tuple[bool, ...] = ()
    iteration_k: int = 0
    vn: int = 0

    @property
    def is_broadcast(self) -> bool:
        return self.traffic_type is TrafficType.BROADCAST

    @property
    def is_unicast(self) -> bool:
        return self.traffic_type is TrafficType.UNICAST

    @property
    def is_multicast(self) -> bool:
        return self.traffic_type is TrafficType.MULTICAST


@dataclass(kw_only=True)
class RequestPackage(DataPackage):
    """A read or write request addressed to off-chip memory."""

    addr: int = 0
    write: bool = False


@dataclass(frozen=True)
class PoolingPackage:
    """Spikes travelling to a pooling unit, or the result coming out of one."""

    channel: int
    retrieve: int
    values: tuple[bool, ...] = ()
    location: int = 0
    result: bool = False


class Fifo(Generic[T]):
    """First-in first-out queue that keeps usage statistics."""

    def __init__(self, capacity: int = 1) -> None:
        self.capacity = capacity
        self._items: deque[T] = deque()
        self.stats = FifoStats()

    def push(self, item: T) -> None:
        self._items.append(item)
        self.stats.n_pushes += 1
        self.stats.max_occupancy = max(self.stats.max_occupancy, len(self._items))

    def pop(self) -> T:
        """Remove and return the oldest item; raise IndexError when empty."""
        if not self._items:
            raise IndexError("pop from an empty fifo")
        self.stats.n_pops += 1
        return self._items.popleft()

    def front(self) -> T:
        """Return the oldest item without removing it; raise IndexError when empty."""
        if not self._items:
            raise IndexError("front of an empty fifo")
        self.stats.n_fronts += 1
        return self._items[0]

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


class Connection:
    """A wire that holds what was sent on it until the other end receives it."""

    def __init__(self, bandwidth: int = 1) -> None:
        self.bandwidth = bandwidth
        self._pending: list = []
        self.stats = ConnectionStats()

    def send(self, packages: Iterable) -> None:
        """Place packages on the wire, replacing anything not yet received."""
        self._pending = list(packages)
        self.stats.n_sends += 1

    def receive(self) -> list:
        """Take everything pending off the wire."""
        received, self._pending = self._pending, []
        if received:
            self.stats.n_receives += 1
        return received

    def has_pending_data(self) -> bool:
        return bool(self._pending)