from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

from .exceptions import (
    AllocationError,
    CapacityExceededError,
    DuplicateKeyError,
    InvalidRangeError,
    NotFoundError,
)
from .models import INITIAL_CAPACITY, MAX_FLIGHTS, Flight, Passenger, Ticket


T = TypeVar("T")


# ---------------------------
# Generic store
# ---------------------------

class RecordStore(Generic[T]):
    """
    Ordered collection of one record type kept in a preallocated slot list.

    Records occupy slots [0, count); the remaining slots up to capacity are
    empty. Lookup and removal are linear scans, and removal shifts every later
    record one slot left so survivors keep their relative order.
    """

    kind = "record"

    def __init__(self, key: Callable[[T], Any], capacity: int) -> None:
        self._key = key
        self._slots: List[Optional[T]] = []
        self.count = 0
        self.capacity = 0
        self.initialize(capacity)

    def _allocate(self, size: int) -> List[Optional[T]]:
        try:
            return [None] * size
        except MemoryError:
            raise AllocationError(
                f"Could not allocate {size} {self.kind} slots.", context={"size": size}
            )

    def initialize(self, capacity: int) -> None:
        self._slots = self._allocate(capacity)
        self.capacity = capacity
        self.count = 0

    def __len__(self) -> int:
        return self.count

    # --- policy hooks ---

    def _check_insert(self, record: T) -> None:
        """Entity-specific validation, run before any slot is touched."""

    def _make_room(self) -> None:
        raise NotImplementedError

    # --- operations ---

    def _index_of(self, key: Any) -> int:
        for i in range(self.count):
            if self._key(self._slots[i]) == key:
                return i
        return -1

    def add(self, record: T) -> T:
        self._check_insert(record)
        if self.count >= self.capacity:
            self._make_room()
        self._slots[self.count] = record
        self.count += 1
        return record

    def find(self, key: Any) -> Optional[T]:
        index = self._index_of(key)
        return self._slots[index] if index >= 0 else None

    def remove(self, key: Any) -> T:
        index = self._index_of(key)
        if index < 0:
            raise NotFoundError(f"{self.kind.capitalize()} {key} not found.", context={"key": key})
        removed = self._slots[index]
        for i in range(index, self.count - 1):
            self._slots[i] = self._slots[i + 1]
        self._slots[self.count - 1] = None
        self.count -= 1
        return removed

    def list(self) -> List[T]:
        return [self._slots[i] for i in range(self.count)]

    def replace_all(self, records: Iterable[T], capacity: Optional[int] = None) -> None:
        """Reset to exactly these records, preallocating `capacity` slots."""
        items = list(records)
        size = len(items) if capacity is None else max(capacity, len(items))
        slots = self._allocate(size)
        slots[:len(items)] = items
        self._slots = slots
        self.capacity = size
        self.count = len(items)


class GrowableStore(RecordStore[T]):
    """Store whose capacity doubles when an add finds it full."""

    def __init__(self, key: Callable[[T], Any], capacity: int = INITIAL_CAPACITY) -> None:
        super().__init__(key, capacity)

    def _make_room(self) -> None:
        new_capacity = max(self.capacity * 2, 1)
        grown = self._allocate(new_capacity)
        grown[:self.count] = self._slots[:self.count]
        # only swap in once the copy is complete
        self._slots = grown
        self.capacity = new_capacity


class FixedCapacityStore(RecordStore[T]):
    """Store with a hard ceiling; adding to a full store is rejected."""

    def __init__(self, key: Callable[[T], Any], capacity: int) -> None:
        super().__init__(key, capacity)
        self.max_capacity = capacity

    def _make_room(self) -> None:
        raise CapacityExceededError(
            f"{self.kind.capitalize()} limit reached ({self.max_capacity}).",
            context={"max_capacity": self.max_capacity},
        )

    def replace_all(self, records: Iterable[T], capacity: Optional[int] = None) -> None:
        items = list(records)
        if len(items) > self.max_capacity:
            raise CapacityExceededError(
                f"Cannot hold {len(items)} {self.kind}s (max {self.max_capacity}).",
                context={"max_capacity": self.max_capacity, "requested": len(items)},
            )
        super().replace_all(items, self.max_capacity)


# ---------------------------
# Entity stores
# ---------------------------

class FlightStore(FixedCapacityStore[Flight]):
    kind = "flight"

    def __init__(self, capacity: int = MAX_FLIGHTS) -> None:
        super().__init__(lambda f: f.flight_id, capacity)

    def _check_insert(self, flight: Flight) -> None:
        if self.count >= self.max_capacity:
            self._make_room()
        flight.validate()
        if self._index_of(flight.flight_id) >= 0:
            raise DuplicateKeyError(
                f"Flight with ID {flight.flight_id} already exists.",
                context={"flight_id": flight.flight_id},
            )
        if flight.departure > flight.arrival:
            raise InvalidRangeError(
                "Arrival time cannot be before departure time.",
                context={"departure": flight.departure.display(), "arrival": flight.arrival.display()},
            )

    def sort_by_departure(self) -> bool:
        """Sort in place by departure; False when there is nothing to sort."""
        if self.count <= 1:
            return False
        ordered = sorted(self.list(), key=lambda f: f.departure)
        self._slots[:self.count] = ordered
        return True


class PassengerStore(GrowableStore[Passenger]):
    kind = "passenger"

    def __init__(self, capacity: int = INITIAL_CAPACITY) -> None:
        super().__init__(lambda p: p.passport, capacity)

    def _check_insert(self, passenger: Passenger) -> None:
        passenger.validate()
        if self._index_of(passenger.passport) >= 0:
            raise DuplicateKeyError(
                f"Passenger with passport number {passenger.passport} already exists!",
                context={"passport": passenger.passport},
            )


class TicketStore(GrowableStore[Ticket]):
    kind = "ticket"

    def __init__(self, capacity: int = INITIAL_CAPACITY) -> None:
        super().__init__(lambda t: t.ticket_id, capacity)

    def _check_insert(self, ticket: Ticket) -> None:
        ticket.validate()

    def next_ticket_id(self) -> int:
        # count + 1: after a cancellation this can repeat a live ticket's ID
        return self.count + 1

    def book(self, passenger_name: str, flight_id: int, seat_no: int) -> Ticket:
        ticket = Ticket(
            ticket_id=self.next_ticket_id(),
            passenger_name=passenger_name,
            flight_id=flight_id,
            seat_no=seat_no,
        )
        return self.add(ticket)

    def cancel(self, ticket_id: int) -> Ticket:
        return self.remove(ticket_id)

    def seats_for_flight(self, flight_id: int) -> List[Ticket]:
        return [t for t in self.list() if t.flight_id == flight_id]
