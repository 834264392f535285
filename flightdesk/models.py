from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

from .exceptions import ValidationError


# ---------------------------
# Limits
# ---------------------------

MAX_FLIGHTS = 100
MAX_NAME_LEN = 100           # text fields hold at most MAX_NAME_LEN - 1 characters
MAX_PASSPORT_LEN = 20
MAX_PASSENGERS_PER_FLIGHT = 250
SEAT_MAP_BYTES = (MAX_PASSENGERS_PER_FLIGHT + 7) // 8
INITIAL_CAPACITY = 10

DELIMITER = ","


def new_seat_map() -> bytearray:
    return bytearray(SEAT_MAP_BYTES)


def check_text(value: str, field_name: str, max_len: int = MAX_NAME_LEN) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} must not be empty.", context={"field": field_name})
    if len(value) > max_len - 1:
        raise ValidationError(
            f"{field_name} is too long (max {max_len - 1} characters).",
            context={"field": field_name, "length": len(value)},
        )
    if DELIMITER in value or "\n" in value or "\r" in value:
        raise ValidationError(
            f"{field_name} must not contain '{DELIMITER}' or line breaks.",
            context={"field": field_name},
        )
    return value


def check_positive(value: int, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field_name} must be a positive integer.", context={"field": field_name, "value": value})
    return value


# ---------------------------
# Enums / Data Model
# ---------------------------

class FlightStatus(IntEnum):
    ON_TIME = 0
    DELAYED = 1
    CANCELLED = 2

    @property
    def label(self) -> str:
        return {0: "On Time", 1: "Delayed", 2: "Cancelled"}[self.value]


_DATETIME_RANGES = {
    "day": (1, 31),
    "month": (1, 12),
    "year": (0, 4095),
    "hour": (0, 23),
    "minute": (0, 59),
}


@dataclass(frozen=True, order=True)
class DateTime:
    """
    Minute-precision timestamp. Field order is the comparison priority,
    so ordering is lexicographic over (year, month, day, hour, minute).
    No calendar validation: 31 February is accepted.
    """
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0

    def __post_init__(self) -> None:
        for name, (low, high) in _DATETIME_RANGES.items():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
                raise ValidationError(
                    f"{name} must be between {low} and {high}.",
                    context={"field": name, "value": value},
                )

    @classmethod
    def parse(cls, raw: str) -> DateTime:
        """Parse the "d m y h mi" group used at the prompt and in data files."""
        parts = raw.split()
        if len(parts) != 5:
            raise ValidationError("Date/time must be 'DD MM YYYY HH MM'.", context={"value": raw})
        try:
            day, month, year, hour, minute = (int(p) for p in parts)
        except ValueError:
            raise ValidationError("Date/time must be 'DD MM YYYY HH MM'.", context={"value": raw})
        return cls(year=year, month=month, day=day, hour=hour, minute=minute)

    def to_field(self) -> str:
        return f"{self.day} {self.month} {self.year} {self.hour} {self.minute}"

    def display(self) -> str:
        return f"{self.day:02d}-{self.month:02d}-{self.year:04d} {self.hour:02d}:{self.minute:02d}"


@dataclass
class Flight:
    flight_id: int
    name: str
    origin: str
    destination: str
    departure: DateTime
    arrival: DateTime
    status: FlightStatus = FlightStatus.ON_TIME
    available_seats: int = MAX_PASSENGERS_PER_FLIGHT
    seat_map: bytearray = field(default_factory=new_seat_map)  # bit set = seat booked

    def validate(self) -> None:
        check_positive(self.flight_id, "Flight ID")
        check_text(self.name, "Flight name")
        check_text(self.origin, "Origin")
        check_text(self.destination, "Destination")
        if not isinstance(self.status, FlightStatus):
            raise ValidationError("Status must be 0 (ON_TIME), 1 (DELAYED) or 2 (CANCELLED).")
        check_positive(self.available_seats, "Available seats")
        if len(self.seat_map) != SEAT_MAP_BYTES:
            raise ValidationError(f"Seat map must be {SEAT_MAP_BYTES} bytes.")

    def is_seat_booked(self, seat_no: int) -> bool:
        if not 1 <= seat_no <= MAX_PASSENGERS_PER_FLIGHT:
            raise ValidationError(
                f"Seat number must be between 1 and {MAX_PASSENGERS_PER_FLIGHT}.",
                context={"seat_no": seat_no},
            )
        index = seat_no - 1
        return bool(self.seat_map[index // 8] & (1 << (index % 8)))

    def booked_seats(self) -> List[int]:
        return [n for n in range(1, MAX_PASSENGERS_PER_FLIGHT + 1) if self.is_seat_booked(n)]


@dataclass
class Passenger:
    name: str
    age: int
    passport: str
    assigned_flight_id: int = 0  # 0 = unassigned
    assigned_seat_no: int = 0

    def validate(self) -> None:
        check_text(self.name, "Passenger name")
        check_positive(self.age, "Age")
        check_text(self.passport, "Passport number", MAX_PASSPORT_LEN)

    @property
    def is_assigned(self) -> bool:
        return self.assigned_flight_id != 0


@dataclass
class Ticket:
    ticket_id: int
    passenger_name: str
    flight_id: int
    seat_no: int

    def validate(self) -> None:
        check_text(self.passenger_name, "Passenger name")
        check_positive(self.flight_id, "Flight ID")
        check_positive(self.seat_no, "Seat number")
