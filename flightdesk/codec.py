"""
Line-oriented text format for the record stores.

Line 1 holds the decimal record count, every following line one record with
its fields joined by ``,`` in declared order. Free text is written verbatim,
so it cannot contain the delimiter or a line break.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterable, List, Optional, Sequence, TypeVar

from .exceptions import FileAccessError, FormatError, ValidationError
from .logger import get_logger
from .models import (
    DELIMITER,
    MAX_NAME_LEN,
    MAX_PASSPORT_LEN,
    SEAT_MAP_BYTES,
    DateTime,
    Flight,
    FlightStatus,
    Passenger,
    Ticket,
)

log = get_logger(__name__)

T = TypeVar("T")


class LoadStatus(str, Enum):
    LOADED = "LOADED"
    NO_FILE = "NO_FILE"
    CORRUPT = "CORRUPT"


@dataclass
class DecodeResult(Generic[T]):
    records: List[T] = field(default_factory=list)
    declared: int = 0
    status: LoadStatus = LoadStatus.LOADED
    error: Optional[str] = None

    @property
    def discrepancy(self) -> int:
        return max(self.declared - len(self.records), 0)


# ---------------------------
# Field helpers
# ---------------------------

def _text(raw: str, max_len: int = MAX_NAME_LEN) -> str:
    if not raw:
        raise FormatError("empty text field")
    return raw[:max_len - 1]


def _int(raw: str, name: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise FormatError(f"{name} is not an integer: {raw!r}")


def _datetime(raw: str, name: str) -> DateTime:
    try:
        return DateTime.parse(raw)
    except ValidationError as e:
        raise FormatError(f"{name} is not a valid date/time group: {e.message}")


def seat_map_to_hex(seat_map: bytes) -> str:
    return "".join(f"{b:02X}" for b in seat_map)


def seat_map_from_hex(raw: str) -> bytearray:
    """Decode two hex digits per byte; a missing or bad pair decodes as 0."""
    seat_map = bytearray(SEAT_MAP_BYTES)
    for j in range(SEAT_MAP_BYTES):
        pair = raw[j * 2:j * 2 + 2]
        try:
            seat_map[j] = int(pair, 16)
        except ValueError:
            log.warning("seat_map_byte_unreadable", byte=j, value=pair)
            seat_map[j] = 0
    return seat_map


# ---------------------------
# Codecs
# ---------------------------

class RecordCodec(Generic[T]):
    """Serialize/deserialize one record type; subclasses define the line layout."""

    kind = "record"
    field_count = 0

    def encode_fields(self, record: T) -> Sequence[str]:
        raise NotImplementedError

    def decode_fields(self, fields: List[str]) -> T:
        raise NotImplementedError

    def encode_line(self, record: T) -> str:
        fields = [str(f) for f in self.encode_fields(record)]
        for value in fields:
            if DELIMITER in value or "\n" in value or "\r" in value:
                raise FormatError(
                    f"Cannot write {self.kind} field {value!r}: contains the delimiter or a line break.",
                    context={"value": value},
                )
        return DELIMITER.join(fields)

    def decode_line(self, line: str) -> T:
        # a missing or extra field both stop the load
        fields = line.rstrip("\r\n").split(DELIMITER)
        if len(fields) != self.field_count:
            raise FormatError(f"expected {self.field_count} fields, found {len(fields)}")
        for position, value in enumerate(fields):
            if value == "":
                raise FormatError(f"field {position + 1} is empty")
        return self.decode_fields(fields)

    def serialize(self, records: Iterable[T]) -> str:
        items = list(records)
        lines = [str(len(items))]
        lines.extend(self.encode_line(r) for r in items)
        return "\n".join(lines) + "\n"

    def deserialize(self, text: str, limit: Optional[int] = None) -> DecodeResult[T]:
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        if not lines:
            return DecodeResult(status=LoadStatus.CORRUPT, error=f"missing {self.kind} count line")
        try:
            declared = int(lines[0].strip())
        except ValueError:
            return DecodeResult(status=LoadStatus.CORRUPT, error=f"bad {self.kind} count line: {lines[0]!r}")
        if declared < 0:
            return DecodeResult(status=LoadStatus.CORRUPT, error=f"negative {self.kind} count: {declared}")

        result: DecodeResult[T] = DecodeResult(declared=declared)
        wanted = declared
        if limit is not None and declared > limit:
            log.warning("count_truncated", kind=self.kind, declared=declared, limit=limit)
            wanted = limit

        for number, line in enumerate(lines[1:wanted + 1], start=2):
            try:
                result.records.append(self.decode_line(line))
            except FormatError as e:
                result.error = f"line {number}: {e.message}"
                break
        return result

    def save(self, records: Iterable[T], path: str) -> None:
        text = self.serialize(records)
        tmp = f"{path}.tmp"
        try:
            with open(tmp, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            os.replace(tmp, path)
        except OSError as e:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise FileAccessError(
                f"Could not write {self.kind} file {path}: {e.strerror or e}",
                context={"path": path},
            )

    def load(self, path: str, limit: Optional[int] = None) -> DecodeResult[T]:
        if not os.path.exists(path):
            return DecodeResult(status=LoadStatus.NO_FILE)
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(f"Could not read {self.kind} file {path}: {e}", context={"path": path})
        return self.deserialize(text, limit=limit)


class FlightCodec(RecordCodec[Flight]):
    kind = "flight"
    field_count = 9

    def encode_fields(self, f: Flight) -> Sequence[str]:
        return (
            f.flight_id,
            f.name,
            f.origin,
            f.destination,
            f.departure.to_field(),
            f.arrival.to_field(),
            int(f.status),
            f.available_seats,
            seat_map_to_hex(f.seat_map),
        )

    def decode_fields(self, fields: List[str]) -> Flight:
        status = _int(fields[6], "status")
        try:
            status = FlightStatus(status)
        except ValueError:
            raise FormatError(f"unknown flight status {status}")
        return Flight(
            flight_id=_int(fields[0], "flightID"),
            name=_text(fields[1]),
            origin=_text(fields[2]),
            destination=_text(fields[3]),
            departure=_datetime(fields[4], "departure"),
            arrival=_datetime(fields[5], "arrival"),
            status=status,
            available_seats=_int(fields[7], "availableSeats"),
            seat_map=seat_map_from_hex(fields[8].strip()),
        )


class PassengerCodec(RecordCodec[Passenger]):
    kind = "passenger"
    field_count = 5

    def encode_fields(self, p: Passenger) -> Sequence[str]:
        return (p.name, p.age, p.passport, p.assigned_flight_id, p.assigned_seat_no)

    def decode_fields(self, fields: List[str]) -> Passenger:
        return Passenger(
            name=_text(fields[0]),
            age=_int(fields[1], "age"),
            passport=_text(fields[2], MAX_PASSPORT_LEN),
            assigned_flight_id=_int(fields[3], "assignedFlightID"),
            assigned_seat_no=_int(fields[4], "assignedSeatNo"),
        )


class TicketCodec(RecordCodec[Ticket]):
    kind = "ticket"
    field_count = 4

    def encode_fields(self, t: Ticket) -> Sequence[str]:
        return (t.ticket_id, t.passenger_name, t.flight_id, t.seat_no)

    def decode_fields(self, fields: List[str]) -> Ticket:
        return Ticket(
            ticket_id=_int(fields[0], "ticketID"),
            passenger_name=_text(fields[1]),
            flight_id=_int(fields[2], "flightID"),
            seat_no=_int(fields[3], "seatNo"),
        )
