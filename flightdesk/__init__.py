"""Flight, passenger and ticket record keeping with plain-text persistence."""
from .codec import DecodeResult, FlightCodec, LoadStatus, PassengerCodec, RecordCodec, TicketCodec
from .models import DateTime, Flight, FlightStatus, Passenger, Ticket
from .services import Directory, FlightService, LoadReport, PassengerService, TicketService
from .store import (
    FixedCapacityStore,
    FlightStore,
    GrowableStore,
    PassengerStore,
    RecordStore,
    TicketStore,
)

__all__ = [
    "DateTime",
    "Flight",
    "FlightStatus",
    "Passenger",
    "Ticket",
    "RecordStore",
    "GrowableStore",
    "FixedCapacityStore",
    "FlightStore",
    "PassengerStore",
    "TicketStore",
    "RecordCodec",
    "FlightCodec",
    "PassengerCodec",
    "TicketCodec",
    "DecodeResult",
    "LoadStatus",
    "LoadReport",
    "FlightService",
    "PassengerService",
    "TicketService",
    "Directory",
]
