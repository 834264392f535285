from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .codec import FlightCodec, LoadStatus, PassengerCodec, RecordCodec, TicketCodec
from .config import Config
from .exceptions import FlightDeskError
from .logger import StoreLogger
from .models import Flight, Passenger, Ticket
from .store import FlightStore, PassengerStore, RecordStore, TicketStore


@dataclass
class LoadReport:
    status: LoadStatus
    declared: int = 0
    loaded: int = 0
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.status == LoadStatus.LOADED

    @property
    def discrepancy(self) -> int:
        return max(self.declared - self.loaded, 0)


# ---------------------------
# Core Services
# ---------------------------

class _StoreService:
    """Save/load plumbing shared by the three entity services."""

    load_limit: Optional[int] = None

    def __init__(self, store: RecordStore, codec: RecordCodec, path: str) -> None:
        self.store = store
        self.codec = codec
        self.path = path
        self.log = StoreLogger(codec.kind + "s")

    def save(self) -> bool:
        try:
            self.codec.save(self.store.list(), self.path)
        except FlightDeskError as e:
            self.log.log_operation_failed("save", e, {"path": self.path})
            return False
        self.log.log_save(self.path, self.store.count)
        return True

    def load(self) -> LoadReport:
        """
        Replace the store's contents with the data file.

        A missing file leaves an empty store and reports NO_FILE. A corrupt
        count line leaves an empty store and reports CORRUPT. Otherwise the
        records parsed before the first bad line are kept.
        """
        try:
            result = self.codec.load(self.path, limit=self.load_limit)
        except FlightDeskError as e:
            self.log.log_operation_failed("load", e, {"path": self.path})
            self.store.replace_all([])
            return LoadReport(status=LoadStatus.CORRUPT, error=e.message)

        if result.status != LoadStatus.LOADED:
            self.store.replace_all([])
            if result.status == LoadStatus.CORRUPT:
                self.log.error("load_corrupt", path=self.path, error=result.error)
            else:
                self.log.info("load_no_file", path=self.path)
            return LoadReport(status=result.status, error=result.error)

        try:
            self.store.replace_all(result.records, result.declared)
        except FlightDeskError as e:
            self.log.log_operation_failed("load", e, {"path": self.path})
            self.store.replace_all([])
            return LoadReport(status=LoadStatus.CORRUPT, declared=result.declared, error=e.message)

        report = LoadReport(
            status=LoadStatus.LOADED,
            declared=result.declared,
            loaded=len(result.records),
            error=result.error,
        )
        if report.discrepancy:
            self.log.warning(
                "load_discrepancy",
                path=self.path,
                declared=report.declared,
                loaded=report.loaded,
                error=report.error,
            )
        self.log.log_load(self.path, report.status.value, report.declared, report.loaded)
        return report


class FlightService(_StoreService):
    def __init__(self, store: FlightStore, path: str, codec: Optional[FlightCodec] = None) -> None:
        super().__init__(store, codec or FlightCodec(), path)
        self.load_limit = store.max_capacity

    def add_flight(self, flight: Flight) -> bool:
        try:
            self.store.add(flight)
        except FlightDeskError as e:
            self.log.log_operation_failed("add_flight", e)
            return False
        self.log.info("flight_added", flight_id=flight.flight_id, count=self.store.count)
        return True

    def list_flights(self) -> List[Flight]:
        flights = self.store.list()
        if not flights:
            self.log.info("flights_empty")
        return flights

    def search_flight(self, flight_id: int) -> Optional[Flight]:
        flight = self.store.find(flight_id)
        if flight is None:
            self.log.info("flight_not_found", flight_id=flight_id)
        return flight

    def delete_flight(self, flight_id: int) -> bool:
        try:
            self.store.remove(flight_id)
        except FlightDeskError as e:
            self.log.log_operation_failed("delete_flight", e)
            return False
        self.log.info("flight_deleted", flight_id=flight_id, count=self.store.count)
        return True

    def sort_flights_by_departure(self) -> bool:
        if not self.store.sort_by_departure():
            self.log.info("flights_sort_skipped", count=self.store.count)
            return False
        self.log.info("flights_sorted", count=self.store.count)
        return True


class PassengerService(_StoreService):
    def __init__(self, store: PassengerStore, path: str, codec: Optional[PassengerCodec] = None) -> None:
        super().__init__(store, codec or PassengerCodec(), path)

    def add_passenger(self, passenger: Passenger) -> bool:
        try:
            self.store.add(passenger)
        except FlightDeskError as e:
            self.log.log_operation_failed("add_passenger", e)
            return False
        self.log.info("passenger_added", passport=passenger.passport, count=self.store.count)
        return True

    def remove_passenger(self, passport: str) -> bool:
        try:
            self.store.remove(passport)
        except FlightDeskError as e:
            self.log.log_operation_failed("remove_passenger", e)
            return False
        self.log.info("passenger_removed", passport=passport, count=self.store.count)
        return True

    def view_passengers(self) -> List[Passenger]:
        passengers = self.store.list()
        if not passengers:
            self.log.info("passengers_empty")
        return passengers


class TicketService(_StoreService):
    def __init__(self, store: TicketStore, path: str, codec: Optional[TicketCodec] = None) -> None:
        super().__init__(store, codec or TicketCodec(), path)

    def book_ticket(self, passenger_name: str, flight_id: int, seat_no: int) -> Optional[Ticket]:
        """
        Book a ticket. The flight is not looked up and its seat availability
        is neither checked nor updated.
        """
        try:
            ticket = self.store.book(passenger_name, flight_id, seat_no)
        except FlightDeskError as e:
            self.log.log_operation_failed("book_ticket", e)
            return None
        self.log.info("ticket_booked", ticket_id=ticket.ticket_id, flight_id=flight_id, seat_no=seat_no)
        return ticket

    def cancel_ticket(self, ticket_id: int) -> bool:
        try:
            self.store.cancel(ticket_id)
        except FlightDeskError as e:
            self.log.log_operation_failed("cancel_ticket", e)
            return False
        self.log.info("ticket_cancelled", ticket_id=ticket_id, count=self.store.count)
        return True

    def show_all_tickets(self) -> List[Ticket]:
        tickets = self.store.list()
        if not tickets:
            self.log.info("tickets_empty")
        return tickets

    def seat_management(self, flight_id: int) -> List[Ticket]:
        return self.store.seats_for_flight(flight_id)


# ---------------------------
# Directory
# ---------------------------

class Directory:
    """The three services wired to their stores and data files."""

    def __init__(self, flights: FlightService, passengers: PassengerService, tickets: TicketService) -> None:
        self.flights = flights
        self.passengers = passengers
        self.tickets = tickets

    @classmethod
    def from_config(cls, cfg: Config) -> Directory:
        return cls(
            flights=FlightService(FlightStore(cfg.store.max_flights), cfg.storage.flights_path),
            passengers=PassengerService(PassengerStore(cfg.store.initial_capacity), cfg.storage.passengers_path),
            tickets=TicketService(TicketStore(cfg.store.initial_capacity), cfg.storage.tickets_path),
        )

    def load_all(self) -> List[LoadReport]:
        return [self.flights.load(), self.passengers.load(), self.tickets.load()]

    def save_all(self) -> bool:
        results = [self.flights.save(), self.passengers.save(), self.tickets.save()]
        return all(results)
