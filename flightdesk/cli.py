#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import sys
from typing import Callable, List, Optional

from .codec import LoadStatus
from .config import Config
from .exceptions import ValidationError
from .handlers import assign_crew, handle_payment
from .logger import setup_logging
from .models import DateTime, Flight, FlightStatus, Passenger, Ticket
from .services import Directory, LoadReport


Ask = Callable[[str], str]


# ---------------------------
# Output
# ---------------------------

def print_flight(f: Flight) -> None:
    print(f"Flight ID      : {f.flight_id}")
    print(f"Name           : {f.name}")
    print(f"From           : {f.origin}")
    print(f"To             : {f.destination}")
    print(f"Departure      : {f.departure.display()}")
    print(f"Arrival        : {f.arrival.display()}")
    print(f"Status         : {f.status.label}")
    print(f"Seats Available: {f.available_seats}")
    booked = f.booked_seats()
    print(f"Booked Seats   : {' '.join(str(n) for n in booked) if booked else 'none'}")


def print_flights(flights: List[Flight]) -> None:
    if not flights:
        print("No flights available to list.")
        return

    print("---- All Available Flights ----")
    for f in flights:
        print("")
        print_flight(f)


def print_passengers(passengers: List[Passenger]) -> None:
    if not passengers:
        print("No passengers found to display.")
        return

    print("---- All Registered Passengers ----")
    for i, p in enumerate(passengers, start=1):
        print(f"Passenger {i}:")
        print(f"  Name       : {p.name}")
        print(f"  Age        : {p.age}")
        print(f"  Passport   : {p.passport}")
        if p.is_assigned:
            print(f"  Flight ID  : {p.assigned_flight_id}")
            print(f"  Seat No    : {p.assigned_seat_no}")
        else:
            print("  Flight ID  : Not assigned")
            print("  Seat No    : Not assigned")
        print("----------------------------")


def print_tickets(tickets: List[Ticket]) -> None:
    if not tickets:
        print("No tickets booked to display.")
        return

    print("---- All Booked Tickets ----")
    for t in tickets:
        print(f"Ticket ID: {t.ticket_id} | Passenger: {t.passenger_name} | Flight ID: {t.flight_id} | Seat: {t.seat_no}")


def print_seats(flight_id: int, tickets: List[Ticket]) -> None:
    print(f"Seats booked on Flight {flight_id}:")
    if not tickets:
        print("No seats booked for this flight.")
        return
    for t in tickets:
        print(f"Seat No: {t.seat_no} (Passenger: {t.passenger_name})")


def print_load_reports(d: Directory, reports: List[LoadReport]) -> None:
    for service, report in zip((d.flights, d.passengers, d.tickets), reports):
        name = os.path.basename(service.path)
        if report.status == LoadStatus.CORRUPT:
            print(f"WARNING: {name} is corrupt ({report.error}); starting with no records.", file=sys.stderr)
        elif report.discrepancy:
            detail = f" ({report.error})" if report.error else ""
            print(
                f"WARNING: {name} declared {report.declared} records, loaded {report.loaded}{detail}.",
                file=sys.stderr,
            )


# ---------------------------
# Input parsing
# ---------------------------

def _parse_int(raw: str, field_name: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ValidationError(f"Invalid {field_name}. Please enter a number.")


def _parse_positive(raw: str, field_name: str) -> int:
    value = _parse_int(raw, field_name)
    if value <= 0:
        raise ValidationError(f"Invalid {field_name}. Please enter a positive number.")
    return value


def _parse_amount(raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        raise ValidationError("Invalid amount. Please enter a positive number.")


def _parse_status(raw: str) -> FlightStatus:
    try:
        return FlightStatus(_parse_int(raw, "status"))
    except ValueError:
        raise ValidationError("Invalid status input. Please enter 0, 1, or 2.")


def _parse_datetime(raw: str, field_name: str) -> DateTime:
    try:
        return DateTime.parse(raw)
    except ValidationError as e:
        raise ValidationError(f"Invalid {field_name} date/time: {e.message}")


def _build_flight(
    flight_id: str,
    name: str,
    origin: str,
    destination: str,
    departure: str,
    arrival: str,
    status: str,
    seats: str,
) -> Flight:
    return Flight(
        flight_id=_parse_int(flight_id, "Flight ID"),
        name=name.strip(),
        origin=origin.strip(),
        destination=destination.strip(),
        departure=_parse_datetime(departure, "departure"),
        arrival=_parse_datetime(arrival, "arrival"),
        status=_parse_status(status),
        available_seats=_parse_int(seats, "number of available seats"),
    )


# ---------------------------
# One-shot commands
# ---------------------------

def cmd_add_flight(args: argparse.Namespace, d: Directory) -> int:
    flight = _build_flight(
        args.flight_id, args.name, args.origin, args.destination,
        args.departure, args.arrival, args.status, args.seats,
    )
    if not d.flights.add_flight(flight):
        print("Flight could not be added.")
        return 1
    print("Flight added successfully.")
    return 0


def cmd_list_flights(args: argparse.Namespace, d: Directory) -> int:
    print_flights(d.flights.list_flights())
    return 0


def cmd_search_flight(args: argparse.Namespace, d: Directory) -> int:
    flight_id = _parse_int(args.flight_id, "Flight ID")
    flight = d.flights.search_flight(flight_id)
    if flight is None:
        print(f"Flight with ID {flight_id} not found.")
        return 1
    print("--- Flight Found ---")
    print_flight(flight)
    return 0


def cmd_delete_flight(args: argparse.Namespace, d: Directory) -> int:
    flight_id = _parse_int(args.flight_id, "Flight ID")
    if not d.flights.delete_flight(flight_id):
        print(f"Flight with ID {flight_id} not found.")
        return 1
    print(f"Flight ID {flight_id} deleted successfully.")
    return 0


def cmd_sort_flights(args: argparse.Namespace, d: Directory) -> int:
    if d.flights.sort_flights_by_departure():
        print("Flights sorted by departure time.")
    else:
        print("Not enough flights to sort.")
    return 0


def cmd_add_passenger(args: argparse.Namespace, d: Directory) -> int:
    passenger = Passenger(
        name=args.name.strip(),
        age=_parse_positive(args.age, "age"),
        passport=args.passport.strip(),
    )
    if not d.passengers.add_passenger(passenger):
        print("Passenger could not be added.")
        return 1
    print(f"Passenger added successfully. Total passengers: {d.passengers.store.count}")
    return 0


def cmd_remove_passenger(args: argparse.Namespace, d: Directory) -> int:
    passport = args.passport.strip()
    if not d.passengers.remove_passenger(passport):
        print(f"Passenger with passport number {passport} not found.")
        return 1
    print(f"Passenger with passport number {passport} removed successfully. "
          f"Total passengers: {d.passengers.store.count}")
    return 0


def cmd_list_passengers(args: argparse.Namespace, d: Directory) -> int:
    print_passengers(d.passengers.view_passengers())
    return 0


def cmd_book_ticket(args: argparse.Namespace, d: Directory) -> int:
    ticket = d.tickets.book_ticket(
        args.passenger.strip(),
        _parse_positive(args.flight_id, "Flight ID"),
        _parse_positive(args.seat, "seat number"),
    )
    if ticket is None:
        print("Ticket could not be booked.")
        return 1
    print(f"Ticket booked successfully. Ticket ID: {ticket.ticket_id}")
    return 0


def cmd_cancel_ticket(args: argparse.Namespace, d: Directory) -> int:
    ticket_id = _parse_positive(args.ticket_id, "Ticket ID")
    if not d.tickets.cancel_ticket(ticket_id):
        print(f"Ticket ID {ticket_id} not found.")
        return 1
    print(f"Ticket ID {ticket_id} cancelled successfully. Total tickets: {d.tickets.store.count}")
    return 0


def cmd_list_tickets(args: argparse.Namespace, d: Directory) -> int:
    print_tickets(d.tickets.show_all_tickets())
    return 0


def cmd_seats(args: argparse.Namespace, d: Directory) -> int:
    flight_id = _parse_positive(args.flight_id, "Flight ID")
    print_seats(flight_id, d.tickets.seat_management(flight_id))
    return 0


def cmd_pay(args: argparse.Namespace, d: Directory) -> int:
    amount = _parse_amount(args.amount)
    if not handle_payment(args.method, amount):
        print("Invalid payment. Method must be given and amount must be positive.")
        return 1
    print(f"Payment of {amount:.2f} via {args.method.strip()} completed successfully.")
    return 0


def cmd_assign_crew(args: argparse.Namespace, d: Directory) -> int:
    flight_id = _parse_positive(args.flight_id, "Flight ID")
    if not assign_crew(args.crew, flight_id):
        print("Crew could not be assigned.")
        return 1
    print(f"Crew member {args.crew.strip()} assigned to Flight ID {flight_id}.")
    return 0


# ---------------------------
# Interactive menu
# ---------------------------

MAIN_MENU = """
========== Flight Management System ==========
1. Add New Flight
2. List All Flights
3. Add/Remove/View Passenger
4. Assign Crew
5. Ticket Management
6. Payment Handling
7. Sort Flights by Departure Time
8. Delete Flight
9. Search Flight
0. Exit"""

PASSENGER_MENU = """
--- Passenger Management ---
1. Add Passenger
2. Remove Passenger
3. View Passengers"""

TICKET_MENU = """
--- Ticket Management ---
1. Book Ticket
2. Cancel Ticket
3. Show All Tickets
4. Seat Management"""


def _ns(**kwargs) -> argparse.Namespace:
    return argparse.Namespace(**kwargs)


def menu_add_flight(d: Directory, ask: Ask) -> None:
    cmd_add_flight(_ns(
        flight_id=ask("Enter flight ID: "),
        name=ask("Enter flight name: "),
        origin=ask("Enter origin: "),
        destination=ask("Enter destination: "),
        departure=ask("Enter departure (DD MM YYYY HH MM): "),
        arrival=ask("Enter arrival (DD MM YYYY HH MM): "),
        status=ask("Enter status (0 = ON_TIME, 1 = DELAYED, 2 = CANCELLED): "),
        seats=ask("Enter available seats: "),
    ), d)


def menu_passengers(d: Directory, ask: Ask) -> None:
    print(PASSENGER_MENU)
    choice = _parse_int(ask("Enter your choice: "), "choice")
    if choice == 1:
        cmd_add_passenger(_ns(
            name=ask("Enter passenger name: "),
            age=ask("Enter age: "),
            passport=ask("Enter passport number: "),
        ), d)
    elif choice == 2:
        cmd_remove_passenger(_ns(passport=ask("Enter passport number of passenger to remove: ")), d)
    elif choice == 3:
        cmd_list_passengers(_ns(), d)
    else:
        print("Invalid passenger option!")


def menu_tickets(d: Directory, ask: Ask) -> None:
    print(TICKET_MENU)
    choice = _parse_int(ask("Enter your choice: "), "choice")
    if choice == 1:
        cmd_book_ticket(_ns(
            passenger=ask("Enter passenger name for ticket: "),
            flight_id=ask("Enter flight ID for ticket: "),
            seat=ask("Enter seat number for ticket: "),
        ), d)
    elif choice == 2:
        cmd_cancel_ticket(_ns(ticket_id=ask("Enter ticket ID to cancel: ")), d)
    elif choice == 3:
        cmd_list_tickets(_ns(), d)
    elif choice == 4:
        cmd_seats(_ns(flight_id=ask("Enter flight ID to check seats: ")), d)
    else:
        print("Invalid ticket option!")


MENU_ACTIONS = {
    1: menu_add_flight,
    2: lambda d, ask: cmd_list_flights(_ns(), d),
    3: menu_passengers,
    4: lambda d, ask: cmd_assign_crew(_ns(
        crew=ask("Enter crew name: "),
        flight_id=ask("Enter flight ID to assign: "),
    ), d),
    5: menu_tickets,
    6: lambda d, ask: cmd_pay(_ns(
        method=ask("Enter payment method (Cash/Card/Online): "),
        amount=ask("Enter amount to pay: "),
    ), d),
    7: lambda d, ask: cmd_sort_flights(_ns(), d),
    8: lambda d, ask: cmd_delete_flight(_ns(flight_id=ask("Enter Flight ID to delete: ")), d),
    9: lambda d, ask: cmd_search_flight(_ns(flight_id=ask("Enter Flight ID to search: ")), d),
}


def run_menu(d: Directory, ask: Optional[Ask] = None) -> int:
    """Loop until 0 (or end of input), then save every store."""
    ask = ask or input
    while True:
        print(MAIN_MENU)
        try:
            raw = ask("Enter your choice: ")
        except EOFError:
            raw = "0"
        try:
            choice = _parse_int(raw, "input")
        except ValidationError as e:
            print(e.message)
            continue

        if choice == 0:
            print("Exiting system. Goodbye!")
            return 0 if d.save_all() else 1

        action = MENU_ACTIONS.get(choice)
        if action is None:
            print("Invalid choice. Please try again.")
            continue
        try:
            action(d, ask)
        except ValidationError as e:
            print(e.message)
        except EOFError:
            print("")
            print("Exiting system. Goodbye!")
            return 0 if d.save_all() else 1


# ---------------------------
# CLI
# ---------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flightdesk", description="Airline flight, passenger and ticket records")
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory holding flights.txt, passengers.txt and tickets.txt (default: FLIGHTDESK_DATA_DIR or .)",
    )
    sub = parser.add_subparsers(dest="cmd")

    p_menu = sub.add_parser("menu", help="Interactive menu (default)")
    p_menu.set_defaults(func=None)

    p_add = sub.add_parser("add-flight", help="Add a flight")
    p_add.add_argument("--flight-id", required=True)
    p_add.add_argument("--name", required=True)
    p_add.add_argument("--origin", required=True)
    p_add.add_argument("--destination", required=True)
    p_add.add_argument("--departure", required=True, help='"DD MM YYYY HH MM"')
    p_add.add_argument("--arrival", required=True, help='"DD MM YYYY HH MM"')
    p_add.add_argument("--status", default="0", help="0 = ON_TIME, 1 = DELAYED, 2 = CANCELLED")
    p_add.add_argument("--seats", required=True, help="Available seats")
    p_add.set_defaults(func=cmd_add_flight, saves=True)

    p_list = sub.add_parser("list-flights", help="List all flights")
    p_list.set_defaults(func=cmd_list_flights)

    p_search = sub.add_parser("search-flight", help="Show one flight")
    p_search.add_argument("flight_id")
    p_search.set_defaults(func=cmd_search_flight)

    p_delete = sub.add_parser("delete-flight", help="Delete a flight")
    p_delete.add_argument("flight_id")
    p_delete.set_defaults(func=cmd_delete_flight, saves=True)

    p_sort = sub.add_parser("sort-flights", help="Sort flights by departure time")
    p_sort.set_defaults(func=cmd_sort_flights, saves=True)

    p_padd = sub.add_parser("add-passenger", help="Register a passenger")
    p_padd.add_argument("--name", required=True)
    p_padd.add_argument("--age", required=True)
    p_padd.add_argument("--passport", required=True)
    p_padd.set_defaults(func=cmd_add_passenger, saves=True)

    p_premove = sub.add_parser("remove-passenger", help="Remove a passenger by passport number")
    p_premove.add_argument("passport")
    p_premove.set_defaults(func=cmd_remove_passenger, saves=True)

    p_plist = sub.add_parser("list-passengers", help="List all passengers")
    p_plist.set_defaults(func=cmd_list_passengers)

    p_book = sub.add_parser("book-ticket", help="Book a ticket (seat availability is not checked)")
    p_book.add_argument("--passenger", required=True)
    p_book.add_argument("--flight-id", required=True)
    p_book.add_argument("--seat", required=True)
    p_book.set_defaults(func=cmd_book_ticket, saves=True)

    p_cancel = sub.add_parser("cancel-ticket", help="Cancel a ticket")
    p_cancel.add_argument("ticket_id")
    p_cancel.set_defaults(func=cmd_cancel_ticket, saves=True)

    p_tlist = sub.add_parser("list-tickets", help="List all tickets")
    p_tlist.set_defaults(func=cmd_list_tickets)

    p_seats = sub.add_parser("seats", help="Seats booked on a flight")
    p_seats.add_argument("flight_id")
    p_seats.set_defaults(func=cmd_seats)

    p_pay = sub.add_parser("pay", help="Record a payment (nothing is stored)")
    p_pay.add_argument("--method", required=True, help="Cash/Card/Online")
    p_pay.add_argument("--amount", required=True)
    p_pay.set_defaults(func=cmd_pay)

    p_crew = sub.add_parser("assign-crew", help="Assign a crew member to a flight (nothing is stored)")
    p_crew.add_argument("--crew", required=True)
    p_crew.add_argument("--flight-id", required=True)
    p_crew.set_defaults(func=cmd_assign_crew)

    return parser


def main(argv: List[str], ask: Optional[Ask] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = Config()
    if args.data_dir:
        cfg.storage.data_dir = args.data_dir
    if not cfg.validate():
        print(f"ERROR: invalid configuration: {'; '.join(cfg.errors)}", file=sys.stderr)
        return 2
    setup_logging(cfg.logging)

    directory = Directory.from_config(cfg)
    print_load_reports(directory, directory.load_all())

    func = getattr(args, "func", None)
    if func is None:
        return run_menu(directory, ask)

    try:
        rc = func(args, directory)
    except ValidationError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 2
    # only commands that change a store write the data files back
    if rc == 0 and getattr(args, "saves", False) and not directory.save_all():
        return 1
    return rc


def run() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(run())
