"""
Unit tests for the controller-facing services
"""
from flightdesk.codec import LoadStatus
from flightdesk.config import Config
from flightdesk.services import Directory, FlightService, PassengerService, TicketService
from flightdesk.store import FlightStore, PassengerStore, TicketStore
from tests.factories import dt, make_flight, make_passenger


def flight_service(tmp_path, capacity=100):
    return FlightService(FlightStore(capacity), str(tmp_path / "flights.txt"))


class TestFlightService:

    def test_operations_return_signals(self, tmp_path):
        """Test that failures come back as False/None, not exceptions"""
        service = flight_service(tmp_path)
        assert service.add_flight(make_flight(101)) is True
        assert service.add_flight(make_flight(101)) is False
        assert service.add_flight(make_flight(
            102, departure=dt(2025, 6, 1, 10, 0), arrival=dt(2025, 6, 1, 9, 0)
        )) is False
        assert service.search_flight(101).flight_id == 101
        assert service.search_flight(999) is None
        assert service.delete_flight(999) is False
        assert service.delete_flight(101) is True
        assert service.list_flights() == []

    def test_capacity_signal(self, tmp_path):
        """Test a full store reports failure"""
        service = flight_service(tmp_path, capacity=1)
        assert service.add_flight(make_flight(1)) is True
        assert service.add_flight(make_flight(2)) is False

    def test_sort_signal(self, tmp_path):
        """Test the nothing-to-sort signal"""
        service = flight_service(tmp_path)
        service.add_flight(make_flight(1))
        assert service.sort_flights_by_departure() is False
        service.add_flight(make_flight(2, departure=dt(2025, 1, 1, 6, 0)))
        assert service.sort_flights_by_departure() is True
        assert [f.flight_id for f in service.list_flights()] == [2, 1]

    def test_load_missing_file(self, tmp_path):
        """Test the no-file start"""
        service = flight_service(tmp_path)
        service.add_flight(make_flight(1))
        report = service.load()
        assert not report
        assert report.status == LoadStatus.NO_FILE
        assert service.store.count == 0

    def test_save_then_load(self, tmp_path):
        """Test that a fresh service reads back what another saved"""
        service = flight_service(tmp_path)
        service.add_flight(make_flight(1))
        service.add_flight(make_flight(2))
        assert service.save() is True

        other = flight_service(tmp_path)
        other.add_flight(make_flight(77))
        report = other.load()
        assert report
        assert report.loaded == 2
        assert [f.flight_id for f in other.list_flights()] == [1, 2]
        assert other.store.capacity == 100

    def test_load_truncates_to_capacity(self, tmp_path):
        """Test a file holding more flights than the ceiling"""
        big = flight_service(tmp_path, capacity=5)
        for i in range(1, 4):
            big.add_flight(make_flight(i))
        big.save()

        small = flight_service(tmp_path, capacity=2)
        report = small.load()
        assert report.declared == 3
        assert report.loaded == 2
        assert small.store.count == 2

    def test_corrupt_count_line(self, tmp_path):
        """Test that a corrupt file is reported and leaves a usable store"""
        (tmp_path / "flights.txt").write_text("garbage\n")
        service = flight_service(tmp_path)
        report = service.load()
        assert not report
        assert report.status == LoadStatus.CORRUPT
        assert service.store.count == 0
        assert service.add_flight(make_flight(1)) is True

    def test_save_failure(self, tmp_path):
        """Test that a write failure is reported"""
        service = FlightService(FlightStore(), str(tmp_path / "missing" / "flights.txt"))
        service.add_flight(make_flight(1))
        assert service.save() is False


class TestPassengerService:

    def test_add_remove_view(self, tmp_path):
        """Test passenger operations"""
        service = PassengerService(PassengerStore(), str(tmp_path / "passengers.txt"))
        assert service.add_passenger(make_passenger("P1")) is True
        assert service.add_passenger(make_passenger("P1")) is False
        assert service.add_passenger(make_passenger("P2")) is True
        assert service.remove_passenger("P9") is False
        assert service.remove_passenger("P1") is True
        assert [p.passport for p in service.view_passengers()] == ["P2"]

    def test_partial_file(self, tmp_path):
        """Test a declared count larger than the lines present"""
        path = tmp_path / "passengers.txt"
        path.write_text("3\nAlice,30,P1,0,0\nBob,41,P2,0,0\n")
        service = PassengerService(PassengerStore(), str(path))
        report = service.load()
        assert report
        assert report.declared == 3
        assert report.loaded == 2
        assert report.discrepancy == 1
        assert service.store.capacity == 3
        assert service.store.count == 2

    def test_empty_file_then_add(self, tmp_path):
        """Test growth after loading an empty passenger file"""
        path = tmp_path / "passengers.txt"
        path.write_text("0\n")
        service = PassengerService(PassengerStore(), str(path))
        assert service.load()
        assert service.store.capacity == 0
        assert service.add_passenger(make_passenger("P1")) is True
        assert service.store.capacity == 1


class TestTicketService:

    def test_book_cancel_seats(self, tmp_path):
        """Test ticket operations"""
        service = TicketService(TicketStore(), str(tmp_path / "tickets.txt"))
        first = service.book_ticket("Alice", 101, 12)
        second = service.book_ticket("Bob", 101, 13)
        assert (first.ticket_id, second.ticket_id) == (1, 2)
        assert service.book_ticket("Chen", 101, 0) is None
        assert [t.seat_no for t in service.seat_management(101)] == [12, 13]
        assert service.cancel_ticket(5) is False
        assert service.cancel_ticket(1) is True
        assert [t.ticket_id for t in service.show_all_tickets()] == [2]


class TestDirectory:

    def test_from_config_round_trip(self, tmp_path):
        """Test saving and loading every store through the directory"""
        cfg = Config()
        cfg.storage.data_dir = str(tmp_path)

        directory = Directory.from_config(cfg)
        reports = directory.load_all()
        assert [r.status for r in reports] == [LoadStatus.NO_FILE] * 3

        directory.flights.add_flight(make_flight(101))
        directory.passengers.add_passenger(make_passenger("P1"))
        directory.tickets.book_ticket("Alice", 101, 7)
        assert directory.save_all() is True
        for name in ("flights.txt", "passengers.txt", "tickets.txt"):
            assert (tmp_path / name).exists()

        reloaded = Directory.from_config(cfg)
        assert all(reloaded.load_all())
        assert reloaded.flights.search_flight(101) == make_flight(101)
        assert reloaded.passengers.view_passengers() == [make_passenger("P1")]
        assert reloaded.tickets.show_all_tickets()[0].passenger_name == "Alice"
        # booking never touched the flight
        assert reloaded.flights.search_flight(101).available_seats == 180


class RecordingLogger:
    """Stands in for the bound structlog logger and keeps event names"""

    def __init__(self):
        self.events = []

    def _record(self, event, **kwargs):
        self.events.append(event)

    info = warning = error = _record


class TestLogEvents:

    def test_event_names_are_snake_case(self, tmp_path):
        """Test the event keys emitted by a service"""
        path = tmp_path / "passengers.txt"
        path.write_text("2\nAlice,30,P1,0,0\n")
        service = PassengerService(PassengerStore(), str(path))
        recorder = RecordingLogger()
        service.log.logger = recorder

        service.load()
        service.add_passenger(make_passenger("P2"))
        service.add_passenger(make_passenger("P2"))
        service.remove_passenger("P2")
        service.save()

        assert recorder.events == [
            "load_discrepancy",
            "data_file_loaded",
            "passenger_added",
            "operation_failed",
            "passenger_removed",
            "data_file_saved",
        ]
