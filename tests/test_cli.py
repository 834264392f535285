"""
Tests for the console interface
"""
from flightdesk.cli import main


def scripted(*answers):
    """Input function replaying answers, then end of input"""
    pending = list(answers)

    def ask(prompt):
        if not pending:
            raise EOFError
        return pending.pop(0)

    return ask


def add_flight_args(flight_id="101", departure="10 3 2025 8 0", arrival="10 3 2025 12 30"):
    return [
        "add-flight",
        "--flight-id", flight_id,
        "--name", "Airbus 320",
        "--origin", "DAC",
        "--destination", "DXB",
        "--departure", departure,
        "--arrival", arrival,
        "--seats", "180",
    ]


class TestCommands:

    def test_add_and_list_flight(self, tmp_path, capsys):
        """Test that a one-shot add is saved and listed by the next run"""
        assert main(["--data-dir", str(tmp_path)] + add_flight_args()) == 0
        assert (tmp_path / "flights.txt").read_text().startswith("1\n101,Airbus 320,DAC,DXB,")

        assert main(["--data-dir", str(tmp_path), "list-flights"]) == 0
        out = capsys.readouterr().out
        assert "Flight ID      : 101" in out
        assert "Departure      : 10-03-2025 08:00" in out
        assert "Status         : On Time" in out

    def test_duplicate_flight(self, tmp_path, capsys):
        """Test the failure exit code"""
        main(["--data-dir", str(tmp_path)] + add_flight_args())
        assert main(["--data-dir", str(tmp_path)] + add_flight_args()) == 1
        assert "could not be added" in capsys.readouterr().out

    def test_bad_datetime(self, tmp_path, capsys):
        """Test the bad-input exit code"""
        assert main(["--data-dir", str(tmp_path)] + add_flight_args(departure="2025-03-10")) == 2
        assert "ERROR" in capsys.readouterr().err
        assert not (tmp_path / "flights.txt").exists()

    def test_sort_and_search(self, tmp_path, capsys):
        """Test sorting persisted flights"""
        data = ["--data-dir", str(tmp_path)]
        main(data + add_flight_args("1", "10 3 2025 8 0", "10 3 2025 9 0"))
        main(data + add_flight_args("2", "1 1 2024 9 0", "1 1 2024 11 0"))
        assert main(data + ["sort-flights"]) == 0
        assert (tmp_path / "flights.txt").read_text().splitlines()[1].startswith("2,")
        assert main(data + ["search-flight", "1"]) == 0
        assert main(data + ["search-flight", "3"]) == 1
        assert "Flight with ID 3 not found." in capsys.readouterr().out

    def test_tickets(self, tmp_path, capsys):
        """Test booking, seat listing and cancelling"""
        data = ["--data-dir", str(tmp_path)]
        assert main(data + ["book-ticket", "--passenger", "Alice", "--flight-id", "101", "--seat", "12"]) == 0
        assert "Ticket ID: 1" in capsys.readouterr().out
        assert (tmp_path / "tickets.txt").read_text() == "1\n1,Alice,101,12\n"

        assert main(data + ["seats", "101"]) == 0
        assert "Seat No: 12 (Passenger: Alice)" in capsys.readouterr().out

        assert main(data + ["cancel-ticket", "1"]) == 0
        assert (tmp_path / "tickets.txt").read_text() == "0\n"

    def test_pay_and_crew(self, tmp_path, capsys):
        """Test the stateless handlers"""
        data = ["--data-dir", str(tmp_path)]
        assert main(data + ["pay", "--method", "Card", "--amount", "99.5"]) == 0
        assert "Payment of 99.50 via Card completed successfully." in capsys.readouterr().out
        assert main(data + ["pay", "--method", "Card", "--amount", "-1"]) == 1
        assert main(data + ["assign-crew", "--crew", "Rahim", "--flight-id", "101"]) == 0


class TestMenu:

    def test_add_passenger_and_exit(self, tmp_path, capsys):
        """Test the passenger sub-menu and save on exit"""
        ask = scripted("3", "1", "Alice Rahman", "30", "P1001", "0")
        assert main(["--data-dir", str(tmp_path)], ask=ask) == 0
        assert (tmp_path / "passengers.txt").read_text() == "1\nAlice Rahman,30,P1001,0,0\n"
        assert "Goodbye" in capsys.readouterr().out

    def test_invalid_input_reprompts(self, tmp_path, capsys):
        """Test non-numeric and unknown choices"""
        ask = scripted("abc", "42", "2", "0")
        assert main(["--data-dir", str(tmp_path), "menu"], ask=ask) == 0
        out = capsys.readouterr().out
        assert "Please enter a number" in out
        assert "Invalid choice. Please try again." in out
        assert "No flights available to list." in out

    def test_end_of_input_saves(self, tmp_path):
        """Test that running out of input behaves like exit"""
        ask = scripted(
            "1", "101", "Airbus 320", "DAC", "DXB",
            "10 3 2025 8 0", "10 3 2025 12 30", "1", "180",
        )
        assert main(["--data-dir", str(tmp_path)], ask=ask) == 0
        lines = (tmp_path / "flights.txt").read_text().splitlines()
        assert lines[0] == "1"
        assert lines[1].startswith("101,Airbus 320,DAC,DXB,10 3 2025 8 0,10 3 2025 12 30,1,180,")

    def test_bad_value_aborts_only_that_operation(self, tmp_path, capsys):
        """Test a validation error inside a prompt sequence"""
        ask = scripted("5", "1", "Alice", "abc", "0")
        assert main(["--data-dir", str(tmp_path)], ask=ask) == 0
        assert "Invalid Flight ID" in capsys.readouterr().out
        assert (tmp_path / "tickets.txt").read_text() == "0\n"


class TestDataFileSafety:

    def test_read_only_command_keeps_partial_file(self, tmp_path, capsys):
        """Test that listing passengers does not rewrite a partly loaded file"""
        original = "3\nAlice,30,P1,0,0\nBob,x,P2,0,0\nChen,22,P3,0,0\n"
        (tmp_path / "passengers.txt").write_text(original)

        assert main(["--data-dir", str(tmp_path), "list-passengers"]) == 0
        assert (tmp_path / "passengers.txt").read_text() == original
        captured = capsys.readouterr()
        assert "Alice" in captured.out
        assert "WARNING: passengers.txt declared 3 records, loaded 1" in captured.err

    def test_stateless_command_keeps_corrupt_file(self, tmp_path, capsys):
        """Test that a payment leaves a corrupt flights file alone and reports it"""
        (tmp_path / "flights.txt").write_text("three\n")

        assert main(["--data-dir", str(tmp_path), "pay", "--method", "Card", "--amount", "5"]) == 0
        assert (tmp_path / "flights.txt").read_text() == "three\n"
        assert "WARNING: flights.txt is corrupt" in capsys.readouterr().err

    def test_read_only_commands_create_no_files(self, tmp_path):
        """Test that listing and searching never write data files"""
        data = ["--data-dir", str(tmp_path)]
        assert main(data + ["list-flights"]) == 0
        assert main(data + ["list-tickets"]) == 0
        assert main(data + ["seats", "101"]) == 0
        assert main(data + ["search-flight", "1"]) == 1
        assert list(tmp_path.iterdir()) == []

    def test_mutating_command_saves(self, tmp_path):
        """Test that adding a passenger writes every data file"""
        data = ["--data-dir", str(tmp_path)]
        args = ["add-passenger", "--name", "Alice", "--age", "30", "--passport", "P1"]
        assert main(data + args) == 0
        assert (tmp_path / "passengers.txt").read_text() == "1\nAlice,30,P1,0,0\n"
        assert (tmp_path / "flights.txt").read_text() == "0\n"
        assert (tmp_path / "tickets.txt").read_text() == "0\n"


class TestStartupConfig:

    def test_non_positive_capacity_rejected(self, tmp_path, capsys, monkeypatch):
        """Test that MAX_FLIGHTS=0 stops the program before any command runs"""
        monkeypatch.setenv("MAX_FLIGHTS", "0")
        assert main(["--data-dir", str(tmp_path)] + add_flight_args()) == 2
        assert "ERROR: invalid configuration" in capsys.readouterr().err
        assert not (tmp_path / "flights.txt").exists()

    def test_non_integer_capacity_rejected(self, tmp_path, capsys, monkeypatch):
        """Test that a non-numeric MAX_FLIGHTS is reported, not raised"""
        monkeypatch.setenv("MAX_FLIGHTS", "abc")
        assert main(["--data-dir", str(tmp_path), "list-flights"]) == 2
        assert "MAX_FLIGHTS must be an integer" in capsys.readouterr().err


class TestFlightOutput:

    def test_booked_seats_shown(self, tmp_path, capsys):
        """Test that seats marked in the seat map are listed with the flight"""
        seat_map = "05" + "00" * 31
        line = "101,Airbus 320,DAC,DXB,10 3 2025 8 0,10 3 2025 12 30,0,178," + seat_map
        (tmp_path / "flights.txt").write_text("1\n" + line + "\n")

        assert main(["--data-dir", str(tmp_path), "search-flight", "101"]) == 0
        assert "Booked Seats   : 1 3" in capsys.readouterr().out

    def test_no_booked_seats(self, tmp_path, capsys):
        """Test the empty seat map"""
        main(["--data-dir", str(tmp_path)] + add_flight_args())
        capsys.readouterr()
        assert main(["--data-dir", str(tmp_path), "list-flights"]) == 0
        assert "Booked Seats   : none" in capsys.readouterr().out
