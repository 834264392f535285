"""
Configuration management for flightdesk
"""
import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class StorageConfig:
    """Data file locations"""
    data_dir: str = "."
    flights_file: str = "flights.txt"
    passengers_file: str = "passengers.txt"
    tickets_file: str = "tickets.txt"

    @property
    def flights_path(self) -> str:
        return os.path.join(self.data_dir, self.flights_file)

    @property
    def passengers_path(self) -> str:
        return os.path.join(self.data_dir, self.passengers_file)

    @property
    def tickets_path(self) -> str:
        return os.path.join(self.data_dir, self.tickets_file)


@dataclass
class StoreConfig:
    """Store sizing"""
    max_flights: int = 100
    initial_capacity: int = 10


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "console"
    log_file: Optional[str] = None


class Config:
    """Central configuration manager"""

    def __init__(self):
        self.errors: List[str] = []
        self._parse_errors: List[str] = []

        self.storage = StorageConfig(
            data_dir=os.getenv('FLIGHTDESK_DATA_DIR', '.'),
            flights_file=os.getenv('FLIGHTS_FILE', 'flights.txt'),
            passengers_file=os.getenv('PASSENGERS_FILE', 'passengers.txt'),
            tickets_file=os.getenv('TICKETS_FILE', 'tickets.txt')
        )

        self.store = StoreConfig(
            max_flights=self._env_int('MAX_FLIGHTS', 100),
            initial_capacity=self._env_int('INITIAL_CAPACITY', 10)
        )

        self.logging = LoggingConfig(
            level=os.getenv('LOG_LEVEL', 'INFO'),
            format=os.getenv('LOG_FORMAT', 'console'),
            log_file=os.getenv('LOG_FILE')
        )

    def _env_int(self, name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            self._parse_errors.append(f"{name} must be an integer, got {raw!r}")
            return default

    def validate(self) -> bool:
        """Validate configuration; reasons for a failure are left in `errors`"""
        problems = list(self._parse_errors)
        if self.store.max_flights <= 0:
            problems.append("MAX_FLIGHTS must be positive")
        if self.store.initial_capacity <= 0:
            problems.append("INITIAL_CAPACITY must be positive")
        if self.logging.format.lower() not in ("json", "console"):
            problems.append(f"LOG_FORMAT must be json or console, got {self.logging.format!r}")
        if not self.storage.data_dir:
            problems.append("data directory must not be empty")
        self.errors = problems
        return not problems


# Global configuration instance
config = Config()
