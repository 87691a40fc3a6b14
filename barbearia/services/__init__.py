from .availability import AvailabilityChecker
from .blocked_dates import BlockedDateManager
from .booking import BookingWriter
from .status_log import StatusLogRecorder


class Agenda:
    """Reúne os serviços da agenda sobre um mesmo armazenamento."""

    def __init__(self, store, hours):
        self.store = store
        self.hours = hours
        self.availability = AvailabilityChecker(store, hours)
        self.status_log = StatusLogRecorder(store)
        self.blocked_dates = BlockedDateManager(store)
        self.booking = BookingWriter(store, self.availability, self.status_log)


__all__ = [
    "Agenda",
    "AvailabilityChecker",
    "BlockedDateManager",
    "BookingWriter",
    "StatusLogRecorder",
]
