import logging

from ..schedule import parse_date

logger = logging.getLogger(__name__)


class BlockedDateManager:
    def __init__(self, store):
        self.store = store

    def block(self, day, reason=None):
        # Bloquear de novo devolve o mesmo registro. Agendamentos já marcados no dia não são cancelados.
        day = parse_date(day)
        with self.store.transaction():
            record = self.store.get_blocked(day)
            if record is not None:
                return record
            record = self.store.add_blocked(day, reason or None)
        logger.info("Data %s bloqueada (%s)", day.isoformat(), reason or "sem motivo")
        return record

    def unblock(self, day):
        day = parse_date(day)
        with self.store.transaction():
            removed = self.store.delete_blocked(day)
        if removed:
            logger.info("Data %s desbloqueada", day.isoformat())
        return removed

    def list_blocked(self):
        with self.store.transaction():
            return self.store.list_blocked()

    def is_blocked(self, day):
        day = parse_date(day)
        with self.store.transaction():
            return self.store.is_blocked(day)
