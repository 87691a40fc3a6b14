import logging

logger = logging.getLogger(__name__)


class StatusLogRecorder:
    """Trilha de auditoria das mudanças de status. Só acrescenta registros."""

    def __init__(self, store):
        self.store = store

    def record_transition(self, appointment_id, previous_status, new_status, actor):
        with self.store.transaction():
            entry = self.store.append_log(appointment_id, previous_status, new_status, actor)
        logger.info(
            "Agendamento %s: %s -> %s (por %s)", appointment_id, previous_status or "-", new_status, actor
        )
        return entry

    def list_entries(self):
        """Todos os registros, do mais recente para o mais antigo."""
        with self.store.transaction():
            return self.store.list_logs()

    def history(self, appointment_id):
        """Registros de um agendamento em ordem cronológica."""
        with self.store.transaction():
            return self.store.logs_for(appointment_id)
