import logging

from ..errors import InvalidStatus, InvalidTime, NotFound, SlotUnavailable
from ..models.appointment import STATUS_PENDING, STATUSES, TRANSITIONS
from ..schedule import format_time, parse_date, parse_time

logger = logging.getLogger(__name__)

BOOKING_ACTOR = "cliente"


class BookingWriter:
    """Grava agendamentos sem permitir dois ativos no mesmo horário."""

    def __init__(self, store, availability, status_log):
        self.store = store
        self.availability = availability
        self.status_log = status_log

    def create_appointment(self, client_id, service_id, day, hour, notes="", actor=BOOKING_ACTOR):
        day = parse_date(day)
        hour = parse_time(hour)
        if hour not in self.availability.hours:
            raise InvalidTime(f"{format_time(hour)} não é um horário de atendimento")

        # Verificação e inserção na mesma transação; a restrição única do banco cobre a corrida restante
        try:
            with self.store.transaction():
                if not self.store.client_exists(client_id):
                    raise NotFound("Cliente não encontrado")
                if not self.store.service_exists(service_id):
                    raise NotFound("Serviço não encontrado")
                if not self.availability.is_slot_available(day, hour):
                    raise SlotUnavailable()

                appointment = self.store.insert_appointment(
                    client_id, service_id, day, hour, notes, STATUS_PENDING
                )
                self.status_log.record_transition(appointment.id, None, STATUS_PENDING, actor)
        except SlotUnavailable:
            logger.info("Horário %s %s indisponível, agendamento recusado", day.isoformat(), format_time(hour))
            raise

        logger.info(
            "Agendamento %s criado para %s %s (cliente %s)",
            appointment.id, day.isoformat(), format_time(hour), client_id,
        )
        return appointment

    def change_status(self, appointment_id, new_status, actor):
        if new_status not in STATUSES:
            raise InvalidStatus(f"Status inválido: {new_status!r}. Use um de: {', '.join(STATUSES)}")

        with self.store.transaction():
            appointment = self.store.get_appointment(appointment_id)
            if appointment is None:
                raise NotFound("Agendamento não encontrado")

            previous = appointment.status
            if previous == new_status:
                return appointment
            if new_status not in TRANSITIONS[previous]:
                raise InvalidStatus(f"Não é possível alterar de {previous} para {new_status}")

            self.store.update_appointment_status(appointment, new_status)
            self.status_log.record_transition(appointment.id, previous, new_status, actor)
        return appointment

    def list_appointments(self, day=None, status=None):
        if day is not None:
            day = parse_date(day)
        if status is not None and status not in STATUSES:
            raise InvalidStatus(f"Status inválido: {status!r}")
        with self.store.transaction():
            return self.store.list_appointments(day, status)
