from ..schedule import format_time, parse_date, parse_time


class AvailabilityChecker:
    """Calcula a disponibilidade dos horários de um dia.

    Só lê do armazenamento: datas bloqueadas fecham o dia inteiro e um horário
    fica ocupado quando existe agendamento não cancelado exatamente nele.
    """

    def __init__(self, store, hours):
        self.store = store
        self.hours = hours

    def compute_availability(self, day):
        day = parse_date(day)
        with self.store.transaction():
            if self.store.is_blocked(day):
                return [{"horario": format_time(slot), "disponivel": False} for slot in self.hours.slots]
            occupied = self.store.occupied_times(day)
        return [
            {"horario": format_time(slot), "disponivel": slot not in occupied}
            for slot in self.hours.slots
        ]

    def is_slot_available(self, day, hour):
        day = parse_date(day)
        hour = parse_time(hour)
        if hour not in self.hours:
            return False
        with self.store.transaction():
            if self.store.is_blocked(day):
                return False
            return hour not in self.store.occupied_times(day)
