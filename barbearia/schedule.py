from datetime import date, datetime, time, timedelta

from .errors import InvalidDate, InvalidTime


def parse_date(value):
    """Converte 'YYYY-MM-DD' (ou um date) em date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise InvalidDate(f"Data inválida: {value!r}. Use o formato YYYY-MM-DD")


def parse_time(value):
    """Converte 'HH:MM' ou 'HH:MM:SS' em time (segundos descartados)."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    text = str(value).strip() if value is not None else ""
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(text, fmt).time().replace(second=0)
        except ValueError:
            continue
    raise InvalidTime(f"Horário inválido: {value!r}. Use o formato HH:MM")


def format_time(value):
    return value.strftime("%H:%M")


class BusinessHours:
    """Grade fixa de horários de atendimento de um dia.

    Os horários começam na abertura e avançam de `interval` em `interval` minutos;
    um horário só entra na grade se terminar até o fechamento e não cruzar a pausa.
    """

    def __init__(self, opening="09:00", closing="19:00", interval=60, pause_start=None, pause_end=None):
        self.opening = parse_time(opening)
        self.closing = parse_time(closing)
        self.interval = timedelta(minutes=int(interval))
        self.pause_start = parse_time(pause_start) if pause_start else None
        self.pause_end = parse_time(pause_end) if pause_end else None

        if self.interval <= timedelta(0):
            raise ValueError("O intervalo entre horários deve ser positivo")
        if self.opening >= self.closing:
            raise ValueError("A abertura deve ser antes do fechamento")
        if (self.pause_start is None) != (self.pause_end is None):
            raise ValueError("Informe início e fim da pausa, ou nenhum dos dois")

        self._slots = tuple(self._build_slots())

    @classmethod
    def from_config(cls, config):
        return cls(
            opening=config["HORARIO_ABERTURA"],
            closing=config["HORARIO_FECHAMENTO"],
            interval=config["INTERVALO_MINUTOS"],
            pause_start=config.get("PAUSA_INICIO"),
            pause_end=config.get("PAUSA_FIM"),
        )

    def _build_slots(self):
        # A data é só uma âncora para somar timedelta a horários
        anchor = date(2000, 1, 1)
        current = datetime.combine(anchor, self.opening)
        end = datetime.combine(anchor, self.closing)
        pause = None
        if self.pause_start:
            pause = (datetime.combine(anchor, self.pause_start), datetime.combine(anchor, self.pause_end))

        while current + self.interval <= end:
            slot_end = current + self.interval
            during_pause = pause is not None and not (slot_end <= pause[0] or current >= pause[1])
            if not during_pause:
                yield current.time()
            current = slot_end

    @property
    def slots(self):
        return self._slots

    def __contains__(self, value):
        return value in self._slots
