from contextlib import contextmanager

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .errors import AgendaError, SlotUnavailable, StoreUnavailable
from .models import db
from .models.appointment import STATUS_CANCELLED, Appointment
from .models.blocked_date import BlockedDate
from .models.client import Client
from .models.service import Service
from .models.status_log import StatusLogEntry

_DEPTH_KEY = "agenda_transaction_depth"


class SQLAlchemyStore:
    """Armazenamento da agenda sobre a sessão do Flask-SQLAlchemy.

    Os serviços de `barbearia.services` só conhecem esta interface; os testes
    usam uma implementação em memória com os mesmos métodos.
    """

    def __init__(self, database=db):
        self.db = database

    @property
    def session(self):
        return self.db.session

    @contextmanager
    def transaction(self):
        """Unidade atômica: commit no nível mais externo, rollback em qualquer falha.

        Blocos aninhados participam da transação de fora.
        """
        info = self.session.info
        depth = info.get(_DEPTH_KEY, 0)
        info[_DEPTH_KEY] = depth + 1
        try:
            yield self
            if depth == 0:
                self.session.commit()
        except AgendaError:
            if depth == 0:
                self.session.rollback()
            raise
        except SQLAlchemyError as exc:
            if depth == 0:
                self.session.rollback()
            raise StoreUnavailable() from exc
        except Exception:
            if depth == 0:
                self.session.rollback()
            raise
        finally:
            info[_DEPTH_KEY] = depth

    # Clientes e serviços

    def client_exists(self, client_id):
        return self.session.get(Client, client_id) is not None

    def service_exists(self, service_id):
        return self.session.get(Service, service_id) is not None

    # Agendamentos

    def is_blocked(self, day):
        return self.get_blocked(day) is not None

    def occupied_times(self, day):
        rows = self.session.execute(
            select(Appointment.hora_agendada).where(
                Appointment.data_agendada == day,
                Appointment.status != STATUS_CANCELLED,
            )
        ).scalars()
        return set(rows)

    def insert_appointment(self, client_id, service_id, day, hour, notes, status):
        appointment = Appointment(
            cliente_id=client_id,
            servico_id=service_id,
            data_agendada=day,
            hora_agendada=hour,
            observacoes=notes or "",
        )
        appointment.set_status(status)
        self.session.add(appointment)
        try:
            self.session.flush()
        except IntegrityError as exc:
            # A restrição única de (data, hora, ativo) é a última barreira contra reservas simultâneas
            raise SlotUnavailable() from exc
        return appointment

    def get_appointment(self, appointment_id):
        return self.session.get(Appointment, appointment_id)

    def update_appointment_status(self, appointment, status):
        appointment.set_status(status)
        self.session.flush()
        return appointment

    def list_appointments(self, day=None, status=None):
        query = select(Appointment)
        if day is not None:
            query = query.where(Appointment.data_agendada == day)
        if status is not None:
            query = query.where(Appointment.status == status)
        query = query.order_by(Appointment.data_agendada.asc(), Appointment.hora_agendada.asc())
        return list(self.session.execute(query).scalars())

    # Datas bloqueadas

    def get_blocked(self, day):
        return self.session.execute(select(BlockedDate).filter_by(data=day)).scalar_one_or_none()

    def add_blocked(self, day, reason):
        record = BlockedDate(data=day, motivo=reason)
        try:
            # Savepoint: só esta inserção é desfeita, a transação de fora continua
            with self.session.begin_nested():
                self.session.add(record)
        except IntegrityError:
            # Outra requisição bloqueou a mesma data entre a leitura e a escrita
            return self.get_blocked(day)
        return record

    def delete_blocked(self, day):
        record = self.get_blocked(day)
        if record is None:
            return False
        self.session.delete(record)
        self.session.flush()
        return True

    def list_blocked(self):
        return list(self.session.execute(select(BlockedDate).order_by(BlockedDate.data.asc())).scalars())

    # Logs de status

    def append_log(self, appointment_id, previous_status, new_status, actor):
        entry = StatusLogEntry(
            agendamento_id=appointment_id,
            status_anterior=previous_status,
            status_novo=new_status,
            alterado_por=actor,
        )
        self.session.add(entry)
        self.session.flush()
        return entry

    def list_logs(self):
        query = select(StatusLogEntry).order_by(StatusLogEntry.criado_em.desc(), StatusLogEntry.id.desc())
        return list(self.session.execute(query).scalars())

    def logs_for(self, appointment_id):
        query = (
            select(StatusLogEntry)
            .filter_by(agendamento_id=appointment_id)
            .order_by(StatusLogEntry.id.asc())
        )
        return list(self.session.execute(query).scalars())
