import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import pytest
from sqlalchemy import event
from sqlalchemy.engine import Engine

from barbearia.errors import SlotUnavailable
from barbearia.main import create_app
from barbearia.models import db
from barbearia.models.client import Client
from barbearia.models.service import Service
from barbearia.schedule import BusinessHours
from barbearia.services import Agenda


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite só aplica ON DELETE SET NULL com foreign_keys ligado
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


ADMIN_TOKEN = "token-de-teste"
ADMIN_NAME = "Admin Teste"


@dataclass
class FakeAppointment:
    id: int
    cliente_id: int
    servico_id: int
    data_agendada: date
    hora_agendada: time
    observacoes: str
    status: str


@dataclass
class FakeBlockedDate:
    data: date
    motivo: Optional[str]


@dataclass(frozen=True)
class FakeLogEntry:
    id: int
    agendamento_id: Optional[int]
    status_anterior: Optional[str]
    status_novo: str
    alterado_por: str
    criado_em: datetime


class FakeStore:
    """Armazenamento em memória com a mesma interface do SQLAlchemyStore.

    A inserção de agendamento é um "insere se livre" sob lock, como a restrição única do banco.
    """

    def __init__(self, clients=(1,), services=(1,)):
        self.clients = set(clients)
        self.services = set(services)
        self.appointments = {}
        self.blocked = {}
        self.logs = []
        self._lock = threading.Lock()
        self._next_id = 1

    @contextmanager
    def transaction(self):
        yield self

    def client_exists(self, client_id):
        return client_id in self.clients

    def service_exists(self, service_id):
        return service_id in self.services

    def is_blocked(self, day):
        return day in self.blocked

    def occupied_times(self, day):
        return {
            a.hora_agendada
            for a in list(self.appointments.values())
            if a.data_agendada == day and a.status != "cancelado"
        }

    def insert_appointment(self, client_id, service_id, day, hour, notes, status):
        with self._lock:
            if hour in self.occupied_times(day):
                raise SlotUnavailable()
            appointment = FakeAppointment(self._next_id, client_id, service_id, day, hour, notes, status)
            self.appointments[appointment.id] = appointment
            self._next_id += 1
            return appointment

    def get_appointment(self, appointment_id):
        return self.appointments.get(appointment_id)

    def update_appointment_status(self, appointment, status):
        appointment.status = status
        return appointment

    def list_appointments(self, day=None, status=None):
        result = [
            a for a in self.appointments.values()
            if (day is None or a.data_agendada == day) and (status is None or a.status == status)
        ]
        return sorted(result, key=lambda a: (a.data_agendada, a.hora_agendada))

    def get_blocked(self, day):
        return self.blocked.get(day)

    def add_blocked(self, day, reason):
        record = FakeBlockedDate(day, reason)
        self.blocked[day] = record
        return record

    def delete_blocked(self, day):
        return self.blocked.pop(day, None) is not None

    def list_blocked(self):
        return sorted(self.blocked.values(), key=lambda record: record.data)

    def append_log(self, appointment_id, previous_status, new_status, actor):
        with self._lock:
            entry = FakeLogEntry(len(self.logs) + 1, appointment_id, previous_status, new_status, actor, datetime.now())
            self.logs.append(entry)
            return entry

    def list_logs(self):
        return list(reversed(self.logs))

    def logs_for(self, appointment_id):
        return [entry for entry in self.logs if entry.agendamento_id == appointment_id]


@pytest.fixture
def hours():
    return BusinessHours("09:00", "19:00", 60, "12:00", "13:00")


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def agenda(fake_store, hours):
    return Agenda(fake_store, hours)


def fake_authorizer(req):
    if req.headers.get("Authorization") == f"Bearer {ADMIN_TOKEN}":
        return ADMIN_NAME
    return None


def make_app(database_uri="sqlite:///:memory:"):
    return create_app({
        "TESTING": True,
        "SECRET_KEY": "chave-de-teste",
        "SQLALCHEMY_DATABASE_URI": database_uri,
        "AUTHORIZER": fake_authorizer,
        "HORARIO_ABERTURA": "09:00",
        "HORARIO_FECHAMENTO": "19:00",
        "INTERVALO_MINUTOS": 60,
        "PAUSA_INICIO": "12:00",
        "PAUSA_FIM": "13:00",
    })


@pytest.fixture
def app():
    app = make_app()
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


def add_client_and_service():
    cliente = Client(nome="João Silva", email="joao@example.com", telefone="11999998888")
    servico = Service(nome="Corte Sobrenatural", descricao="Corte completo", preco=Decimal("45.00"))
    db.session.add_all([cliente, servico])
    db.session.commit()
    return {"cliente_id": cliente.id, "servico_id": servico.id}


@pytest.fixture
def seed(app):
    """Um cliente e um serviço já cadastrados."""
    return add_client_and_service()


@pytest.fixture
def file_app(tmp_path):
    """App sobre um arquivo SQLite, para testes com várias conexões simultâneas."""
    app = make_app(f"sqlite:///{tmp_path / 'agenda.db'}")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def file_seed(file_app):
    return add_client_and_service()
