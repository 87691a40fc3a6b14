from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import select, text

from ..errors import InvalidPayload
from ..models import db
from ..models.appointment import STATUS_CANCELLED, Appointment
from ..models.service import Service
from ..schedule import format_time, parse_date

client_bp = Blueprint("client", __name__)


def get_agenda():
    return current_app.extensions["agenda"]


def get_clients():
    return current_app.extensions["clientes"]


def json_body(*required, strings=()):
    """Corpo JSON da requisição; `strings` lista os campos que, se enviados, precisam ser strings."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidPayload("Envie os dados em JSON")
    missing = [field for field in required if data.get(field) in (None, "")]
    if missing:
        raise InvalidPayload(f"Campos obrigatórios ausentes: {', '.join(missing)}")
    not_text = [field for field in strings if data.get(field) is not None and not isinstance(data[field], str)]
    if not_text:
        raise InvalidPayload(f"Campos devem ser texto: {', '.join(not_text)}")
    return data


def record_id(value, field):
    # bool é subclasse de int e 1.9 não é um id
    if isinstance(value, bool):
        raise InvalidPayload(f"{field} deve ser um número inteiro")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise InvalidPayload(f"{field} deve ser um número inteiro")


# Rota de verificação do banco
@client_bp.route("/health", methods=["GET"])
def health():
    db.session.execute(text("SELECT 1"))
    return jsonify({"status": "ok", "database": "ok"})


# Rota para listar serviços da barbearia
@client_bp.route("/servicos", methods=["GET"])
def list_services():
    services = db.session.execute(select(Service).order_by(Service.nome.asc())).scalars()
    return jsonify([service.to_dict() for service in services])


# Rota para listar clientes
@client_bp.route("/clientes", methods=["GET"])
def list_clients():
    return jsonify([client.to_dict() for client in get_clients().list_clients()])


# Rota para cadastrar cliente (recusa duplicatas)
@client_bp.route("/clientes", methods=["POST"])
def create_client():
    data = json_body("nome", "email", "telefone", strings=("nome", "email", "telefone"))
    client = get_clients().create_client(data["nome"], data["email"], data["telefone"])
    return jsonify(client.to_dict()), 201


@client_bp.route("/clientes/verificar-duplicata", methods=["POST"])
def check_duplicate_client():
    data = json_body(strings=("nome", "email", "telefone"))
    result = get_clients().check_duplicates(data.get("nome"), data.get("email"), data.get("telefone"))
    return jsonify(result)


@client_bp.route("/clientes/verificar-nome", methods=["GET"])
def check_name():
    return jsonify({"existe": get_clients().name_exists(request.args.get("nome"))})


@client_bp.route("/clientes/verificar-email", methods=["GET"])
def check_email():
    return jsonify({"existe": get_clients().email_exists(request.args.get("email"))})


@client_bp.route("/clientes/verificar-telefone", methods=["GET"])
def check_phone():
    return jsonify({"existe": get_clients().phone_exists(request.args.get("telefone"))})


# Rota para criar agendamento (formulário público)
@client_bp.route("/agendamentos", methods=["POST"])
def create_appointment():
    data = json_body(
        "cliente_id", "servico_id", "data_agendada", "hora_agendada",
        strings=("data_agendada", "hora_agendada", "observacoes"),
    )
    client_id = record_id(data["cliente_id"], "cliente_id")
    service_id = record_id(data["servico_id"], "servico_id")

    appointment = get_agenda().booking.create_appointment(
        client_id,
        service_id,
        data["data_agendada"],
        data["hora_agendada"],
        data.get("observacoes") or "",
    )
    return jsonify(appointment.to_dict()), 201


# Rota para listar horários ocupados de uma data (sem dados pessoais)
@client_bp.route("/agendamentos-data", methods=["GET"])
def appointments_by_date():
    day = parse_date(request.args.get("data"))
    appointments = db.session.execute(
        select(Appointment)
        .where(Appointment.data_agendada == day, Appointment.status != STATUS_CANCELLED)
        .order_by(Appointment.hora_agendada.asc())
    ).scalars()
    return jsonify([
        {"hora_agendada": format_time(appointment.hora_agendada), "status": appointment.status}
        for appointment in appointments
    ])
