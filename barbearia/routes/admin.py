from decimal import Decimal, InvalidOperation

from flask import Blueprint, current_app, g, jsonify, request
from sqlalchemy import select

from ..auth import require_admin
from ..errors import InvalidPayload, NotFound
from ..models import db
from ..models.service import Service
from .client import get_agenda, json_body

admin_bp = Blueprint("admin", __name__)


def _price(value):
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidPayload("Preço inválido")
    if price < 0:
        raise InvalidPayload("Preço não pode ser negativo")
    return price


# Rota para adicionar um novo serviço
@admin_bp.route("/servicos", methods=["POST"])
@require_admin
def create_service():
    data = json_body("nome", "preco", strings=("nome", "descricao"))
    existing_service = db.session.execute(select(Service).filter_by(nome=data["nome"])).scalar_one_or_none()
    if existing_service:
        return jsonify({"error": "servico_duplicado", "message": "Já existe um serviço com este nome"}), 409

    service = Service(nome=data["nome"], descricao=data.get("descricao") or "", preco=_price(data["preco"]))
    db.session.add(service)
    db.session.commit()
    current_app.logger.info("Serviço %s criado por %s", service.nome, g.actor)
    return jsonify(service.to_dict()), 201


# Rota para atualizar um serviço
@admin_bp.route("/servicos/<int:service_id>", methods=["PUT"])
@require_admin
def update_service(service_id):
    service = db.session.get(Service, service_id)
    if service is None:
        raise NotFound("Serviço não encontrado")
    data = json_body(strings=("nome", "descricao"))

    # Nome novo não pode repetir o de outro serviço
    if "nome" in data and data["nome"] != service.nome:
        existing_service = db.session.execute(
            select(Service).where(Service.nome == data["nome"], Service.id != service_id)
        ).scalar_one_or_none()
        if existing_service:
            return jsonify({"error": "servico_duplicado", "message": "Já existe um serviço com este nome"}), 409

    service.nome = data.get("nome") or service.nome
    if data.get("descricao") is not None:
        service.descricao = data["descricao"]
    if "preco" in data:
        service.preco = _price(data["preco"])
    db.session.commit()
    return jsonify(service.to_dict())


# Rota para listar agendamentos (filtros opcionais por data e status)
@admin_bp.route("/agendamentos", methods=["GET"])
@require_admin
def list_appointments():
    appointments = get_agenda().booking.list_appointments(
        day=request.args.get("data") or None,
        status=request.args.get("status") or None,
    )
    return jsonify([appointment.to_dict() for appointment in appointments])


# Rota para alterar o status de um agendamento (gera log)
@admin_bp.route("/agendamentos/<int:appointment_id>", methods=["PATCH"])
@require_admin
def update_appointment_status(appointment_id):
    data = json_body("status", strings=("status",))
    appointment = get_agenda().booking.change_status(appointment_id, data["status"], g.actor)
    return jsonify(appointment.to_dict())


# Rota com a disponibilidade de todos os horários de uma data
@admin_bp.route("/disponibilidade", methods=["GET"])
@require_admin
def availability():
    return jsonify(get_agenda().availability.compute_availability(request.args.get("data")))


# Rota para verificar um horário específico
@admin_bp.route("/verificar-horario", methods=["GET"])
@require_admin
def check_slot():
    available = get_agenda().availability.is_slot_available(request.args.get("data"), request.args.get("hora"))
    return jsonify({"disponivel": available})


@admin_bp.route("/datas-bloqueadas", methods=["GET"])
@require_admin
def list_blocked_dates():
    return jsonify([record.to_dict() for record in get_agenda().blocked_dates.list_blocked()])


@admin_bp.route("/datas-bloqueadas", methods=["POST"])
@require_admin
def block_date():
    data = json_body("data", strings=("data", "motivo"))
    get_agenda().blocked_dates.block(data["data"], data.get("motivo"))
    return jsonify({"success": True}), 201


@admin_bp.route("/datas-bloqueadas/<data>", methods=["DELETE"])
@require_admin
def unblock_date(data):
    get_agenda().blocked_dates.unblock(data)
    return jsonify({"success": True})


# Rota para os logs de alteração de status (mais recentes primeiro)
@admin_bp.route("/logs-agendamentos", methods=["GET"])
@require_admin
def list_status_logs():
    return jsonify([entry.to_dict() for entry in get_agenda().status_log.list_entries()])
