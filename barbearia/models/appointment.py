from . import db, local_now

STATUS_PENDING = "pendente"
STATUS_CONFIRMED = "confirmado"
STATUS_COMPLETED = "concluido"
STATUS_CANCELLED = "cancelado"

STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_COMPLETED, STATUS_CANCELLED)

# Transições aceitas pelo painel; concluido e cancelado são finais
TRANSITIONS = {
    STATUS_PENDING: {STATUS_CONFIRMED, STATUS_CANCELLED},
    STATUS_CONFIRMED: {STATUS_COMPLETED, STATUS_CANCELLED},
    STATUS_COMPLETED: set(),
    STATUS_CANCELLED: set(),
}


class Appointment(db.Model):
    __tablename__ = "agendamentos"
    # `ativo` vale True enquanto o agendamento ocupa o horário e NULL depois de cancelado.
    # NULLs não colidem em índices únicos, então só agendamentos ativos disputam (data, hora).
    __table_args__ = (
        db.UniqueConstraint("data_agendada", "hora_agendada", "ativo", name="uq_agendamentos_horario_ativo"),
    )

    id = db.Column(db.Integer, primary_key=True)
    cliente_id = db.Column(db.Integer, db.ForeignKey("clientes.id"), nullable=False)
    servico_id = db.Column(db.Integer, db.ForeignKey("servicos.id"), nullable=False)
    data_agendada = db.Column(db.Date, nullable=False, index=True)
    hora_agendada = db.Column(db.Time, nullable=False)
    observacoes = db.Column(db.Text, nullable=False, default="")
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)
    ativo = db.Column(db.Boolean, nullable=True, default=True)
    criado_em = db.Column(db.DateTime, nullable=False, default=local_now)

    cliente = db.relationship("Client", backref=db.backref("agendamentos", lazy=True))
    servico = db.relationship("Service", backref=db.backref("agendamentos", lazy=True))

    def set_status(self, status):
        self.status = status
        self.ativo = None if status == STATUS_CANCELLED else True

    def to_dict(self):
        return {
            "id": self.id,
            "cliente_id": self.cliente_id,
            "servico_id": self.servico_id,
            "data_agendada": self.data_agendada.isoformat(),
            "hora_agendada": self.hora_agendada.strftime("%H:%M"),
            "observacoes": self.observacoes,
            "status": self.status,
            "cliente_nome": self.cliente.nome if self.cliente else None,
            "cliente_email": self.cliente.email if self.cliente else None,
            "cliente_telefone": self.cliente.telefone if self.cliente else None,
            "servico_nome": self.servico.nome if self.servico else None,
            "servico_preco": float(self.servico.preco) if self.servico else None,
            "criado_em": self.criado_em.isoformat() if self.criado_em else None,
        }

    def __repr__(self):
        return f"<Appointment {self.data_agendada} {self.hora_agendada} ({self.status})>"
