from . import db, local_now


class StatusLogEntry(db.Model):
    """Registro de auditoria de uma mudança de status. Nunca é alterado nem removido."""

    __tablename__ = "logs_agendamentos"

    id = db.Column(db.Integer, primary_key=True)
    # Referência fraca: se o agendamento for apagado por retenção de dados o log fica com NULL
    agendamento_id = db.Column(
        db.Integer, db.ForeignKey("agendamentos.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status_anterior = db.Column(db.String(20), nullable=True)
    status_novo = db.Column(db.String(20), nullable=False)
    alterado_por = db.Column(db.String(150), nullable=False)
    criado_em = db.Column(db.DateTime, nullable=False, default=local_now)

    agendamento = db.relationship("Appointment")

    def to_dict(self):
        appointment = self.agendamento
        return {
            "id": self.id,
            "agendamento_id": self.agendamento_id,
            "status_anterior": self.status_anterior,
            "status_novo": self.status_novo,
            "alterado_por": self.alterado_por,
            "criado_em": self.criado_em.isoformat(),
            "data_agendada": appointment.data_agendada.isoformat() if appointment else None,
            "hora_agendada": appointment.hora_agendada.strftime("%H:%M") if appointment else None,
            "cliente_nome": appointment.cliente.nome if appointment and appointment.cliente else None,
        }

    def __repr__(self):
        return f"<StatusLogEntry {self.agendamento_id}: {self.status_anterior} -> {self.status_novo}>"
