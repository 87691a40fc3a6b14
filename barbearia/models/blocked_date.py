from . import db, local_now


class BlockedDate(db.Model):
    __tablename__ = "datas_bloqueadas"

    id = db.Column(db.Integer, primary_key=True)
    data = db.Column(db.Date, nullable=False, unique=True)
    motivo = db.Column(db.String(255), nullable=True)
    criado_em = db.Column(db.DateTime, nullable=False, default=local_now)

    def to_dict(self):
        return {"data": self.data.isoformat(), "motivo": self.motivo}

    def __repr__(self):
        return f"<BlockedDate {self.data}>"
