from . import db, local_now


class Client(db.Model):
    __tablename__ = "clientes"

    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(150), nullable=False, index=True)
    telefone = db.Column(db.String(20), nullable=False, index=True)  # apenas dígitos
    criado_em = db.Column(db.DateTime, nullable=False, default=local_now)

    def to_dict(self):
        return {
            "id": self.id,
            "nome": self.nome,
            "email": self.email,
            "telefone": self.telefone,
        }

    def __repr__(self):
        return f"<Client {self.nome}>"
