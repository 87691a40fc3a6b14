import logging
import re

from sqlalchemy import func, select

from ..errors import DuplicateClient, InvalidPayload
from ..models.client import Client

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def text_value(value, field):
    """Valor textual de um campo vindo do JSON; None vira string vazia."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidPayload(f"O campo {field} deve ser texto")
    return value.strip()


def normalize_phone(telefone):
    return re.sub(r"\D", "", text_value(telefone, "telefone"))


class ClientDirectory:
    """Cadastro de clientes com detecção de duplicatas por nome, email e telefone."""

    def __init__(self, store):
        self.store = store

    def _exists(self, clause):
        with self.store.transaction():
            return self.store.session.execute(select(Client.id).where(clause).limit(1)).first() is not None

    def name_exists(self, nome):
        nome = text_value(nome, "nome")
        if not nome:
            return False
        return self._exists(func.lower(Client.nome) == nome.lower())

    def email_exists(self, email):
        email = text_value(email, "email")
        if not email:
            return False
        return self._exists(func.lower(Client.email) == email.lower())

    def phone_exists(self, telefone):
        telefone = normalize_phone(telefone)
        if not telefone:
            return False
        return self._exists(Client.telefone == telefone)

    def check_duplicates(self, nome, email, telefone):
        result = {
            "nome": self.name_exists(nome),
            "email": self.email_exists(email),
            "telefone": self.phone_exists(telefone),
        }
        result["duplicado"] = any(result.values())
        return result

    def create_client(self, nome, email, telefone):
        nome = text_value(nome, "nome")
        email = text_value(email, "email").lower()
        telefone = normalize_phone(telefone)
        if not nome or not email or not telefone:
            raise InvalidPayload("Informe nome, email e telefone")
        if not EMAIL_RE.match(email):
            raise InvalidPayload("Email inválido")

        duplicates = self.check_duplicates(nome, email, telefone)
        fields = [field for field in ("nome", "email", "telefone") if duplicates[field]]
        if fields:
            raise DuplicateClient(fields)

        with self.store.transaction():
            client = Client(nome=nome, email=email, telefone=telefone)
            self.store.session.add(client)
            self.store.session.flush()
        logger.info("Cliente %s cadastrado", client.id)
        return client

    def list_clients(self):
        with self.store.transaction():
            return list(self.store.session.execute(select(Client).order_by(Client.nome.asc())).scalars())
