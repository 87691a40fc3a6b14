class AgendaError(Exception):
    """Erro base da agenda. Cada subclasse define o status HTTP e o código devolvido ao front-end."""

    status_code = 400
    code = "erro"
    default_message = "Erro ao processar a requisição"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"error": self.code, "message": self.message}


class InvalidDate(AgendaError):
    code = "data_invalida"
    default_message = "Data inválida. Use o formato YYYY-MM-DD"


class InvalidTime(AgendaError):
    code = "horario_invalido"
    default_message = "Horário inválido. Use o formato HH:MM dentro do horário de funcionamento"


class InvalidPayload(AgendaError):
    code = "dados_invalidos"
    default_message = "Dados obrigatórios ausentes"


class InvalidStatus(AgendaError):
    code = "status_invalido"
    default_message = "Status inválido"


class NotFound(AgendaError):
    status_code = 404
    code = "nao_encontrado"
    default_message = "Registro não encontrado"


class SlotUnavailable(AgendaError):
    status_code = 409
    code = "horario_indisponivel"
    default_message = "O horário selecionado não está mais disponível"


class DuplicateClient(AgendaError):
    status_code = 409
    code = "cliente_duplicado"
    default_message = "Já existe um cliente com estes dados"

    def __init__(self, fields, message=None):
        self.fields = fields
        super().__init__(message or f"Já existe um cliente com o mesmo {', '.join(fields)}")

    def to_dict(self):
        data = super().to_dict()
        data["campos"] = self.fields
        return data


class StoreUnavailable(AgendaError):
    # Falha de infraestrutura: o chamador decide se tenta de novo
    status_code = 503
    code = "servico_indisponivel"
    default_message = "Serviço temporariamente indisponível. Tente novamente em instantes"
