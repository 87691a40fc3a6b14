"""Tests for the public API routes."""
import pytest

from barbearia.models.appointment import Appointment


class TestServices:
    def test_list_services(self, client, seed):
        response = client.get("/api/servicos")

        assert response.status_code == 200
        data = response.get_json()
        assert data == [{"id": seed["servico_id"], "nome": "Corte Sobrenatural", "descricao": "Corte completo", "preco": 45.0}]

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.get_json()["database"] == "ok"


class TestClients:
    def test_create_client(self, client):
        response = client.post(
            "/api/clientes",
            json={"nome": "Maria Souza", "email": "Maria@Example.com", "telefone": "(11) 98888-7777"},
        )

        assert response.status_code == 201
        data = response.get_json()
        assert data["email"] == "maria@example.com"
        assert data["telefone"] == "11988887777"

    def test_create_duplicate_client(self, client, seed):
        response = client.post(
            "/api/clientes",
            json={"nome": "joão silva", "email": "outro@example.com", "telefone": "11000000000"},
        )

        assert response.status_code == 409
        data = response.get_json()
        assert data["error"] == "cliente_duplicado"
        assert data["campos"] == ["nome"]

    def test_create_client_missing_fields(self, client):
        response = client.post("/api/clientes", json={"nome": "Maria"})

        assert response.status_code == 400
        assert response.get_json()["error"] == "dados_invalidos"

    def test_create_client_invalid_email(self, client):
        response = client.post("/api/clientes", json={"nome": "Maria", "email": "maria", "telefone": "11988887777"})
        assert response.status_code == 400

    def test_check_duplicate(self, client, seed):
        response = client.post(
            "/api/clientes/verificar-duplicata",
            json={"nome": "Outro Nome", "email": "JOAO@example.com", "telefone": "11 99999-8888"},
        )

        assert response.get_json() == {"nome": False, "email": True, "telefone": True, "duplicado": True}

    def test_check_individual_fields(self, client, seed):
        assert client.get("/api/clientes/verificar-nome", query_string={"nome": "João Silva"}).get_json() == {"existe": True}
        assert client.get("/api/clientes/verificar-email?email=nao@existe.com").get_json() == {"existe": False}
        assert client.get("/api/clientes/verificar-telefone?telefone=11999998888").get_json() == {"existe": True}
        assert client.get("/api/clientes/verificar-telefone").get_json() == {"existe": False}

    @pytest.mark.parametrize("field", ["nome", "email", "telefone"])
    def test_create_client_non_text_field(self, client, field):
        payload = {"nome": "Maria Souza", "email": "maria@example.com", "telefone": "11988887777"}
        payload[field] = 123

        response = client.post("/api/clientes", json=payload)

        assert response.status_code == 400
        assert response.get_json()["error"] == "dados_invalidos"

    def test_check_duplicate_non_text_field(self, client):
        response = client.post("/api/clientes/verificar-duplicata", json={"nome": ["x"], "telefone": 11999998888})

        assert response.status_code == 400
        assert response.get_json()["error"] == "dados_invalidos"

    def test_list_clients(self, client, seed):
        response = client.get("/api/clientes")
        assert [c["nome"] for c in response.get_json()] == ["João Silva"]


class TestCreateAppointment:
    def _payload(self, seed, **overrides):
        payload = {
            "cliente_id": seed["cliente_id"],
            "servico_id": seed["servico_id"],
            "data_agendada": "2025-03-10",
            "hora_agendada": "14:00:00",
            "observacoes": "Degradê",
        }
        payload.update(overrides)
        return payload

    def test_create(self, client, seed):
        response = client.post("/api/agendamentos", json=self._payload(seed))

        assert response.status_code == 201
        data = response.get_json()
        assert data["status"] == "pendente"
        assert data["data_agendada"] == "2025-03-10"
        assert data["hora_agendada"] == "14:00"
        assert data["cliente_nome"] == "João Silva"
        assert data["servico_nome"] == "Corte Sobrenatural"

    def test_conflict(self, client, seed):
        client.post("/api/agendamentos", json=self._payload(seed))

        response = client.post("/api/agendamentos", json=self._payload(seed, hora_agendada="14:00"))

        assert response.status_code == 409
        assert response.get_json()["error"] == "horario_indisponivel"

    def test_invalid_date(self, client, seed):
        response = client.post("/api/agendamentos", json=self._payload(seed, data_agendada="10/03/2025"))

        assert response.status_code == 400
        assert response.get_json()["error"] == "data_invalida"

    def test_time_outside_business_hours(self, client, seed):
        response = client.post("/api/agendamentos", json=self._payload(seed, hora_agendada="22:00"))

        assert response.status_code == 400
        assert response.get_json()["error"] == "horario_invalido"

    def test_unknown_client(self, client, seed):
        response = client.post("/api/agendamentos", json=self._payload(seed, cliente_id=999))

        assert response.status_code == 404

    def test_missing_fields(self, client):
        response = client.post("/api/agendamentos", json={"cliente_id": 1})

        assert response.status_code == 400
        assert "servico_id" in response.get_json()["message"]

    def test_notes_must_be_text(self, client, seed):
        response = client.post("/api/agendamentos", json=self._payload(seed, observacoes={"a": 1}))

        assert response.status_code == 400
        assert response.get_json()["error"] == "dados_invalidos"

    @pytest.mark.parametrize("value", [True, 1.9, "1a", [1]])
    def test_client_id_must_be_integer(self, client, seed, value):
        response = client.post("/api/agendamentos", json=self._payload(seed, cliente_id=value))

        assert response.status_code == 400
        assert "cliente_id" in response.get_json()["message"]
        assert Appointment.query.count() == 0

    def test_ids_as_digit_strings(self, client, seed):
        payload = self._payload(seed, cliente_id=str(seed["cliente_id"]), servico_id=str(seed["servico_id"]))

        response = client.post("/api/agendamentos", json=payload)

        assert response.status_code == 201

    def test_not_json(self, client):
        response = client.post("/api/agendamentos", data="cliente_id=1")
        assert response.status_code == 400

    def test_appointments_by_date(self, client, seed):
        client.post("/api/agendamentos", json=self._payload(seed, hora_agendada="15:00"))
        client.post("/api/agendamentos", json=self._payload(seed, hora_agendada="09:00"))

        response = client.get("/api/agendamentos-data?data=2025-03-10")

        assert response.get_json() == [
            {"hora_agendada": "09:00", "status": "pendente"},
            {"hora_agendada": "15:00", "status": "pendente"},
        ]
