"""
Tests unitarios para CustomerUseCases (cadastro manual, edicion y borrado).

Asaas se reemplaza por un AsyncMock; la base es SQLite en memoria y las
fotos van a un directorio temporal.
"""
from __future__ import annotations

import io
from unittest.mock import AsyncMock

import pytest
from fastapi import UploadFile
from sqlalchemy import select
from starlette.datastructures import Headers

from asaas_sync.application.dto.customer_dto import CustomerUpdateDTO
from asaas_sync.application.use_cases.customer_use_cases import CustomerUseCases
from asaas_sync.infrastructure.database.models import CustomerModel
from asaas_sync.infrastructure.external.asaas.types import AsaasApiError
from asaas_sync.shared.exceptions.base import AppException
from asaas_sync.shared.exceptions.domain import (
    EntityAlreadyExistsException,
    EntityNotFoundException,
    ExternalServiceException,
    ValidationException,
)


CPF = "52998224725"


def _photo(filename: str = "documento.jpg", content_type: str = "image/jpeg") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(b"\xff\xd8fake-jpeg"),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def _form(**overrides):
    data = dict(
        nome="Maria da Silva",
        documento="529.982.247-25",
        telefone="(11) 98765-4321",
        endereco="Rua das Flores, 10",
        verificado="true",
        vendedor_id="7",
        vendedor_nome="Joao",
        foto_documento=_photo(),
    )
    data.update(overrides)
    return data


@pytest.fixture
def asaas() -> AsyncMock:
    mock = AsyncMock()
    mock.find_customer_by_document.return_value = None
    mock.create_customer.return_value = {"id": "cus_new"}
    return mock


@pytest.fixture
def use_cases(db_session, asaas, upload_dir) -> CustomerUseCases:
    return CustomerUseCases(db_session, asaas=asaas, verification=AsyncMock())


def _saved_photos(upload_dir):
    folder = upload_dir / "documentos"
    return list(folder.iterdir()) if folder.exists() else []


class TestRegisterCustomer:
    """Tests del cadastro manual."""

    @pytest.mark.asyncio
    async def test_success(self, use_cases, asaas, db_session, upload_dir) -> None:
        response = await use_cases.register_customer(**_form())

        cliente = response.cliente
        assert cliente.asaas_customer_id == "cus_new"
        assert cliente.documento == CPF
        assert cliente.telefone == "11987654321"
        assert cliente.verificado is True
        assert cliente.vendedor_id == 7
        assert cliente.foto_documento_url.startswith(f"/uploads/documentos/{CPF}_")
        assert len(_saved_photos(upload_dir)) == 1

        payload = asaas.create_customer.await_args.args[0]
        assert payload["cpfCnpj"] == CPF
        assert payload["notificationDisabled"] is True

        stored = (await db_session.execute(select(CustomerModel))).scalar_one()
        assert stored.asaas_id == "cus_new"

    @pytest.mark.asyncio
    async def test_requires_verification(self, use_cases, asaas) -> None:
        with pytest.raises(ValidationException) as exc_info:
            await use_cases.register_customer(**_form(verificado="false"))

        assert exc_info.value.details == {"field": "verificado"}
        asaas.create_customer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_document(self, use_cases) -> None:
        with pytest.raises(ValidationException):
            await use_cases.register_customer(**_form(documento="111.111.111-11"))

    @pytest.mark.asyncio
    async def test_invalid_photo_format(self, use_cases) -> None:
        photo = _photo(filename="documento.pdf", content_type="application/pdf")

        with pytest.raises(ValidationException):
            await use_cases.register_customer(**_form(foto_documento=photo))

    @pytest.mark.asyncio
    async def test_missing_photo(self, use_cases) -> None:
        with pytest.raises(ValidationException):
            await use_cases.register_customer(**_form(foto_documento=None))

    @pytest.mark.asyncio
    async def test_local_duplicate_returns_existing(self, use_cases, asaas, db_session, upload_dir) -> None:
        db_session.add(CustomerModel(asaas_id="cus_old", nome="Maria", cpf_cnpj=CPF))
        await db_session.commit()

        with pytest.raises(EntityAlreadyExistsException) as exc_info:
            await use_cases.register_customer(**_form())

        assert exc_info.value.status_code == 409
        assert exc_info.value.details["existing"]["asaas_customer_id"] == "cus_old"
        asaas.create_customer.assert_not_awaited()
        assert _saved_photos(upload_dir) == []

    @pytest.mark.asyncio
    async def test_remote_duplicate_removes_photo(self, use_cases, asaas, upload_dir) -> None:
        asaas.find_customer_by_document.return_value = {"id": "cus_remote", "name": "Maria", "cpfCnpj": CPF}

        with pytest.raises(EntityAlreadyExistsException) as exc_info:
            await use_cases.register_customer(**_form())

        assert exc_info.value.details["existing"]["asaas_customer_id"] == "cus_remote"
        assert _saved_photos(upload_dir) == []

    @pytest.mark.asyncio
    async def test_remote_lookup_error_is_not_fatal(self, use_cases, asaas) -> None:
        asaas.find_customer_by_document.side_effect = AsaasApiError("timeout")

        response = await use_cases.register_customer(**_form())

        assert response.cliente.asaas_customer_id == "cus_new"

    @pytest.mark.asyncio
    async def test_asaas_create_error(self, use_cases, asaas, upload_dir) -> None:
        asaas.create_customer.side_effect = AsaasApiError(
            "400", status_code=400, description="CPF invalido"
        )

        with pytest.raises(ExternalServiceException) as exc_info:
            await use_cases.register_customer(**_form())

        assert exc_info.value.status_code == 400
        assert "CPF invalido" in exc_info.value.message
        assert _saved_photos(upload_dir) == []

    @pytest.mark.asyncio
    async def test_local_failure_rolls_back_remote(
        self, use_cases, asaas, db_session, upload_dir, monkeypatch
    ) -> None:
        monkeypatch.setattr(db_session, "commit", AsyncMock(side_effect=RuntimeError("db down")))

        with pytest.raises(AppException) as exc_info:
            await use_cases.register_customer(**_form())

        assert exc_info.value.status_code == 500
        assert exc_info.value.error_code == "CUSTOMER_PERSIST_ERROR"
        asaas.delete_customer.assert_awaited_once_with("cus_new")
        assert _saved_photos(upload_dir) == []

    @pytest.mark.asyncio
    async def test_remote_rollback_error_is_logged_only(
        self, use_cases, asaas, db_session, upload_dir, monkeypatch
    ) -> None:
        monkeypatch.setattr(db_session, "commit", AsyncMock(side_effect=RuntimeError("db down")))
        asaas.delete_customer.side_effect = AsaasApiError("fallo")

        with pytest.raises(AppException) as exc_info:
            await use_cases.register_customer(**_form())

        assert exc_info.value.error_code == "CUSTOMER_PERSIST_ERROR"


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_by_local_or_asaas_id(self, use_cases, db_session) -> None:
        customer = CustomerModel(asaas_id="cus_1", nome="Ana")
        db_session.add(customer)
        await db_session.commit()

        by_id = await use_cases.get_customer(str(customer.id))
        by_asaas = await use_cases.get_customer("cus_1")

        assert by_id.id == by_asaas.id == customer.id

    @pytest.mark.asyncio
    async def test_deleted_customer_is_not_found(self, use_cases, db_session) -> None:
        db_session.add(CustomerModel(asaas_id="cus_1", nome="Ana", deletado=True))
        await db_session.commit()

        with pytest.raises(EntityNotFoundException):
            await use_cases.get_customer("cus_1")

    @pytest.mark.asyncio
    async def test_list_search_by_name_and_document(self, use_cases, db_session) -> None:
        db_session.add_all([
            CustomerModel(asaas_id="cus_1", nome="Ana Souza", cpf_cnpj=CPF),
            CustomerModel(asaas_id="cus_2", nome="Bruno Lima", cpf_cnpj="11144477735"),
            CustomerModel(asaas_id="cus_3", nome="Ana Borrada", deletado=True),
        ])
        await db_session.commit()

        by_name = await use_cases.list_customers(busca="ana")
        by_document = await use_cases.list_customers(busca="111.444")

        assert [c.asaas_id for c in by_name.clientes] == ["cus_1"]
        assert by_name.total == 1
        assert [c.asaas_id for c in by_document.clientes] == ["cus_2"]

    @pytest.mark.asyncio
    async def test_list_limit_is_capped(self, use_cases) -> None:
        response = await use_cases.list_customers(limite=10_000)

        assert response.limite == 500


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_update_goes_to_asaas_first(self, use_cases, asaas, db_session) -> None:
        customer = CustomerModel(asaas_id="cus_1", nome="Ana")
        db_session.add(customer)
        await db_session.commit()

        updated = await use_cases.update_customer(
            customer.id, CustomerUpdateDTO(nome="Ana Maria", telefone="(11) 3456-7890")
        )

        asaas.update_customer.assert_awaited_once_with(
            "cus_1", {"name": "Ana Maria", "phone": "1134567890"}
        )
        assert updated.nome == "Ana Maria"
        assert updated.telefone == "1134567890"

    @pytest.mark.asyncio
    async def test_update_asaas_error_keeps_local(self, use_cases, asaas, db_session) -> None:
        customer = CustomerModel(asaas_id="cus_1", nome="Ana")
        db_session.add(customer)
        await db_session.commit()
        asaas.update_customer.side_effect = AsaasApiError("400", status_code=400, description="Invalido")

        with pytest.raises(ExternalServiceException):
            await use_cases.update_customer(customer.id, CustomerUpdateDTO(nome="Otro"))

        await db_session.refresh(customer)
        assert customer.nome == "Ana"

    @pytest.mark.asyncio
    async def test_delete_soft_deletes(self, use_cases, asaas, db_session) -> None:
        customer = CustomerModel(asaas_id="cus_1", nome="Ana")
        db_session.add(customer)
        await db_session.commit()

        await use_cases.delete_customer(customer.id)

        asaas.delete_customer.assert_awaited_once_with("cus_1")
        await db_session.refresh(customer)
        assert customer.deletado is True

    @pytest.mark.asyncio
    async def test_delete_remote_not_found_still_deletes_local(self, use_cases, asaas, db_session) -> None:
        customer = CustomerModel(asaas_id="cus_1", nome="Ana")
        db_session.add(customer)
        await db_session.commit()
        asaas.delete_customer.side_effect = AsaasApiError("404", status_code=404)

        await use_cases.delete_customer(customer.id)

        await db_session.refresh(customer)
        assert customer.deletado is True

    @pytest.mark.asyncio
    async def test_delete_unknown_customer(self, use_cases) -> None:
        with pytest.raises(EntityNotFoundException):
            await use_cases.delete_customer(999)
