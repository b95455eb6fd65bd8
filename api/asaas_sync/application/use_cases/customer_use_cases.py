"""
Casos de uso de clientes: consultas, cadastro manual con verificacion,
edicion/borrado (Asaas primero, luego local) y envio de codigo de verificacion.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import UploadFile
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from asaas_sync.application.dto.customer_dto import (
    CustomerCreatedDTO,
    CustomerCreateResponseDTO,
    CustomerListResponseDTO,
    CustomerResponseDTO,
    CustomerUpdateDTO,
    VerificationRequestDTO,
)
from asaas_sync.infrastructure.database.models import CustomerModel
from asaas_sync.infrastructure.external.asaas.client import AsaasClient
from asaas_sync.infrastructure.external.asaas.types import AsaasApiError
from asaas_sync.infrastructure.external.verification.verification_client import VerificationClient
from asaas_sync.infrastructure.repositories.customer_repository import CustomerRepository
from asaas_sync.shared.exceptions.base import AppException
from asaas_sync.shared.exceptions.domain import (
    EntityAlreadyExistsException,
    EntityNotFoundException,
    ExternalServiceException,
    ValidationException,
)
from asaas_sync.shared.utils.document_validators import (
    is_valid_document,
    is_valid_phone,
    only_digits,
)
from asaas_sync.shared.utils.file_storage import (
    save_document_photo,
    validate_image,
)


LOG_TAG = "[CADASTRO-CLIENTE]"

# Campos editables -> nombre del campo en Asaas
_UPDATE_FIELD_MAP = {
    "nome": "name",
    "email": "email",
    "telefone": "phone",
    "celular": "mobilePhone",
    "endereco": "address",
    "numero_endereco": "addressNumber",
    "complemento": "complement",
    "bairro": "province",
    "cep": "postalCode",
    "observacoes": "observations",
}


def _existing_local_payload(customer: CustomerModel) -> Dict[str, Any]:
    return {
        "id": customer.id,
        "nome": customer.nome,
        "documento": customer.cpf_cnpj,
        "telefone": customer.telefone,
        "endereco": customer.endereco,
        "verificado": customer.verificado,
        "vendedor_id": customer.vendedor_id,
        "vendedor_nome": customer.vendedor_nome,
        "asaas_customer_id": customer.asaas_id,
        "foto_documento_url": customer.foto_documento_url,
        "criado_em": customer.criado_em.isoformat() if customer.criado_em else None,
    }


def _existing_remote_payload(customer: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "nome": customer.get("name"),
        "documento": customer.get("cpfCnpj"),
        "telefone": customer.get("phone") or customer.get("mobilePhone"),
        "email": customer.get("email"),
        "asaas_customer_id": customer.get("id"),
        "cadastrado_em": customer.get("dateCreated"),
    }


class CustomerUseCases:
    """Casos de uso de clientes."""

    def __init__(
        self,
        db: AsyncSession,
        asaas: Optional[AsaasClient] = None,
        verification: Optional[VerificationClient] = None,
    ) -> None:
        self.db = db
        self.repository = CustomerRepository(db)
        self.asaas = asaas
        self.verification = verification or VerificationClient()

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------

    async def list_customers(
        self,
        busca: Optional[str] = None,
        ordem: str = "nome",
        limite: int = 100,
        pagina: int = 1,
    ) -> CustomerListResponseDTO:
        rows, total = await self.repository.search(
            busca=busca, ordem=ordem, limite=limite, pagina=pagina
        )
        logger.debug(f"[LISTAR-CLIENTES] {len(rows)} clientes (total={total})")
        return CustomerListResponseDTO(
            clientes=[CustomerResponseDTO.model_validate(row) for row in rows],
            total=total,
            pagina=max(pagina, 1),
            limite=min(max(limite, 1), 500),
        )

    async def get_customer(self, identifier: str) -> CustomerResponseDTO:
        customer = await self.repository.get_by_local_or_external_id(identifier)
        if customer is None:
            raise EntityNotFoundException("Cliente", identifier)
        return CustomerResponseDTO.model_validate(customer)

    # ------------------------------------------------------------------
    # Cadastro manual
    # ------------------------------------------------------------------

    async def register_customer(
        self,
        *,
        nome: Optional[str],
        documento: Optional[str],
        telefone: Optional[str],
        endereco: Optional[str],
        verificado: Optional[str],
        vendedor_id: Optional[str],
        vendedor_nome: Optional[str],
        foto_documento: Optional[UploadFile],
    ) -> CustomerCreateResponseDTO:
        """
        Cadastra un cliente verificado: Asaas primero, luego la base local.

        Si el INSERT local falla se intenta borrar el cliente en Asaas
        (best-effort) y se elimina la foto guardada.
        """
        logger.info(f"{LOG_TAG} Iniciando cadastro")

        # 1. Validaciones
        if not all([nome, documento, telefone, endereco, vendedor_id, vendedor_nome]):
            raise ValidationException("Todos los campos obligatorios deben completarse")
        validate_image(foto_documento, "fotoDocumento")
        if verificado != "true":
            raise ValidationException(
                "El cliente debe pasar por la verificacion antes del cadastro",
                field="verificado",
            )
        if not is_valid_document(documento):
            raise ValidationException("CPF o CNPJ invalido", field="documento")
        if not is_valid_phone(telefone):
            raise ValidationException("Telefono invalido", field="telefone")
        try:
            vendedor_id_int = int(vendedor_id)
        except (TypeError, ValueError):
            raise ValidationException("vendedorId invalido", field="vendedorId")

        documento_limpo = only_digits(documento)
        telefone_limpo = only_digits(telefone)

        existing = await self.repository.find_active_by_document(documento_limpo)
        if existing is not None:
            logger.info(f"{LOG_TAG} Cliente ya existe en la base: id={existing.id}")
            raise EntityAlreadyExistsException(
                "Cliente con este documento ya esta cadastrado",
                existing=_existing_local_payload(existing),
            )

        photo = await save_document_photo(foto_documento, documento_limpo)

        # 2. Duplicado en Asaas (si la consulta falla, se sigue)
        try:
            remote = await self.asaas.find_customer_by_document(documento_limpo)
        except AsaasApiError as e:
            logger.error(f"{LOG_TAG} Error al verificar en Asaas: {e.user_message}")
            remote = None
        if remote is not None:
            logger.info(f"{LOG_TAG} Cliente ya existe en Asaas: {remote.get('id')}")
            photo.remove()
            raise EntityAlreadyExistsException(
                "Cliente con este CPF/CNPJ ya esta cadastrado en Asaas",
                existing=_existing_remote_payload(remote),
            )

        # 3. Alta en Asaas
        try:
            created = await self.asaas.create_customer({
                "name": nome,
                "cpfCnpj": documento_limpo,
                "phone": telefone_limpo,
                "mobilePhone": telefone_limpo,
                "address": endereco,
                "complement": endereco,
                "notificationDisabled": True,
            })
        except AsaasApiError as e:
            logger.error(f"{LOG_TAG} Error en Asaas: {e.user_message}")
            photo.remove()
            raise ExternalServiceException(
                f"Error al cadastrar en Asaas: {e.user_message}",
                status_code=400,
                error_code="ASAAS_ERROR",
            )
        asaas_customer_id = created["id"]
        logger.info(f"{LOG_TAG} Asaas ID: {asaas_customer_id}")

        # 4. Alta local
        try:
            customer = CustomerModel(
                asaas_id=asaas_customer_id,
                nome=nome,
                cpf_cnpj=documento_limpo,
                telefone=telefone_limpo,
                celular=telefone_limpo,
                endereco=endereco,
                verificado=True,
                vendedor_id=vendedor_id_int,
                vendedor_nome=vendedor_nome,
                foto_documento_url=photo.url,
            )
            self.db.add(customer)
            await self.db.commit()
            await self.db.refresh(customer)
        except Exception as e:
            logger.error(f"{LOG_TAG} Error interno: {e}")
            await self.db.rollback()
            await self._rollback_remote_customer(asaas_customer_id)
            photo.remove()
            raise AppException(
                "Error interno al procesar el cadastro",
                status_code=500,
                error_code="CUSTOMER_PERSIST_ERROR",
            ) from e

        logger.success(f"{LOG_TAG} Cadastro finalizado - ID: {customer.id}")
        return CustomerCreateResponseDTO(
            cliente=CustomerCreatedDTO(
                id=customer.id,
                nome=customer.nome,
                documento=customer.cpf_cnpj,
                telefone=customer.telefone,
                endereco=customer.endereco,
                verificado=customer.verificado,
                vendedor_id=customer.vendedor_id,
                vendedor_nome=customer.vendedor_nome,
                asaas_customer_id=customer.asaas_id,
                foto_documento_url=customer.foto_documento_url,
                criado_em=customer.criado_em,
            )
        )

    async def _rollback_remote_customer(self, asaas_customer_id: str) -> None:
        logger.info(f"{LOG_TAG} Intentando rollback en Asaas...")
        try:
            await self.asaas.delete_customer(asaas_customer_id)
            logger.info(f"{LOG_TAG} Rollback en Asaas concluido")
        except AsaasApiError as e:
            logger.error(f"{LOG_TAG} Error en el rollback de Asaas: {e.user_message}")

    # ------------------------------------------------------------------
    # Edicion / borrado
    # ------------------------------------------------------------------

    async def update_customer(self, customer_id: int, data: CustomerUpdateDTO) -> CustomerResponseDTO:
        """Actualiza en Asaas y luego en la base local."""
        customer = await self.repository.get_by_id(customer_id)
        if customer is None:
            raise EntityNotFoundException("Cliente", customer_id)

        changes = data.model_dump(exclude_unset=True)
        for phone_field in ("telefone", "celular"):
            if changes.get(phone_field):
                if not is_valid_phone(changes[phone_field]):
                    raise ValidationException("Telefono invalido", field=phone_field)
                changes[phone_field] = only_digits(changes[phone_field])
        if not changes:
            return CustomerResponseDTO.model_validate(customer)

        if customer.asaas_id:
            payload = {_UPDATE_FIELD_MAP[key]: value for key, value in changes.items()}
            try:
                await self.asaas.update_customer(customer.asaas_id, payload)
            except AsaasApiError as e:
                logger.error(f"[EDITAR-CLIENTE] Error en Asaas: {e.user_message}")
                raise ExternalServiceException(
                    f"Error al actualizar en Asaas: {e.user_message}",
                    status_code=400,
                    error_code="ASAAS_ERROR",
                )

        customer = await self.repository.update_local(customer, **changes)
        await self.db.commit()
        logger.info(f"[EDITAR-CLIENTE] Cliente {customer.id} actualizado: {sorted(changes)}")
        return CustomerResponseDTO.model_validate(customer)

    async def delete_customer(self, customer_id: int) -> None:
        """Borra en Asaas y marca `deletado` en la base local."""
        customer = await self.repository.get_by_id(customer_id)
        if customer is None:
            raise EntityNotFoundException("Cliente", customer_id)

        if customer.asaas_id:
            try:
                await self.asaas.delete_customer(customer.asaas_id)
            except AsaasApiError as e:
                # Ya borrado en Asaas: solo falta reflejarlo local
                if not e.is_not_found:
                    logger.error(f"[BORRAR-CLIENTE] Error en Asaas: {e.user_message}")
                    raise ExternalServiceException(
                        f"Error al borrar en Asaas: {e.user_message}",
                        status_code=400,
                        error_code="ASAAS_ERROR",
                    )

        await self.repository.update_local(customer, deletado=True)
        await self.db.commit()
        logger.info(f"[BORRAR-CLIENTE] Cliente {customer.id} marcado como deletado")

    # ------------------------------------------------------------------
    # Verificacion
    # ------------------------------------------------------------------

    async def send_verification_code(self, data: VerificationRequestDTO) -> Any:
        return await self.verification.send_code(data.model_dump())
