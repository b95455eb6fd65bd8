"""
Casos de uso de ventas parceladas.

Flujo de una venta:
1. Validar campos, valor, parcelas (1..60), fecha (dd/mm/yyyy, no pasada)
2. Cliente local activo y con asaas_id
3. POST /payments con installmentCount (Asaas genera el parcelamento)
4. GET /payments?installment=... (no fatal), ordenado por vencimiento
5. INSERT parcelamento + cobranzas en UNA transaccion; si falla, rollback
   y DELETE /installments/{id} en Asaas, o DELETE /payments/{id} si la
   venta no genero parcelamento (best-effort)
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from asaas_sync.application.dto.sale_dto import SaleDTO, SaleInstallmentDTO, SaleResponseDTO
from asaas_sync.infrastructure.database.models import ChargeModel, InstallmentModel
from asaas_sync.infrastructure.external.asaas.client import AsaasClient
from asaas_sync.infrastructure.external.asaas.mappers import map_charge
from asaas_sync.infrastructure.external.asaas.types import AsaasApiError
from asaas_sync.infrastructure.repositories.customer_repository import CustomerRepository
from asaas_sync.infrastructure.repositories.installment_repository import InstallmentRepository
from asaas_sync.shared.constants.asaas_constants import (
    MAX_INSTALLMENTS,
    MIN_INSTALLMENTS,
    SALE_TYPE_INSTALLMENTS,
    BillingType,
    ChargeStatus,
)
from asaas_sync.shared.exceptions.base import AppException
from asaas_sync.shared.exceptions.domain import (
    EntityNotFoundException,
    ExternalServiceException,
    ValidationException,
)
from asaas_sync.shared.utils.date_utils import parse_br_date, parse_provider_date
from asaas_sync.shared.utils.file_storage import save_sheet_photo, validate_image


LOG_TAG = "[VENDA-PARCELADA]"


def _parse_amount(value: str) -> Optional[float]:
    """Acepta "150.50" o "150,50"."""
    try:
        return float(str(value).strip().replace(",", "."))
    except (TypeError, ValueError):
        return None


def _parse_int(value: Any) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def sort_by_due_date(payments: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Ordena las cobranzas por dueDate (las sin fecha al final)."""
    return sorted(
        payments,
        key=lambda p: (parse_provider_date(p.get("dueDate")) is None, parse_provider_date(p.get("dueDate")) or date.max),
    )


class SaleUseCases:
    def __init__(self, db: AsyncSession, asaas: AsaasClient) -> None:
        self.db = db
        self.asaas = asaas
        self.customers = CustomerRepository(db)
        self.installments = InstallmentRepository(db)

    async def create_sale(
        self,
        *,
        cliente_id: Optional[str],
        valor: Optional[str],
        parcelas: Optional[str],
        data_vencimento: Optional[str],
        descricao: Optional[str],
        numero_ficha: Optional[str],
        vendedor_id: Optional[str],
        tipo_venda: Optional[str],
        rota_id: Optional[str],
        foto_ficha: Optional[UploadFile],
        today: Optional[date] = None,
    ) -> SaleResponseDTO:
        logger.info(f"{LOG_TAG} Iniciando registro de venta")
        today = today or date.today()

        # 1. Validaciones
        if not all([cliente_id, valor, parcelas, data_vencimento, descricao,
                    numero_ficha, vendedor_id, tipo_venda, rota_id]):
            raise ValidationException("Faltan campos obligatorios")
        validate_image(foto_ficha, "fotoFicha")

        if tipo_venda != SALE_TYPE_INSTALLMENTS:
            raise ValidationException(
                f"Tipo de venta invalido. Use: {SALE_TYPE_INSTALLMENTS}", field="tipoVenda"
            )

        valor_total = _parse_amount(valor)
        if valor_total is None or valor_total <= 0:
            raise ValidationException("Valor de la venta invalido", field="valor")

        numero_parcelas = _parse_int(parcelas)
        if numero_parcelas is None or not MIN_INSTALLMENTS <= numero_parcelas <= MAX_INSTALLMENTS:
            raise ValidationException(
                f"El numero de parcelas debe estar entre {MIN_INSTALLMENTS} y {MAX_INSTALLMENTS}",
                field="parcelas",
            )

        due_date = parse_br_date(data_vencimento)
        if due_date is None:
            raise ValidationException("Fecha de vencimiento invalida", field="dataVencimento")
        if due_date < today:
            raise ValidationException(
                "La fecha de vencimiento no puede estar en el pasado", field="dataVencimento"
            )

        cliente_id_int = _parse_int(cliente_id)
        vendedor_id_int = _parse_int(vendedor_id)
        rota_id_int = _parse_int(rota_id)
        if vendedor_id_int is None or rota_id_int is None:
            raise ValidationException("vendedorId y rotaId deben ser numericos")

        # 2. Cliente
        customer = await self.customers.get_by_id(cliente_id_int) if cliente_id_int else None
        if customer is None:
            raise EntityNotFoundException("Cliente", cliente_id)
        if not customer.asaas_id:
            raise ValidationException("El cliente no posee ID de Asaas", field="clienteId")

        photo = await save_sheet_photo(foto_ficha, numero_ficha)

        # 3. Parcelamento en Asaas
        valor_parcela = round(valor_total / numero_parcelas, 2)
        logger.info(
            f"{LOG_TAG} Cliente: {customer.asaas_id} | Total: R$ {valor_total:.2f} | "
            f"{numero_parcelas}x de R$ {valor_parcela:.2f} | 1er vencimiento: {due_date.isoformat()}"
        )
        try:
            created = await self.asaas.create_payment({
                "customer": customer.asaas_id,
                "billingType": BillingType.BOLETO.value,
                "value": valor_total,
                "dueDate": due_date.isoformat(),
                "installmentCount": numero_parcelas,
                "installmentValue": valor_parcela,
                "description": descricao,
                "externalReference": f"FICHA-{numero_ficha}",
                "notificationDisabled": True,
            })
        except AsaasApiError as e:
            logger.error(f"{LOG_TAG} Error al crear parcelamento en Asaas: {e.user_message}")
            photo.remove()
            raise ExternalServiceException(
                f"Error al crear parcelamento en Asaas: {e.user_message}",
                error_code="ASAAS_ERROR",
            )

        installment_id = created.get("installment")
        plan_asaas_id = installment_id or created["id"]
        logger.info(f"{LOG_TAG} Parcelamento creado - payment={created.get('id')} installment={installment_id}")

        # 4. Parcelas generadas
        payments = await self._fetch_generated_payments(created, installment_id)

        # 5. Persistencia en una transaccion
        try:
            plan = InstallmentModel(
                asaas_id=plan_asaas_id,
                valor=valor_total,
                valor_parcela=valor_parcela,
                numero_parcelas=numero_parcelas,
                forma_pagamento=BillingType.BOLETO.value,
                descricao=descricao,
                cliente_asaas_id=customer.asaas_id,
                data_criacao_asaas=today,
                numero_ficha=numero_ficha,
                vendedor_id=vendedor_id_int,
                rota_id=rota_id_int,
                foto_ficha_url=photo.url,
            )
            self.db.add(plan)

            charges: List[ChargeModel] = []
            for index, payment in enumerate(payments, start=1):
                row = map_charge(payment)
                row.update(
                    descricao=row["descricao"] or descricao,
                    forma_pagamento=row["forma_pagamento"] or BillingType.BOLETO.value,
                    status=row["status"] or ChargeStatus.PENDING.value,
                    data_criacao_asaas=row["data_criacao_asaas"] or today,
                    cliente_asaas_id=customer.asaas_id,
                    parcelamento_asaas_id=installment_id,
                    numero_parcela=index,
                )
                charge = ChargeModel(**row)
                self.db.add(charge)
                charges.append(charge)

            await self.db.commit()
        except Exception as e:
            logger.error(f"{LOG_TAG} Error al guardar en la base: {e}")
            await self.db.rollback()
            await self._rollback_remote_sale(created["id"], installment_id)
            photo.remove()
            raise AppException(
                "Error interno al procesar la venta",
                status_code=500,
                error_code="SALE_PERSIST_ERROR",
            ) from e

        logger.success(f"{LOG_TAG} Venta registrada - parcelamento local {plan.id}, {len(charges)} cobranzas")
        return SaleResponseDTO(
            venda_id=plan.id,
            venda=SaleDTO(
                id=plan.id,
                cliente_id=customer.id,
                cliente_nome=customer.nome,
                cliente_cpf=customer.cpf_cnpj,
                vendedor_id=vendedor_id_int,
                rota_id=rota_id_int,
                tipo_venda=tipo_venda,
                valor_total=valor_total,
                numero_parcelas=numero_parcelas,
                descricao=descricao,
                numero_ficha=numero_ficha,
                foto_ficha_url=photo.url,
                data_vencimento_primeira=due_date,
                asaas_installment_id=plan_asaas_id,
                parcelas=[
                    SaleInstallmentDTO(
                        numero=charge.numero_parcela,
                        valor=charge.valor,
                        data_vencimento=charge.data_vencimento,
                        asaas_payment_id=charge.asaas_id,
                        status=charge.status,
                        link_boleto=charge.url_boleto,
                        link_fatura=charge.url_fatura,
                    )
                    for charge in charges
                ],
            ),
        )

    async def _fetch_generated_payments(
        self, created: Dict[str, Any], installment_id: Optional[str]
    ) -> List[Dict[str, Any]]:
        """Cobranzas del parcelamento recien creado. Un error aqui no es fatal."""
        if not installment_id:
            return [created]
        try:
            page = await self.asaas.list_payments(0, 100, installment=installment_id)
        except AsaasApiError as e:
            logger.warning(f"{LOG_TAG} Error al buscar las parcelas en Asaas: {e.user_message}")
            return []
        payments = sort_by_due_date(page.data)
        logger.info(f"{LOG_TAG} {len(payments)} parcelas obtenidas de Asaas")
        return payments

    async def _rollback_remote_sale(self, payment_id: str, installment_id: Optional[str]) -> None:
        """Borra en Asaas el parcelamento o, sin parcelamento, la cobranza unica."""
        try:
            if installment_id:
                logger.info(f"{LOG_TAG} Intentando rollback del parcelamento {installment_id} en Asaas...")
                await self.asaas.delete_installment(installment_id)
            else:
                logger.info(f"{LOG_TAG} Intentando rollback de la cobranza {payment_id} en Asaas...")
                await self.asaas.delete_payment(payment_id)
            logger.info(f"{LOG_TAG} Rollback en Asaas concluido")
        except AsaasApiError as e:
            logger.error(f"{LOG_TAG} Error en el rollback de Asaas: {e.user_message}")

    async def get_payment_book(self, installment_local_id: int) -> bytes:
        """PDF (carne) de un parcelamento, pedido a Asaas."""
        installment = await self.installments.get_by_id(installment_local_id)
        if installment is None:
            raise EntityNotFoundException("Parcelamento", installment_local_id)

        logger.info(f"[VENDA-PDF] Buscando carne del parcelamento {installment.asaas_id}")
        try:
            return await self.asaas.get_installment_payment_book(installment.asaas_id)
        except AsaasApiError as e:
            logger.error(f"[VENDA-PDF] Error al buscar PDF en Asaas: {e.user_message}")
            if e.is_not_found:
                raise AppException(
                    "Carne no disponible en Asaas. El parcelamento puede no haberse creado correctamente.",
                    status_code=404,
                    error_code="PAYMENT_BOOK_NOT_FOUND",
                )
            raise ExternalServiceException(
                "Error al buscar el carne en Asaas. Intente nuevamente mas tarde.",
                error_code="ASAAS_ERROR",
            )
