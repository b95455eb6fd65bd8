"""
DTOs de la venta parcelada.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class SaleInstallmentDTO(BaseModel):
    """Una parcela (cobranza) generada por Asaas."""

    numero: int
    valor: Optional[float] = None
    data_vencimento: Optional[date] = None
    asaas_payment_id: str
    status: Optional[str] = None
    link_boleto: Optional[str] = None
    link_fatura: Optional[str] = None


class SaleDTO(BaseModel):
    id: int
    cliente_id: int
    cliente_nome: Optional[str] = None
    cliente_cpf: Optional[str] = None
    vendedor_id: int
    rota_id: int
    tipo_venda: str
    valor_total: float
    numero_parcelas: int
    descricao: str
    numero_ficha: str
    foto_ficha_url: Optional[str] = None
    data_vencimento_primeira: date
    asaas_installment_id: str
    parcelas: List[SaleInstallmentDTO]


class SaleResponseDTO(BaseModel):
    success: bool = True
    message: str = "Venta parcelada registrada con exito"
    venda_id: int
    venda: SaleDTO
