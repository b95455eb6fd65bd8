"""
DTOs de parcelamentos y cobranzas (tablas espejo de Asaas).
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


class InstallmentResponseDTO(BaseModel):
    id: int
    asaas_id: str
    valor: Optional[float] = None
    valor_liquido: Optional[float] = None
    valor_parcela: Optional[float] = None
    numero_parcelas: Optional[int] = None
    forma_pagamento: Optional[str] = None
    data_pagamento: Optional[date] = None
    descricao: Optional[str] = None
    dia_vencimento: Optional[int] = None
    data_criacao_asaas: Optional[date] = None
    cliente_asaas_id: Optional[str] = None
    payment_link: Optional[str] = None
    checkout_session: Optional[str] = None
    url_comprovante: Optional[str] = None
    cartao_ultimos_digitos: Optional[str] = None
    cartao_bandeira: Optional[str] = None
    deletado: bool = False
    numero_ficha: Optional[str] = None
    vendedor_id: Optional[int] = None
    rota_id: Optional[int] = None
    foto_ficha_url: Optional[str] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    class Config:
        from_attributes = True


class ChargeResponseDTO(BaseModel):
    id: int
    asaas_id: str
    valor: Optional[float] = None
    valor_liquido: Optional[float] = None
    valor_original: Optional[float] = None
    valor_juros: Optional[float] = None
    descricao: Optional[str] = None
    forma_pagamento: Optional[str] = None
    status: Optional[str] = None
    data_criacao_asaas: Optional[date] = None
    data_vencimento: Optional[date] = None
    data_vencimento_original: Optional[date] = None
    data_pagamento: Optional[date] = None
    data_pagamento_cliente: Optional[date] = None
    data_credito: Optional[date] = None
    data_credito_estimada: Optional[date] = None
    cliente_asaas_id: Optional[str] = None
    assinatura_id: Optional[str] = None
    parcelamento_asaas_id: Optional[str] = None
    numero_parcela: Optional[int] = None
    checkout_session: Optional[str] = None
    payment_link: Optional[str] = None
    url_fatura: Optional[str] = None
    numero_fatura: Optional[str] = None
    referencia_externa: Optional[str] = None
    nosso_numero: Optional[str] = None
    url_boleto: Optional[str] = None
    pode_pagar_apos_vencimento: Optional[bool] = None
    pix_transacao_id: Optional[str] = None
    pix_qrcode_id: Optional[str] = None
    cartao_ultimos_digitos: Optional[str] = None
    cartao_bandeira: Optional[str] = None
    url_comprovante: Optional[str] = None
    desconto_valor: Optional[float] = None
    desconto_dias_limite: Optional[int] = None
    desconto_tipo: Optional[str] = None
    multa_percentual: Optional[float] = None
    juros_percentual: Optional[float] = None
    deletado: bool = False
    antecipado: bool = False
    antecipavel: bool = False
    envio_correios: bool = False
    dias_apos_vencimento_para_cancelamento: Optional[int] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    class Config:
        from_attributes = True


class InstallmentListResponseDTO(BaseModel):
    data: List[InstallmentResponseDTO]
    total: int
    limit: int
    offset: int


class ChargeListResponseDTO(BaseModel):
    data: List[ChargeResponseDTO]
    total: int
    limit: int
    offset: int
