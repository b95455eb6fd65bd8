"""
DTOs relacionados con clientes.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CustomerResponseDTO(BaseModel):
    """DTO de respuesta para un cliente (todas las columnas)."""

    id: int
    asaas_id: Optional[str] = None
    nome: Optional[str] = None
    email: Optional[str] = None
    telefone: Optional[str] = None
    celular: Optional[str] = None
    cpf_cnpj: Optional[str] = None
    tipo_pessoa: Optional[str] = None
    estrangeiro: bool = False
    endereco: Optional[str] = None
    numero_endereco: Optional[str] = None
    complemento: Optional[str] = None
    bairro: Optional[str] = None
    cidade_id: Optional[int] = None
    cidade_nome: Optional[str] = None
    estado: Optional[str] = None
    pais: Optional[str] = None
    cep: Optional[str] = None
    emails_adicionais: Optional[str] = None
    referencia_externa: Optional[str] = None
    notificacoes_desabilitadas: bool = False
    observacoes: Optional[str] = None
    deletado: bool = False
    data_criacao_asaas: Optional[date] = None
    verificado: bool = False
    vendedor_id: Optional[int] = None
    vendedor_nome: Optional[str] = None
    foto_documento_url: Optional[str] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerListResponseDTO(BaseModel):
    success: bool = True
    clientes: List[CustomerResponseDTO]
    total: int
    pagina: int
    limite: int


class CustomerCreatedDTO(BaseModel):
    """Cliente recien cadastrado (respuesta del POST multipart)."""

    id: int
    nome: str
    documento: str
    telefone: str
    endereco: Optional[str] = None
    verificado: bool
    vendedor_id: Optional[int] = None
    vendedor_nome: Optional[str] = None
    asaas_customer_id: Optional[str] = None
    foto_documento_url: Optional[str] = None
    criado_em: Optional[datetime] = None


class CustomerCreateResponseDTO(BaseModel):
    success: bool = True
    message: str = "Cliente cadastrado con exito"
    cliente: CustomerCreatedDTO


class CustomerUpdateDTO(BaseModel):
    """Campos editables de un cliente; los ausentes no se tocan."""

    nome: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = None
    telefone: Optional[str] = None
    celular: Optional[str] = None
    endereco: Optional[str] = None
    numero_endereco: Optional[str] = None
    complemento: Optional[str] = None
    bairro: Optional[str] = None
    cep: Optional[str] = None
    observacoes: Optional[str] = None


class VerificationRequestDTO(BaseModel):
    """Payload reenviado al servicio de mensajeria."""

    nomeCliente: str = Field(..., min_length=1)
    nomeVendedor: str = Field(..., min_length=1)
    documento: str = Field(..., min_length=1)
    telefone: str = Field(..., min_length=1)
    endereco: Optional[str] = None
    codigoVerificacao: str = Field(..., min_length=1)
    metodo: str = Field(..., min_length=1, description="Canal de envio (ej. whatsapp, sms)")
