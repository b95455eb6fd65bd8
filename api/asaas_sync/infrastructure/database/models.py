"""
Modelos de base de datos (ORM).

Las tablas espejo (clientes, parcelamentos, cobrancas) se alimentan por el
sync con Asaas. La llave de union entre tablas es siempre el ID de Asaas
(`asaas_id`, `cliente_asaas_id`, `parcelamento_asaas_id`), no FKs.
Nunca se borra fisicamente: se marca `deletado = true`.
"""
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func, false, true

from asaas_sync.infrastructure.database.session import Base


def _money():
    return Numeric(12, 2, asdecimal=False)


class CustomerModel(Base):
    """
    Modelo de base de datos para clientes.

    Columnas sincronizadas desde Asaas + columnas locales del flujo de
    cadastro manual (verificado, vendedor, foto), que el sync no toca.
    """

    __tablename__ = "clientes"

    id = Column(Integer, primary_key=True, index=True)
    asaas_id = Column(String(64), unique=True, nullable=True, index=True)

    nome = Column(String(255), nullable=True, index=True)
    email = Column(String(255), nullable=True)
    telefone = Column(String(20), nullable=True)
    celular = Column(String(20), nullable=True)
    cpf_cnpj = Column(String(20), nullable=True, index=True)
    tipo_pessoa = Column(String(10), nullable=True)
    estrangeiro = Column(Boolean, nullable=False, default=False, server_default=false())

    # Direccion
    endereco = Column(String(255), nullable=True)
    numero_endereco = Column(String(20), nullable=True)
    complemento = Column(String(255), nullable=True)
    bairro = Column(String(255), nullable=True)
    cidade_id = Column(Integer, nullable=True)
    cidade_nome = Column(String(255), nullable=True)
    estado = Column(String(50), nullable=True)
    pais = Column(String(100), nullable=True)
    cep = Column(String(20), nullable=True)

    emails_adicionais = Column(Text, nullable=True)
    referencia_externa = Column(String(255), nullable=True)
    notificacoes_desabilitadas = Column(Boolean, nullable=False, default=False, server_default=false())
    observacoes = Column(Text, nullable=True)
    deletado = Column(Boolean, nullable=False, default=False, server_default=false(), index=True)
    data_criacao_asaas = Column(Date, nullable=True)

    # Solo locales (cadastro manual)
    verificado = Column(Boolean, nullable=False, default=False, server_default=false())
    vendedor_id = Column(Integer, nullable=True)
    vendedor_nome = Column(String(255), nullable=True)
    foto_documento_url = Column(String(500), nullable=True)

    criado_em = Column(DateTime(timezone=True), server_default=func.now())
    atualizado_em = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Customer(id={self.id}, asaas_id={self.asaas_id}, nome={self.nome})>"


class InstallmentModel(Base):
    """
    Modelo de base de datos para parcelamentos.

    Las columnas numero_ficha/vendedor_id/rota_id/foto_ficha_url solo las
    llena el flujo de venta manual.
    """

    __tablename__ = "parcelamentos"

    id = Column(Integer, primary_key=True, index=True)
    asaas_id = Column(String(64), unique=True, nullable=False, index=True)

    valor = Column(_money(), nullable=True)
    valor_liquido = Column(_money(), nullable=True)
    valor_parcela = Column(_money(), nullable=True)
    numero_parcelas = Column(Integer, nullable=True)
    forma_pagamento = Column(String(20), nullable=True)
    data_pagamento = Column(Date, nullable=True)
    descricao = Column(Text, nullable=True)
    dia_vencimento = Column(Integer, nullable=True)
    data_criacao_asaas = Column(Date, nullable=True)
    cliente_asaas_id = Column(String(64), nullable=True, index=True)
    payment_link = Column(String(255), nullable=True)
    checkout_session = Column(String(255), nullable=True)
    url_comprovante = Column(String(500), nullable=True)
    cartao_ultimos_digitos = Column(String(20), nullable=True)
    cartao_bandeira = Column(String(50), nullable=True)
    cartao_token = Column(String(255), nullable=True)
    deletado = Column(Boolean, nullable=False, default=False, server_default=false(), index=True)

    # Solo locales (venta manual)
    numero_ficha = Column(String(100), nullable=True)
    vendedor_id = Column(Integer, nullable=True)
    rota_id = Column(Integer, nullable=True)
    foto_ficha_url = Column(String(500), nullable=True)

    criado_em = Column(DateTime(timezone=True), server_default=func.now())
    atualizado_em = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Installment(id={self.id}, asaas_id={self.asaas_id}, valor={self.valor})>"


class ChargeModel(Base):
    """Modelo de base de datos para cobranzas (payments de Asaas)."""

    __tablename__ = "cobrancas"

    id = Column(Integer, primary_key=True, index=True)
    asaas_id = Column(String(64), unique=True, nullable=False, index=True)

    # Valores
    valor = Column(_money(), nullable=True)
    valor_liquido = Column(_money(), nullable=True)
    valor_original = Column(_money(), nullable=True)
    valor_juros = Column(_money(), nullable=True)

    descricao = Column(Text, nullable=True)
    forma_pagamento = Column(String(20), nullable=True)
    status = Column(String(40), nullable=True, index=True)

    # Fechas
    data_criacao_asaas = Column(Date, nullable=True)
    data_vencimento = Column(Date, nullable=True)
    data_vencimento_original = Column(Date, nullable=True)
    data_pagamento = Column(Date, nullable=True)
    data_pagamento_cliente = Column(Date, nullable=True)
    data_credito = Column(Date, nullable=True)
    data_credito_estimada = Column(Date, nullable=True)

    # Relaciones por ID externo
    cliente_asaas_id = Column(String(64), nullable=True, index=True)
    assinatura_id = Column(String(64), nullable=True)
    parcelamento_asaas_id = Column(String(64), nullable=True, index=True)
    numero_parcela = Column(Integer, nullable=True)

    # Links / referencias
    checkout_session = Column(String(255), nullable=True)
    payment_link = Column(String(255), nullable=True)
    url_fatura = Column(String(500), nullable=True)
    numero_fatura = Column(String(50), nullable=True)
    referencia_externa = Column(String(255), nullable=True)
    nosso_numero = Column(String(50), nullable=True)
    url_boleto = Column(String(500), nullable=True)
    pode_pagar_apos_vencimento = Column(Boolean, nullable=True)

    # Sub-campos por forma de pago
    pix_transacao_id = Column(String(255), nullable=True)
    pix_qrcode_id = Column(String(255), nullable=True)
    cartao_ultimos_digitos = Column(String(20), nullable=True)
    cartao_bandeira = Column(String(50), nullable=True)
    cartao_token = Column(String(255), nullable=True)
    url_comprovante = Column(String(500), nullable=True)

    # Descuento / multa / intereses
    desconto_valor = Column(_money(), nullable=True)
    desconto_dias_limite = Column(Integer, nullable=True)
    desconto_tipo = Column(String(20), nullable=True)
    multa_percentual = Column(_money(), nullable=True)
    juros_percentual = Column(_money(), nullable=True)

    deletado = Column(Boolean, nullable=False, default=False, server_default=false(), index=True)
    antecipado = Column(Boolean, nullable=False, default=False, server_default=false())
    antecipavel = Column(Boolean, nullable=False, default=False, server_default=false())
    envio_correios = Column(Boolean, nullable=False, default=False, server_default=false())
    dias_apos_vencimento_para_cancelamento = Column(Integer, nullable=True)

    criado_em = Column(DateTime(timezone=True), server_default=func.now())
    atualizado_em = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Charge(id={self.id}, asaas_id={self.asaas_id}, status={self.status})>"


class UserModel(Base):
    """Modelo de base de datos para usuarios locales (vendedores y administradores)."""

    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    senha_hash = Column(String(255), nullable=False)
    tipo_usuario = Column(String(20), nullable=False, default="vendedor")
    ativo = Column(Boolean, nullable=False, default=True, server_default=true())
    criado_em = Column(DateTime(timezone=True), server_default=func.now())
    ultimo_login = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, tipo={self.tipo_usuario})>"
