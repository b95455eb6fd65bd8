"""
Traduccion registro Asaas -> fila local, una funcion por entidad.

Funciones puras: sin I/O y sin validacion. Cada mapper devuelve un dict
con TODAS las columnas sincronizadas (las ausentes quedan en None) para que
un UPDATE sobrescriba siempre el set completo.
"""

from __future__ import annotations

from typing import Any, Optional

from asaas_sync.shared.constants.asaas_constants import DEFAULT_COUNTRY
from asaas_sync.shared.utils.date_utils import parse_provider_date


def _nested(record: dict[str, Any], key: str, field: str) -> Optional[Any]:
    """Lee record[key][field] tolerando que el objeto anidado no exista."""
    obj = record.get(key)
    if not isinstance(obj, dict):
        return None
    return obj.get(field)


def _flag(record: dict[str, Any], key: str) -> bool:
    return bool(record.get(key) or False)


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _int_or_none(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def map_customer(record: dict[str, Any]) -> dict[str, Any]:
    """Cliente de Asaas -> fila de `clientes` (solo columnas sincronizadas)."""
    return {
        "asaas_id": record.get("id"),
        "nome": record.get("name"),
        "email": record.get("email"),
        "telefone": record.get("phone"),
        "celular": record.get("mobilePhone"),
        "cpf_cnpj": record.get("cpfCnpj"),
        "tipo_pessoa": record.get("personType"),
        "estrangeiro": _flag(record, "foreignCustomer"),
        "endereco": record.get("address"),
        "numero_endereco": _str_or_none(record.get("addressNumber")),
        "complemento": record.get("complement"),
        "bairro": record.get("province"),
        "cidade_id": _int_or_none(record.get("city")),
        "cidade_nome": record.get("cityName"),
        "estado": record.get("state"),
        "pais": record.get("country") or DEFAULT_COUNTRY,
        "cep": _str_or_none(record.get("postalCode")),
        "emails_adicionais": record.get("additionalEmails"),
        "referencia_externa": record.get("externalReference"),
        "notificacoes_desabilitadas": _flag(record, "notificationDisabled"),
        "observacoes": record.get("observations"),
        "deletado": _flag(record, "deleted"),
        "data_criacao_asaas": parse_provider_date(record.get("dateCreated")),
    }


def map_installment(record: dict[str, Any]) -> dict[str, Any]:
    """Parcelamento de Asaas -> fila de `parcelamentos`."""
    return {
        "asaas_id": record.get("id"),
        "valor": record.get("value"),
        "valor_liquido": record.get("netValue"),
        "valor_parcela": record.get("paymentValue"),
        "numero_parcelas": record.get("installmentCount"),
        "forma_pagamento": record.get("billingType"),
        "data_pagamento": parse_provider_date(record.get("paymentDate")),
        "descricao": record.get("description"),
        "dia_vencimento": record.get("expirationDay"),
        "data_criacao_asaas": parse_provider_date(record.get("dateCreated")),
        "cliente_asaas_id": record.get("customer"),
        "payment_link": record.get("paymentLink"),
        "checkout_session": record.get("checkoutSession"),
        "url_comprovante": record.get("transactionReceiptUrl"),
        "cartao_ultimos_digitos": _nested(record, "creditCard", "creditCardNumber"),
        "cartao_bandeira": _nested(record, "creditCard", "creditCardBrand"),
        "cartao_token": _nested(record, "creditCard", "creditCardToken"),
        "deletado": _flag(record, "deleted"),
    }


def map_charge(record: dict[str, Any]) -> dict[str, Any]:
    """Cobranza (payment) de Asaas -> fila de `cobrancas`."""
    return {
        "asaas_id": record.get("id"),
        "valor": record.get("value"),
        "valor_liquido": record.get("netValue"),
        "valor_original": record.get("originalValue"),
        "valor_juros": record.get("interestValue"),
        "descricao": record.get("description"),
        "forma_pagamento": record.get("billingType"),
        "status": record.get("status"),
        "data_criacao_asaas": parse_provider_date(record.get("dateCreated")),
        "data_vencimento": parse_provider_date(record.get("dueDate")),
        "data_vencimento_original": parse_provider_date(record.get("originalDueDate")),
        "data_pagamento": parse_provider_date(record.get("paymentDate")),
        "data_pagamento_cliente": parse_provider_date(record.get("clientPaymentDate")),
        "data_credito": parse_provider_date(record.get("creditDate")),
        "data_credito_estimada": parse_provider_date(record.get("estimatedCreditDate")),
        "cliente_asaas_id": record.get("customer"),
        "assinatura_id": record.get("subscription"),
        "parcelamento_asaas_id": record.get("installment"),
        "numero_parcela": record.get("installmentNumber"),
        "checkout_session": record.get("checkoutSession"),
        "payment_link": record.get("paymentLink"),
        "url_fatura": record.get("invoiceUrl"),
        "numero_fatura": _str_or_none(record.get("invoiceNumber")),
        "referencia_externa": record.get("externalReference"),
        "nosso_numero": _str_or_none(record.get("nossoNumero")),
        "url_boleto": record.get("bankSlipUrl"),
        "pode_pagar_apos_vencimento": record.get("canBePaidAfterDueDate"),
        "pix_transacao_id": record.get("pixTransaction"),
        "pix_qrcode_id": record.get("pixQrCodeId"),
        "cartao_ultimos_digitos": _nested(record, "creditCard", "creditCardNumber"),
        "cartao_bandeira": _nested(record, "creditCard", "creditCardBrand"),
        "cartao_token": _nested(record, "creditCard", "creditCardToken"),
        "url_comprovante": record.get("transactionReceiptUrl"),
        "desconto_valor": _nested(record, "discount", "value"),
        "desconto_dias_limite": _nested(record, "discount", "dueDateLimitDays"),
        "desconto_tipo": _nested(record, "discount", "type"),
        "multa_percentual": _nested(record, "fine", "value"),
        "juros_percentual": _nested(record, "interest", "value"),
        "deletado": _flag(record, "deleted"),
        "antecipado": _flag(record, "anticipated"),
        "antecipavel": _flag(record, "anticipable"),
        "envio_correios": _flag(record, "postalService"),
        "dias_apos_vencimento_para_cancelamento": record.get(
            "daysAfterDueDateToRegistrationCancellation"
        ),
    }


# Columnas que el sync escribe, por entidad. Las columnas locales (vendedor,
# foto, ficha...) quedan fuera y el UPDATE no las toca.
CUSTOMER_SYNC_COLUMNS = tuple(map_customer({}).keys())
INSTALLMENT_SYNC_COLUMNS = tuple(map_installment({}).keys())
CHARGE_SYNC_COLUMNS = tuple(map_charge({}).keys())
