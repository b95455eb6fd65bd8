"""
Constantes del dominio Asaas (estados, formas de pago, tipos de usuario).
"""
from enum import Enum


class ChargeStatus(str, Enum):
    """Estados de una cobranza en Asaas."""
    PENDING = "PENDING"
    RECEIVED = "RECEIVED"
    CONFIRMED = "CONFIRMED"
    OVERDUE = "OVERDUE"
    REFUNDED = "REFUNDED"
    RECEIVED_IN_CASH = "RECEIVED_IN_CASH"
    REFUND_REQUESTED = "REFUND_REQUESTED"
    REFUND_IN_PROGRESS = "REFUND_IN_PROGRESS"
    CHARGEBACK_REQUESTED = "CHARGEBACK_REQUESTED"
    CHARGEBACK_DISPUTE = "CHARGEBACK_DISPUTE"
    AWAITING_CHARGEBACK_REVERSAL = "AWAITING_CHARGEBACK_REVERSAL"
    DUNNING_REQUESTED = "DUNNING_REQUESTED"
    DUNNING_RECEIVED = "DUNNING_RECEIVED"
    AWAITING_RISK_ANALYSIS = "AWAITING_RISK_ANALYSIS"


class BillingType(str, Enum):
    """Formas de pago aceptadas por Asaas."""
    BOLETO = "BOLETO"
    CREDIT_CARD = "CREDIT_CARD"
    PIX = "PIX"
    UNDEFINED = "UNDEFINED"


class UserType(str, Enum):
    """Tipos de usuario local."""
    VENDEDOR = "vendedor"
    ADMINISTRADOR = "administrador"


# Pais por defecto cuando Asaas no informa `country`
DEFAULT_COUNTRY = "Brasil"

# Tamaños de pagina del sync (limit enviado a Asaas)
CUSTOMER_PAGE_SIZE = 100
INSTALLMENT_PAGE_SIZE = 50
CHARGE_PAGE_SIZE = 50

# Limites del flujo de venta parcelada
MIN_INSTALLMENTS = 1
MAX_INSTALLMENTS = 60
SALE_TYPE_INSTALLMENTS = "parcelado"
