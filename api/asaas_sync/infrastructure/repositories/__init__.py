from asaas_sync.infrastructure.repositories.charge_repository import ChargeRepository
from asaas_sync.infrastructure.repositories.customer_repository import CustomerRepository
from asaas_sync.infrastructure.repositories.installment_repository import InstallmentRepository
from asaas_sync.infrastructure.repositories.mirror_repository import MirrorRepository
from asaas_sync.infrastructure.repositories.user_repository import UserRepository

__all__ = [
    "ChargeRepository",
    "CustomerRepository",
    "InstallmentRepository",
    "MirrorRepository",
    "UserRepository",
]
