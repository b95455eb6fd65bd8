"""
Endpoints de parcelamentos.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from asaas_sync.api.v1.dependencies.auth_deps import get_current_user, require_admin
from asaas_sync.api.v1.dependencies.use_case_deps import (
    get_installment_query_use_cases,
    get_sync_use_cases,
)
from asaas_sync.api.v1.endpoints.sync import sync_response
from asaas_sync.application.dto.auth_dto import CurrentUserDTO
from asaas_sync.application.dto.mirror_dto import (
    InstallmentListResponseDTO,
    InstallmentResponseDTO,
)
from asaas_sync.application.dto.sync_dto import SyncResultDTO
from asaas_sync.application.sync.manager import INSTALLMENTS
from asaas_sync.application.use_cases.mirror_use_cases import InstallmentQueryUseCases
from asaas_sync.application.use_cases.sync_use_cases import SyncUseCases


router = APIRouter(prefix="/parcelamentos", tags=["Parcelamentos"])


@router.get(
    "",
    response_model=InstallmentListResponseDTO,
    summary="Listar parcelamentos",
)
async def list_installments(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    cliente: Optional[str] = Query(None, description="asaas_id del cliente"),
    forma_pagamento: Optional[str] = Query(None),
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: InstallmentQueryUseCases = Depends(get_installment_query_use_cases),
) -> InstallmentListResponseDTO:
    return await use_cases.list_installments(
        cliente=cliente, forma_pagamento=forma_pagamento, limit=limit, offset=offset
    )


@router.post(
    "/sync",
    response_model=SyncResultDTO,
    summary="Sincronizar parcelamentos desde Asaas",
)
async def sync_installments(
    _: CurrentUserDTO = Depends(require_admin),
    use_cases: SyncUseCases = Depends(get_sync_use_cases),
):
    return sync_response(await use_cases.sync_entity(INSTALLMENTS))


@router.get(
    "/{installment_id}",
    response_model=InstallmentResponseDTO,
    summary="Obtener parcelamento por ID local o asaas_id",
)
async def get_installment(
    installment_id: str,
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: InstallmentQueryUseCases = Depends(get_installment_query_use_cases),
) -> InstallmentResponseDTO:
    return await use_cases.get_installment(installment_id)
