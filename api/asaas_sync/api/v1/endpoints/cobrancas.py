"""
Endpoints de cobranzas.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from asaas_sync.api.v1.dependencies.auth_deps import get_current_user, require_admin
from asaas_sync.api.v1.dependencies.use_case_deps import (
    get_charge_query_use_cases,
    get_sync_use_cases,
)
from asaas_sync.api.v1.endpoints.sync import sync_response
from asaas_sync.application.dto.auth_dto import CurrentUserDTO
from asaas_sync.application.dto.mirror_dto import ChargeListResponseDTO, ChargeResponseDTO
from asaas_sync.application.dto.sync_dto import SyncResultDTO
from asaas_sync.application.sync.manager import CHARGES
from asaas_sync.application.use_cases.mirror_use_cases import ChargeQueryUseCases
from asaas_sync.application.use_cases.sync_use_cases import SyncUseCases


router = APIRouter(prefix="/cobrancas", tags=["Cobrancas"])


@router.get(
    "",
    response_model=ChargeListResponseDTO,
    summary="Listar cobranzas",
)
async def list_charges(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    cliente: Optional[str] = Query(None, description="asaas_id del cliente"),
    status: Optional[str] = Query(None, description="PENDING, RECEIVED, CONFIRMED, OVERDUE..."),
    forma_pagamento: Optional[str] = Query(None),
    parcelamento: Optional[str] = Query(None, description="asaas_id del parcelamento"),
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: ChargeQueryUseCases = Depends(get_charge_query_use_cases),
) -> ChargeListResponseDTO:
    return await use_cases.list_charges(
        cliente=cliente,
        status=status,
        forma_pagamento=forma_pagamento,
        parcelamento=parcelamento,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/sync",
    response_model=SyncResultDTO,
    summary="Sincronizar cobranzas desde Asaas",
)
async def sync_charges(
    _: CurrentUserDTO = Depends(require_admin),
    use_cases: SyncUseCases = Depends(get_sync_use_cases),
):
    return sync_response(await use_cases.sync_entity(CHARGES))


@router.get(
    "/{charge_id}",
    response_model=ChargeResponseDTO,
    summary="Obtener cobranza por ID local o asaas_id",
)
async def get_charge(
    charge_id: str,
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: ChargeQueryUseCases = Depends(get_charge_query_use_cases),
) -> ChargeResponseDTO:
    return await use_cases.get_charge(charge_id)
