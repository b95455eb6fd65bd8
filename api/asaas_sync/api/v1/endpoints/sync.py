"""
Endpoints de sincronizacion Asaas -> base local.

Los triggers y la cancelacion son solo para administradores. Una corrida
fallida responde 500; `already_running` responde 200 con success=false.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from asaas_sync.api.v1.dependencies.auth_deps import get_current_user, require_admin
from asaas_sync.api.v1.dependencies.use_case_deps import get_sync_use_cases
from asaas_sync.application.dto.auth_dto import CurrentUserDTO
from asaas_sync.application.dto.sync_dto import (
    FullSyncResultDTO,
    SyncCancelResponseDTO,
    SyncResultDTO,
    SyncStatusDTO,
)
from asaas_sync.application.sync.types import SyncOutcome
from asaas_sync.application.use_cases.sync_use_cases import SyncUseCases


router = APIRouter(prefix="/sync", tags=["Sync"])


def sync_response(dto: SyncResultDTO) -> JSONResponse:
    """Serializa el resultado; HTTP 500 si la corrida fallo."""
    status_code = (
        status.HTTP_500_INTERNAL_SERVER_ERROR
        if dto.status == SyncOutcome.FAILED.value
        else status.HTTP_200_OK
    )
    return JSONResponse(status_code=status_code, content=dto.model_dump(mode="json"))


@router.post(
    "/all",
    response_model=FullSyncResultDTO,
    summary="Sincronizar clientes, parcelamentos y cobranzas en secuencia",
)
async def sync_all(
    _: CurrentUserDTO = Depends(require_admin),
    use_cases: SyncUseCases = Depends(get_sync_use_cases),
):
    """
    Corre clientes -> parcelamentos -> cobranzas con espera entre etapas.
    Responde cuando termina la secuencia (o se cancela).
    """
    return sync_response(await use_cases.sync_all())


@router.get(
    "/status",
    response_model=SyncStatusDTO,
    summary="Estado de las sincronizaciones",
)
async def sync_status(
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: SyncUseCases = Depends(get_sync_use_cases),
) -> SyncStatusDTO:
    return use_cases.status()


@router.post(
    "/cancel",
    response_model=SyncCancelResponseDTO,
    summary="Cancelar la sincronizacion en curso",
)
async def sync_cancel(
    _: CurrentUserDTO = Depends(require_admin),
    use_cases: SyncUseCases = Depends(get_sync_use_cases),
) -> SyncCancelResponseDTO:
    """La corrida se detiene al inicio del siguiente registro o pagina."""
    return use_cases.cancel()
