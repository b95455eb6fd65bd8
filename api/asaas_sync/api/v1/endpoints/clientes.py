"""
Endpoints de clientes.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from asaas_sync.api.v1.dependencies.auth_deps import get_current_user, require_admin
from asaas_sync.api.v1.dependencies.use_case_deps import (
    get_customer_use_cases,
    get_sync_use_cases,
)
from asaas_sync.api.v1.endpoints.sync import sync_response
from asaas_sync.application.dto.auth_dto import CurrentUserDTO
from asaas_sync.application.dto.customer_dto import (
    CustomerCreateResponseDTO,
    CustomerListResponseDTO,
    CustomerResponseDTO,
    CustomerUpdateDTO,
    VerificationRequestDTO,
)
from asaas_sync.application.dto.sync_dto import SyncResultDTO
from asaas_sync.application.sync.manager import CUSTOMERS
from asaas_sync.application.use_cases.customer_use_cases import CustomerUseCases
from asaas_sync.application.use_cases.sync_use_cases import SyncUseCases


router = APIRouter(prefix="/clientes", tags=["Clientes"])


@router.get(
    "",
    response_model=CustomerListResponseDTO,
    summary="Listar clientes activos",
)
async def list_customers(
    busca: Optional[str] = Query(None, description="Nombre o CPF/CNPJ"),
    ordem: str = Query("nome", description="nome | criado_em | id"),
    limite: int = Query(100, ge=1, description="Maximo 500"),
    pagina: int = Query(1, ge=1),
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: CustomerUseCases = Depends(get_customer_use_cases),
) -> CustomerListResponseDTO:
    return await use_cases.list_customers(busca=busca, ordem=ordem, limite=limite, pagina=pagina)


@router.post(
    "",
    response_model=CustomerCreateResponseDTO,
    summary="Cadastrar cliente verificado (multipart)",
)
async def register_customer(
    nome: Optional[str] = Form(None),
    documento: Optional[str] = Form(None),
    telefone: Optional[str] = Form(None),
    endereco: Optional[str] = Form(None),
    verificado: Optional[str] = Form(None),
    vendedorId: Optional[str] = Form(None),
    vendedorNome: Optional[str] = Form(None),
    fotoDocumento: Optional[UploadFile] = File(None),
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: CustomerUseCases = Depends(get_customer_use_cases),
) -> CustomerCreateResponseDTO:
    """
    Cadastra el cliente en Asaas y luego en la base local.

    - 400: validacion o error de Asaas
    - 409: documento ya cadastrado (local o en Asaas)
    - 500: fallo al guardar localmente (se revierte el alta en Asaas)
    """
    return await use_cases.register_customer(
        nome=nome,
        documento=documento,
        telefone=telefone,
        endereco=endereco,
        verificado=verificado,
        vendedor_id=vendedorId,
        vendedor_nome=vendedorNome,
        foto_documento=fotoDocumento,
    )


@router.post(
    "/sync",
    response_model=SyncResultDTO,
    summary="Sincronizar clientes desde Asaas",
)
async def sync_customers(
    _: CurrentUserDTO = Depends(require_admin),
    use_cases: SyncUseCases = Depends(get_sync_use_cases),
):
    """Incluye la reconciliacion de borrados si la corrida se completa."""
    return sync_response(await use_cases.sync_entity(CUSTOMERS))


@router.post(
    "/enviar-verificacao",
    summary="Enviar codigo de verificacion al cliente",
)
async def send_verification_code(
    dto: VerificationRequestDTO,
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: CustomerUseCases = Depends(get_customer_use_cases),
) -> Dict[str, Any]:
    data = await use_cases.send_verification_code(dto)
    return {"success": True, "message": "Codigo enviado con exito", "data": data}


@router.get(
    "/{customer_id}",
    response_model=CustomerResponseDTO,
    summary="Obtener cliente por ID local o asaas_id",
)
async def get_customer(
    customer_id: str,
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: CustomerUseCases = Depends(get_customer_use_cases),
) -> CustomerResponseDTO:
    return await use_cases.get_customer(customer_id)


@router.put(
    "/{customer_id}",
    response_model=CustomerResponseDTO,
    summary="Actualizar cliente (Asaas y local)",
)
async def update_customer(
    customer_id: int,
    dto: CustomerUpdateDTO,
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: CustomerUseCases = Depends(get_customer_use_cases),
) -> CustomerResponseDTO:
    return await use_cases.update_customer(customer_id, dto)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Borrar cliente (Asaas y soft-delete local)",
)
async def delete_customer(
    customer_id: int,
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: CustomerUseCases = Depends(get_customer_use_cases),
) -> None:
    await use_cases.delete_customer(customer_id)
