"""
Endpoints de ventas parceladas.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response

from asaas_sync.api.v1.dependencies.auth_deps import get_current_user
from asaas_sync.api.v1.dependencies.use_case_deps import get_sale_use_cases
from asaas_sync.application.dto.auth_dto import CurrentUserDTO
from asaas_sync.application.dto.sale_dto import SaleResponseDTO
from asaas_sync.application.use_cases.sale_use_cases import SaleUseCases


router = APIRouter(prefix="/vendas", tags=["Vendas"])


@router.post(
    "",
    response_model=SaleResponseDTO,
    summary="Registrar venta parcelada (multipart)",
)
async def create_sale(
    clienteId: Optional[str] = Form(None),
    valor: Optional[str] = Form(None),
    parcelas: Optional[str] = Form(None),
    dataVencimento: Optional[str] = Form(None, description="dd/mm/yyyy"),
    descricao: Optional[str] = Form(None),
    numeroFicha: Optional[str] = Form(None),
    vendedorId: Optional[str] = Form(None),
    tipoVenda: Optional[str] = Form(None, description="parcelado"),
    rotaId: Optional[str] = Form(None),
    fotoFicha: Optional[UploadFile] = File(None),
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: SaleUseCases = Depends(get_sale_use_cases),
) -> SaleResponseDTO:
    """
    Crea el parcelamento en Asaas y lo guarda junto con sus cobranzas.

    - 400: validacion
    - 404: cliente inexistente
    - 502: Asaas rechazo el parcelamento
    - 500: fallo al guardar (se intenta borrar el parcelamento en Asaas)
    """
    return await use_cases.create_sale(
        cliente_id=clienteId,
        valor=valor,
        parcelas=parcelas,
        data_vencimento=dataVencimento,
        descricao=descricao,
        numero_ficha=numeroFicha,
        vendedor_id=vendedorId,
        tipo_venda=tipoVenda,
        rota_id=rotaId,
        foto_ficha=fotoFicha,
    )


@router.get(
    "/{sale_id}/pdf",
    summary="Descargar el carne (PDF) del parcelamento",
    response_class=Response,
)
async def get_payment_book(
    sale_id: int,
    _: CurrentUserDTO = Depends(get_current_user),
    use_cases: SaleUseCases = Depends(get_sale_use_cases),
) -> Response:
    content = await use_cases.get_payment_book(sale_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="carne_parcelamento_{sale_id}.pdf"'},
    )
