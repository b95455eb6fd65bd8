"""
Router principal de la API.
Agrupa todos los endpoints bajo /api.
"""
from fastapi import APIRouter

from asaas_sync.api.v1.endpoints import auth, clientes, cobrancas, parcelamentos, sync, vendas


api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(clientes.router)
api_router.include_router(parcelamentos.router)
api_router.include_router(cobrancas.router)
api_router.include_router(vendas.router)
api_router.include_router(sync.router)
