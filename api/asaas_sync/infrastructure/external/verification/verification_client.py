"""
Cliente para el servicio de mensajeria (AgroChat) que entrega los codigos
de verificacion de clientes.
"""
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from asaas_sync.core.config import settings
from asaas_sync.shared.exceptions.domain import ExternalServiceException


class VerificationClient:
    """
    Reenvia el payload del codigo de verificacion a `{AGROCHAT_API_URL}/enviar-verificacao`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.AGROCHAT_API_URL).rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    async def send_code(self, payload: Dict[str, Any]) -> Any:
        """
        Envia el codigo y retorna la respuesta del servicio.

        Raises:
            ExternalServiceException: si el servicio no responde o responde con error.
        """
        url = f"{self.base_url}/enviar-verificacao"
        logger.info(
            f"[AGROCHAT] Enviando codigo para {payload.get('nomeCliente')} via {payload.get('metodo')}"
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                body = e.response.json()
            except ValueError:
                body = e.response.text
            logger.error(f"[AGROCHAT] Error al enviar codigo: {e}")
            raise ExternalServiceException(
                "Error al enviar el codigo de verificacion",
                details={"erro": body},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"[AGROCHAT] Error al enviar codigo: {e}")
            raise ExternalServiceException(
                "Error al enviar el codigo de verificacion",
                details={"erro": str(e)},
            ) from e

        logger.info(f"[AGROCHAT] Codigo enviado con exito para {payload.get('nomeCliente')}")
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
