"""
Cliente de la API REST de Asaas (v3) sobre httpx.AsyncClient.

Requisitos cubiertos:
- header `access_token` con la API key
- paginacion por offset/limit -> {data, hasMore}
- errores traducidos a AsaasApiError (status + errors[0].description)

No hace reintentos: el orquestador de sync tampoco los hace, un error
aborta la corrida.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from loguru import logger

from asaas_sync.core.config import settings

from .types import AsaasApiError, AsaasPage, extract_error_description


# Sentinel para distinguir "sin timeout" (None) de "usar el default del cliente"
_DEFAULT = object()


class AsaasClient:
    """
    Wrapper HTTP de Asaas.

    - El timeout por defecto (`timeout_s`) aplica a los flujos manuales.
    - Los listados del sync usan `sync_timeout_s`; None = sin timeout.
    - `transport` permite inyectar httpx.MockTransport en tests.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        sync_timeout_s: Any = _DEFAULT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.ASAAS_API_KEY
        self._base_url = (base_url or settings.ASAAS_BASE_URL).rstrip("/")
        self._timeout_s = timeout_s if timeout_s is not None else settings.ASAAS_TIMEOUT
        self._sync_timeout_s = (
            settings.ASAAS_SYNC_TIMEOUT if sync_timeout_s is _DEFAULT else sync_timeout_s
        )
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "access_token": self._api_key,
                "Content-Type": "application/json",
                "User-Agent": "asaas-sync",
            },
            timeout=self._timeout_s,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsaasClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Nucleo HTTP
    # ------------------------------------------------------------------

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Any = _DEFAULT,
    ) -> httpx.Response:
        kwargs: dict[str, Any] = {}
        if params:
            kwargs["params"] = {k: v for k, v in params.items() if v is not None}
        if json is not None:
            kwargs["json"] = json
        if timeout is not _DEFAULT:
            kwargs["timeout"] = timeout

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise AsaasApiError(f"Error de red con Asaas ({method} {path}): {e}") from e

        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            description = extract_error_description(payload)
            raise AsaasApiError(
                f"Asaas respondio {response.status_code} en {method} {path}"
                + (f": {description}" if description else ""),
                status_code=response.status_code,
                description=description,
                payload=payload,
            )
        return response

    async def _request_json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        response = await self._send(method, path, **kwargs)
        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError as e:
            raise AsaasApiError(
                f"Respuesta no-JSON de Asaas en {method} {path}",
                status_code=response.status_code,
            ) from e
        if not isinstance(payload, dict):
            raise AsaasApiError(f"Respuesta inesperada de Asaas en {method} {path}")
        return payload

    async def _list(
        self,
        path: str,
        *,
        offset: int,
        limit: int,
        filters: Optional[dict[str, Any]] = None,
        for_sync: bool = True,
    ) -> AsaasPage:
        params: dict[str, Any] = {"offset": offset, "limit": limit}
        if filters:
            params.update(filters)
        timeout = self._sync_timeout_s if for_sync else _DEFAULT
        payload = await self._request_json("GET", path, params=params, timeout=timeout)
        page = AsaasPage.from_payload(payload)
        logger.debug(
            f"[ASAAS] GET {path} offset={offset} limit={limit} -> "
            f"{len(page.data)} registros (hasMore={page.has_more})"
        )
        return page

    # ------------------------------------------------------------------
    # Clientes
    # ------------------------------------------------------------------

    async def list_customers(self, offset: int = 0, limit: int = 100) -> AsaasPage:
        return await self._list("/customers", offset=offset, limit=limit)

    async def get_customer(self, customer_id: str) -> dict[str, Any]:
        return await self._request_json("GET", f"/customers/{customer_id}")

    async def find_customer_by_document(self, cpf_cnpj: str) -> Optional[dict[str, Any]]:
        """
        Busca un cliente activo en Asaas por CPF/CNPJ.

        Returns:
            El primer cliente no borrado o None.
        """
        page = await self._list(
            "/customers",
            offset=0,
            limit=10,
            filters={"cpfCnpj": cpf_cnpj},
            for_sync=False,
        )
        for customer in page.data:
            if not customer.get("deleted"):
                return customer
        return None

    async def create_customer(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request_json("POST", "/customers", json=payload)

    async def update_customer(self, customer_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request_json("PUT", f"/customers/{customer_id}", json=payload)

    async def delete_customer(self, customer_id: str) -> dict[str, Any]:
        return await self._request_json("DELETE", f"/customers/{customer_id}")

    # ------------------------------------------------------------------
    # Parcelamentos
    # ------------------------------------------------------------------

    async def list_installments(self, offset: int = 0, limit: int = 50) -> AsaasPage:
        return await self._list("/installments", offset=offset, limit=limit)

    async def get_installment(self, installment_id: str) -> dict[str, Any]:
        return await self._request_json("GET", f"/installments/{installment_id}")

    async def delete_installment(self, installment_id: str) -> dict[str, Any]:
        return await self._request_json("DELETE", f"/installments/{installment_id}")

    async def get_installment_payment_book(self, installment_id: str) -> bytes:
        """Descarga el carne (PDF) de un parcelamento."""
        response = await self._send("GET", f"/installments/{installment_id}/paymentBook")
        return response.content

    # ------------------------------------------------------------------
    # Cobranzas
    # ------------------------------------------------------------------

    async def list_payments(
        self,
        offset: int = 0,
        limit: int = 50,
        *,
        installment: Optional[str] = None,
    ) -> AsaasPage:
        if installment:
            return await self._list(
                "/payments",
                offset=offset,
                limit=limit,
                filters={"installment": installment},
                for_sync=False,
            )
        return await self._list("/payments", offset=offset, limit=limit)

    async def get_payment(self, payment_id: str) -> dict[str, Any]:
        return await self._request_json("GET", f"/payments/{payment_id}")

    async def create_payment(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request_json("POST", "/payments", json=payload)

    async def delete_payment(self, payment_id: str) -> dict[str, Any]:
        return await self._request_json("DELETE", f"/payments/{payment_id}")
