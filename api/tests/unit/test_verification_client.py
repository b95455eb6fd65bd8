"""
Tests unitarios para VerificationClient (reenvio del codigo de verificacion).
"""
import json

import httpx
import pytest

from asaas_sync.infrastructure.external.verification.verification_client import VerificationClient
from asaas_sync.shared.exceptions.domain import ExternalServiceException


PAYLOAD = {
    "nomeCliente": "Maria",
    "nomeVendedor": "Joao",
    "documento": "52998224725",
    "telefone": "11987654321",
    "codigoVerificacao": "123456",
    "metodo": "whatsapp",
}


@pytest.mark.asyncio
async def test_send_code_forwards_payload() -> None:
    received = {}

    def handler(request: httpx.Request) -> httpx.Response:
        received["url"] = str(request.url)
        received["body"] = json.loads(request.content)
        return httpx.Response(200, json={"enviado": True})

    client = VerificationClient(base_url="http://agrochat.test/", transport=httpx.MockTransport(handler))

    data = await client.send_code(PAYLOAD)

    assert data == {"enviado": True}
    assert received["url"] == "http://agrochat.test/enviar-verificacao"
    assert received["body"]["codigoVerificacao"] == "123456"


@pytest.mark.asyncio
async def test_send_code_error_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"erro": "fora do ar"})

    client = VerificationClient(base_url="http://agrochat.test", transport=httpx.MockTransport(handler))

    with pytest.raises(ExternalServiceException) as exc_info:
        await client.send_code(PAYLOAD)

    assert exc_info.value.status_code == 502
    assert exc_info.value.details == {"erro": {"erro": "fora do ar"}}
