"""
Tests unitarios para los validadores de CPF/CNPJ y telefono.
"""
import pytest

from asaas_sync.shared.utils.document_validators import (
    is_valid_cnpj,
    is_valid_cpf,
    is_valid_document,
    is_valid_phone,
    only_digits,
)


class TestOnlyDigits:
    def test_removes_mask(self) -> None:
        assert only_digits("529.982.247-25") == "52998224725"

    def test_none_is_empty(self) -> None:
        assert only_digits(None) == ""


class TestCpf:
    """Tests para is_valid_cpf."""

    @pytest.mark.parametrize("cpf", ["529.982.247-25", "52998224725", "111.444.777-35"])
    def test_valid_cpf(self, cpf: str) -> None:
        assert is_valid_cpf(cpf) is True

    @pytest.mark.parametrize("cpf", ["529.982.247-26", "111.111.111-11", "1234567890", ""])
    def test_invalid_cpf(self, cpf: str) -> None:
        assert is_valid_cpf(cpf) is False


class TestCnpj:
    """Tests para is_valid_cnpj."""

    @pytest.mark.parametrize("cnpj", ["11.222.333/0001-81", "11222333000181"])
    def test_valid_cnpj(self, cnpj: str) -> None:
        assert is_valid_cnpj(cnpj) is True

    @pytest.mark.parametrize("cnpj", ["11.222.333/0001-82", "00.000.000/0000-00", "112223330001"])
    def test_invalid_cnpj(self, cnpj: str) -> None:
        assert is_valid_cnpj(cnpj) is False


class TestDocumentAndPhone:
    def test_document_dispatches_by_length(self) -> None:
        assert is_valid_document("529.982.247-25") is True
        assert is_valid_document("11.222.333/0001-81") is True
        assert is_valid_document("123") is False

    @pytest.mark.parametrize("phone,expected", [
        ("(11) 98765-4321", True),
        ("(11) 3456-7890", True),
        ("98765-4321", False),
        ("", False),
    ])
    def test_phone(self, phone: str, expected: bool) -> None:
        assert is_valid_phone(phone) is expected
