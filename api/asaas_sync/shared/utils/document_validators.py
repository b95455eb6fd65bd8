"""
Validadores de documentos brasileños (CPF/CNPJ) y telefonos.

Funciones puras: reciben texto con o sin mascara y trabajan sobre los digitos.
"""
import re

_NON_DIGITS = re.compile(r"\D")


def only_digits(value: str) -> str:
    """Elimina todo lo que no sea digito ("123.456.789-09" -> "12345678909")."""
    return _NON_DIGITS.sub("", value or "")


def _all_same_digit(digits: str) -> bool:
    return len(set(digits)) == 1


def is_valid_cpf(cpf: str) -> bool:
    digits = only_digits(cpf)
    if len(digits) != 11 or _all_same_digit(digits):
        return False

    for position in (9, 10):
        total = sum(int(digits[i]) * (position + 1 - i) for i in range(position))
        check = (total * 10) % 11
        if check == 10:
            check = 0
        if check != int(digits[position]):
            return False
    return True


def is_valid_cnpj(cnpj: str) -> bool:
    digits = only_digits(cnpj)
    if len(digits) != 14 or _all_same_digit(digits):
        return False

    weights_first = [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
    weights_second = [6] + weights_first

    for position, weights in ((12, weights_first), (13, weights_second)):
        total = sum(int(d) * w for d, w in zip(digits[:position], weights))
        remainder = total % 11
        check = 0 if remainder < 2 else 11 - remainder
        if check != int(digits[position]):
            return False
    return True


def is_valid_document(document: str) -> bool:
    """Valida CPF (11 digitos) o CNPJ (14 digitos)."""
    digits = only_digits(document)
    if len(digits) == 11:
        return is_valid_cpf(digits)
    if len(digits) == 14:
        return is_valid_cnpj(digits)
    return False


def is_valid_phone(phone: str) -> bool:
    """Acepta 10 digitos (fijo) u 11 digitos (celular), con DDD."""
    return len(only_digits(phone)) in (10, 11)
