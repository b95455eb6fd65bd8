"""
Utilidades de fechas para el formato de Asaas y el formato brasileño.
"""
from datetime import date, datetime
from typing import Any, Optional


def parse_provider_date(value: Any) -> Optional[date]:
    """
    Convierte una fecha de Asaas ("2024-01-15" o "2024-01-15 10:32:00") a date.

    Valores vacios o None retornan None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_br_date(value: str) -> Optional[date]:
    """
    Parsea una fecha en formato dd/mm/yyyy. Retorna None si es invalida.
    """
    try:
        return datetime.strptime(value.strip(), "%d/%m/%Y").date()
    except (ValueError, AttributeError):
        return None


def format_duration(seconds: float) -> str:
    """Formatea una duracion en segundos como "1h 05m 03s" / "2m 10s" / "45s"."""
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"
