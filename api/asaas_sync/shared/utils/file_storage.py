"""
Almacenamiento local de imagenes subidas (foto de documento, foto de ficha).

Estructura bajo UPLOAD_DIR:
- documentos/{documento}_{timestamp}{ext}
- fichas/ficha_{numero}_{timestamp}{ext}

La URL publica es `/uploads/<subcarpeta>/<archivo>` (montada como StaticFiles).
"""
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from loguru import logger

from asaas_sync.core.config import settings
from asaas_sync.shared.exceptions.domain import ValidationException


ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png"}
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png"}

DOCUMENTS_DIR = "documentos"
SHEETS_DIR = "fichas"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


@dataclass(frozen=True)
class StoredFile:
    path: Path
    url: str

    def remove(self) -> None:
        """Borra el archivo si existe. Los errores solo se loguean."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"[UPLOADS] Error al remover {self.path}: {e}")


def validate_image(upload: Optional[UploadFile], field: str) -> UploadFile:
    """Exige un archivo JPG/JPEG/PNG."""
    if upload is None or not upload.filename:
        raise ValidationException(f"El archivo '{field}' es obligatorio", field=field)

    extension = Path(upload.filename).suffix.lower()
    content_type = (upload.content_type or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES and extension not in ALLOWED_EXTENSIONS:
        raise ValidationException(
            "Formato de archivo invalido. Solo se permiten JPG, JPEG y PNG",
            field=field,
        )
    return upload


async def _save(upload: UploadFile, subdir: str, filename: str) -> StoredFile:
    target_dir = Path(settings.UPLOAD_DIR) / subdir
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / filename

    content = await upload.read()
    target.write_bytes(content)
    logger.debug(f"[UPLOADS] Guardado {target} ({len(content)} bytes)")
    return StoredFile(path=target, url=f"/uploads/{subdir}/{filename}")


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


async def save_document_photo(upload: UploadFile, documento: str) -> StoredFile:
    extension = Path(upload.filename or "").suffix.lower()
    safe_doc = _UNSAFE_CHARS.sub("", documento) or "documento"
    return await _save(upload, DOCUMENTS_DIR, f"{safe_doc}_{_timestamp_ms()}{extension}")


async def save_sheet_photo(upload: UploadFile, numero_ficha: str) -> StoredFile:
    extension = Path(upload.filename or "").suffix.lower()
    safe_number = _UNSAFE_CHARS.sub("_", numero_ficha or "") or "ficha"
    return await _save(upload, SHEETS_DIR, f"ficha_{safe_number}_{_timestamp_ms()}{extension}")
