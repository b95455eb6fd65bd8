"""
Script para ejecutar el servidor en modo desarrollo.
"""
import uvicorn
from asaas_sync.core.config import settings


if __name__ == "__main__":
    uvicorn.run(
        "asaas_sync.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        log_level=settings.LOG_LEVEL.lower()
    )
