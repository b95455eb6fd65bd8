"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from pathlib import Path
from typing import Callable

from fastapi import FastAPI
from loguru import logger

from asaas_sync.application.sync.manager import build_sync_manager
from asaas_sync.core.config import settings
from asaas_sync.infrastructure.database.session import AsyncSessionLocal, close_db, init_db
from asaas_sync.infrastructure.external.asaas.client import AsaasClient


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Validar configuracion critica
            _validate_config()

            # Inicializar base de datos (crea tablas si no existen)
            await init_db()
            logger.info("Base de datos inicializada")

            # Directorios de uploads
            for subdir in ("documentos", "fichas"):
                (Path(settings.UPLOAD_DIR) / subdir).mkdir(parents=True, exist_ok=True)

            # Cliente de Asaas y motor de sync compartidos por el proceso
            client = AsaasClient()
            app.state.asaas_client = client
            app.state.sync_manager = build_sync_manager(AsyncSessionLocal, client=client)
            logger.info(f"Cliente Asaas configurado ({client.base_url})")

            # Configurar logging adicional
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )

            logger.success("Aplicacion iniciada correctamente")

            # Mostrar URLs disponibles
            _print_available_urls()

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []

    if not settings.ASAAS_API_KEY:
        warnings.append("ASAAS_API_KEY no configurada - sync y flujos manuales fallaran")

    if settings.SECRET_KEY == "change-this-secret-key-in-production":
        warnings.append("SECRET_KEY con valor por defecto - cambiarla en produccion")

    # Mostrar advertencias
    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def _print_available_urls() -> None:
    """Imprime las URLs disponibles de la aplicacion."""
    # Determinar la URL base de acceso
    if settings.HOST == "0.0.0.0":
        access_host = "localhost"
    else:
        access_host = settings.HOST

    base_url = f"http://{access_host}:{settings.PORT}"

    # Mostrar las URLs disponibles
    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")
    logger.opt(colors=True).info("<bold><green>URLS DISPONIBLES:</green></bold>")
    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")
    logger.opt(colors=True).info(f"<cyan>  Swagger UI:  {base_url}/docs</cyan>")
    logger.opt(colors=True).info(f"<cyan>  ReDoc:       {base_url}/redoc</cyan>")
    logger.opt(colors=True).info(f"<cyan>  OpenAPI:     {base_url}/openapi.json</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Health:      {base_url}/health</cyan>")
    logger.opt(colors=True).info(f"<cyan>  API:         {base_url}/api</cyan>")
    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        # Cancelar sincronizaciones en curso
        manager = getattr(app.state, "sync_manager", None)
        if manager is not None:
            if manager.cancel_all():
                logger.info("Sincronizaciones en curso canceladas")
            await manager.close()
            logger.info("Cliente Asaas cerrado")

        # Cerrar conexiones de base de datos
        await close_db()
        logger.info("Conexiones de base de datos cerradas")

        logger.success("Aplicacion cerrada correctamente")

    return shutdown
