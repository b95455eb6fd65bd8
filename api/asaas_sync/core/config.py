"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.
Soporta configuracion dinamica para desarrollo (ENVIRONMENT=development)
y produccion (ENVIRONMENT=production).
"""
import json
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    - DATABASE_URL se puede especificar completa o por componentes
    - ASAAS_API_KEY es obligatoria para sincronizar y para los flujos manuales
    - Los delays de SYNC_* respetan el rate limit (no documentado) de Asaas
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Asaas Sync Backend")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)

    # Base de datos - Componentes separados (recomendado para flexibilidad)
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="dev")
    DATABASE_PASSWORD: str = Field(default="dev")
    DATABASE_NAME: str = Field(default="devdb")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # Seguridad (JWT)
    SECRET_KEY: str = Field(default="change-this-secret-key-in-production")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Asaas
    ASAAS_BASE_URL: str = Field(default="https://api.asaas.com/v3")
    ASAAS_API_KEY: str = Field(default="")
    # Timeout de los flujos manuales (cadastro, venta, PDF)
    ASAAS_TIMEOUT: float = Field(default=30.0)
    # Timeout de los listados usados por el sync. None = sin timeout.
    ASAAS_SYNC_TIMEOUT: Optional[float] = Field(default=None)

    # Sincronizacion
    SYNC_RECORD_DELAY_SECONDS: float = Field(default=0.1)
    SYNC_PAGE_DELAY_SECONDS: float = Field(default=2.0)
    SYNC_STAGE_DELAY_SECONDS: float = Field(default=10.0)

    # Uploads (fotos de documento y de ficha)
    UPLOAD_DIR: str = Field(default="uploads")

    # Servicio de mensajeria para codigos de verificacion
    AGROCHAT_API_URL: str = Field(default="http://localhost:8080")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
