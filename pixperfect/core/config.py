"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 5001
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./pixperfect.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    min_password_length: int = 6


class LocalStorageSettings(BaseModel):
    directory: Path = Field(default=Path("storage/uploads"))
    public_path: str = "/uploads"


class S3StorageSettings(BaseModel):
    bucket: str = ""
    prefix: str = ""
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    public_base_url: Optional[str] = None
    connect_timeout: int = 10
    read_timeout: int = 60
    max_retries: int = 3


class StorageSettings(BaseModel):
    backend: Literal["local", "s3"] = "local"
    # Upper bound (seconds) for any single blob store or metadata store call.
    operation_timeout: float = Field(default=30.0, gt=0)
    max_upload_bytes: int = 20 * 1024 * 1024
    local: LocalStorageSettings = LocalStorageSettings()
    s3: S3StorageSettings = S3StorageSettings()


class CorsSettings(BaseModel):
    allow_origins: list[str] = ["https://pixperfectfrontend.netlify.app"]


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    project_name: str = "PixPerfect"
    api_prefix: str = ""

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    storage: StorageSettings = StorageSettings()
    cors: CorsSettings = CorsSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def access_token_expire_minutes(self) -> int:
        return self.security.access_token_expire_minutes

    @property
    def upload_dir(self) -> Path:
        return self.storage.local.directory


@lru_cache()
def get_settings() -> Settings:
    return Settings()
