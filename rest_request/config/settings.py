from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RestRequestSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    connect_timeout_seconds: float = Field(5.0, validation_alias="REST_CONNECT_TIMEOUT_SECONDS")
    read_timeout_seconds: float = Field(30.0, validation_alias="REST_READ_TIMEOUT_SECONDS")
    follow_redirects: bool = Field(True, validation_alias="REST_FOLLOW_REDIRECTS")
    verify_tls: bool = Field(True, validation_alias="REST_VERIFY_TLS")
    product_info: str = Field("", validation_alias="REST_PRODUCT_INFO")
    # Directory for in-flight downloads; empty means the system temp dir.
    download_dir: str = Field("", validation_alias="REST_DOWNLOAD_DIR")

    circuit_timeout_ms: int = Field(1000, gt=0, validation_alias="REST_CIRCUIT_TIMEOUT_MS")
    circuit_reset_timeout_ms: int = Field(60000, gt=0, validation_alias="REST_CIRCUIT_RESET_TIMEOUT_MS")
    circuit_max_failures: int = Field(5, gt=0, validation_alias="REST_CIRCUIT_MAX_FAILURES")
    circuit_rolling_window_ms: int = Field(10000, gt=0, validation_alias="REST_CIRCUIT_ROLLING_WINDOW_MS")
    circuit_bulkhead_size: int = Field(0, ge=0, validation_alias="REST_CIRCUIT_BULKHEAD")
