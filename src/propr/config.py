"""Application configuration via environment variables."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from propr.models.enums import SimulationMode


class Settings(BaseSettings):
    # Server
    host: str = "127.0.0.1"
    port: int = 31001
    log_level: str = "info"
    log_json: bool = False

    # Shared secret expected in X-Client-Key
    client_key: str = "test-client-key"
    # Testbed convenience: name the expected key in 401 messages
    reveal_client_key: bool = True

    # Simulated work
    simulate: SimulationMode = SimulationMode.SUCCESS
    delay_ms: int = Field(6000, ge=0)

    # TLS (self-signed, local development only)
    http_only: bool = False
    cert_dir: Path = Path(".propr-certs")
    cert_renew_before_days: int = Field(30, ge=0)
    cert_validity_days: int = Field(365, ge=1)

    # CORS
    cors_fallback_origin: str = "http://localhost:3000"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cert_file(self) -> Path:
        return self.cert_dir / "localhost-cert.pem"

    @property
    def key_file(self) -> Path:
        return self.cert_dir / "localhost-key.pem"

    @property
    def scheme(self) -> str:
        return "http" if self.http_only else "https"


settings = Settings()
