"""Application configuration via environment variables."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    stripe_secret_key: str = ""
    stripe_publishable_key: str = ""
    test_billing_email: str = "succeed_immediately@example.com"
    processor_backend: str = "stripe"  # "stripe" or "mock"
    public_base_url: Optional[str] = None  # Overrides request host in return URLs
    log_level: str = "INFO"
    poll_interval_ms: int = 3000
    poll_max_attempts: int = 40  # ~120s at the default interval
    mock_latency_ms: int = 0  # Simulated processor latency

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
