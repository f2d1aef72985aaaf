import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

from cardpoints.domain.models import EvaluationMode


class Settings(BaseSettings):
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    rule_store_file: str = "data/rules/reward_rules.json"
    transaction_file: str = "data/transactions/transactions.json"

    rule_cache_ttl_seconds: float = 300.0
    spend_cache_ttl_seconds: float = 300.0

    default_evaluation_mode: EvaluationMode = "first_match"
    product_evaluation_modes: dict[str, EvaluationMode] = {}

    # bearer token -> user id, e.g. API_TOKENS='{"s3cret": "alice"}'
    api_tokens: dict[str, str] = {}

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
