from os import environ

import boto3
from pydantic import BaseModel, ConfigDict, Field

_cached_clerk_secret: str | None = None


def _resolve_clerk_secret() -> str:
    """Fetch Clerk secret from Secrets Manager at runtime, with caching."""
    global _cached_clerk_secret
    if _cached_clerk_secret is not None:
        return _cached_clerk_secret

    # Local dev: use env var directly
    direct = environ.get("CLERK_SECRET_KEY", "")
    if direct:
        _cached_clerk_secret = direct
        return direct

    # Deployed: fetch from Secrets Manager by ARN
    arn = environ.get("CLERK_SECRET_ARN", "")
    if not arn:
        return ""

    client = boto3.client("secretsmanager")
    _cached_clerk_secret = client.get_secret_value(SecretId=arn)["SecretString"]
    return _cached_clerk_secret


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    aws_region: str
    db_host: str
    db_port: int
    db_name: str
    db_user: str
    db_password: str
    db_secret_arn: str | None = None
    db_pool_min_size: int = Field(default=1, ge=0)
    db_pool_max_size: int = Field(default=20, ge=1)
    db_pool_timeout_seconds: float = Field(default=2.0, gt=0)
    db_statement_timeout_ms: int = Field(default=5000, ge=0)
    clerk_secret_key: str = ""
    environment: str
    recovery_window_days: int = Field(default=30, ge=0)


_cached_config: Config | None = None


def _reset_config() -> None:
    """Reset cached config — for testing only."""
    global _cached_config, _cached_clerk_secret
    _cached_config = None
    _cached_clerk_secret = None


def get_config() -> Config:
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    _cached_config = Config(
        aws_region=environ.get("AWS_REGION", "us-east-1"),
        db_host=environ.get("DB_HOST", "localhost"),
        db_port=int(environ.get("DB_PORT", "5432")),
        db_name=environ.get("DB_NAME", "planit_db"),
        db_user=environ.get("DB_USER", "planit"),
        db_password=environ.get("DB_PASSWORD", "localdev"),
        db_secret_arn=environ.get("DB_SECRET_ARN"),
        db_pool_min_size=int(environ.get("DB_POOL_MIN_SIZE", "1")),
        db_pool_max_size=int(environ.get("DB_POOL_MAX_SIZE", "20")),
        db_pool_timeout_seconds=float(environ.get("DB_POOL_TIMEOUT_SECONDS", "2.0")),
        db_statement_timeout_ms=int(environ.get("DB_STATEMENT_TIMEOUT_MS", "5000")),
        clerk_secret_key=_resolve_clerk_secret(),
        environment=environ.get("ENVIRONMENT", "local"),
        recovery_window_days=int(environ.get("RECOVERY_WINDOW_DAYS", "30")),
    )
    return _cached_config
