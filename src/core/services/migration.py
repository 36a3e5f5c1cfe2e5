"""Run Alembic migrations programmatically — invoked via the MigrateFunction Lambda."""

import io
import json
import logging
import os

import boto3
from alembic.config import Config

from alembic import command

logger = logging.getLogger(__name__)

_DEFAULT_ALEMBIC_INI = "/var/task/alembic.ini"
_DEFAULT_SCRIPT_LOCATION = "/var/task/alembic"


def _load_credentials_from_secret(secret_arn: str) -> None:
    """Fetch database credentials from Secrets Manager and set env vars for alembic/env.py."""
    sm = boto3.client("secretsmanager", region_name=os.environ.get("AWS_REGION", "us-east-1"))
    secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
    os.environ["DB_USER"] = secret.get("username", "planit")
    os.environ["DB_PASSWORD"] = secret.get("password", "")
    os.environ["DB_HOST"] = secret.get("host", os.environ.get("DB_HOST", ""))
    os.environ["DB_PORT"] = str(secret.get("port", 5432))
    os.environ["DB_NAME"] = secret.get("dbname", os.environ.get("DB_NAME", "planit_db"))


def run_migrations(revision: str = "head") -> dict[str, str]:
    secret_arn = os.environ.get("DB_SECRET_ARN")
    if secret_arn:
        _load_credentials_from_secret(secret_arn)

    cfg = Config(os.environ.get("ALEMBIC_CONFIG", _DEFAULT_ALEMBIC_INI))
    cfg.set_main_option("script_location", os.environ.get("ALEMBIC_SCRIPT_LOCATION", _DEFAULT_SCRIPT_LOCATION))

    stderr_buf = io.StringIO()
    stream_handler = logging.StreamHandler(stderr_buf)
    alembic_logger = logging.getLogger("alembic")
    alembic_logger.addHandler(stream_handler)

    try:
        command.upgrade(cfg, revision)
        output = stderr_buf.getvalue()
        logger.info("Migration to %s complete: %s", revision, output)
        return {"status": "success", "revision": revision, "output": output}
    except Exception as e:
        logger.error("Migration to %s failed: %s", revision, e)
        raise
    finally:
        alembic_logger.removeHandler(stream_handler)
