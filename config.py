import os
import sys
from typing import Optional
from dataclasses import dataclass

from loguru import logger
from dotenv import load_dotenv
from sqlalchemy import create_engine, Engine


@dataclass(frozen=True)
class Settings:
    db_uri: str
    max_rows: int = 30
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "Settings":
        load_dotenv(dotenv_path)

        # --- DB credentials (Postgres unless DATABASE_URL says otherwise) ---
        db_host = os.getenv("DB_HOST", "localhost")
        db_port = os.getenv("DB_PORT", "5432")
        db_user = os.getenv("DB_USER", "music")
        db_password = os.getenv("DB_PASSWORD", "music")
        db_name = os.getenv("DB_NAME", "music_store")
        db_uri = os.getenv(
            "DATABASE_URL",
            f"postgresql+psycopg2://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}",
        )

        max_rows = int(os.getenv("MAX_ROWS", "30"))
        if max_rows < 1:
            raise ValueError(f"MAX_ROWS must be positive, got {max_rows}")

        return cls(
            db_uri=db_uri,
            max_rows=max_rows,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def build_engine(settings: Settings, **kwargs) -> Engine:
    return create_engine(settings.db_uri, pool_pre_ping=True, **kwargs)
