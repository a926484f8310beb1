# catalog/database.py
from __future__ import annotations

import logging
from typing import Generator, Optional

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from catalog.core.settings import Settings, settings

logger = logging.getLogger("catalog.database")

SQLITE_FALLBACK_URL = "sqlite:///./catalog.db"
_SQLITE_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:"}


# -----------------------------
# Helpers
# -----------------------------
def mask_url(url: str) -> str:
    if "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    if "@" not in rest or ":" not in rest.split("@", 1)[0]:
        return url
    creds, tail = rest.split("@", 1)
    user = creds.split(":", 1)[0]
    return f"{scheme}://{user}:***@{tail}"


def _build_url_from_parts(cfg: Settings) -> Optional[str]:
    host = (cfg.DB_HOST or "").strip()
    if not host:
        return None
    url = URL.create(
        drivername=cfg.DB_DRIVER.strip(),
        username=(cfg.DB_USER or "").strip() or None,
        password=cfg.DB_PASSWORD or None,
        host=host,
        port=cfg.DB_PORT,
        database=cfg.DB_NAME.strip() or None,
    )
    return url.render_as_string(hide_password=False)


def resolve_database_url(cfg: Settings) -> str:
    """DATABASE_URL, then DB_HOST/DB_USER/... parts, then a local SQLite file."""
    env_url = (cfg.DATABASE_URL or "").strip()
    if env_url:
        return env_url
    return _build_url_from_parts(cfg) or SQLITE_FALLBACK_URL


DATABASE_URL = resolve_database_url(settings)

# -----------------------------
# Naming convention for Alembic/op.f()
# -----------------------------
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)
Base = declarative_base(metadata=metadata)


# -----------------------------
# Engine factory
# -----------------------------
def build_engine_kwargs(url: str, cfg: Settings) -> dict:
    kwargs: dict = {"echo": cfg.DB_ECHO, "pool_pre_ping": True}

    if url.startswith("sqlite"):
        # SQLite driver is single-thread by default
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory needs StaticPool, otherwise every connection sees its own DB
        if url in _SQLITE_MEMORY_URLS:
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["poolclass"] = NullPool
    else:
        kwargs.update(
            {
                "pool_size": cfg.DB_POOL_SIZE,
                "max_overflow": cfg.DB_MAX_OVERFLOW,
                "pool_recycle": cfg.DB_POOL_RECYCLE,
                "pool_timeout": cfg.DB_POOL_TIMEOUT,
                "pool_use_lifo": True,
            }
        )
    return kwargs


engine: Engine = create_engine(DATABASE_URL, **build_engine_kwargs(DATABASE_URL, settings))

# -----------------------------
# Session factory
# -----------------------------
# expire_on_commit=False: objects stay usable after commit
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding a SQLAlchemy session that is always closed.
    Rolls back if the request handler raises.
    """
    db: Session = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db_if_requested() -> None:
    """
    Creates the tables from the models when DB_CREATE_ALL=1.
    Meant for demos and tests; production schemas come from Alembic.
    """
    if settings.DB_CREATE_ALL:
        from catalog import models  # noqa: F401
        logger.info("DB_CREATE_ALL set, creating tables on %s", mask_url(DATABASE_URL))
        Base.metadata.create_all(bind=engine)


__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_db",
    "init_db_if_requested",
    "resolve_database_url",
    "mask_url",
]
