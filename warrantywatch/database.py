"""Database engines and device store construction."""

import logging
from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import create_engine

# Import all models so SQLModel registers them
import warrantywatch.models  # noqa: F401
from warrantywatch.config import Settings
from warrantywatch.errors import ConfigurationError
from warrantywatch.store import DeviceStore, MultiTenantDeviceStore, SingleTenantDeviceStore

logger = logging.getLogger(__name__)


def create_sqlite_engine(db_path: Path, echo: bool = False) -> Engine:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        f"sqlite:///{db_path}",
        echo=echo,
        connect_args={"check_same_thread": False},
    )


def init_db(engine: Engine) -> None:
    """Enable WAL mode on SQLite engines."""
    if engine.dialect.name != "sqlite":
        return
    with engine.connect() as conn:
        conn.exec_driver_sql("PRAGMA journal_mode=WAL")
        conn.exec_driver_sql("PRAGMA synchronous=NORMAL")
        conn.commit()


def create_store(settings: Settings) -> DeviceStore:
    """Build the device store for the configured deployment mode.

    Self-hosted deployments get the embedded single-tenant SQLite store;
    SaaS deployments get the multi-tenant store on ``database_url``.
    """
    if settings.is_saas:
        if not settings.database_url:
            raise ConfigurationError("WARRANTYWATCH_DATABASE_URL is required for saas mode")
        engine = create_engine(settings.database_url, echo=settings.debug, pool_pre_ping=True)
        store = MultiTenantDeviceStore(engine)
    else:
        engine = create_sqlite_engine(settings.db_path, echo=settings.debug)
        store = SingleTenantDeviceStore(engine)

    store.init_schema()
    init_db(engine)
    logger.info("Device store ready: %s (%s)", type(store).__name__, engine.dialect.name)
    return store
