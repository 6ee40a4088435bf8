# cms_dashboard/core/database.py
"""Host database configuration and read-only session scopes."""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from cms_dashboard.core.config import HOST_DATABASE_URL
from cms_dashboard.core.exceptions import BackendUnavailableError

logger = logging.getLogger(__name__)

# ===== HOST DATABASE =====
# The platform's database. Tables are owned and migrated by the host; we only read them.

host_engine = create_engine(
    HOST_DATABASE_URL,
    pool_pre_ping=True,
    connect_args={"check_same_thread": False} if HOST_DATABASE_URL.startswith("sqlite") else {},
)
HostSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=host_engine)
HostBase = declarative_base()

SessionFactory = Callable[[], Session]


# ===== SESSION SCOPES =====


def get_session_factory() -> SessionFactory:
    """Get the host session factory."""
    return HostSessionLocal


@contextmanager
def database_scope(session_factory: Optional[SessionFactory] = None) -> Iterator[Session]:
    """Open a unit of work against the host database and always release it.

    Connection loss, pool exhaustion and driver timeouts are re-raised as
    BackendUnavailableError. Any other error propagates unchanged.
    """
    session = (session_factory or HostSessionLocal)()
    try:
        yield session
    except (OperationalError, InterfaceError, PoolTimeoutError) as e:
        logger.error("Host database unavailable: %s", e)
        raise BackendUnavailableError("Host database is unavailable") from e
    except DBAPIError as e:
        if e.connection_invalidated:
            logger.error("Host database connection lost: %s", e)
            raise BackendUnavailableError("Host database connection was lost") from e
        raise
    finally:
        session.close()


def table_exists(session: Session, table_name: str) -> bool:
    """Check whether the host schema contains the given table."""
    return inspect(session.connection()).has_table(table_name)
