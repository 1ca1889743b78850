from __future__ import annotations

import logging
from typing import Any, Dict, Generator

from fastapi import HTTPException, Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# --- Declarative base ---
Base = declarative_base()


class Database:
    """
    Storage handle owned by the application: one engine and its session factory.
    Built once at startup and stored on `app.state.database`.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any) -> None:
        options: Dict[str, Any] = {"future": True, "echo": echo}
        if url.startswith("sqlite"):
            options["connect_args"] = {"check_same_thread": False}
        else:
            options["pool_pre_ping"] = True
        options.update(engine_kwargs)

        self.url = url
        self.engine = create_engine(url, **options)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            future=True,
        )

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def init_db(self) -> None:
        """
        Registers every model and creates missing tables.
        Models must be imported before create_all().
        """
        from orderdesk import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("[orderdesk] DB init: tables ensured")

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Provides one DB session per HTTP request."""
    db = request.app.state.database.session()
    try:
        yield db
    except HTTPException:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception("[orderdesk] db session rolled back due to exception")
        raise
    finally:
        db.close()
        logger.debug("[orderdesk] db session closed")
