# infra/db/base.py
from __future__ import annotations
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from infra.config import EngineSettings, load_settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# Bound by init_session_factory(); unbound until the application starts.
SessionLocal = sessionmaker(autoflush=False, autocommit=False, future=True)


def build_engine(db_url: str, *, echo: bool = False) -> Engine:
    kwargs = {}
    if db_url.startswith("sqlite"):
        # sessions are per thread, pooled connections may hop threads
        kwargs["connect_args"] = {"check_same_thread": False}
    engine = create_engine(db_url, echo=echo, future=True, **kwargs)
    logger.info("Using database at: %s", engine.url.render_as_string(hide_password=True))
    return engine


def init_session_factory(settings: EngineSettings | None = None) -> sessionmaker:
    settings = settings or load_settings()
    SessionLocal.configure(bind=build_engine(settings.db_url, echo=settings.sql_echo))
    return SessionLocal
