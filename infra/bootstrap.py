# infra/bootstrap.py
from __future__ import annotations

import logging

from core.interfaces import ProjectRegistry, ResourceDirectory
from core.services.allocation import default_lock_manager
from core.services.auth.session import UserSessionContext
from infra.config import EngineSettings, load_settings
from infra.db.base import init_session_factory
from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.services import ServiceGraph, build_service_graph

logger = logging.getLogger(__name__)


def bootstrap(
    settings: EngineSettings | None = None,
    *,
    user_session: UserSessionContext | None = None,
    resource_directory: ResourceDirectory | None = None,
    project_registry: ProjectRegistry | None = None,
    migrate: bool = True,
) -> ServiceGraph:
    """Configure logging, bring the schema to head and wire the engine services."""
    settings = settings or load_settings()
    setup_logging(settings)
    if migrate:
        run_migrations(settings.db_url)

    session_factory = init_session_factory(settings)
    session = session_factory()
    graph = build_service_graph(
        session,
        user_session=user_session,
        lock_manager=default_lock_manager(settings.lock_timeout_seconds),
        resource_directory=resource_directory,
        project_registry=project_registry,
    )
    logger.info("Allocation engine ready (lock timeout %.1fs)", settings.lock_timeout_seconds)
    return graph


__all__ = ["bootstrap"]
