# tests/conftest.py
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.services.allocation import ResourceLockManager
from infra.db.base import Base
from infra.services import build_service_graph

WORKSPACE = "ws-1"
ORGANIZATION = "org-1"
RESOURCE = "res-1"
PROJECT = "proj-1"
START = date(2026, 3, 2)
END = date(2026, 3, 13)


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def lock_manager():
    return ResourceLockManager(timeout=2.0)


@pytest.fixture
def services(session, lock_manager):
    # Same wiring as build_service_graph() at runtime, with the test session
    graph = build_service_graph(session, lock_manager=lock_manager)
    return graph.as_dict()


@pytest.fixture
def book(services):
    """Create an allocation on the default resource/window; keyword args override."""
    allocation_service = services["allocation_service"]

    def _book(type, allocation_percentage, justification=None, **overrides):
        kwargs = {
            "resource_id": RESOURCE,
            "project_id": PROJECT,
            "allocation_percentage": allocation_percentage,
            "start_date": START,
            "end_date": END,
            "type": type,
            "justification": justification,
            "workspace_id": WORKSPACE,
            "organization_id": ORGANIZATION,
        }
        kwargs.update(overrides)
        return allocation_service.create_allocation(**kwargs)

    return _book


@pytest.fixture
def detect(services):
    """Preview the default resource/window, optionally with a requested percentage."""
    allocation_service = services["allocation_service"]

    def _detect(allocation_percentage=0.0, **overrides):
        kwargs = {
            "resource_id": RESOURCE,
            "start_date": START,
            "end_date": END,
            "allocation_percentage": allocation_percentage,
            "workspace_id": WORKSPACE,
        }
        kwargs.update(overrides)
        return allocation_service.detect_conflicts(**kwargs)

    return _detect
