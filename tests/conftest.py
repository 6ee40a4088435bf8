"""
Test configuration and shared fixtures for the CMS dashboard test suite.
Provides an in-memory host database, sample host content and an API client.
"""

import pytest
from datetime import datetime
from typing import Callable, List
from unittest.mock import Mock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from cms_dashboard.app import create_app
from cms_dashboard.core.database import HostBase, get_session_factory
from cms_dashboard.core.dependencies import get_url_resolver
from cms_dashboard.host.models import (
    Content,
    ContentType,
    ContentVersion,
    Document,
    DocumentCultureVariation,
    DocumentType,
    KeyValue,
    Language,
    Member,
    MemberGroupLink,
    Node,
    ObjectTypes,
    Server,
    Template,
    User,
)
from cms_dashboard.host.urls import ContentHandle
from cms_dashboard.reporting.dao import KEY_VALUE_TABLE, SERVER_TABLE, ReportingDAO

SITE_URL = "https://site.test"


def unique_id_for(node_id: int) -> str:
    """Deterministic unique id per node; the node id is embedded in the first group."""
    return f"d0c0{node_id:04d}-0000-4000-8000-{node_id:012d}"


def _make_engine(exclude_tables=()):
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    tables = [table for table in HostBase.metadata.sorted_tables if table.name not in exclude_tables]
    HostBase.metadata.create_all(bind=engine, tables=tables)
    return engine


# ===== DATABASE SETUP =====

@pytest.fixture
def host_engine():
    """In-memory SQLite engine with the full host schema"""
    engine = _make_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def bare_host_engine():
    """Host schema of an older install: no server or key-value tables"""
    engine = _make_engine(exclude_tables=(SERVER_TABLE, KEY_VALUE_TABLE))
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(host_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=host_engine)


@pytest.fixture
def bare_session_factory(bare_host_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=bare_host_engine)


# ===== SAMPLE DATA =====

JAN_1 = datetime(2024, 1, 1, 9, 0, 0)

# id, name, content type node, level, trashed, creator, updater, language ids
SAMPLE_DOCUMENTS = [
    (1100, "Home Page", 1000, 1, False, 1, 1, [1, 2]),
    (1101, "About Page", 1001, 2, False, 1, 2, [1]),
    (1102, "Contact Page", 1001, 2, False, 2, 2, [1]),
    (1103, "Old Page", 1001, 2, True, 2, 1, []),
    (1104, "Press Release", 1001, 3, False, 1, 1, [2]),
]

# node id, name, email, login, group node ids
SAMPLE_MEMBERS = [
    (1300, "John Smith", "john@example.com", "jsmith", [1400]),
    (1301, "Jane Doe", "jane@example.com", "jdoe", [1400]),
    (1302, "Anna Smithson", "anna@example.com", "annas", [1401]),
]


def _node(node_id: int, text: str, object_type: str, level: int = 1, parent_id: int = -1, **kwargs) -> Node:
    return Node(
        id=node_id,
        unique_id=unique_id_for(node_id),
        parent_id=parent_id,
        level=level,
        trashed=kwargs.pop("trashed", False),
        node_user=kwargs.pop("node_user", 1),
        text=text,
        node_object_type=object_type,
        create_date=kwargs.pop("create_date", JAN_1),
    )


def seed_host_content(session) -> None:
    """Populate a host database with a small site, its members and templates."""
    session.add_all([User(id=1, user_name="admin"), User(id=2, user_name="editor")])
    session.add_all([
        Language(id=1, iso_code="en-US", culture_name="English (United States)"),
        Language(id=2, iso_code="da-DK", culture_name="Danish (Denmark)"),
    ])

    # Content types: three document types, one media type, one member type
    session.add_all([
        _node(1000, "Home Page", ObjectTypes.DOCUMENT_TYPE),
        _node(1001, "Text Page", ObjectTypes.DOCUMENT_TYPE),
        _node(1002, "News Item", ObjectTypes.DOCUMENT_TYPE),
        _node(1003, "Image", ObjectTypes.MEDIA_TYPE),
        _node(1004, "Member", ObjectTypes.MEMBER_TYPE),
    ])
    session.add_all([
        ContentType(pk=1, node_id=1000, alias="homePage", icon="icon-home", description="Site root"),
        ContentType(pk=2, node_id=1001, alias="textPage", icon="icon-document", description="Plain page"),
        ContentType(pk=3, node_id=1002, alias="newsItem", icon="icon-newspaper", description=None),
        ContentType(pk=4, node_id=1003, alias="Image", icon="icon-picture", description="Media image"),
        ContentType(pk=5, node_id=1004, alias="Member", icon="icon-user", description=None),
    ])

    version_id = 1
    for node_id, name, type_node, level, trashed, creator, updater, languages in SAMPLE_DOCUMENTS:
        parent = -1 if level == 1 else 1100
        session.add(_node(node_id, name, ObjectTypes.DOCUMENT, level=level, parent_id=parent,
                          trashed=trashed, node_user=creator))
        session.add(Content(node_id=node_id, content_type_id=type_node))
        session.add(Document(node_id=node_id, published=not trashed))
        # An older version saved by the creator, then the current one
        session.add(ContentVersion(id=version_id, node_id=node_id, version_date=JAN_1,
                                   user_id=creator, current=False))
        session.add(ContentVersion(id=version_id + 1, node_id=node_id,
                                   version_date=datetime(2024, 2, node_id - 1099, 12, 0, 0),
                                   user_id=updater, current=True))
        version_id += 2
        for language_id in languages:
            session.add(DocumentCultureVariation(node_id=node_id, language_id=language_id))

    # Templates; newsItem has one but no content uses it
    session.add_all([
        _node(1200, "Home", ObjectTypes.TEMPLATE),
        _node(1201, "Text", ObjectTypes.TEMPLATE),
        _node(1202, "News", ObjectTypes.TEMPLATE),
        Template(pk=1, node_id=1200, alias="Home"),
        Template(pk=2, node_id=1201, alias="Text"),
        Template(pk=3, node_id=1202, alias="News"),
        DocumentType(content_type_node_id=1000, template_node_id=1200, is_default=True),
        DocumentType(content_type_node_id=1001, template_node_id=1201, is_default=True),
        DocumentType(content_type_node_id=1002, template_node_id=1202, is_default=True),
    ])

    # Members and groups
    session.add_all([
        _node(1400, "Subscribers", ObjectTypes.MEMBER_GROUP),
        _node(1401, "Editors", ObjectTypes.MEMBER_GROUP),
    ])
    for node_id, name, email, login, groups in SAMPLE_MEMBERS:
        session.add(_node(node_id, name, ObjectTypes.MEMBER, create_date=datetime(2024, 3, node_id - 1299)))
        session.add(Content(node_id=node_id, content_type_id=1004))
        session.add(Member(node_id=node_id, email=email, login_name=login))
        for group in groups:
            session.add(MemberGroupLink(member=node_id, member_group=group))

    session.commit()


def seed_optional_tables(session) -> None:
    session.add_all([
        Server(id=1, address="http://web-01/", computer_name="WEB-01", registered_date=JAN_1,
               last_notified_date=datetime(2024, 5, 1), is_active=True, is_master=True),
        Server(id=2, address="http://web-02/", computer_name="WEB-02", registered_date=JAN_1,
               last_notified_date=datetime(2024, 4, 1), is_active=False, is_master=False),
        KeyValue(key="Umbraco.Core.Upgrader.State", value="{done}", updated=datetime(2024, 1, 2)),
        KeyValue(key="Examine.Rebuild", value=None, updated=datetime(2024, 1, 3)),
    ])
    session.commit()


@pytest.fixture
def sample_host_data(session_factory):
    """Full sample host: content, members, templates and the optional tables"""
    session = session_factory()
    try:
        seed_host_content(session)
        seed_optional_tables(session)
    finally:
        session.close()
    return session_factory


@pytest.fixture
def bare_host_data(bare_session_factory):
    session = bare_session_factory()
    try:
        seed_host_content(session)
    finally:
        session.close()
    return bare_session_factory


@pytest.fixture
def reporting_dao(sample_host_data) -> ReportingDAO:
    return ReportingDAO(sample_host_data)


# ===== URL RESOLUTION =====

@pytest.fixture
def url_resolver():
    """Resolver stub: every node lives at /node-<id>/ on the test site"""
    resolver = Mock()
    resolver.resolve_node.side_effect = lambda node_id: ContentHandle(id=node_id, url=f"/node-{node_id}/")
    resolver.absolute_url.side_effect = lambda content: f"{SITE_URL}{content.url}"
    return resolver


# ===== API CLIENT =====

def _client_for(session_factory: Callable, url_resolver) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_url_resolver] = lambda: url_resolver
    return TestClient(app)


@pytest.fixture
def client(sample_host_data, url_resolver):
    """FastAPI test client bound to the sample host database"""
    with _client_for(sample_host_data, url_resolver) as test_client:
        yield test_client


@pytest.fixture
def bare_client(bare_host_data, url_resolver):
    """Test client for a host without the optional tables"""
    with _client_for(bare_host_data, url_resolver) as test_client:
        yield test_client


@pytest.fixture
def make_client(url_resolver):
    """Build a client over any session factory"""
    clients: List[TestClient] = []

    def factory(session_factory: Callable) -> TestClient:
        test_client = _client_for(session_factory, url_resolver)
        clients.append(test_client)
        return test_client

    yield factory
    for test_client in clients:
        test_client.close()
