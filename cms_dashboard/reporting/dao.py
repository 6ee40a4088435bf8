# cms_dashboard/reporting/dao.py
"""Data Access Object for the reporting module (host database, read-only)."""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select, text
from sqlalchemy.engine import Row
from sqlalchemy.sql import ColumnElement

from cms_dashboard.core.database import SessionFactory, database_scope, table_exists
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
    Node,
    ObjectTypes,
    Server,
    Template,
)
from cms_dashboard.query.builder import QueryBuilder
from cms_dashboard.query.pagination import paginate
from cms_dashboard.query.schemas import PageRequest, SortDirection
from cms_dashboard.reporting.predicates import Creator, Updater, apply_content_criteria, apply_member_criteria
from cms_dashboard.reporting.schemas import (
    ContentCriteria,
    ContentOrderBy,
    MemberCriteria,
    MemberOrderBy,
    UsageOrderBy,
)

logger = logging.getLogger(__name__)

SERVER_TABLE = Server.__tablename__
KEY_VALUE_TABLE = KeyValue.__tablename__

_node_count = func.count(Content.node_id).label("node_count")

# ===== SORT COLUMN ALLOW-LISTS =====
# The only column expressions a caller can sort by.

CONTENT_ORDER_COLUMNS: Dict[ContentOrderBy, ColumnElement] = {
    ContentOrderBy.ID: Node.id,
    ContentOrderBy.NAME: Node.text,
    ContentOrderBy.ALIAS: ContentType.alias,
    ContentOrderBy.LEVEL: Node.level,
    ContentOrderBy.TRASHED: Node.trashed,
    ContentOrderBy.CREATE_DATE: Node.create_date,
    ContentOrderBy.UPDATE_DATE: ContentVersion.version_date,
    ContentOrderBy.CREATOR: Creator.user_name,
    ContentOrderBy.UPDATER: Updater.user_name,
}

MEMBER_ORDER_COLUMNS: Dict[MemberOrderBy, ColumnElement] = {
    MemberOrderBy.ID: Member.node_id,
    MemberOrderBy.NAME: Node.text,
    MemberOrderBy.USER_NAME: Member.login_name,
    MemberOrderBy.EMAIL: Member.email,
    MemberOrderBy.CREATE_DATE: Node.create_date,
}

USAGE_ORDER_COLUMNS: Dict[UsageOrderBy, ColumnElement] = {
    UsageOrderBy.ID: ContentType.pk,
    UsageOrderBy.ALIAS: ContentType.alias,
    UsageOrderBy.NODE_COUNT: _node_count,
    UsageOrderBy.DESCRIPTION: ContentType.description,
    UsageOrderBy.TYPE: Node.node_object_type,
}


def _ordering(column: ColumnElement, direction: SortDirection, tie_breaker: Optional[ColumnElement] = None) -> List:
    ordered = [column.desc() if direction == SortDirection.DESC else column.asc()]
    if tie_breaker is not None and tie_breaker is not column:
        ordered.append(tie_breaker.asc())
    return ordered


class ReportingDAO:
    """Builds and runs one query per report. Every method uses its own database scope."""

    def __init__(self, session_factory: Optional[SessionFactory] = None):
        self.session_factory = session_factory

    # ===== CONTENT =====

    def get_content_page(
        self,
        criteria: ContentCriteria,
        page_request: PageRequest,
        order_by: ContentOrderBy = ContentOrderBy.ID,
        direction: SortDirection = SortDirection.ASC,
    ) -> Tuple[int, List[Row]]:
        """Current version of every document matching the criteria, one page at a time."""
        language_count = (
            select(func.count(DocumentCultureVariation.language_id))
            .where(DocumentCultureVariation.node_id == Node.id)
            .correlate(Node)
            .scalar_subquery()
        )

        base = (
            select(
                Node.unique_id.label("udi"),
                Node.id.label("id"),
                Node.parent_id.label("parent_id"),
                Node.level.label("level"),
                ContentType.icon.label("icon"),
                Node.trashed.label("trashed"),
                ContentType.alias.label("alias"),
                Node.text.label("name"),
                Node.create_date.label("create_date"),
                Creator.id.label("creator_id"),
                Creator.user_name.label("creator_name"),
                ContentVersion.version_date.label("update_date"),
                Updater.id.label("updater_id"),
                Updater.user_name.label("updater_name"),
                language_count.label("language_count"),
            )
            .select_from(Content)
            .join(Node, Node.id == Content.node_id)
            .join(ContentType, Content.content_type_id == ContentType.node_id)
            .join(Document, Document.node_id == Content.node_id)
            .join(ContentVersion, ContentVersion.node_id == Node.id)
            .join(Creator, Creator.id == Node.node_user)
            .join(Updater, ContentVersion.user_id == Updater.id)
        )

        builder = QueryBuilder(base).where(ContentVersion.current == True)
        apply_content_criteria(builder, criteria)

        with database_scope(self.session_factory) as session:
            return paginate(
                session,
                builder.build(),
                page_request,
                _ordering(CONTENT_ORDER_COLUMNS[order_by], direction, Node.id),
            )

    def get_content_type_aliases(self) -> List[str]:
        """Aliases of all document types, alphabetically."""
        stmt = (
            select(ContentType.alias)
            .join(Node, ContentType.node_id == Node.id)
            .where(Node.node_object_type == ObjectTypes.DOCUMENT_TYPE)
            .order_by(ContentType.alias)
        )
        with database_scope(self.session_factory) as session:
            return list(session.execute(stmt).scalars().all())

    def get_content_usage(
        self,
        content_type_id: Optional[int] = None,
        order_by: UsageOrderBy = UsageOrderBy.ALIAS,
        direction: SortDirection = SortDirection.ASC,
    ) -> List[Row]:
        """Instance count per content type, including types with no instances."""
        base = (
            select(
                ContentType.pk.label("id"),
                _node_count,
                ContentType.description.label("description"),
                ContentType.alias.label("alias"),
                ContentType.icon.label("icon"),
                Node.node_object_type.label("guid_type"),
            )
            .select_from(ContentType)
            .outerjoin(Content, Content.content_type_id == ContentType.node_id)
            .outerjoin(Node, ContentType.node_id == Node.id)
        )

        builder = (
            QueryBuilder(base)
            .where_if(content_type_id, lambda pk: ContentType.pk == pk)
            .group_by(
                ContentType.pk,
                ContentType.alias,
                ContentType.icon,
                ContentType.description,
                Node.node_object_type,
            )
        )
        stmt = builder.build(order_by=_ordering(USAGE_ORDER_COLUMNS[order_by], direction, ContentType.pk))

        with database_scope(self.session_factory) as session:
            return list(session.execute(stmt).all())

    # ===== MEMBERS =====

    def get_members_page(
        self,
        criteria: MemberCriteria,
        page_request: PageRequest,
        order_by: MemberOrderBy = MemberOrderBy.NAME,
        direction: SortDirection = SortDirection.ASC,
    ) -> Tuple[int, List[Row]]:
        base = (
            select(
                Member.node_id.label("id"),
                Member.login_name.label("user_name"),
                Node.text.label("name"),
                Member.email.label("email"),
                Node.create_date.label("create_date"),
                Node.unique_id.label("udi"),
            )
            .select_from(Member)
            .join(Node, Member.node_id == Node.id)
        )

        builder = apply_member_criteria(QueryBuilder(base), criteria)

        with database_scope(self.session_factory) as session:
            return paginate(
                session,
                builder.build(),
                page_request,
                _ordering(MEMBER_ORDER_COLUMNS[order_by], direction, Member.node_id),
            )

    def get_member_groups(self) -> List[Row]:
        stmt = (
            select(Node.id.label("id"), Node.text.label("name"))
            .where(Node.node_object_type == ObjectTypes.MEMBER_GROUP)
            .order_by(Node.text, Node.id)
        )
        with database_scope(self.session_factory) as session:
            return list(session.execute(stmt).all())

    # ===== SYSTEM =====

    def get_languages(self) -> List[Row]:
        stmt = select(
            Language.id.label("id"),
            Language.iso_code.label("iso_code"),
            Language.culture_name.label("name"),
        ).order_by(Language.id)
        with database_scope(self.session_factory) as session:
            return list(session.execute(stmt).all())

    def get_servers(self) -> Optional[List[Row]]:
        """Registered servers, or None when the host has no server registration table."""
        stmt = select(
            Server.id.label("id"),
            Server.address.label("address"),
            Server.computer_name.label("computer_name"),
            Server.registered_date.label("registered_date"),
            Server.last_notified_date.label("last_notified_date"),
            Server.is_active.label("is_active"),
            Server.is_master.label("is_master"),
        ).order_by(Server.id)

        with database_scope(self.session_factory) as session:
            if not table_exists(session, SERVER_TABLE):
                logger.info(f"Table {SERVER_TABLE} not present; server report unavailable")
                return None
            return list(session.execute(stmt).all())

    def get_key_values(self) -> Optional[List[Row]]:
        """Key-value store entries by update time, or None when the table is missing."""
        stmt = select(
            KeyValue.key.label("key"),
            KeyValue.value.label("value"),
            KeyValue.updated.label("updated"),
        ).order_by(KeyValue.updated, KeyValue.key)

        with database_scope(self.session_factory) as session:
            if not table_exists(session, KEY_VALUE_TABLE):
                logger.info(f"Table {KEY_VALUE_TABLE} not present; key-value report unavailable")
                return None
            return list(session.execute(stmt).all())

    def get_database_type(self) -> str:
        with database_scope(self.session_factory) as session:
            return session.get_bind().dialect.name

    def ping(self) -> bool:
        with database_scope(self.session_factory) as session:
            return session.execute(text("SELECT 1")).scalar_one() == 1

    # ===== TEMPLATES =====

    def get_template_node_ids(self) -> List[int]:
        """Lowest content node id for each template that has any content, by node id."""
        rank = (
            func.row_number()
            .over(partition_by=DocumentType.template_node_id, order_by=Content.node_id)
            .label("rn")
        )
        ranked = (
            select(Content.node_id.label("node_id"), rank)
            .select_from(DocumentType)
            .join(Template, DocumentType.template_node_id == Template.node_id)
            .join(Content, Content.content_type_id == DocumentType.content_type_node_id)
            .subquery("unique_template_node")
        )
        stmt = select(ranked.c.node_id).where(ranked.c.rn == 1).order_by(ranked.c.node_id)

        with database_scope(self.session_factory) as session:
            return list(session.execute(stmt).scalars().all())
