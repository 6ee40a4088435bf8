"""Filter predicates for the content and member reports.

Content predicates are applied in a fixed order: alias, name, identifier,
level, trashed, creator, updater, language.
"""

from typing import List

from sqlalchemy import literal, or_, select
from sqlalchemy.orm import aliased
from sqlalchemy.sql import ColumnElement

from cms_dashboard.host.models import (
    ContentType,
    DocumentCultureVariation,
    Member,
    MemberGroupLink,
    Node,
    User,
)
from cms_dashboard.query.builder import QueryBuilder
from cms_dashboard.reporting.schemas import ContentCriteria, MemberCriteria

# Two joins to the user table: who created the node and who saved the current version.
Creator = aliased(User, name="creator")
Updater = aliased(User, name="updater")


def identifier_predicate(identifier: str, numeric_id=None) -> ColumnElement:
    """Match a node id exactly or any part of its unique id."""
    unique_id_match = Node.unique_id.icontains(identifier, autoescape=True)
    if numeric_id is None:
        return unique_id_match
    return or_(Node.id == numeric_id, unique_id_match)


def language_predicate(language_id: int) -> ColumnElement:
    """Node has a culture variant in the given language."""
    variant_languages = (
        select(DocumentCultureVariation.language_id)
        .where(DocumentCultureVariation.node_id == Node.id)
        .correlate(Node)
    )
    return literal(language_id).in_(variant_languages)


def content_predicates(criteria: ContentCriteria) -> List[ColumnElement]:
    """Translate content criteria into predicates, skipping unset fields."""
    builder = QueryBuilder(select(Node.id))
    apply_content_criteria(builder, criteria)
    return builder.predicates


def apply_content_criteria(builder: QueryBuilder, criteria: ContentCriteria) -> QueryBuilder:
    (
        builder.where_if(criteria.alias, lambda alias: ContentType.alias == alias)
        .where_if(criteria.name, lambda name: Node.text.icontains(name, autoescape=True))
        .where_if(criteria.id, lambda ident: identifier_predicate(ident, criteria.numeric_id))
        .where_if(criteria.level, lambda level: Node.level == level)
        .where_if(criteria.trashed, lambda trashed: Node.trashed == trashed)
        .where_if(criteria.creator_id, lambda creator_id: Creator.id == creator_id)
        .where_if(criteria.updater_id, lambda updater_id: Updater.id == updater_id)
        .where_if(criteria.language_id, language_predicate)
    )
    return builder


def member_search_predicate(search: str) -> ColumnElement:
    """Case-insensitive substring match on display name, email or login name."""
    return or_(
        Node.text.icontains(search, autoescape=True),
        Member.email.icontains(search, autoescape=True),
        Member.login_name.icontains(search, autoescape=True),
    )


def apply_member_criteria(builder: QueryBuilder, criteria: MemberCriteria) -> QueryBuilder:
    if criteria.group_id is not None:
        builder.join(MemberGroupLink, MemberGroupLink.member == Member.node_id)
        builder.where(MemberGroupLink.member_group == criteria.group_id)
    builder.where_if(criteria.search, member_search_predicate)
    return builder
