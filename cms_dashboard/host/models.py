# cms_dashboard/host/models.py
"""Mappings of the host platform tables the dashboard reads.

Column names follow the host schema. Only the columns used by reports are mapped.
"""

from typing import Any, Optional

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from cms_dashboard.core.database import HostBase as Base


class ObjectTypes:
    """Well-known node object type identifiers stored in umbracoNode.nodeObjectType."""

    DOCUMENT = "c66ba18e-eaf3-4cff-8a22-41b16d66a972"
    DOCUMENT_TYPE = "a2cb7800-f571-4787-9638-bc48539a0efb"
    MEDIA_TYPE = "4ea4382b-2f5a-4c2b-9587-ae9b3cf3602e"
    MEMBER = "39eb0f98-b348-42a1-8662-e7eb18487560"
    MEMBER_TYPE = "9b5416fb-e72f-45a9-a07b-5a9a2709ce43"
    MEMBER_GROUP = "366e63b9-880f-4e13-a61c-98069b029728"
    TEMPLATE = "6fbde604-4178-42ce-a10b-8a2600a2f07d"

    CATEGORIES = {
        DOCUMENT_TYPE: "Content",
        MEDIA_TYPE: "Media",
        MEMBER_TYPE: "Members",
    }

    @classmethod
    def category(cls, object_type: Optional[Any]) -> str:
        """Map a content type's object type to its category label, or "" when unknown."""
        if object_type is None:
            return ""
        return cls.CATEGORIES.get(str(object_type).strip().lower(), "")


# ===== NODES & CONTENT =====


class Node(Base):
    """Every tree entity (documents, types, members, groups...) is a node."""

    __tablename__ = "umbracoNode"

    id = Column(Integer, primary_key=True)
    unique_id = Column("uniqueId", String(36), nullable=False)
    parent_id = Column("parentId", Integer, nullable=False)
    level = Column(Integer, nullable=False)
    trashed = Column(Boolean, nullable=False, default=False)
    node_user = Column("nodeUser", Integer, nullable=True)
    text = Column(String(255), nullable=True)
    node_object_type = Column("nodeObjectType", String(36), nullable=True)
    create_date = Column("createDate", DateTime, nullable=False)


class ContentType(Base):
    __tablename__ = "cmsContentType"

    pk = Column(Integer, primary_key=True)
    node_id = Column("nodeId", Integer, nullable=False)
    alias = Column(String(255), nullable=False)
    icon = Column(String(255), nullable=True)
    description = Column(String(1500), nullable=True)


class Content(Base):
    __tablename__ = "umbracoContent"

    node_id = Column("nodeId", Integer, primary_key=True)
    content_type_id = Column("contentTypeId", Integer, nullable=False)


class Document(Base):
    __tablename__ = "umbracoDocument"

    node_id = Column("nodeId", Integer, primary_key=True)
    published = Column(Boolean, nullable=False, default=False)


class ContentVersion(Base):
    __tablename__ = "umbracoContentVersion"

    id = Column(Integer, primary_key=True)
    node_id = Column("nodeId", Integer, nullable=False)
    version_date = Column("versionDate", DateTime, nullable=False)
    user_id = Column("userId", Integer, nullable=True)
    current = Column(Boolean, nullable=False, default=False)


class DocumentCultureVariation(Base):
    __tablename__ = "umbracoDocumentCultureVariation"

    id = Column(Integer, primary_key=True)
    node_id = Column("nodeId", Integer, nullable=False)
    language_id = Column("languageId", Integer, nullable=False)


class User(Base):
    __tablename__ = "umbracoUser"

    id = Column(Integer, primary_key=True)
    user_name = Column("userName", String(255), nullable=False)


class Language(Base):
    __tablename__ = "umbracoLanguage"

    id = Column(Integer, primary_key=True)
    iso_code = Column("languageISOCode", String(14), nullable=True)
    culture_name = Column("languageCultureName", String(100), nullable=True)


# ===== TEMPLATES =====


class DocumentType(Base):
    """Allowed templates per document type."""

    __tablename__ = "cmsDocumentType"

    content_type_node_id = Column("contentTypeNodeId", Integer, primary_key=True)
    template_node_id = Column("templateNodeId", Integer, primary_key=True)
    is_default = Column("IsDefault", Boolean, nullable=False, default=False)


class Template(Base):
    __tablename__ = "cmsTemplate"

    pk = Column(Integer, primary_key=True)
    node_id = Column("nodeId", Integer, nullable=False)
    alias = Column(String(100), nullable=True)


# ===== MEMBERS =====


class Member(Base):
    __tablename__ = "cmsMember"

    node_id = Column("nodeId", Integer, primary_key=True)
    email = Column("Email", String(1000), nullable=False)
    login_name = Column("LoginName", String(1000), nullable=False)


class MemberGroupLink(Base):
    __tablename__ = "cmsMember2MemberGroup"

    member = Column("Member", Integer, primary_key=True)
    member_group = Column("MemberGroup", Integer, primary_key=True)


# ===== OPTIONAL TABLES =====
# Not every host version provisions these; check with table_exists() before querying.


class Server(Base):
    __tablename__ = "umbracoServer"

    id = Column(Integer, primary_key=True)
    address = Column(String(500), nullable=False)
    computer_name = Column("computerName", String(255), nullable=False)
    registered_date = Column("registeredDate", DateTime, nullable=False)
    last_notified_date = Column("lastNotifiedDate", DateTime, nullable=False)
    is_active = Column("isActive", Boolean, nullable=False)
    is_master = Column("isMaster", Boolean, nullable=False)


class KeyValue(Base):
    __tablename__ = "umbracoKeyValue"

    key = Column(String(256), primary_key=True)
    value = Column(Text, nullable=True)
    updated = Column(DateTime, nullable=False)
