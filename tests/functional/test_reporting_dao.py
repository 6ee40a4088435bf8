"""
Functional tests for the reporting DAO against an in-memory host database.
"""

import pytest

from cms_dashboard.query.schemas import PageRequest, SortDirection
from cms_dashboard.reporting.dao import ReportingDAO
from cms_dashboard.reporting.schemas import (
    ContentCriteria,
    ContentOrderBy,
    MemberCriteria,
    MemberOrderBy,
    UsageOrderBy,
)

ALL = PageRequest(page=1, items_per_page=100)


def content_ids(dao: ReportingDAO, criteria: ContentCriteria, **kwargs):
    total, rows = dao.get_content_page(criteria, kwargs.pop("page_request", ALL), **kwargs)
    return total, [row.id for row in rows]


class TestContentPage:
    """Test filtering, ordering and paging of the content listing"""

    def test_lists_current_version_of_every_document(self, reporting_dao):
        total, ids = content_ids(reporting_dao, ContentCriteria())
        assert total == 5
        assert ids == [1100, 1101, 1102, 1103, 1104]

    def test_row_shape(self, reporting_dao):
        _, rows = reporting_dao.get_content_page(ContentCriteria(id="1101"), ALL)
        (row,) = rows

        assert row.name == "About Page"
        assert row.alias == "textPage"
        assert row.creator_name == "admin"
        assert row.updater_name == "editor"
        assert row.language_count == 1
        assert row.update_date.month == 2

    def test_alias_filter(self, reporting_dao):
        total, ids = content_ids(reporting_dao, ContentCriteria(alias="textPage"))
        assert total == 4
        assert ids == [1101, 1102, 1103, 1104]

    def test_alias_filter_is_exact(self, reporting_dao):
        total, _ = content_ids(reporting_dao, ContentCriteria(alias="text"))
        assert total == 0

    @pytest.mark.parametrize("name,expected", [
        ("home", [1100]),
        ("PAGE", [1100, 1101, 1102, 1103]),
        ("me pa", [1100]),
        ("release", [1104]),
    ])
    def test_name_is_case_insensitive_substring(self, reporting_dao, name, expected):
        _, ids = content_ids(reporting_dao, ContentCriteria(name=name))
        assert ids == expected

    def test_name_wildcards_are_literal(self, reporting_dao):
        assert content_ids(reporting_dao, ContentCriteria(name="%"))[0] == 0
        assert content_ids(reporting_dao, ContentCriteria(name="_"))[0] == 0

    def test_identifier_matches_node_id(self, reporting_dao):
        assert content_ids(reporting_dao, ContentCriteria(id="1103"))[1] == [1103]

    def test_identifier_matches_unique_id_fragment(self, reporting_dao):
        assert content_ids(reporting_dao, ContentCriteria(id="D0C01102"))[1] == [1102]

    def test_level(self, reporting_dao):
        assert content_ids(reporting_dao, ContentCriteria(level=2))[1] == [1101, 1102, 1103]

    def test_trashed(self, reporting_dao):
        assert content_ids(reporting_dao, ContentCriteria(trashed=True))[1] == [1103]
        assert content_ids(reporting_dao, ContentCriteria(trashed=False))[1] == [1100, 1101, 1102, 1104]

    def test_creator_and_updater(self, reporting_dao):
        assert content_ids(reporting_dao, ContentCriteria(creator_id=2))[1] == [1102, 1103]
        assert content_ids(reporting_dao, ContentCriteria(updater_id=2))[1] == [1101, 1102]
        assert content_ids(reporting_dao, ContentCriteria(creator_id=1, updater_id=2))[1] == [1101]

    def test_language(self, reporting_dao):
        assert content_ids(reporting_dao, ContentCriteria(language_id=2))[1] == [1100, 1104]

    def test_filters_combine_with_and(self, reporting_dao):
        criteria = ContentCriteria(alias="textPage", name="page", trashed=False)
        assert content_ids(reporting_dao, criteria)[1] == [1101, 1102]

    def test_order_by_name(self, reporting_dao):
        _, ids = content_ids(reporting_dao, ContentCriteria(), order_by=ContentOrderBy.NAME)
        assert ids == [1101, 1102, 1100, 1103, 1104]

        _, ids = content_ids(reporting_dao, ContentCriteria(), order_by=ContentOrderBy.NAME, direction=SortDirection.DESC)
        assert ids == [1104, 1103, 1100, 1102, 1101]

    def test_ties_are_broken_by_id(self, reporting_dao):
        """Every document shares a create date"""
        _, ids = content_ids(reporting_dao, ContentCriteria(), order_by=ContentOrderBy.CREATE_DATE)
        assert ids == [1100, 1101, 1102, 1103, 1104]

    def test_order_by_updater(self, reporting_dao):
        _, ids = content_ids(reporting_dao, ContentCriteria(), order_by=ContentOrderBy.UPDATER)
        assert ids == [1100, 1103, 1104, 1101, 1102]

    def test_pages_partition_the_result(self, reporting_dao):
        seen = []
        for page in (1, 2, 3):
            total, ids = content_ids(reporting_dao, ContentCriteria(), page_request=PageRequest(page=page, items_per_page=2))
            assert total == 5
            seen.extend(ids)
        assert seen == [1100, 1101, 1102, 1103, 1104]

    def test_page_past_end(self, reporting_dao):
        total, ids = content_ids(reporting_dao, ContentCriteria(alias="textPage"), page_request=PageRequest(page=4, items_per_page=2))
        assert total == 4
        assert ids == []


class TestContentTypes:
    def test_aliases_are_document_types_only(self, reporting_dao):
        assert reporting_dao.get_content_type_aliases() == ["homePage", "newsItem", "textPage"]

    def test_usage_counts_every_type(self, reporting_dao):
        rows = reporting_dao.get_content_usage(order_by=UsageOrderBy.NODE_COUNT, direction=SortDirection.DESC)
        counts = [(row.alias, row.node_count) for row in rows]

        assert counts == [("textPage", 4), ("Member", 3), ("homePage", 1), ("newsItem", 0), ("Image", 0)]

    def test_usage_for_one_type(self, reporting_dao):
        (row,) = reporting_dao.get_content_usage(content_type_id=3)
        assert row.alias == "newsItem"
        assert row.node_count == 0


class TestMembers:
    """Test the member listing filters"""

    def ids(self, dao, criteria, **kwargs):
        total, rows = dao.get_members_page(criteria, ALL, **kwargs)
        return total, [row.id for row in rows]

    def test_default_order_is_name(self, reporting_dao):
        assert self.ids(reporting_dao, MemberCriteria()) == (3, [1302, 1301, 1300])

    def test_group(self, reporting_dao):
        assert self.ids(reporting_dao, MemberCriteria(group_id=1400)) == (2, [1301, 1300])

    def test_search(self, reporting_dao):
        assert self.ids(reporting_dao, MemberCriteria(search="smith")) == (2, [1302, 1300])

    def test_search_matches_email_and_login(self, reporting_dao):
        assert self.ids(reporting_dao, MemberCriteria(search="JANE@"))[1] == [1301]
        assert self.ids(reporting_dao, MemberCriteria(search="annas"))[1] == [1302]

    def test_group_and_search(self, reporting_dao):
        assert self.ids(reporting_dao, MemberCriteria(group_id=1400, search="smith")) == (1, [1300])

    def test_order_by_email_desc(self, reporting_dao):
        _, ids = self.ids(reporting_dao, MemberCriteria(), order_by=MemberOrderBy.EMAIL, direction=SortDirection.DESC)
        assert ids == [1300, 1301, 1302]

    def test_member_groups(self, reporting_dao):
        groups = reporting_dao.get_member_groups()
        assert [(row.id, row.name) for row in groups] == [(1401, "Editors"), (1400, "Subscribers")]


class TestSystemReports:
    def test_languages(self, reporting_dao):
        assert [(row.id, row.iso_code) for row in reporting_dao.get_languages()] == [(1, "en-US"), (2, "da-DK")]

    def test_servers(self, reporting_dao):
        assert [row.computer_name for row in reporting_dao.get_servers()] == ["WEB-01", "WEB-02"]

    def test_key_values_by_update_time(self, reporting_dao):
        assert [row.key for row in reporting_dao.get_key_values()] == ["Umbraco.Core.Upgrader.State", "Examine.Rebuild"]

    def test_missing_tables(self, bare_host_data):
        dao = ReportingDAO(bare_host_data)
        assert dao.get_servers() is None
        assert dao.get_key_values() is None

    def test_database_type(self, reporting_dao):
        assert reporting_dao.get_database_type() == "sqlite"

    def test_ping(self, reporting_dao):
        assert reporting_dao.ping() is True


class TestTemplateNodes:
    def test_first_node_per_used_template(self, reporting_dao):
        assert reporting_dao.get_template_node_ids() == [1100, 1101]
