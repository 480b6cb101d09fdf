"""Tests for filter clauses and the recording SQL query."""

import pytest

from menufilter import ROOT_PARENT, MenuChildrenJoin, MenuLink, QueryFilterBuilder, RouteDescriptor, SqlQuery


def _link(link_id=7, parent_id=3):
    return MenuLink(id=link_id, parent_id=parent_id, menu_name="main", route=RouteDescriptor.entity("node", 42))


def test_membership_clause_for_configured_menus():
    clause = QueryFilterBuilder().menu_membership_clause(["main", "footer", "main"])
    assert clause.kind == "menu"
    assert clause.expression == "menu_link_content_data.menu_name in (:menus[])"
    assert clause.values == {":menus[]": ["main", "footer"]}
    assert clause.matches({"menu_name": "footer"})
    assert not clause.matches({"menu_name": "account"})


def test_membership_clause_absent_without_menus():
    builder = QueryFilterBuilder()
    assert builder.menu_membership_clause([]) is None
    assert builder.menu_membership_clause(None) is None


def test_parent_clause_for_link_and_root():
    builder = QueryFilterBuilder()
    clause = builder.parent_clause(_link())
    assert clause.expression == "menu_link_content_data.parent = :parent_lid"
    assert clause.values == {":parent_lid": 7}
    assert clause.matches({"parent": 7})
    assert not clause.matches({"parent": 3})
    root = builder.parent_clause(None)
    assert root.values == {":parent_lid": ROOT_PARENT}
    assert root.matches({"parent": 0})


def test_apply_appends_to_configured_group():
    query = SqlQuery("node_field_data")
    builder = QueryFilterBuilder(group=2)
    builder.apply(query, builder.menu_membership_clause(["main"]))
    builder.apply(query, None)
    builder.apply(query, builder.parent_clause(None))
    assert list(query.where) == [2]
    assert len(query.where[2]) == 2


def test_sql_query_compiles_joins_and_placeholders():
    query = SqlQuery("node_field_data")
    join = MenuChildrenJoin()
    assert join.join_to_node_table(query) == "menu_link_content_data"
    query.add_where_expression(0, "node_field_data.status = :status", {":status": 1})
    builder = QueryFilterBuilder()
    builder.apply(query, builder.menu_membership_clause(["main", "footer"]))
    builder.apply(query, builder.parent_clause(_link()))
    assert query.sql == (
        "SELECT node_field_data.* FROM node_field_data "
        "INNER JOIN menu_link_content_data ON menu_link_content_data.link__uri = "
        "CONCAT('entity:node/', node_field_data.nid) "
        "WHERE (node_field_data.status = ?) "
        "AND (menu_link_content_data.menu_name in (?, ?)) "
        "AND (menu_link_content_data.parent = ?)"
    )
    assert query.params == (1, "main", "footer", 7)


def test_sql_query_join_is_idempotent_per_alias():
    query = SqlQuery("node_field_data")
    join = MenuChildrenJoin()
    join.join_to_node_table(query)
    join.join_to_node_table(query)
    assert len(query.joins) == 1
    with pytest.raises(ValueError):
        query.add_join("menu_link_content_data", "1 = 1")


def test_sql_query_where_groups_are_ordered():
    query = SqlQuery("node_field_data")
    query.add_where_expression(1, "b = :b", {":b": 2})
    query.add_where_expression(0, "a = :a", {":a": 1})
    assert query.expressions() == ["a = :a", "b = :b"]
    assert query.params == (1, 2)


def test_sql_query_unbound_placeholder_raises():
    query = SqlQuery("node_field_data")
    query.add_where_expression(0, "a = :missing", {})
    with pytest.raises(KeyError):
        query.sql
