"""Tests for the owning list, the borrowed view, and their element behaviour."""

import pytest

from gpxdoc.containers import END, EntityKind, ListView, OrderedList
from gpxdoc.model import ExtensionField, Route


class CountingField(ExtensionField):
    destroyed = 0

    def destroy(self):
        self.destroyed += 1


def _routes(*names):
    return OrderedList(EntityKind.ROUTE, [Route(name=n) for n in names])


class TestOrderedList:
    def test_insertion_order_preserved(self):
        routes = _routes("c", "a", "b")
        assert [r.name for r in routes] == ["c", "a", "b"]

    def test_length_and_ends(self):
        routes = _routes("a", "b")
        assert len(routes) == 2
        assert routes.first().name == "a"
        assert routes.last().name == "b"

    def test_empty_list_has_no_last(self):
        empty = OrderedList(EntityKind.WAYPOINT)
        assert len(empty) == 0
        assert empty.last() is None
        assert empty.first() is None

    def test_push_back_is_append(self):
        routes = OrderedList(EntityKind.ROUTE)
        routes.push_back(Route(name="x"))
        assert routes.last().name == "x"

    def test_iterator_returns_end_when_exhausted(self):
        routes = _routes("a")
        it = routes.iterator()
        assert it.next().name == "a"
        assert it.next() is END
        assert it.next() is END

    def test_iterator_restarts(self):
        routes = _routes("a", "b")
        it = routes.iterator()
        list(it)
        it.restart()
        assert [r.name for r in it] == ["a", "b"]

    def test_iteration_is_repeatable(self):
        routes = _routes("a", "b")
        assert [r.name for r in routes] == [r.name for r in routes]

    def test_find_uses_compare_first_match_wins(self):
        first = Route(name="dup")
        routes = OrderedList(EntityKind.ROUTE, [Route(name="a"), first, Route(name="dup")])
        assert routes.find(Route(name="dup")) is first
        assert routes.index(Route(name="dup")) == 1

    def test_find_miss(self):
        routes = _routes("a")
        assert routes.find(Route(name="zzz")) is None
        assert routes.index(Route(name="zzz")) == -1

    def test_compare_is_total_order_on_names(self):
        routes = OrderedList(EntityKind.ROUTE)
        assert routes.compare(Route(name="a"), Route(name="b")) < 0
        assert routes.compare(Route(name="b"), Route(name="a")) > 0
        assert routes.compare(Route(name="a"), Route(name="a")) == 0

    def test_to_string_concatenates_in_order(self):
        fields = OrderedList(EntityKind.EXTENSION_FIELD,
                             [ExtensionField("ele", "1"), ExtensionField("sym", "flag")])
        text = fields.to_string()
        assert text.index("ele") < text.index("sym")


class TestDestroy:
    def test_destroy_all_destroys_each_element_once(self):
        items = [CountingField("a", "1"), CountingField("b", "2")]
        fields = OrderedList(EntityKind.EXTENSION_FIELD, items)
        fields.destroy_all()
        fields.destroy_all()
        assert [f.destroyed for f in items] == [1, 1]
        assert fields.released
        assert len(fields) == 0

    def test_append_after_release_fails(self):
        fields = OrderedList(EntityKind.EXTENSION_FIELD)
        fields.destroy_all()
        with pytest.raises(RuntimeError):
            fields.append(ExtensionField("a", "1"))


class TestListView:
    def test_release_never_destroys(self):
        items = [CountingField("a", "1"), CountingField("b", "2")]
        owner = OrderedList(EntityKind.EXTENSION_FIELD, items)
        view = ListView(EntityKind.EXTENSION_FIELD, owner)
        view.release()
        assert [f.destroyed for f in items] == [0, 0]
        assert len(view) == 0
        assert len(owner) == 2

    def test_view_aliases_owner_elements(self):
        owner = _routes("a", "b")
        view = ListView(EntityKind.ROUTE, [owner[1]])
        assert view[0] is owner[1]
        assert view.kind is EntityKind.ROUTE

    def test_view_has_no_destroy(self):
        assert not hasattr(ListView(EntityKind.ROUTE), "destroy_all")
