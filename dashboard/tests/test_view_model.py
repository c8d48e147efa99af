"""
Tests for the dashboard view model.
"""

import pytest

from dashboard.models import AuthUser, Category, Profile, Tag
from dashboard.view_model import LIST_NAMES, DashboardViewModel


class TestReplace:
    """Tests for generation-checked replace operations."""

    def test_replace_list_with_current_generation(self):
        view = DashboardViewModel()
        generation = view.begin_generation()

        applied = view.replace_list("tags", [Tag(id="t1", name="a", slug="a")], generation)

        assert applied is True
        assert [t.id for t in view.tags] == ["t1"]

    def test_replace_list_stores_tuple(self):
        """Lists are replaced wholesale and cannot be mutated in place."""
        view = DashboardViewModel()
        generation = view.begin_generation()
        rows = [Tag(id="t1", name="a", slug="a")]

        view.replace_list("tags", rows, generation)
        rows.append(Tag(id="t2", name="b", slug="b"))

        assert isinstance(view.tags, tuple)
        assert len(view.tags) == 1

    def test_stale_generation_is_discarded(self):
        view = DashboardViewModel()
        old = view.begin_generation()
        view.begin_generation()

        applied = view.replace_list("categories", [Category(id="c1", name="N", slug="n")], old)

        assert applied is False
        assert view.categories == ()

    def test_none_rows_become_empty(self):
        view = DashboardViewModel()
        generation = view.begin_generation()
        view.replace_list("tags", [Tag(id="t1", name="a", slug="a")], generation)

        view.replace_list("tags", None, generation)

        assert view.tags == ()

    def test_unknown_list_rejected(self):
        view = DashboardViewModel()
        with pytest.raises(ValueError):
            view.replace_list("users", [], view.generation)

    def test_stale_profile_is_discarded(self):
        view = DashboardViewModel()
        old = view.begin_generation()
        view.reset()

        applied = view.replace_profile(Profile(id="u1", email="a@b.com"), old)

        assert applied is False
        assert view.profile is None


class TestReset:
    """Tests for sign-out reset."""

    def test_reset_clears_everything(self):
        view = DashboardViewModel()
        generation = view.begin_generation()
        view.data_loading = True
        view.user = AuthUser(id="u1", email="a@b.com")
        view.replace_profile(Profile(id="u1", email="a@b.com"), generation)
        view.replace_list("tags", [Tag(id="t1", name="a", slug="a")], generation)

        view.reset()

        assert view.user is None
        assert view.profile is None
        for name in LIST_NAMES:
            assert getattr(view, name) == ()
        assert view.data_loading is False

    def test_reset_invalidates_in_flight_loads(self):
        view = DashboardViewModel()
        generation = view.begin_generation()

        view.reset()

        assert not view.is_current(generation)

    def test_counts(self):
        view = DashboardViewModel()
        generation = view.begin_generation()
        view.replace_list("tags", [Tag(id="t1", name="a", slug="a")], generation)

        assert view.counts() == {
            "categories": 0,
            "articles": 0,
            "tags": 1,
            "comments": 0,
            "analytics": 0,
        }
