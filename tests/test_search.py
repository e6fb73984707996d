"""
Tests for the shared search and sort helpers (academy.utils.search).
"""
from datetime import datetime, timezone as dt_timezone
from types import SimpleNamespace

from academy.utils.search import filter_by_search, matches_search, newest_first


def test_match_is_case_insensitive_substring():
    program = SimpleNamespace(title='Text Influencer', description='Master course')
    assert matches_search(program, 'influ', ('title',)) is True
    assert matches_search(program, 'MASTER', ('title', 'description')) is True
    assert matches_search(program, 'python', ('title', 'description')) is False


def test_empty_term_matches_everything():
    assert matches_search(SimpleNamespace(title=''), '', ('title',)) is True


def test_dicts_are_searched_by_key():
    assert matches_search({'email': 'Jane@Example.com'}, 'jane@', ('email',)) is True


def test_list_fields_match_any_item():
    post = SimpleNamespace(tags=['React', 'Frontend'])
    assert matches_search(post, 'front', ('tags',)) is True
    assert matches_search(post, 'backend', ('tags',)) is False


def test_missing_or_none_fields_never_match():
    item = SimpleNamespace(title=None)
    assert matches_search(item, 'none', ('title', 'absent')) is False


def test_filter_by_search_strips_term_and_keeps_order():
    items = [SimpleNamespace(title=t) for t in ('Alpha', 'Beta', 'alphabet')]
    assert [i.title for i in filter_by_search(items, '  alpha ', ('title',))] == ['Alpha', 'alphabet']
    assert len(filter_by_search(items, '   ', ('title',))) == 3
    assert len(filter_by_search(items, None, ('title',))) == 3


def test_newest_first_falls_back_and_puts_undated_last():
    jan = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
    feb = datetime(2024, 2, 1, tzinfo=dt_timezone.utc)
    mar = datetime(2024, 3, 1, tzinfo=dt_timezone.utc)
    items = [
        SimpleNamespace(name='draft', published_at=None, created_at=None),
        SimpleNamespace(name='jan', published_at=jan, created_at=mar),
        SimpleNamespace(name='feb-created', published_at=None, created_at=feb),
        SimpleNamespace(name='mar', published_at=mar, created_at=jan),
    ]
    ordered = newest_first(items, 'published_at', 'created_at')
    assert [i.name for i in ordered] == ['mar', 'feb-created', 'jan', 'draft']
