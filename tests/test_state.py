import pytest

from crm.models import UsersPage
from crm.state import (
    FetchStatus,
    ListQuery,
    ListState,
    begin_fetch,
    fetch_failed,
    fetch_succeeded,
    record_error,
    with_page,
    with_page_size,
    with_search_term,
)


def test_query_params_are_one_based():
    query = ListQuery(search_term="", page_index=2, page_size=10, sort_key="name.first")

    assert query.to_params() == {"page": 3, "per_page": 10, "search": None, "sort_by": "name.first"}


def test_search_resets_page_index():
    state = with_page(ListState(), 4)

    state = with_search_term(state, "smith")

    assert state.query.search_term == "smith"
    assert state.query.page_index == 0


def test_page_size_change_resets_page_index():
    state = with_page_size(with_page(ListState(), 3), 50)

    assert state.query.page_size == 50
    assert state.query.page_index == 0


@pytest.mark.parametrize("index", [-1, -10])
def test_negative_page_rejected(index):
    with pytest.raises(ValueError):
        with_page(ListState(), index)


def test_zero_page_size_rejected():
    with pytest.raises(ValueError):
        with_page_size(ListState(), 0)


def test_fetch_lifecycle(customer):
    state = begin_fetch(ListState())
    assert state.loading
    assert state.status is FetchStatus.LOADING

    state = fetch_succeeded(state, UsersPage(page=1, total=7, data=[customer]))
    assert not state.loading
    assert state.records == (customer,)
    assert state.total == 7

    failed = fetch_failed(begin_fetch(state), "API Error: 503 Service Unavailable")
    assert failed.status is FetchStatus.FAILED
    assert failed.error == "API Error: 503 Service Unavailable"
    # last good page stays visible
    assert failed.records == (customer,)


def test_transitions_do_not_mutate_input():
    original = ListState()

    with_search_term(original, "x")
    begin_fetch(original)
    record_error(original, "boom")

    assert original == ListState()
