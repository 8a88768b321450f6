"""
Keeps the displayed page of customers in step with the current list query.

Fetches run on worker threads (the Directory client is blocking) while all
state changes happen on the event loop. Every fetch is numbered when it is
issued; a response is applied only if no newer fetch has been issued since,
so a slow response can never overwrite the result of a later query.
"""

from typing import Callable, Optional, Set
import asyncio
import logging

from crm.api_client import APIClientError, DirectoryAPIClient
from crm.log import build_default_logger
from crm.state import (
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

ConfirmDelete = Callable[[str], bool]


class CustomerListCoordinator:
    DEFAULT_DEBOUNCE = 0.5  # seconds
    DEFAULT_PAGE_SIZE = 25
    DEFAULT_SORT_KEY = "name.first"

    def __init__(
        self,
        client: DirectoryAPIClient,
        page_size: int = DEFAULT_PAGE_SIZE,
        sort_key: Optional[str] = DEFAULT_SORT_KEY,
        debounce_seconds: float = DEFAULT_DEBOUNCE,
        confirm_delete: Optional[ConfirmDelete] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.debounce_seconds = debounce_seconds
        self.confirm_delete = confirm_delete
        self.logger = logger or build_default_logger(self.__class__.__name__)

        self._state = ListState(query=ListQuery(page_size=page_size, sort_key=sort_key))
        self._issued = 0
        self._debounce_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()

    @property
    def state(self) -> ListState:
        return self._state

    def set_search_term(self, text: str) -> None:
        """Record new search text; the fetch fires once typing pauses."""
        if text == self._state.query.search_term:
            return
        self._state = with_search_term(self._state, text)
        # results still in flight answer the old query
        self._issued += 1
        self._cancel_debounce()
        self._debounce_task = asyncio.get_running_loop().create_task(
            self._debounced_fetch()
        )

    async def set_page(self, index: int) -> ListState:
        self._state = with_page(self._state, index)
        return await self._spawn_fetch()

    async def set_page_size(self, size: int) -> ListState:
        self._state = with_page_size(self._state, size)
        return await self._spawn_fetch()

    async def refresh(self) -> ListState:
        """Re-fetch the current query unchanged."""
        return await self._spawn_fetch()

    async def delete_record(
        self, record_id: str, confirm: Optional[ConfirmDelete] = None
    ) -> bool:
        """Delete one customer after confirmation, then reload the page.

        Returns True only when the record was deleted. Without a confirm
        callable, or when it declines, no calls are made; a failed delete keeps
        the current page and sets ``error``.
        """
        confirm = confirm or self.confirm_delete
        if confirm is None or not confirm(record_id):
            self.logger.debug("Delete of %s declined", record_id)
            return False

        try:
            await asyncio.to_thread(self.client.delete_user, record_id)
        except APIClientError as exc:
            self.logger.warning("Delete of %s failed: %s", record_id, exc)
            self._state = record_error(self._state, exc.message)
            return False

        await self.refresh()
        return True

    async def wait_idle(self) -> ListState:
        """Wait until no debounce timer or fetch is outstanding."""
        while True:
            pending = [t for t in self._inflight if not t.done()]
            if self._debounce_task is not None and not self._debounce_task.done():
                pending.append(self._debounce_task)
            if not pending:
                return self._state
            await asyncio.wait(pending)

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    async def _debounced_fetch(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._debounce_task = None
        self._spawn_fetch()

    def _spawn_fetch(self) -> "asyncio.Task[ListState]":
        # an explicit fetch already covers a pending search
        self._cancel_debounce()
        self._issued += 1
        request_id = self._issued
        query = self._state.query
        self._state = begin_fetch(self._state)

        task = asyncio.get_running_loop().create_task(self._fetch(request_id, query))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _fetch(self, request_id: int, query: ListQuery) -> ListState:
        self.logger.debug("Fetch #%d for %s", request_id, query)
        try:
            page = await asyncio.to_thread(self.client.list_users, **query.to_params())
        except APIClientError as exc:
            if request_id != self._issued:
                self.logger.debug("Discarding stale failure of fetch #%d", request_id)
                return self._state
            self.logger.warning("Fetching customers failed: %s", exc)
            self._state = fetch_failed(self._state, exc.message)
            return self._state

        if request_id != self._issued:
            self.logger.debug("Discarding stale result of fetch #%d", request_id)
            return self._state

        self._state = fetch_succeeded(self._state, page)
        return self._state
