"""
Immutable snapshots of the customer list screen and the transitions between them.

Each transition takes a ``ListState`` and returns a new one; nothing here
performs I/O, so the list behaviour can be checked without a running loop.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from crm.models import CustomerRecord, UsersPage


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


class ListQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    search_term: str = ""
    page_index: int = Field(default=0, ge=0)  # 0-based; the wire is 1-based
    page_size: int = Field(default=25, gt=0)
    sort_key: Optional[str] = "name.first"

    def to_params(self) -> dict:
        """Keyword arguments for ``DirectoryAPIClient.list_users``."""
        return {
            "page": self.page_index + 1,
            "per_page": self.page_size,
            "search": self.search_term or None,
            "sort_by": self.sort_key,
        }


class ListState(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: ListQuery = Field(default_factory=ListQuery)
    records: Tuple[CustomerRecord, ...] = ()
    total: int = 0
    status: FetchStatus = FetchStatus.IDLE
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status is FetchStatus.LOADING


def with_search_term(state: ListState, text: str) -> ListState:
    query = state.query.model_copy(update={"search_term": text, "page_index": 0})
    return state.model_copy(update={"query": query})


def with_page(state: ListState, index: int) -> ListState:
    if index < 0:
        raise ValueError(f"page index must be >= 0, got {index}")
    query = state.query.model_copy(update={"page_index": index})
    return state.model_copy(update={"query": query})


def with_page_size(state: ListState, size: int) -> ListState:
    if size <= 0:
        raise ValueError(f"page size must be > 0, got {size}")
    query = state.query.model_copy(update={"page_size": size, "page_index": 0})
    return state.model_copy(update={"query": query})


def begin_fetch(state: ListState) -> ListState:
    # records stay visible while the next page loads
    return state.model_copy(update={"status": FetchStatus.LOADING, "error": None})


def fetch_succeeded(state: ListState, page: UsersPage) -> ListState:
    return state.model_copy(
        update={
            "records": tuple(page.data),
            "total": page.total,
            "status": FetchStatus.SUCCESS,
            "error": None,
        }
    )


def fetch_failed(state: ListState, message: str) -> ListState:
    return state.model_copy(update={"status": FetchStatus.FAILED, "error": message})


def record_error(state: ListState, message: str) -> ListState:
    """Surface a failure that did not come from a list fetch (e.g. delete)."""
    return state.model_copy(update={"error": message})
