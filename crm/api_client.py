from typing import Any, Dict, Optional
from urllib.parse import quote
import logging

import requests
from pydantic import BaseModel, ValidationError

from crm.log import build_default_logger
from crm.models import (
    CreateUserRequest,
    CustomerRecord,
    MutationResult,
    UpdateUserRequest,
    UsersPage,
)


class APIClientError(Exception):
    """Raised for any failed call to the Directory Service."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        method: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code
        self.method = method

    def __str__(self) -> str:
        base = f"{self.__class__.__name__}: {self.message}"
        if self.method:
            base += f" | Method: {self.method}"
        if self.url:
            base += f" | URL: {self.url}"
        if self.status_code is not None:
            base += f" | Status: {self.status_code}"
        return base


class NotFoundError(APIClientError):
    """The addressed customer no longer exists on the server."""


class DirectoryAPIClient:
    """Thin client for the Directory Service ``/users`` resource.

    Every method issues exactly one HTTP request; failures are never retried
    here; callers decide whether to repeat the action.
    """

    DEFAULT_TIMEOUT = 10  # seconds

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = logger or build_default_logger(self.__class__.__name__)

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _user_url(self, user_id: str) -> str:
        return f"{self.base_url}/users/{quote(str(user_id), safe='')}"

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[BaseModel] = None,
    ) -> Any:
        """Perform one request and return the decoded JSON body."""
        body = None
        if payload is not None:
            body = payload.model_dump(mode="json", exclude_none=True)
        self.logger.debug("%s %s params=%s", method, url, params)

        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=body,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise APIClientError(
                f"Network error: {exc}", url=url, method=method
            ) from exc

        if resp.status_code == 404:
            raise NotFoundError(
                f"API Error: 404 {resp.reason or 'Not Found'}",
                url=url,
                status_code=404,
                method=method,
            )

        if not 200 <= resp.status_code < 300:
            raise APIClientError(
                f"API Error: {resp.status_code} {resp.reason or ''}".rstrip(),
                url=url,
                status_code=resp.status_code,
                method=method,
            )

        try:
            return resp.json()
        except ValueError:
            raise APIClientError(
                f"Invalid JSON from {url}",
                url=url,
                status_code=resp.status_code,
                method=method,
            )

    def _parse(self, model, data: Any, url: str, method: str):
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise APIClientError(
                f"Unexpected response shape: {exc.error_count()} invalid field(s)",
                url=url,
                method=method,
            ) from exc

    def _mutation(self, data: Any, url: str, method: str) -> MutationResult:
        result = self._parse(MutationResult, data, url, method)
        if not result.success:
            raise APIClientError(
                result.message or "Directory Service rejected the request",
                url=url,
                method=method,
            )
        return result

    def list_users(
        self,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        span: Optional[str] = None,
    ) -> UsersPage:
        """Fetch one page of customers. ``page`` is 1-based, as on the wire."""
        url = f"{self.base_url}/users"
        params: Dict[str, Any] = {}
        if page:
            params["page"] = page
        if per_page:
            params["perPage"] = per_page
        if search:
            params["search"] = search
        if sort_by:
            params["sortBy"] = sort_by
        if span:
            params["span"] = span

        result = self._parse(UsersPage, self._request("GET", url, params=params), url, "GET")
        self.logger.info(
            "Fetched page %d with %d records (total=%d)",
            result.page,
            len(result.data),
            result.total,
        )
        return result

    def get_user(self, user_id: str) -> CustomerRecord:
        url = self._user_url(user_id)
        return self._parse(CustomerRecord, self._request("GET", url), url, "GET")

    def create_user(self, request: CreateUserRequest) -> MutationResult:
        url = f"{self.base_url}/users"
        result = self._mutation(self._request("POST", url, payload=request), url, "POST")
        self.logger.info("Created customer uuid=%s", result.uuid)
        return result

    def update_user(self, user_id: str, request: UpdateUserRequest) -> MutationResult:
        url = self._user_url(user_id)
        result = self._mutation(self._request("PUT", url, payload=request), url, "PUT")
        self.logger.info("Updated customer uuid=%s", user_id)
        return result

    def delete_user(self, user_id: str) -> MutationResult:
        url = self._user_url(user_id)
        result = self._mutation(self._request("DELETE", url), url, "DELETE")
        self.logger.info("Deleted customer uuid=%s", user_id)
        return result
