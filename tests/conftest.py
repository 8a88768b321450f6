"""Pytest configuration and fixtures."""

import copy
import threading
from typing import Dict, List, Optional

import pytest

from crm.api_client import APIClientError
from crm.models import CustomerRecord, MutationResult, UsersPage

USER_PAYLOAD = {
    "login": {"uuid": "7a0eed16-9430-4d68-901f-c0d4c1c3bf00", "username": "yellowpeacock117"},
    "name": {"title": "Mr", "first": "Brad", "last": "Gibson"},
    "gender": "male",
    "location": {
        "street": {"number": 9278, "name": "New Road"},
        "city": "Kilcoole",
        "state": "Waterford",
        "country": "Ireland",
        "postcode": 93027,
        "coordinates": {"latitude": "20.9267", "longitude": "-7.9310"},
        "timezone": {"offset": "-3:30", "description": "Newfoundland"},
    },
    "email": "brad.gibson@example.com",
    "dob": {"date": "1993-07-20T09:44:18.674Z", "age": 26},
    "registered": {"date": "2002-05-21T10:59:49.966Z", "age": 17},
    "phone": "011-962-7516",
    "cell": "081-454-0666",
    "picture": {
        "large": "https://randomuser.me/api/portraits/men/75.jpg",
        "medium": "https://randomuser.me/api/portraits/med/men/75.jpg",
        "thumbnail": "https://randomuser.me/api/portraits/thumb/men/75.jpg",
    },
    "nat": "IE",
}


def make_user(uuid: str, first: str = "Brad", last: str = "Gibson") -> dict:
    user = copy.deepcopy(USER_PAYLOAD)
    user["login"]["uuid"] = uuid
    user["login"]["username"] = f"{first.lower()}{last.lower()}"
    user["name"]["first"] = first
    user["name"]["last"] = last
    return user


class FakeDirectory:
    """In-memory stand-in for DirectoryAPIClient.

    ``gates`` maps a 1-based page number to a threading.Event; a list call for
    that page blocks until the event is set, which lets tests decide the order
    in which overlapping responses complete.
    """

    def __init__(self, total: int = 3):
        self.total = total
        self.calls: List[tuple] = []
        self.gates: Dict[int, threading.Event] = {}
        self.fail_list: Optional[APIClientError] = None
        self.fail_mutation: Optional[APIClientError] = None
        self.records: Dict[str, dict] = {}

    def list_users(self, page=None, per_page=None, search=None, sort_by=None, span=None):
        self.calls.append(("list", page, per_page, search, sort_by))
        gate = self.gates.get(page)
        if gate is not None:
            gate.wait(timeout=5)
        if self.fail_list is not None:
            raise self.fail_list
        tag = f"{search or 'all'}-p{page}"
        return UsersPage(
            page=page,
            perPage=per_page,
            total=self.total,
            data=[CustomerRecord.model_validate(make_user(tag, first=tag))],
        )

    def get_user(self, user_id):
        self.calls.append(("get", user_id))
        if self.fail_mutation is not None:
            raise self.fail_mutation
        return CustomerRecord.model_validate(self.records.get(user_id) or make_user(user_id))

    def create_user(self, request):
        self.calls.append(("create", request))
        if self.fail_mutation is not None:
            raise self.fail_mutation
        return MutationResult(success=True, uuid="new-uuid", message="created")

    def update_user(self, user_id, request):
        self.calls.append(("update", user_id, request))
        if self.fail_mutation is not None:
            raise self.fail_mutation
        return MutationResult(success=True, message="updated")

    def delete_user(self, user_id):
        self.calls.append(("delete", user_id))
        if self.fail_mutation is not None:
            raise self.fail_mutation
        return MutationResult(success=True, message="deleted")

    def calls_of(self, kind: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def user_payload() -> dict:
    return copy.deepcopy(USER_PAYLOAD)


@pytest.fixture
def customer(user_payload) -> CustomerRecord:
    return CustomerRecord.model_validate(user_payload)
