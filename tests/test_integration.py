from unittest.mock import MagicMock, patch

import pytest
import requests

from crm.config import CRMSettings
from crm.draft import DraftField
from crm.main import build_console, show_customers

BASE_URL = "https://user-api.example.test/api"


def make_response(status_code=200, json_data=None, reason="OK"):
    # Create a mock requests.Response-like object (MagicMock).
    mock_resp = MagicMock(spec=requests.Response)
    mock_resp.status_code = status_code
    mock_resp.reason = reason
    mock_resp.headers = {}
    mock_resp.text = ""
    mock_resp.json.return_value = json_data
    return mock_resp


@pytest.fixture
def mock_request():
    with patch("requests.Session.request") as mocked:
        yield mocked


@pytest.fixture
def settings():
    return CRMSettings(
        _env_file=None,
        api_base_url=BASE_URL,
        page_size=5,
        search_debounce_ms=10,
        default_password="changeme",
    )


@pytest.mark.asyncio
async def test_create_from_editor_refreshes_list(mock_request, settings, user_payload):
    """
    Integration: CustomerEditor (create) -> DirectoryAPIClient POST -> on_saved
    -> CustomerListCoordinator.refresh -> DirectoryAPIClient GET.
    """
    mock_request.side_effect = [
        make_response(200, {"success": True, "uuid": "u-9", "message": "User created"}),
        make_response(200, {"page": 1, "perPage": 5, "total": 1, "data": [user_payload]}),
    ]
    console = build_console(settings)

    console.editor.load()
    console.editor.set_field(DraftField.FIRST_NAME, "Brad")
    console.editor.set_field(DraftField.LAST_NAME, "Gibson")
    console.editor.set_field(DraftField.EMAIL, "brad.gibson@example.com")
    console.editor.set_field(DraftField.USERNAME, "yellowpeacock117")
    console.editor.set_field(DraftField.STREET_NUMBER, "9278")

    assert await console.editor.submit() is True

    post, get = mock_request.call_args_list
    assert post.args == ("POST", f"{BASE_URL}/users")
    assert post.kwargs["json"]["login"] == {"username": "yellowpeacock117", "password": "changeme"}
    assert post.kwargs["json"]["location"]["street"] == {"number": 9278, "name": ""}
    assert get.args == ("GET", f"{BASE_URL}/users")
    assert get.kwargs["params"] == {"page": 1, "perPage": 5, "sortBy": "name.first"}

    state = console.customers.state
    assert state.total == 1
    assert state.records[0].username == "yellowpeacock117"


@pytest.mark.asyncio
async def test_delete_confirmed_then_list_reloads(mock_request, settings, user_payload):
    mock_request.side_effect = [
        make_response(200, {"success": True, "message": "User deleted"}),
        make_response(200, {"page": 1, "perPage": 5, "total": 0, "data": []}),
    ]
    console = build_console(settings)

    deleted = await console.customers.delete_record("u-1", confirm=lambda record_id: True)

    assert deleted is True
    methods = [c.args[0] for c in mock_request.call_args_list]
    assert methods == ["DELETE", "GET"]
    assert console.customers.state.records == ()


@pytest.mark.asyncio
async def test_show_customers_prints_rows(mock_request, settings, user_payload, capsys):
    mock_request.return_value = make_response(
        200, {"page": 1, "perPage": 5, "total": 1, "data": [user_payload]}
    )
    console = build_console(settings)

    code = await show_customers(console, "brad")

    assert code == 0
    assert mock_request.call_args.kwargs["params"]["search"] == "brad"
    assert "Mr Brad Gibson" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_show_customers_reports_transport_failure(mock_request, settings):
    mock_request.return_value = make_response(503, reason="Service Unavailable")
    console = build_console(settings)

    code = await show_customers(console)

    assert code == 1
    assert console.customers.state.error == "API Error: 503 Service Unavailable"
