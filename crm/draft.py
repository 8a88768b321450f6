"""
The editable, unsaved copy of a customer and the editor's state snapshots.

Fields are addressed through ``DraftField`` rather than by walking nested
dictionaries; dotted wire paths such as ``"name.first"`` or
``"location.city"`` resolve to the same members.
"""

from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from crm.models import (
    CreateUserRequest,
    CustomerRecord,
    Gender,
    LocationUpdate,
    NameUpdate,
    NewLogin,
    StreetUpdate,
    UpdateUserRequest,
)


class EditorMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class DraftField(str, Enum):
    TITLE = "title"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    EMAIL = "email"
    USERNAME = "username"
    GENDER = "gender"
    PHONE = "phone"
    CELL = "cell"
    STREET_NUMBER = "street_number"
    STREET_NAME = "street_name"
    CITY = "city"
    STATE = "state"
    COUNTRY = "country"
    POSTCODE = "postcode"

    @classmethod
    def from_path(cls, path: Union[str, "DraftField"]) -> "DraftField":
        """Resolve a member, its value, or a dotted wire path."""
        if isinstance(path, DraftField):
            return path
        if path in FIELD_PATHS:
            return FIELD_PATHS[path]
        try:
            return cls(path)
        except ValueError:
            raise ValueError(f"Unknown customer field: {path!r}") from None


FIELD_PATHS: Dict[str, DraftField] = {
    "name.title": DraftField.TITLE,
    "name.first": DraftField.FIRST_NAME,
    "name.last": DraftField.LAST_NAME,
    "login.username": DraftField.USERNAME,
    "street.number": DraftField.STREET_NUMBER,
    "street.name": DraftField.STREET_NAME,
    "location.street.number": DraftField.STREET_NUMBER,
    "location.street.name": DraftField.STREET_NAME,
    "location.city": DraftField.CITY,
    "location.state": DraftField.STATE,
    "location.country": DraftField.COUNTRY,
    "location.postcode": DraftField.POSTCODE,
}


class CustomerDraft(BaseModel):
    # Form values are kept as text; numbers are parsed when building payloads.
    model_config = ConfigDict(frozen=True)

    title: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    username: str = ""
    gender: str = Gender.MALE.value
    phone: str = ""
    cell: str = ""
    street_number: str = ""
    street_name: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    postcode: str = ""

    @classmethod
    def blank(cls) -> "CustomerDraft":
        return cls(title="Mr")

    @classmethod
    def from_record(cls, record: CustomerRecord) -> "CustomerDraft":
        number = record.location.street.number
        return cls(
            title=record.name.title or "",
            first_name=record.name.first or "",
            last_name=record.name.last or "",
            email=record.email or "",
            username=record.login.username or "",
            gender=record.gender or Gender.MALE.value,
            phone=record.phone or "",
            cell=record.cell or "",
            street_number=str(number) if number is not None else "",
            street_name=record.location.street.name or "",
            city=record.location.city or "",
            state=record.location.state or "",
            country=record.location.country or "",
            postcode=record.location.postcode or "",
        )

    def with_value(self, field: DraftField, value: str) -> "CustomerDraft":
        return self.model_copy(update={field.value: value})

    def _name(self) -> NameUpdate:
        return NameUpdate(title=self.title, first=self.first_name, last=self.last_name)

    def _location(self, street_number: Optional[int]) -> LocationUpdate:
        return LocationUpdate(
            street=StreetUpdate(number=street_number, name=self.street_name),
            city=self.city,
            state=self.state,
            country=self.country,
            postcode=self.postcode,
        )

    def to_create_request(self, password: Optional[str] = None) -> CreateUserRequest:
        number = int(self.street_number) if self.street_number else 0
        return CreateUserRequest(
            email=self.email,
            login=NewLogin(username=self.username, password=password),
            name=self._name(),
            gender=Gender(self.gender),
            location=self._location(number),
        )

    def to_update_request(self) -> UpdateUserRequest:
        number = int(self.street_number) if self.street_number else None
        return UpdateUserRequest(
            email=self.email,
            name=self._name(),
            gender=Gender(self.gender),
            phone=self.phone,
            cell=self.cell,
            location=self._location(number),
        )


class EditorState(BaseModel):
    """Snapshot of the editor; ``draft`` is None when nothing is open."""

    model_config = ConfigDict(frozen=True)

    mode: EditorMode = EditorMode.CREATE
    draft: Optional[CustomerDraft] = None
    original_id: Optional[str] = None
    errors: Dict[str, str] = Field(default_factory=dict)
    submitting: bool = False
    error: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.draft is not None


def open_create() -> EditorState:
    return EditorState(mode=EditorMode.CREATE, draft=CustomerDraft.blank())


def open_edit(record: CustomerRecord) -> EditorState:
    return EditorState(
        mode=EditorMode.EDIT,
        draft=CustomerDraft.from_record(record),
        original_id=record.id,
    )


def apply_field(state: EditorState, field: DraftField, value: str) -> EditorState:
    errors = {k: v for k, v in state.errors.items() if k != field.value}
    return state.model_copy(
        update={"draft": state.draft.with_value(field, value), "errors": errors}
    )


def with_errors(state: EditorState, errors: Dict[str, str]) -> EditorState:
    return state.model_copy(update={"errors": dict(errors)})


def begin_submit(state: EditorState) -> EditorState:
    return state.model_copy(update={"submitting": True, "error": None})


def submit_failed(state: EditorState, message: str) -> EditorState:
    return state.model_copy(update={"submitting": False, "error": message})


def end_submit(state: EditorState) -> EditorState:
    return state.model_copy(update={"submitting": False})


def closed() -> EditorState:
    return EditorState()
