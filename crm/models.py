"""
Defines Pydantic models for:
 - Customer records as served by the Directory Service (``/users``)
 - The paginated list envelope
 - Create/update request payloads and mutation results
Field names follow the wire format; convenience properties expose the flat
view used by the list and editor screens.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class UserLogin(BaseModel):
    uuid: str
    username: str = ""
    password: Optional[str] = None


class UserName(BaseModel):
    title: str = ""
    first: str = ""
    last: str = ""


class Street(BaseModel):
    number: Optional[int] = None
    name: str = ""


class Coordinates(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class Timezone(BaseModel):
    offset: str = ""
    description: str = ""


class UserLocation(BaseModel):
    street: Street = Field(default_factory=Street)
    city: str = ""
    state: str = ""
    country: str = ""
    postcode: str = ""
    coordinates: Optional[Coordinates] = None
    timezone: Optional[Timezone] = None

    @field_validator("postcode", mode="before")
    @classmethod
    def coerce_postcode(cls, v) -> str:
        # the service sends numeric postcodes for some countries
        if v is None:
            return ""
        return str(v)


class DatedAge(BaseModel):
    date: Optional[datetime] = None
    age: Optional[int] = None


class UserPicture(BaseModel):
    large: str = ""
    medium: str = ""
    thumbnail: str = ""


class CustomerRecord(BaseModel):
    # Schema for a customer as returned by GET /users and GET /users/{id}.
    login: UserLogin
    name: UserName = Field(default_factory=UserName)
    gender: str = ""
    location: UserLocation = Field(default_factory=UserLocation)
    email: str = ""
    dob: DatedAge = Field(default_factory=DatedAge)
    registered: DatedAge = Field(default_factory=DatedAge)
    phone: str = ""
    cell: str = ""
    picture: UserPicture = Field(default_factory=UserPicture)
    nat: str = ""

    @property
    def id(self) -> str:
        return self.login.uuid

    @property
    def username(self) -> str:
        return self.login.username

    @property
    def first_name(self) -> str:
        return self.name.first

    @property
    def last_name(self) -> str:
        return self.name.last

    @property
    def age(self) -> Optional[int]:
        return self.dob.age


class UsersPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int = 1
    per_page: int = Field(default=0, alias="perPage")
    total: int = 0
    span: Optional[str] = None
    effective_page: Optional[int] = Field(default=None, alias="effectivePage")
    data: List[CustomerRecord] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class NewLogin(BaseModel):
    username: str
    password: Optional[str] = None


class NameUpdate(BaseModel):
    title: Optional[str] = None
    first: Optional[str] = None
    last: Optional[str] = None


class StreetUpdate(BaseModel):
    number: Optional[int] = None
    name: Optional[str] = None


class LocationUpdate(BaseModel):
    street: Optional[StreetUpdate] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postcode: Optional[str] = None


class CreateUserRequest(BaseModel):
    email: str
    login: NewLogin
    name: NameUpdate
    gender: Optional[Gender] = None
    location: Optional[LocationUpdate] = None


class UpdateUserRequest(BaseModel):
    email: Optional[str] = None
    name: Optional[NameUpdate] = None
    gender: Optional[Gender] = None
    location: Optional[LocationUpdate] = None
    phone: Optional[str] = None
    cell: Optional[str] = None


class MutationResult(BaseModel):
    success: bool = True
    uuid: Optional[str] = None
    message: str = ""
