"""CTFd response schemas (pydantic v2) and the sheet row record.

The schemas describe only what the sync reads. Extra keys in CTFd responses
are ignored; anything missing or of the wrong type raises
``pydantic.ValidationError``, which the client turns into ``CTFdError``.
"""
from typing import List, NamedTuple, Optional, Union

from pydantic import BaseModel, Field

# CTFd custom field name -> UserRecord attribute
FIELD_SLOTS = {
    "Phone Number": "phone",
    "School/Educational Institute": "school",
    "Dietary Requirements": "dietary",
    "Current Course and Year": "course",
    "Discord username": "discord",
    "What is your date of birth? (DD/MM/YYYY)": "dob",
    "Student ID": "student_id",
}


class Pagination(BaseModel):
    # CTFd sends the next page number; other deployments may send a URL
    next: Optional[Union[int, str]] = None


class Meta(BaseModel):
    pagination: Pagination


class UserSummary(BaseModel):
    id: int = Field(..., gt=0)


class UserListResponse(BaseModel):
    """Body of ``GET /api/v1/users``."""

    data: List[UserSummary]
    meta: Meta

    @property
    def has_next(self) -> bool:
        return self.meta.pagination.next is not None


class UserField(BaseModel):
    name: str
    value: Optional[str] = None


class UserDetail(BaseModel):
    name: str
    email: Optional[str] = None
    custom_fields: List[UserField] = Field(default_factory=list, alias="fields")


class UserDetailResponse(BaseModel):
    """Body of ``GET /api/v1/users/{id}``."""

    data: UserDetail


class UserRecord(NamedTuple):
    """One sheet row.

    Columns: Name, Email, Phone Number, School, Dietary Requirements,
    Course and Year, Discord, Date of Birth, Student ID.
    """

    name: str = ""
    email: str = ""
    phone: str = ""
    school: str = ""
    dietary: str = ""
    course: str = ""
    discord: str = ""
    dob: str = ""
    student_id: str = ""

    @classmethod
    def from_detail(cls, detail: UserDetail) -> "UserRecord":
        """Build a record from a user detail, keeping only the known fields.

        When a known field appears more than once the last value wins.
        """
        slots = {}
        for field in detail.custom_fields:
            slot = FIELD_SLOTS.get(field.name)
            if slot is not None:
                slots[slot] = field.value or ""
        return cls(name=detail.name, email=detail.email or "", **slots)

    def to_row(self) -> List[str]:
        return list(self)
