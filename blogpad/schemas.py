from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    EmailStr,
    Field,
    RootModel,
    Tag,
    field_validator,
    model_validator,
)
from datetime import datetime
from typing import Annotated, Any, Optional, Union


class SignupRequest(BaseModel):
    """
    Signup payload validation.

    All three fields are required and must be non-empty.
    EmailStr uses email-validator library for RFC-compliant validation.
    """
    username: str
    email: EmailStr
    password: str

    @field_validator('username', 'password')
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('must not be empty')
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    """
    Public user projection.

    Critical: Never include password_hash in any response.
    """
    id: int
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    message: str
    user: UserResponse


class UserListResponse(BaseModel):
    status: str = "success"
    data: list[UserResponse]


class MessageResponse(BaseModel):
    """
    Generic message response for operations without specific return data.
    """
    message: str


# ---------------------------------------------------------------------------
# Post payloads
#
# Clients have sent three shapes over time:
#   {title, content}   {title, body}   {post: {...}}
# "name" is also accepted in place of "title". Every shape is normalized
# into PostInput before it reaches the database.
# ---------------------------------------------------------------------------

class PostInput(BaseModel):
    """Canonical post fields. None means "not supplied"."""
    title: Optional[str] = None
    content: Optional[str] = None

    def missing_fields(self) -> list[str]:
        return [name for name in ("title", "content") if not getattr(self, name)]


class _TitledPayload(BaseModel):
    title: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def title_or_name(cls, data: Any) -> Any:
        # an empty title falls through to name
        if isinstance(data, dict) and not data.get("title") and data.get("name"):
            data = {**data, "title": data["name"]}
        return data


class ContentPayload(_TitledPayload):
    content: Optional[str] = None

    def normalize(self) -> PostInput:
        return PostInput(title=self.title, content=self.content)


class BodyPayload(_TitledPayload):
    body: Optional[str] = None

    def normalize(self) -> PostInput:
        return PostInput(title=self.title, content=self.body)


def _flat_shape(value: Any) -> Optional[str]:
    # content takes precedence when both keys are present
    if isinstance(value, dict):
        if value.get("content") is None and value.get("body") is not None:
            return "body"
        return "content"
    if isinstance(value, BodyPayload):
        return "body"
    if isinstance(value, ContentPayload):
        return "content"
    return None


FlatPostPayload = Annotated[
    Union[
        Annotated[ContentPayload, Tag("content")],
        Annotated[BodyPayload, Tag("body")],
    ],
    Discriminator(_flat_shape),
]


class WrappedPayload(BaseModel):
    post: FlatPostPayload

    def normalize(self) -> PostInput:
        return self.post.normalize()


def _payload_shape(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return "wrapped" if isinstance(value.get("post"), dict) else "flat"
    if isinstance(value, WrappedPayload):
        return "wrapped"
    if isinstance(value, (ContentPayload, BodyPayload)):
        return "flat"
    return None


class PostPayload(RootModel):
    """Any accepted post payload shape."""
    root: Annotated[
        Union[
            Annotated[WrappedPayload, Tag("wrapped")],
            Annotated[FlatPostPayload, Tag("flat")],
        ],
        Discriminator(_payload_shape),
    ]

    def normalize(self) -> PostInput:
        return self.root.normalize()


class PostResponse(BaseModel):
    id: str
    title: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostListResponse(BaseModel):
    status: str = "success"
    data: list[PostResponse]
