"""Tests for payload normalization and request schemas."""

import pytest
from pydantic import ValidationError

from blogpad.schemas import (
    BodyPayload,
    ContentPayload,
    PostInput,
    PostPayload,
    LoginRequest,
    SignupRequest,
    UserResponse,
    WrappedPayload,
)


class TestPostPayload:
    def test_content_shape(self):
        payload = PostPayload.model_validate({"title": "T", "content": "C"})
        assert isinstance(payload.root, ContentPayload)
        assert payload.normalize() == PostInput(title="T", content="C")

    def test_body_shape(self):
        payload = PostPayload.model_validate({"title": "T", "body": "B"})
        assert isinstance(payload.root, BodyPayload)
        assert payload.normalize() == PostInput(title="T", content="B")

    def test_wrapped_shape(self):
        payload = PostPayload.model_validate({"post": {"title": "T", "body": "B"}})
        assert isinstance(payload.root, WrappedPayload)
        assert payload.normalize() == PostInput(title="T", content="B")

    def test_content_preferred_over_body(self):
        payload = PostPayload.model_validate({"title": "T", "content": "C", "body": "B"})
        assert payload.normalize().content == "C"

    def test_name_alias(self):
        assert PostPayload.model_validate({"name": "N"}).normalize().title == "N"

    def test_empty_title_falls_back_to_name(self):
        payload = PostPayload.model_validate({"title": "", "name": "N", "content": "C"})
        assert payload.normalize().title == "N"

    def test_title_preferred_over_name(self):
        payload = PostPayload.model_validate({"title": "T", "name": "N", "content": "C"})
        assert payload.normalize().title == "T"

    def test_wrapped_empty_title_falls_back_to_name(self):
        payload = PostPayload.model_validate({"post": {"title": "", "name": "N", "body": "B"}})
        assert payload.normalize() == PostInput(title="N", content="B")

    def test_partial_payload_keeps_unset_as_none(self):
        fields = PostPayload.model_validate({"content": "C"}).normalize()
        assert fields.title is None
        assert fields.missing_fields() == ["title"]

    def test_rejects_non_object(self):
        with pytest.raises(ValidationError):
            PostPayload.model_validate(["T", "C"])


class TestSignupRequest:
    def test_blank_username_rejected(self):
        with pytest.raises(ValidationError):
            SignupRequest(username=" ", email="a@x.com", password="secret1")

    def test_short_password_allowed(self):
        request = SignupRequest(username="alice", email="a@x.com", password="secret1")
        assert request.password == "secret1"

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            SignupRequest(username="alice", email="not-an-email", password="secret1")


class TestLoginRequest:
    def test_empty_password_rejected(self):
        with pytest.raises(ValidationError):
            LoginRequest(email="a@x.com", password="")

    def test_any_non_empty_password_accepted(self):
        assert LoginRequest(email="a@x.com", password=" ").password == " "


def test_user_response_has_no_password_field():
    assert set(UserResponse.model_fields) == {"id", "username", "email"}
