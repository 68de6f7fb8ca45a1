"""
Request bodies for portal routes.

The portal stores whatever the client sends: every field is optional and
untyped, unknown keys are kept, and a missing or non-object body reads as `{}`.
"""

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ConfigDict

Model = TypeVar("Model", bound="LooseBody")


class LooseBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_raw(cls: Type[Model], raw: Any) -> Model:
        return cls.model_validate(raw if isinstance(raw, dict) else {})


class SignupRequest(LooseBody):
    fullname: Any = None
    email: Any = None
    phone: Any = None
    country: Any = None
    idcard: Any = None
    password: Any = None


class SigninRequest(LooseBody):
    email: Any = None
    password: Any = None


class ProgressUpdate(LooseBody):
    word: Any = None
    excel: Any = None
    ppt: Any = None


class VerifyAdminRequest(LooseBody):
    code: Any = None


class VisitRequest(LooseBody):
    userAgent: Any = None
    platform: Any = None
    screen: Any = None


class AskRequest(LooseBody):
    message: Any = None
