"""
RPC Messages - Typed request and response shapes

Module: protocol.messages
Date: 2026-10-19
Version: 0.1.0

Request classes validate JSON-RPC params and raise INVALID_ARGUMENT when a
field is missing or not a string.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping

from ..core.errors import ServiceError


def _require_str(params: Mapping[str, Any], name: str) -> str:
    value = params.get(name)
    if not isinstance(value, str):
        raise ServiceError.invalid_argument(f"Missing or invalid field: {name}")
    return value


@dataclass(frozen=True)
class LoginRequest:
    email: str
    password: str

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "LoginRequest":
        return cls(
            email=_require_str(params, "email"),
            password=_require_str(params, "password"),
        )


@dataclass(frozen=True)
class RegisterRequest:
    firstname: str
    lastname: str
    email: str
    password: str

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "RegisterRequest":
        return cls(
            firstname=_require_str(params, "firstname"),
            lastname=_require_str(params, "lastname"),
            email=_require_str(params, "email"),
            password=_require_str(params, "password"),
        )


@dataclass(frozen=True)
class GreetRequest:
    message: str

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "GreetRequest":
        return cls(message=_require_str(params, "message"))


@dataclass(frozen=True)
class Token:
    access_token: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GreetResponse:
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
