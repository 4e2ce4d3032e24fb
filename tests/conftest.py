"""Shared pytest fixtures for error-envelope test suites."""

from collections.abc import Callable
from pathlib import Path
import sys
from typing import Literal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import model_validator
from pydantic_core import PydanticCustomError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from error_envelope.core.config import FormatterConfig  # noqa: E402
from error_envelope.core.config import build_formatter_config  # noqa: E402
from error_envelope.core.errors import BadRequestError  # noqa: E402
from error_envelope.core.errors import ConflictError  # noqa: E402
from error_envelope.core.errors import FormattedError  # noqa: E402
from error_envelope.core.errors import NotFoundError  # noqa: E402
from error_envelope.core.errors import register_error_handlers  # noqa: E402


class UnauthorizedUser(Exception):
    """Plain exception surfaced as a 500 with a meaningful class name."""


class MalformedError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.name = None


class PaymentRequired(FormattedError):
    status_code = 402


class Numbers(BaseModel):
    banana: float | None = None
    test: float | None = None


class NoParams(BaseModel):
    model_config = ConfigDict(extra="forbid")


class Pair(BaseModel):
    one: str | None = None
    two: str | None = None

    @model_validator(mode="after")
    def exactly_one(self) -> "Pair":
        peers = ["one", "two"]
        if self.one is None and self.two is None:
            raise PydanticCustomError("object.missing", "one of one, two is required", {"peers": peers})
        if self.one is not None and self.two is not None:
            raise PydanticCustomError("object.xor", "only one of one, two is allowed", {"peers": peers})
        return self


class NestedPair(BaseModel):
    test: Pair


class Choices(BaseModel):
    model_config = ConfigDict(extra="forbid")

    one: Literal["one", "1"] | None = None
    two: Literal["two"] | None = None


class NestedChoices(BaseModel):
    test: Choices | None = None


def build_app(config: FormatterConfig) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app, config)

    @app.get("/normal")
    def normal() -> dict[str, str]:
        return {}

    @app.post("/numbers")
    def numbers(payload: Numbers) -> dict[str, str]:
        return {}

    @app.post("/no-params")
    def no_params(payload: NoParams) -> dict[str, str]:
        return {}

    @app.post("/xor")
    def xor(payload: Pair) -> dict[str, str]:
        return {}

    @app.post("/nested-xor")
    def nested_xor(payload: NestedPair) -> dict[str, str]:
        return {}

    @app.post("/nested-paths")
    def nested_paths(payload: NestedChoices) -> dict[str, str]:
        return {}

    @app.post("/error")
    def error() -> None:
        raise RuntimeError("boom")

    @app.get("/unauth")
    def unauth() -> None:
        raise UnauthorizedUser("who even are you")

    @app.get("/malformed-error")
    def malformed() -> None:
        raise MalformedError("no name property")

    @app.get("/payment")
    def payment() -> None:
        raise PaymentRequired("top up first")

    @app.get("/not-found")
    def not_found() -> None:
        raise NotFoundError()

    @app.post("/conflict")
    def conflict() -> None:
        raise ConflictError("Error kind is already registered")

    @app.post("/bad-request")
    def bad_request() -> None:
        raise BadRequestError("Template reference is malformed")

    return app


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Build a test client for an app configured with the given options."""

    def factory(**options: object) -> TestClient:
        config = build_formatter_config(**options)
        return TestClient(build_app(config), raise_server_exceptions=False)

    return factory
