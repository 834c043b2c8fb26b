"""Record types shared by the test suite.

Importable as ``sample_records`` (``tests/`` is on the pytest pythonpath),
so CLI tests can name them as ``sample_records:ServerConfig``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field

from envbind import Env, UInt8, UInt64, env_field

if TYPE_CHECKING:
    from decimal import Decimal


@dataclass
class ServerConfig:
    listen_address: Annotated[str, Env("EB_LISTEN_ADDRESS")] = ""
    port: Annotated[int, Env("EB_PORT")] = 0
    debug: Annotated[bool, Env("EB_DEBUG")] = False
    timeout: Annotated[timedelta, Env("EB_TIMEOUT")] = timedelta(0)
    allowed_hosts: Annotated[list[str], Env("EB_ALLOWED_HOSTS")] = field(default_factory=list)
    label: str = "untagged"


@dataclass
class ScalarConfig:
    name: Annotated[str, Env("EB_NAME")] = ""
    age: Annotated[int, Env("EB_AGE")] = 0
    active: Annotated[bool, Env("EB_ACTIVE")] = False
    height: Annotated[float, Env("EB_HEIGHT")] = 0.0
    big: Annotated[UInt64, Env("EB_BIG")] = 0
    small: Annotated[UInt8, Env("EB_SMALL")] = 0


@dataclass
class MetadataConfig:
    """Keys declared through dataclass field metadata."""

    region: str = env_field("EB_REGION", default="")
    retries: int = env_field("EB_RETRIES", default=0)


@dataclass
class Nested:
    age: int = 0


@dataclass
class NestedConfig:
    name: Annotated[str, Env("EB_NAME")] = ""
    info: Annotated[Nested, Env("EB_INFO")] = field(default_factory=Nested)


@dataclass
class OptionalConfig:
    name: Annotated[str | None, Env("EB_NAME")] = None


@dataclass
class TimestampConfig:
    birthday: Annotated[datetime, Env("EB_BIRTHDAY")] = datetime(2000, 1, 1)


@dataclass
class NeedsArgs:
    port: Annotated[int, Env("EB_PORT")]


@dataclass
class DeferredConfig:
    """Untagged field typed with a name only importable by type checkers."""

    port: Annotated[int, Env("EB_PORT")] = 0
    cache: Decimal | None = None


@dataclass
class DeferredTaggedConfig:
    port: Annotated[int, Env("EB_PORT")] = 0
    rate: Annotated[Decimal, Env("EB_RATE")] | None = None


@dataclass
class DeferredMetadataConfig:
    amount: Decimal | None = env_field("EB_AMOUNT", default=None)


@dataclass(frozen=True)
class FrozenConfig:
    port: Annotated[int, Env("EB_PORT")] = 0


class ModelConfig(BaseModel):
    service: Annotated[str, Env("EB_SERVICE")] = ""
    workers: Annotated[int, Env("EB_WORKERS")] = 0
    grace: Annotated[timedelta, Env("EB_GRACE")] = timedelta(0)
    tags: Annotated[list[str], Env("EB_TAGS")] = []
    note: str = ""


class ValidatedModel(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    workers: Annotated[int, Env("EB_WORKERS"), Field(ge=1)] = 1


class FrozenModel(BaseModel):
    model_config = {"frozen": True}

    service: Annotated[str, Env("EB_SERVICE")] = ""


NOT_A_CLASS = ServerConfig()


@dataclass
class ExplodingConfig:
    port: Annotated[int, Env("EB_PORT")] = 0

    def __post_init__(self) -> None:
        raise RuntimeError("not configured")
