"""Common schemas: enums and the camelCase base model."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EvidenceKind(StrEnum):
    TRANSACTION = "tx"
    FILE = "file"
    TOPIC_MESSAGE = "topic"
    TOKEN = "token"


class ToastVariant(StrEnum):
    DEFAULT = "default"
    SUCCESS = "success"
    WARNING = "warning"


ALL_FILTER = "all"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys, matching the UI's JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
