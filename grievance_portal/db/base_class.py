import re
import uuid
from typing import Any

from sqlalchemy import Column, Enum, String
from sqlalchemy.orm import as_declarative, declared_attr


def generate_uuid() -> str:
    return str(uuid.uuid4())


@as_declarative()
class Base:
    __name__: str

    # BlockchainRecord -> blockchain_records
    @declared_attr
    def __tablename__(cls) -> str:
        return re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower() + "s"

    id = Column(String(36), primary_key=True, default=generate_uuid)


def enum_type(enum_cls: Any) -> Enum:
    """Store a str enum by value (``"in_progress"``), not by member name."""
    return Enum(
        enum_cls,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        validate_strings=True,
        length=64,
    )
