"""
Module: inventory_kernel.db.base
Responsibility: Declarative base for the inventory ORM models: string-stored
    UUID primary keys and the column types used for annotated attributes.
Architecture position: Kernel > DB.  Lowest import target in the kernel;
    imports nothing from models/, selectors/ or domain/.

Invariants enforced:
    - Every row has a uuid4 primary key, stored as 36 characters so the
      schema is identical on SQLite and server databases.
    - Decimal attributes default to Numeric(19, 4), the internal cost scale.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, DateTime, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from inventory_kernel.db.types import ShortCode, UnitPrice


class UUIDString(TypeDecorator):
    """UUID in Python, 36-character string in the database."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    """
    Declarative base for every inventory model.

    Timestamps are naive: stock history stores the wall-clock time the
    source system recorded.
    """

    type_annotation_map: ClassVar[dict] = {
        UUID: UUIDString(),
        Decimal: Numeric(19, 4),
        datetime: DateTime(),
        int: BigInteger,
        UnitPrice: Numeric(12, 2),
        ShortCode: String(50),
    }

    id: Mapped[UUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)
