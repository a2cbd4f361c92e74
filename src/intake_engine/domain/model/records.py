"""
Record building blocks:
identity, ownership, partial-field updates.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import UTC, datetime
from typing import Any, ClassVar
from uuid import uuid4

from intake_engine.domain.model.enums import AssetCategory, RecordKind

_PROTECTED_FIELDS = frozenset({"id", "client_id", "created_at", "updated_at"})


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def new_record_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex}"


@dataclass(slots=True)
class Address:
    address1: str = ""
    address2: str = ""
    formatted_address: str = ""
    city: str = ""
    region: str = ""
    postal_code: str = ""
    country: str = ""
    lat: float = 0.0
    lng: float = 0.0

    def merged(self, values: Mapping[str, Any]) -> Address:
        # every address part is a plain string or number; null leaves it as is
        return replace(self, **{key: value for key, value in values.items() if value is not None})


@dataclass(eq=False, kw_only=True)
class Entity:
    """Identity exists as soon as the store hands out an id."""

    RECORD_KIND: ClassVar[RecordKind]
    ID_PREFIX: ClassVar[str]

    id: str
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def record_kind(self) -> RecordKind:
        return self.RECORD_KIND

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls)) - _PROTECTED_FIELDS

    @classmethod
    def nullable_field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls) if f.default is None)

    def apply(self, values: Mapping[str, Any], *, at: datetime | None = None) -> None:
        """Apply a partial field map in place.

        Nested ``Address`` values accept a mapping and are merged field-wise.
        An explicit ``None`` only clears fields whose default is ``None``; on any
        other field it is ignored.
        """

        allowed = self.field_names()
        unknown = sorted(set(values) - allowed)
        if unknown:
            raise AttributeError(
                f"{type(self).__name__} has no updatable field(s): {', '.join(unknown)}"
            )
        nullable = self.nullable_field_names()
        for name, value in values.items():
            if value is None and name not in nullable:
                continue
            current = getattr(self, name)
            if isinstance(current, Address) and isinstance(value, Mapping):
                value = current.merged(value)
            setattr(self, name, value)
        self.updated_at = at or utc_now()


@dataclass(eq=False, kw_only=True)
class ClientProfile(Entity):
    RECORD_KIND: ClassVar[RecordKind] = RecordKind.CLIENT
    ID_PREFIX: ClassVar[str] = "client"

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    ssn: str = ""
    dob: str = ""
    citizenship: str = ""
    marital_status: str = ""
    has_military_service: bool = False
    military_note: str | None = None
    general_notes: str = ""

    @property
    def display_name(self) -> str:
        first = self.first_name.strip()
        last = self.last_name.strip()
        if first and last:
            return f"{first} {last}"
        return first or last or "Client"

    @property
    def has_complete_name(self) -> bool:
        return bool(self.first_name.strip() and self.last_name.strip())


@dataclass(eq=False, kw_only=True)
class ClientRecord(Entity):
    """Record owned by exactly one client."""

    client_id: str


@dataclass(eq=False, kw_only=True)
class AddressPeriod(ClientRecord):
    RECORD_KIND: ClassVar[RecordKind] = RecordKind.ADDRESS
    ID_PREFIX: ClassVar[str] = "addr"
    PRESENT_ID: ClassVar[str] = "present"

    from_date: str = ""
    to_date: str = ""
    addr: Address = field(default_factory=Address)
    is_present: bool = False


@dataclass(eq=False, kw_only=True)
class EmploymentRecord(ClientRecord):
    RECORD_KIND: ClassVar[RecordKind] = RecordKind.EMPLOYMENT
    ID_PREFIX: ClassVar[str] = "emp"

    employer_name: str = ""
    phone_number: str = ""
    employer_address: Address = field(default_factory=Address)
    job_title: str = ""
    income_type: str = ""
    self_employed: bool = False
    ownership_percentage: bool = False
    related_party: bool = False
    currently_employed: bool = False
    start_date: str = ""
    end_date: str | None = None
    has_offer_letter: bool = False
    gross_monthly_income: float | None = None


@dataclass(eq=False, kw_only=True)
class ActiveIncomeRecord(ClientRecord):
    RECORD_KIND: ClassVar[RecordKind] = RecordKind.ACTIVE_INCOME
    ID_PREFIX: ClassVar[str] = "active-income"

    employment_record_id: str | None = None
    company_name: str = ""
    position: str = ""
    monthly_amount: float = 0.0
    bonus: float | None = None
    commissions: float | None = None
    overtime: float | None = None
    notes: str | None = None


@dataclass(eq=False, kw_only=True)
class PassiveIncomeRecord(ClientRecord):
    RECORD_KIND: ClassVar[RecordKind] = RecordKind.PASSIVE_INCOME
    ID_PREFIX: ClassVar[str] = "passive-income"

    source_type: str = "social_security"
    source_name: str = ""
    monthly_amount: float = 0.0
    notes: str | None = None


@dataclass(eq=False, kw_only=True)
class AssetRecord(ClientRecord):
    RECORD_KIND: ClassVar[RecordKind] = RecordKind.ASSET
    ID_PREFIX: ClassVar[str] = "asset"

    category: AssetCategory | None = None
    type: str = ""
    amount: float = 0.0
    institution_name: str | None = None
    account_number: str | None = None
    source: str | None = None
    shared_client_ids: list[str] = field(default_factory=list[str])


@dataclass(eq=False, kw_only=True)
class RealEstateRecord(ClientRecord):
    RECORD_KIND: ClassVar[RecordKind] = RecordKind.REAL_ESTATE
    ID_PREFIX: ClassVar[str] = "reo"

    address: Address = field(default_factory=Address)
    property_type: str = "Single Family"
    property_status: str = "Retained"
    occupancy_type: str = "Primary Residence"
    monthly_taxes: float = 0.0
    monthly_insurance: float = 0.0
    current_residence: bool = False
    property_value: float = 0.0
