"""Public domain model surface."""

from __future__ import annotations

from intake_engine.domain.model.enums import (
    ActionKind,
    ActionVerb,
    AssetCategory,
    OutcomeStatus,
    RecordKind,
)
from intake_engine.domain.model.log import UpdateLogEntry
from intake_engine.domain.model.records import (
    ActiveIncomeRecord,
    Address,
    AddressPeriod,
    AssetRecord,
    ClientProfile,
    ClientRecord,
    EmploymentRecord,
    Entity,
    PassiveIncomeRecord,
    RealEstateRecord,
    new_record_id,
    utc_now,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "ClientRecord",
    "new_record_id",
    "utc_now",
    # records
    "Address",
    "AddressPeriod",
    "ActiveIncomeRecord",
    "AssetRecord",
    "ClientProfile",
    "EmploymentRecord",
    "PassiveIncomeRecord",
    "RealEstateRecord",
    # log
    "UpdateLogEntry",
    # enums
    "ActionKind",
    "ActionVerb",
    "AssetCategory",
    "OutcomeStatus",
    "RecordKind",
]
