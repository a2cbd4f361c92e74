"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class RecordKind(StrEnum):
    """Entity collections owned by the domain store."""

    CLIENT = "client"
    ADDRESS = "address"
    EMPLOYMENT = "employment"
    ACTIVE_INCOME = "active_income"
    PASSIVE_INCOME = "passive_income"
    ASSET = "asset"
    REAL_ESTATE = "real_estate"


class ActionVerb(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    REMOVE = "remove"


class ActionKind(StrEnum):
    """Action vocabulary emitted by the oracle."""

    ADD_CLIENT = "addClient"
    UPDATE_CLIENT_DATA = "updateClientData"
    REMOVE_CLIENT = "removeClient"

    UPDATE_ADDRESS_DATA = "updateAddressData"
    ADD_FORMER_ADDRESS = "addFormerAddress"
    UPDATE_FORMER_ADDRESS = "updateFormerAddress"
    REMOVE_FORMER_ADDRESS = "removeFormerAddress"

    ADD_EMPLOYMENT_RECORD = "addEmploymentRecord"
    UPDATE_EMPLOYMENT_RECORD = "updateEmploymentRecord"
    REMOVE_EMPLOYMENT_RECORD = "removeEmploymentRecord"

    ADD_ACTIVE_INCOME = "addActiveIncome"
    UPDATE_ACTIVE_INCOME = "updateActiveIncome"
    REMOVE_ACTIVE_INCOME = "removeActiveIncome"

    ADD_PASSIVE_INCOME = "addPassiveIncome"
    UPDATE_PASSIVE_INCOME = "updatePassiveIncome"
    REMOVE_PASSIVE_INCOME = "removePassiveIncome"

    ADD_ASSET = "addAsset"
    UPDATE_ASSET = "updateAsset"
    REMOVE_ASSET = "removeAsset"
    SET_SHARED_OWNERS = "setSharedOwners"

    ADD_REAL_ESTATE_RECORD = "addRealEstateRecord"
    UPDATE_REAL_ESTATE_RECORD = "updateRealEstateRecord"
    REMOVE_REAL_ESTATE_RECORD = "removeRealEstateRecord"

    @property
    def verb(self) -> ActionVerb:
        return _ACTION_SHAPES[self][0]

    @property
    def record_kind(self) -> RecordKind:
        return _ACTION_SHAPES[self][1]

    @classmethod
    def lookup(cls, value: str) -> ActionKind | None:
        try:
            return cls(value)
        except ValueError:
            return None


_ACTION_SHAPES: dict[ActionKind, tuple[ActionVerb, RecordKind]] = {
    ActionKind.ADD_CLIENT: (ActionVerb.CREATE, RecordKind.CLIENT),
    ActionKind.UPDATE_CLIENT_DATA: (ActionVerb.UPDATE, RecordKind.CLIENT),
    ActionKind.REMOVE_CLIENT: (ActionVerb.REMOVE, RecordKind.CLIENT),
    ActionKind.UPDATE_ADDRESS_DATA: (ActionVerb.UPDATE, RecordKind.ADDRESS),
    ActionKind.ADD_FORMER_ADDRESS: (ActionVerb.CREATE, RecordKind.ADDRESS),
    ActionKind.UPDATE_FORMER_ADDRESS: (ActionVerb.UPDATE, RecordKind.ADDRESS),
    ActionKind.REMOVE_FORMER_ADDRESS: (ActionVerb.REMOVE, RecordKind.ADDRESS),
    ActionKind.ADD_EMPLOYMENT_RECORD: (ActionVerb.CREATE, RecordKind.EMPLOYMENT),
    ActionKind.UPDATE_EMPLOYMENT_RECORD: (ActionVerb.UPDATE, RecordKind.EMPLOYMENT),
    ActionKind.REMOVE_EMPLOYMENT_RECORD: (ActionVerb.REMOVE, RecordKind.EMPLOYMENT),
    ActionKind.ADD_ACTIVE_INCOME: (ActionVerb.CREATE, RecordKind.ACTIVE_INCOME),
    ActionKind.UPDATE_ACTIVE_INCOME: (ActionVerb.UPDATE, RecordKind.ACTIVE_INCOME),
    ActionKind.REMOVE_ACTIVE_INCOME: (ActionVerb.REMOVE, RecordKind.ACTIVE_INCOME),
    ActionKind.ADD_PASSIVE_INCOME: (ActionVerb.CREATE, RecordKind.PASSIVE_INCOME),
    ActionKind.UPDATE_PASSIVE_INCOME: (ActionVerb.UPDATE, RecordKind.PASSIVE_INCOME),
    ActionKind.REMOVE_PASSIVE_INCOME: (ActionVerb.REMOVE, RecordKind.PASSIVE_INCOME),
    ActionKind.ADD_ASSET: (ActionVerb.CREATE, RecordKind.ASSET),
    ActionKind.UPDATE_ASSET: (ActionVerb.UPDATE, RecordKind.ASSET),
    ActionKind.REMOVE_ASSET: (ActionVerb.REMOVE, RecordKind.ASSET),
    ActionKind.SET_SHARED_OWNERS: (ActionVerb.UPDATE, RecordKind.ASSET),
    ActionKind.ADD_REAL_ESTATE_RECORD: (ActionVerb.CREATE, RecordKind.REAL_ESTATE),
    ActionKind.UPDATE_REAL_ESTATE_RECORD: (ActionVerb.UPDATE, RecordKind.REAL_ESTATE),
    ActionKind.REMOVE_REAL_ESTATE_RECORD: (ActionVerb.REMOVE, RecordKind.REAL_ESTATE),
}


class AssetCategory(StrEnum):
    BANK_ACCOUNT = "BankAccount"
    STOCKS_AND_BONDS = "StocksAndBonds"
    LIFE_INSURANCE = "LifeInsurance"
    RETIREMENT_FUND = "RetirementFund"
    GIFT = "Gift"
    OTHER = "Other"


class OutcomeStatus(StrEnum):
    """Per-action execution result."""

    APPLIED = "applied"
    NOOP = "noop"
    FAILED = "failed"
