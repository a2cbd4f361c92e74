"""Declared parameter shapes per action kind.

Payloads arrive in the oracle's camelCase vocabulary and are validated after
reference resolution. Unknown fields are ignored; updates keep only the fields
the oracle actually sent.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from intake_engine.domain.model.enums import ActionKind, ActionVerb, AssetCategory, RecordKind


class OracleModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_partial(self) -> dict[str, Any]:
        """Snake-cased field map of the values that were actually provided."""

        return self.model_dump(exclude_unset=True)


# --- partial record fields ---------------------------------------------------


class AddressFields(OracleModel):
    address1: str | None = None
    address2: str | None = None
    formatted_address: str | None = None
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country: str | None = None
    lat: float | None = None
    lng: float | None = None


class ClientFields(OracleModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    ssn: str | None = None
    dob: str | None = None
    citizenship: str | None = None
    marital_status: str | None = None
    has_military_service: bool | None = None
    military_note: str | None = None
    general_notes: str | None = None


class AddressPeriodFields(OracleModel):
    from_date: str | None = None
    to_date: str | None = None
    addr: AddressFields | None = None


class EmploymentFields(OracleModel):
    employer_name: str | None = None
    phone_number: str | None = None
    employer_address: AddressFields | None = None
    job_title: str | None = None
    income_type: str | None = None
    self_employed: bool | None = None
    ownership_percentage: bool | None = None
    related_party: bool | None = None
    currently_employed: bool | None = None
    start_date: str | None = None
    end_date: str | None = None
    has_offer_letter: bool | None = None
    gross_monthly_income: float | None = None


class ActiveIncomeFields(OracleModel):
    employment_record_id: str | None = None
    company_name: str | None = None
    position: str | None = None
    monthly_amount: float | None = None
    bonus: float | None = None
    commissions: float | None = None
    overtime: float | None = None
    notes: str | None = None


class PassiveIncomeFields(OracleModel):
    source_type: str | None = None
    source_name: str | None = None
    monthly_amount: float | None = None
    notes: str | None = None


class AssetFields(OracleModel):
    category: AssetCategory | None = None
    type: str | None = None
    amount: float | None = None
    institution_name: str | None = None
    account_number: str | None = None
    source: str | None = None
    shared_client_ids: list[str] | None = None


class RealEstateFields(OracleModel):
    address: AddressFields | None = None
    property_type: str | None = None
    property_status: str | None = None
    occupancy_type: str | None = None
    monthly_taxes: float | None = None
    monthly_insurance: float | None = None
    current_residence: bool | None = None
    property_value: float | None = None


FIELDS_BY_RECORD_KIND: dict[RecordKind, type[OracleModel]] = {
    RecordKind.CLIENT: ClientFields,
    RecordKind.ADDRESS: AddressPeriodFields,
    RecordKind.EMPLOYMENT: EmploymentFields,
    RecordKind.ACTIVE_INCOME: ActiveIncomeFields,
    RecordKind.PASSIVE_INCOME: PassiveIncomeFields,
    RecordKind.ASSET: AssetFields,
    RecordKind.REAL_ESTATE: RealEstateFields,
}


# --- action parameters --------------------------------------------------------


class AddClientParams(OracleModel):
    # initial fields may sit under ``updates`` or at the top level
    model_config = ConfigDict(extra="allow")

    updates: dict[str, Any] | None = None

    def initial_fields(self) -> dict[str, Any]:
        if self.updates is not None:
            return dict(self.updates)
        return dict(self.model_extra or {})


class ClientTargetParams(OracleModel):
    client_id: str = Field(validation_alias=AliasChoices("clientId", "id", "client_id"))


class UpdateClientParams(ClientTargetParams):
    updates: dict[str, Any] = Field(default_factory=dict[str, Any])


class ClientScopedParams(OracleModel):
    client_id: str


class CreateRecordParams(ClientScopedParams):
    updates: dict[str, Any] = Field(default_factory=dict[str, Any])


class AddFormerAddressParams(ClientScopedParams):
    updates: dict[str, Any] = Field(
        default_factory=dict[str, Any],
        validation_alias=AliasChoices("updates", "address"),
    )


class UpdatePresentAddressParams(ClientScopedParams):
    updates: dict[str, Any] = Field(
        default_factory=dict[str, Any],
        validation_alias=AliasChoices("updates", "data"),
    )


class UpdateRecordParams(ClientScopedParams):
    record_id: str
    updates: dict[str, Any] = Field(default_factory=dict[str, Any])


class RemoveRecordParams(ClientScopedParams):
    record_id: str


class SetSharedOwnersParams(ClientScopedParams):
    asset_id: str = Field(validation_alias=AliasChoices("assetId", "recordId", "asset_id"))
    shared_client_ids: list[str] = Field(default_factory=list[str])


_CREATE_PARAMS: dict[ActionKind, type[OracleModel]] = {
    ActionKind.ADD_CLIENT: AddClientParams,
    ActionKind.ADD_FORMER_ADDRESS: AddFormerAddressParams,
}
_SPECIAL_PARAMS: dict[ActionKind, type[OracleModel]] = {
    ActionKind.UPDATE_CLIENT_DATA: UpdateClientParams,
    ActionKind.REMOVE_CLIENT: ClientTargetParams,
    ActionKind.UPDATE_ADDRESS_DATA: UpdatePresentAddressParams,
    ActionKind.SET_SHARED_OWNERS: SetSharedOwnersParams,
}


def params_model_for(kind: ActionKind) -> type[OracleModel]:
    """Parameter shape declared for ``kind``."""

    if kind in _SPECIAL_PARAMS:
        return _SPECIAL_PARAMS[kind]
    if kind in _CREATE_PARAMS:
        return _CREATE_PARAMS[kind]
    if kind.verb is ActionVerb.CREATE:
        return CreateRecordParams
    if kind.verb is ActionVerb.UPDATE:
        return UpdateRecordParams
    return RemoveRecordParams


def parse_fields(record_kind: RecordKind, values: dict[str, Any]) -> dict[str, Any]:
    """Validate a camelCase partial field map into snake-cased record attributes."""

    return FIELDS_BY_RECORD_KIND[record_kind].model_validate(values).to_partial()
