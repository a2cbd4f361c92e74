"""Field-level sanity checks run on a batch before merging.

Errors reject an action; warnings are logged only.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any

from intake_engine.domain.model.enums import ActionKind, ActionVerb, RecordKind

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable, Mapping

    from intake_engine.domain.actions.proposed import ProposedAction

log = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_SSN = re.compile(r"^\d{3}-\d{2}-\d{4}$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list[str])
    warnings: list[str] = field(default_factory=list[str])

    @property
    def valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True, slots=True)
class RejectedAction:
    """An action removed from the batch because its fields failed validation."""

    action: ProposedAction
    errors: tuple[str, ...]
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    valid: list[ProposedAction]
    rejected: list[RejectedAction]


# --- primitive checks --------------------------------------------------------


def is_valid_phone(value: str) -> bool:
    return len(re.sub(r"\D", "", value)) == 10


def is_valid_email(value: str) -> bool:
    return _EMAIL.match(value) is not None


def is_valid_ssn(value: str) -> bool:
    return _SSN.match(value) is not None


def parse_iso_date(value: str) -> date | None:
    if _ISO_DATE.match(value) is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def is_valid_iso_date(value: str) -> bool:
    return parse_iso_date(value) is not None


def _text(values: Mapping[str, Any], key: str) -> str | None:
    value = values.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _check_format(
    values: Mapping[str, Any],
    key: str,
    check: Callable[[str], bool],
    message: str,
    result: ValidationResult,
) -> None:
    value = _text(values, key)
    if value is not None and not check(value):
        result.errors.append(f"{message}: {value}")


def _check_non_negative(
    values: Mapping[str, Any], key: str, label: str, result: ValidationResult
) -> None:
    value = values.get(key)
    if value is None:
        return
    if isinstance(value, bool):
        result.errors.append(f"{label} must be a number")
        return
    try:
        number = float(value)
    except (TypeError, ValueError):
        result.errors.append(f"{label} must be a number: {value!r}")
        return
    if number < 0:
        result.errors.append(f"{label} cannot be negative")


def _check_date_range(
    values: Mapping[str, Any],
    start_key: str,
    end_key: str,
    labels: tuple[str, str],
    result: ValidationResult,
) -> None:
    valid_dates: list[date | None] = []
    for key, label in zip((start_key, end_key), labels, strict=True):
        text = _text(values, key)
        parsed = parse_iso_date(text) if text is not None else None
        if text is not None and parsed is None:
            result.errors.append(f"Invalid {label} date format: {text}")
        valid_dates.append(parsed)
    start, end = valid_dates
    if start is not None and end is not None and end < start:
        result.errors.append(
            f"{labels[1].capitalize()} date cannot be before {labels[0]} date"
        )


# --- per record kind ----------------------------------------------------------


def _validate_client(action: ProposedAction, values: Mapping[str, Any], result: ValidationResult) -> None:
    _check_format(values, "phone", is_valid_phone, "Invalid phone number format", result)
    _check_format(values, "email", is_valid_email, "Invalid email format", result)
    _check_format(values, "ssn", is_valid_ssn, "Invalid SSN format", result)
    _check_format(values, "dob", is_valid_iso_date, "Invalid date of birth format", result)
    if action.known_kind is ActionKind.ADD_CLIENT and not (
        _text(values, "firstName") or _text(values, "lastName")
    ):
        result.warnings.append("Client should have at least firstName or lastName")


def _validate_employment(
    action: ProposedAction, values: Mapping[str, Any], result: ValidationResult
) -> None:
    _check_date_range(values, "startDate", "endDate", ("start", "end"), result)
    _check_format(
        values, "phoneNumber", is_valid_phone, "Invalid employer phone number format", result
    )
    _check_non_negative(values, "grossMonthlyIncome", "Gross monthly income", result)


def _validate_active_income(
    action: ProposedAction, values: Mapping[str, Any], result: ValidationResult
) -> None:
    for key, label in (
        ("monthlyAmount", "Monthly amount"),
        ("bonus", "Bonus"),
        ("commissions", "Commissions"),
        ("overtime", "Overtime"),
    ):
        _check_non_negative(values, key, label, result)


def _validate_passive_income(
    action: ProposedAction, values: Mapping[str, Any], result: ValidationResult
) -> None:
    _check_non_negative(values, "monthlyAmount", "Monthly amount", result)


def _validate_asset(action: ProposedAction, values: Mapping[str, Any], result: ValidationResult) -> None:
    _check_non_negative(values, "amount", "Asset amount", result)


def _validate_real_estate(
    action: ProposedAction, values: Mapping[str, Any], result: ValidationResult
) -> None:
    for key, label in (
        ("propertyValue", "Property value"),
        ("monthlyTaxes", "Monthly taxes"),
        ("monthlyInsurance", "Monthly insurance"),
    ):
        _check_non_negative(values, key, label, result)


def _validate_address(action: ProposedAction, values: Mapping[str, Any], result: ValidationResult) -> None:
    _check_date_range(values, "fromDate", "toDate", ("from", "to"), result)
    addr = values.get("addr")
    if isinstance(addr, dict):
        address1 = addr.get("address1")  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
        if isinstance(address1, str) and address1 and not address1.strip():
            result.errors.append("Address1 cannot be empty")


_VALIDATORS: dict[
    RecordKind, Callable[[ProposedAction, Mapping[str, Any], ValidationResult], None]
] = {
    RecordKind.CLIENT: _validate_client,
    RecordKind.EMPLOYMENT: _validate_employment,
    RecordKind.ACTIVE_INCOME: _validate_active_income,
    RecordKind.PASSIVE_INCOME: _validate_passive_income,
    RecordKind.ASSET: _validate_asset,
    RecordKind.REAL_ESTATE: _validate_real_estate,
    RecordKind.ADDRESS: _validate_address,
}


def _field_values(action: ProposedAction) -> Mapping[str, Any]:
    kind = action.known_kind
    parameters = action.parameters
    if kind is ActionKind.ADD_CLIENT and not isinstance(parameters.get("updates"), dict):
        return parameters
    if kind is ActionKind.ADD_FORMER_ADDRESS and "updates" not in parameters:
        address = parameters.get("address")
        return address if isinstance(address, dict) else {}  # pyright: ignore[reportUnknownVariableType]
    if kind is ActionKind.UPDATE_ADDRESS_DATA and "updates" not in parameters:
        data = parameters.get("data")
        return data if isinstance(data, dict) else {}  # pyright: ignore[reportUnknownVariableType]
    return action.updates


def validate_action(action: ProposedAction, *, known_client_ids: Collection[str]) -> ValidationResult:
    result = ValidationResult()
    kind = action.known_kind
    if kind is not None and kind.verb is not ActionVerb.REMOVE:
        validator = _VALIDATORS.get(kind.record_kind)
        if validator is not None:
            validator(action, _field_values(action), result)

    client_id = action.client_id
    if isinstance(client_id, str) and client_id not in known_client_ids:
        result.warnings.append(f"Client ID {client_id} does not exist in current state")
    return result


def validate_actions(
    actions: Iterable[ProposedAction], *, known_client_ids: Collection[str]
) -> ValidationOutcome:
    """Split a batch into actions that pass field validation and rejected ones."""

    valid: list[ProposedAction] = []
    rejected: list[RejectedAction] = []
    for action in actions:
        result = validate_action(action, known_client_ids=known_client_ids)
        if result.valid:
            valid.append(action)
            if result.warnings:
                log.warning("Warnings for action %s: %s", action.kind, "; ".join(result.warnings))
            continue
        log.error("Rejected action %s: %s", action.kind, "; ".join(result.errors))
        rejected.append(
            RejectedAction(
                action=action,
                errors=tuple(result.errors),
                warnings=tuple(result.warnings),
            )
        )
    return ValidationOutcome(valid=valid, rejected=rejected)
