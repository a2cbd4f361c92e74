"""Proposed actions: ingestion, placeholder tokens, parameter shapes, field validation."""

from __future__ import annotations

from intake_engine.domain.actions.ingest import parse_batch
from intake_engine.domain.actions.proposed import ProposedAction
from intake_engine.domain.actions.tokens import PlaceholderToken, iter_tokens, render, tokenize
from intake_engine.domain.actions.validation import (
    RejectedAction,
    ValidationOutcome,
    ValidationResult,
    validate_action,
    validate_actions,
)

__all__ = [
    "PlaceholderToken",
    "ProposedAction",
    "RejectedAction",
    "ValidationOutcome",
    "ValidationResult",
    "iter_tokens",
    "parse_batch",
    "render",
    "tokenize",
    "validate_action",
    "validate_actions",
]
