"""Batch interpretation: duplicate merging, reference resolution, execution."""

from __future__ import annotations

from intake_engine.domain.batch.describe import FIELD_TAGS, Description, describe_action
from intake_engine.domain.batch.engine import BatchEngine, BatchResult
from intake_engine.domain.batch.execute import ActionOutcome, Clock, ExecutionReport, Executor
from intake_engine.domain.batch.matching import (
    AMOUNT_TOLERANCE,
    MERGE_RULES,
    ClaimKey,
    MatchKey,
    MatchRule,
    find_existing_match,
)
from intake_engine.domain.batch.merge import MergeRecord, MergeResult, merge_duplicate_actions
from intake_engine.domain.batch.resolve import IdRegistry, Resolution, resolve_parameters

__all__ = [  # noqa: RUF022
    # matching
    "AMOUNT_TOLERANCE",
    "MERGE_RULES",
    "ClaimKey",
    "MatchKey",
    "MatchRule",
    "find_existing_match",
    # merge
    "MergeRecord",
    "MergeResult",
    "merge_duplicate_actions",
    # resolve
    "IdRegistry",
    "Resolution",
    "resolve_parameters",
    # execute
    "ActionOutcome",
    "Clock",
    "ExecutionReport",
    "Executor",
    "Description",
    "FIELD_TAGS",
    "describe_action",
    # orchestration
    "BatchEngine",
    "BatchResult",
]
