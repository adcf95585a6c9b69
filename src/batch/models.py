# src/batch/models.py — v1
"""Batch processing models: Outcome, WorkItem, RunError, RunReport."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cljfmt.config.loader import FormatConfig

OutcomeKind = Literal["correct", "incorrect", "fixed"]


class Outcome(BaseModel):
    """Result of running an operation on one file."""

    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    debug_message: str | None = None
    info: str | None = None


class WorkItem(BaseModel):
    """One file to process, with the config of the root it was found under."""

    model_config = ConfigDict(frozen=True)

    config: FormatConfig
    path: str
    file: Path


class RunError(BaseModel):
    """A file whose processing raised instead of producing an Outcome."""

    model_config = ConfigDict(frozen=True)

    path: str
    error_type: str
    message: str

    @classmethod
    def from_exception(cls, path: str, exc: BaseException) -> RunError:
        return cls(path=path, error_type=type(exc).__name__, message=str(exc))

    def describe(self) -> str:
        return f"{self.path}: {self.error_type}: {self.message}"


class FileMessage(BaseModel):
    """An Outcome's info payload, kept for the command layer to print."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: OutcomeKind
    info: str


class RunReport(BaseModel):
    """Summary of one batch run.

    Every processed work item is accounted for exactly once, either in
    ``counts`` (by outcome kind) or in ``errors``.
    """

    model_config = ConfigDict(frozen=True)

    counts: dict[OutcomeKind, int] = Field(default_factory=dict)
    errors: list[RunError] = Field(default_factory=list)
    messages: list[FileMessage] = Field(default_factory=list)
    elapsed_ms: float = 0.0
    total: int = 0

    @model_validator(mode="after")
    def validate_totals(self) -> RunReport:
        if any(n <= 0 for n in self.counts.values()):
            raise ValueError("counts only hold observed outcome kinds")
        accounted = sum(self.counts.values()) + len(self.errors)
        if accounted != self.total:
            raise ValueError(
                f"report accounts for {accounted} of {self.total} work items"
            )
        return self

    def count(self, kind: OutcomeKind) -> int:
        return self.counts.get(kind, 0)
