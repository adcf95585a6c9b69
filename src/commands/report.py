# src/commands/report.py — v1
"""Report consumer — map a RunReport to an exit code and a message.

Precedence: processing errors, then formatting violations (check only),
then applied fixes (fix only, informational), then success.
"""

from __future__ import annotations

import logging
from enum import IntEnum

from pydantic import BaseModel, ConfigDict

from cljfmt.batch.models import RunReport
from cljfmt.batch.operations import BatchCommand


class ExitCode(IntEnum):
    """Process exit codes."""

    OK = 0
    USAGE = 1
    VIOLATIONS = 2
    PROCESSING_ERRORS = 3
    UNHANDLED = 4


class Verdict(BaseModel):
    """What the command layer should report and how it should exit."""

    model_config = ConfigDict(frozen=True)

    exit_code: ExitCode
    message: str
    level: int = logging.INFO


def interpret_report(command: BatchCommand, report: RunReport) -> Verdict:
    """Decide the outcome class of a batch run."""
    if report.errors:
        return Verdict(
            exit_code=ExitCode.PROCESSING_ERRORS,
            message=f"Failed to process {len(report.errors)} files",
            level=logging.ERROR,
        )
    if command == "check" and report.count("incorrect"):
        return Verdict(
            exit_code=ExitCode.VIOLATIONS,
            message=f"{report.count('incorrect')} files formatted incorrectly",
            level=logging.ERROR,
        )
    if command == "fix" and report.count("fixed"):
        return Verdict(
            exit_code=ExitCode.OK,
            message=f"Corrected formatting of {report.count('fixed')} files",
            level=logging.WARNING,
        )
    return Verdict(
        exit_code=ExitCode.OK,
        message=f"All {report.count('correct')} files formatted correctly",
        level=logging.DEBUG,
    )
