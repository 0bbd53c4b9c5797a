"""Outcome reporting for the GitHub Actions runner.

Failures become an ``::error::`` workflow command and a non-zero exit code,
which blocks the merge when the check is required. Successful runs write
step outputs so later workflow steps can use the linked card ids.
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from trellolink.logging import get_logger
from trellolink.sync import SyncResult

logger = get_logger("reporter")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def escape_workflow_data(value: str) -> str:
    """Escape a message for a workflow command."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def report_failure(message: str) -> int:
    """Mark the step as failed with a message.

    Returns:
        The exit code to use.
    """
    click.echo(f"::error::{escape_workflow_data(message)}")
    return EXIT_FAILURE


def write_outputs(result: SyncResult, output_path: str | Path | None = None) -> None:
    """Append step outputs to the GITHUB_OUTPUT file when one is set."""
    if output_path is None:
        output_path = os.environ.get("GITHUB_OUTPUT") or None
    if output_path is None:
        return

    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"card-ids={','.join(result.card_ids)}\n")
        f.write(f"attachments-created={result.attachments_created}\n")
    logger.debug("Wrote step outputs to %s", output_path)


def report_success(result: SyncResult | None, output_path: str | Path | None = None) -> int:
    """Report a successful run.

    Args:
        result: Sync outcome, or None when the event was skipped.
        output_path: Step output file (defaults to GITHUB_OUTPUT).

    Returns:
        The exit code to use.
    """
    if result is not None:
        write_outputs(result, output_path)
    return EXIT_SUCCESS
