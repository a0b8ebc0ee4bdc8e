"""Workflow for partitioning, reporting and deleting secrets."""
import logging
from typing import Callable, Iterable, List, Sequence
from ..domains.models import PartitionResult, Secret
from ..domains.gcp_client import GCPSecretClient

logger = logging.getLogger(__name__)


def partition(secrets: Iterable[Secret], skip_names: Sequence[str]) -> PartitionResult:
    """
    Split secrets into the ones to delete and the ones to keep.

    Args:
        secrets: Secrets as listed from Secret Manager
        skip_names: Short names that must not be deleted (exact match)

    Returns:
        PartitionResult; relative input order is kept in every list.
        Secrets without a parseable short name go to ``unparsed`` and
        are never deleted.
    """
    skips = set(skip_names)
    to_delete: List[Secret] = []
    skipped: List[Secret] = []
    unparsed: List[Secret] = []

    for secret in secrets:
        short_name = secret.short_name
        if short_name is None:
            unparsed.append(secret)
        elif short_name in skips:
            skipped.append(secret)
        else:
            to_delete.append(secret)

    return PartitionResult(to_delete=to_delete, skipped=skipped, unparsed=unparsed)


def format_skipped(skipped: Iterable[Secret]) -> str:
    """Render skipped secrets as ``- <short-name>`` lines."""
    lines = []
    for secret in skipped:
        short_name = secret.short_name
        if short_name:
            lines.append(f"- {short_name}\n")
    return "".join(lines)


def render_summary(result: PartitionResult, total: int, skip_file: str) -> str:
    """Build the report shown before asking for confirmation."""
    summary = (
        f"\nI will be deleting {len(result.to_delete)} secrets out of {total}.\n"
        f"\n"
        f"Here are the ones that I'll skip. You can add skips in the '{skip_file}'.\n"
        f"{format_skipped(result.skipped)}"
    )
    if result.unparsed:
        unparsed = "".join(f"- {s.name}\n" for s in result.unparsed)
        summary += (
            f"\n"
            f"These {len(result.unparsed)} secrets have unexpected names and will be left alone:\n"
            f"{unparsed}"
        )
    return summary


def delete_secrets(
    client: GCPSecretClient,
    secrets: Sequence[Secret],
    dry_run: bool,
    echo: Callable[[str], None] = print,
) -> int:
    """
    Delete secrets one at a time, in order.

    Args:
        client: Secret Manager wrapper
        secrets: Secrets to delete
        dry_run: If True, only report what would be deleted
        echo: Sink for the per-secret console lines

    Returns:
        Number of secrets processed

    Raises:
        RemoteDeleteError: On the first failed delete; the remaining
            secrets are not attempted
    """
    processed = 0
    for secret in secrets:
        if dry_run:
            echo(f"DRY_RUN: {secret.name} deleted.")
        else:
            try:
                client.delete_secret(secret.name)
            except Exception:
                logger.error(f"Stopping after {processed} of {len(secrets)} deletions")
                raise
            echo(f"{secret.name} deleted.")
        processed += 1
    return processed
