"""Domain models for secret purging."""
from dataclasses import dataclass, field
from typing import List, Optional


def parse_short_name(fully_qualified_name: str) -> Optional[str]:
    """
    Extract the short secret name from a fully-qualified resource name.

    Secret Manager names look like ``projects/<project>/secrets/<name>``.
    The short name is the fourth path segment.

    Args:
        fully_qualified_name: Resource name as returned by the API

    Returns:
        Short name, or None if the name has fewer than four segments
        or the fourth segment is empty
    """
    if not fully_qualified_name:
        return None
    segments = fully_qualified_name.split("/")
    if len(segments) < 4:
        return None
    return segments[3] or None


@dataclass(frozen=True)
class Secret:
    """A secret stored in GCP Secret Manager."""
    name: str  # projects/<project>/secrets/<short-name>

    @property
    def short_name(self) -> Optional[str]:
        return parse_short_name(self.name)


@dataclass(frozen=True)
class PartitionResult:
    """Secrets split into what gets deleted and what is kept."""
    to_delete: List[Secret] = field(default_factory=list)
    skipped: List[Secret] = field(default_factory=list)
    unparsed: List[Secret] = field(default_factory=list)
