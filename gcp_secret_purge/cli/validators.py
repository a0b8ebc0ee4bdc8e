"""Input validation for the skip list."""
import re
import logging
from typing import List, Sequence

logger = logging.getLogger(__name__)

# GCP secret name format: alphanumeric, underscores, hyphens only
SECRET_NAME_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')


def is_valid_secret_name(name: str) -> bool:
    """Check a short name against GCP Secret Manager naming rules."""
    return bool(name) and SECRET_NAME_PATTERN.match(name) is not None


def validate_skip_list(skip_list: Sequence[str], skip_file: str) -> List[str]:
    """
    Warn about skip entries that can never match a secret.

    GCP Secret Manager allows only: [a-zA-Z0-9_-]. An entry like
    ``projects/p/secrets/api-key`` or ``api.key`` will not protect anything,
    so it is better to say so before the user confirms a deletion.

    Args:
        skip_list: Entries as loaded from the skip file
        skip_file: Path of the skip file, for the message

    Returns:
        The invalid entries, in file order
    """
    invalid = [name for name in skip_list if not is_valid_secret_name(name)]
    for name in invalid:
        logger.warning(
            f"Warning: skip entry '{name}' in {skip_file} is not a valid secret name "
            f"and will not match anything (allowed: letters, numbers, _ and -)"
        )
    return invalid
