"""GCP Secret Manager client wrapper."""
import logging
from typing import List, Optional
from google.api_core import exceptions
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import secretmanager

from .models import Secret

logger = logging.getLogger(__name__)


class RemoteError(Exception):
    """Secret Manager call failed."""
    pass


class RemoteListError(RemoteError):
    """Listing secrets failed."""

    def __init__(self, parent: str, cause: Exception):
        super().__init__(f"Failed to list secrets under {parent}: {cause}")
        self.parent = parent


class RemoteDeleteError(RemoteError):
    """Deleting a secret failed."""

    def __init__(self, name: str, cause: Exception):
        super().__init__(f"Failed to delete {name}: {cause}")
        self.name = name


class GCPSecretClient:
    """Wrapper around GCP Secret Manager client."""

    def __init__(self, client: Optional[secretmanager.SecretManagerServiceClient] = None):
        self._client = client

    @property
    def client(self) -> secretmanager.SecretManagerServiceClient:
        """Lazy-initialize client."""
        if self._client is None:
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    def list_secrets(self, parent: str) -> List[Secret]:
        """
        List every secret under a parent scope.

        The API returns a pager; iterating it fetches the following pages,
        so the returned list holds all secrets, not only the first page.

        Args:
            parent: Parent resource, e.g. ``projects/my-project``

        Returns:
            Secrets in the order the API returned them

        Raises:
            RemoteListError: If authentication or the list call fails
        """
        try:
            pager = self.client.list_secrets(request={"parent": parent})
            secrets = [Secret(name=s.name) for s in pager]
        except (exceptions.GoogleAPIError, DefaultCredentialsError) as e:
            raise RemoteListError(parent, e) from e

        logger.info(f"Found {len(secrets)} secrets under {parent}")
        return secrets

    def delete_secret(self, name: str) -> None:
        """
        Delete a secret and all of its versions.

        Raises:
            RemoteDeleteError: If the delete call fails
        """
        try:
            self.client.delete_secret(request={"name": name})
        except (exceptions.GoogleAPIError, DefaultCredentialsError) as e:
            raise RemoteDeleteError(name, e) from e
        logger.debug(f"Delete call completed for {name}")
