"""
Blob upload authorizer interface.
Issues short-lived credentials for a direct client upload to blob storage,
so image bytes never pass through the API.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadGrant:
    url: str
    key: str
    content_type: str
    expires_in: int
    method: str = "PUT"


class UploadAuthorizer(ABC):
    """
    Interface for upload authorization backends.

    Implementations:
    - S3UploadAuthorizer: SigV4 presigned PUT URL
    """

    @abstractmethod
    async def authorize(self, key: str, content_type: str) -> UploadGrant:
        """
        Issue a write grant for a single object.

        Args:
            key: Storage key the client may write
            content_type: MIME type the upload must declare

        Returns:
            UploadGrant with the URL, HTTP method and lifetime in seconds
        """
