"""
Wati Credentials

Access token plus the API endpoint URL copied from the Wati dashboard.
The dashboard URL carries the tenant ID; the REST API lives on the bare
host, so the tenant segment is stripped before building requests.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field

from config import Config

_TRAILING_SLASHES = re.compile(r"/+$")
_TENANT_SEGMENT = re.compile(r"/\d+$")

CREDENTIAL_TEST_PATH = "/api/ext/v3/contacts"


class CredentialsError(Exception):
    """Wati credentials missing or unusable."""
    pass


def derive_api_base_url(api_url: str) -> str:
    """
    Derive the API base URL from the dashboard endpoint URL.

    https://live-mt-server.wati.io/123456/ -> https://live-mt-server.wati.io
    """
    cleaned = _TRAILING_SLASHES.sub("", api_url.strip())
    return _TENANT_SEGMENT.sub("", cleaned)


class WatiCredentials(BaseModel):
    """Wati API credentials."""

    api_url: str = Field(..., description="Endpoint URL incl. tenant ID")
    access_token: str = Field(..., description="Bearer token from API Docs")

    model_config = {"frozen": True}

    @property
    def base_url(self) -> str:
        return derive_api_base_url(self.api_url)

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    @classmethod
    def from_config(
        cls,
        api_url: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> "WatiCredentials":
        """
        Build credentials from explicit values or the environment.

        Raises:
            CredentialsError: URL or token not configured
        """
        api_url = api_url or Config.WATI_API_URL
        access_token = access_token or Config.WATI_ACCESS_TOKEN

        if not api_url:
            raise CredentialsError("WATI_API_URL not configured")
        if not access_token:
            raise CredentialsError("WATI_ACCESS_TOKEN not configured")

        return cls(api_url=api_url, access_token=access_token)
