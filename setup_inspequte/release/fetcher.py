"""
Release metadata retrieval from the GitHub releases API.

Two read-only calls are made against the inspequte repository:

    GET /repos/KengoTODA/inspequte/releases/tags/{tag}
    GET /repos/KengoTODA/inspequte/releases?per_page=100

Response bodies are parsed into Release models without further validation.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from setup_inspequte.core.exceptions import FetchError
from setup_inspequte.release.constants import (
    ACCEPT_HEADER,
    DEFAULT_API_URL,
    RELEASES_PER_PAGE,
    TOOL_NAME,
    TOOL_REPOSITORY,
    USER_AGENT,
)
from setup_inspequte.release.models import Release

logger = logging.getLogger(__name__)


class ReleaseFetcher:
    """
    Client for the release registry.

    Example:
        >>> fetcher = ReleaseFetcher()
        >>> release = fetcher.get_release_by_tag("inspequte-v0.16.0")
        >>> release.tag_name
        'inspequte-v0.16.0'
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        repository: str = TOOL_REPOSITORY,
        token: Optional[str] = None,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize release fetcher.

        Args:
            api_url: Base URL of the GitHub REST API
            repository: 'owner/name' of the repository publishing releases
            token: Optional API token, sent as a bearer token
            timeout: Request timeout in seconds
            session: requests session to use (a new one by default)
        """
        self.api_url = api_url.rstrip("/")
        self.repository = repository
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": ACCEPT_HEADER, "User-Agent": USER_AGENT}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]],
        describe: str,
        tag: Optional[str],
    ) -> Any:
        """
        GET url and decode its JSON body.

        Raises:
            FetchError: On transport failure, non-2xx status, or invalid JSON
        """
        logger.debug(f"GET {url} {params or ''}")
        try:
            response = self.session.get(
                url, headers=self._headers(), params=params, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch {describe}: {e}", tag=tag) from e

        if not response.ok:
            raise FetchError(
                f"Failed to fetch {describe}: {response.status_code} {response.reason}",
                status_code=response.status_code,
                reason=response.reason,
                tag=tag,
            )

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(
                f"Failed to fetch {describe}: invalid JSON response",
                status_code=response.status_code,
                tag=tag,
            ) from e

    def get_release_by_tag(self, tag_name: str) -> Release:
        """
        Fetch release metadata by exact tag.

        Raises:
            FetchError: If the registry does not answer with a release
        """
        url = (
            f"{self.api_url}/repos/{self.repository}/releases/tags/"
            f"{quote(tag_name, safe='')}"
        )
        data = self._get_json(url, None, f"{TOOL_NAME} release {tag_name}", tag_name)
        return Release.from_dict(data)

    def get_releases(self) -> List[Release]:
        """
        Fetch the most recent releases, newest first.

        Raises:
            FetchError: If the registry does not answer with a release list
        """
        url = f"{self.api_url}/repos/{self.repository}/releases"
        data = self._get_json(
            url, {"per_page": RELEASES_PER_PAGE}, f"{TOOL_NAME} releases", None
        )
        if not isinstance(data, list):
            logger.warning("Release list response is not a list, ignoring it")
            return []
        return [Release.from_dict(item) for item in data]
