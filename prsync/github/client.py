# prsync GitHub Client
# Async GitHub REST API client built on httpx

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from prsync import __version__
from prsync.config.schema import DEFAULT_API_URL
from prsync.github.errors import GitHubError, NotFoundError, UnexpectedPayloadError
from prsync.github.models import PullRequest, RemoteFile
from prsync.utils.encoding import decode_content, encode_content

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"


def _segment(value: str) -> str:
    return quote(value, safe="")


def _path(value: str) -> str:
    return quote(value, safe="/")


class GitHubClient:
    """
    Repository host backed by the GitHub REST API.

    Use as an async context manager, or call aclose() when done:

        async with GitHubClient(token) as client:
            sha = await client.get_ref("acme", "widgets", "main")
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            token: GitHub token with contents and pull request write access.
            base_url: REST API base URL (GitHub Enterprise uses a different one).
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": f"prsync/{__version__}",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body."""
        logger.debug("%s %s", method, url)
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubError(f"{method} {url} failed: {e}", method=method, url=url) from e

        if response.status_code == 404:
            raise NotFoundError(f"{method} {url}: Not Found", method=method, url=url)
        if response.status_code >= 400:
            raise GitHubError(
                f"{method} {url} returned {response.status_code}: {_error_message(response)}",
                status=response.status_code,
                method=method,
                url=url,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise UnexpectedPayloadError(
                f"{method} {url} returned invalid JSON", status=response.status_code, method=method, url=url
            ) from e

    async def get_file(self, owner: str, repo: str, path: str, ref: Optional[str] = None) -> RemoteFile:
        url = f"/repos/{_segment(owner)}/{_segment(repo)}/contents/{_path(path)}"
        params = {"ref": ref} if ref else None
        data = await self._request("GET", url, params=params)

        if isinstance(data, list):
            raise UnexpectedPayloadError(f"{path} is a directory, not a file", status=200, method="GET", url=url)
        if not isinstance(data, dict) or data.get("type", "file") != "file" or "content" not in data:
            kind = data.get("type", "unknown") if isinstance(data, dict) else type(data).__name__
            raise UnexpectedPayloadError(f"{path} is a {kind}, not a file", status=200, method="GET", url=url)

        # Files over 1 MB come back with encoding "none" and empty content
        encoding = data.get("encoding", "base64")
        if encoding != "base64":
            raise UnexpectedPayloadError(
                f"{path} content not returned inline (encoding {encoding!r}, size {data.get('size', 'unknown')})",
                status=200,
                method="GET",
                url=url,
            )
        if not data.get("sha"):
            raise UnexpectedPayloadError(f"{path} has no blob SHA", status=200, method="GET", url=url)

        try:
            content = decode_content(data["content"])
        except ValueError as e:
            raise UnexpectedPayloadError(f"{path}: {e}", status=200, method="GET", url=url) from e

        return RemoteFile(path=data.get("path", path), sha=data["sha"], content=content)

    async def get_ref(self, owner: str, repo: str, branch: str) -> str:
        url = f"/repos/{_segment(owner)}/{_segment(repo)}/git/ref/heads/{_path(branch)}"
        data = await self._request("GET", url)
        try:
            return data["object"]["sha"]
        except (KeyError, TypeError) as e:
            raise UnexpectedPayloadError(f"Ref heads/{branch} has no commit SHA", method="GET", url=url) from e

    async def create_ref(self, owner: str, repo: str, branch: str, sha: str) -> None:
        url = f"/repos/{_segment(owner)}/{_segment(repo)}/git/refs"
        await self._request("POST", url, json={"ref": f"refs/heads/{branch}", "sha": sha})

    async def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        *,
        message: str,
        content: bytes,
        branch: str,
        sha: Optional[str] = None,
    ) -> str:
        url = f"/repos/{_segment(owner)}/{_segment(repo)}/contents/{_path(path)}"
        payload: dict[str, Any] = {
            "message": message,
            "content": encode_content(content),
            "branch": branch,
        }
        if sha is not None:
            payload["sha"] = sha

        data = await self._request("PUT", url, json=payload)
        commit = (data or {}).get("commit") or {}
        return commit.get("sha", "")

    async def list_pulls(self, owner: str, repo: str, *, head: str, base: str, state: str = "open") -> list[PullRequest]:
        url = f"/repos/{_segment(owner)}/{_segment(repo)}/pulls"
        data = await self._request("GET", url, params={"head": head, "base": base, "state": state})
        if not isinstance(data, list):
            raise UnexpectedPayloadError("Pull request listing is not a list", method="GET", url=url)
        return [_pull_from_json(item, method="GET", url=url) for item in data]

    async def create_pull(self, owner: str, repo: str, *, title: str, head: str, base: str, body: str) -> PullRequest:
        url = f"/repos/{_segment(owner)}/{_segment(repo)}/pulls"
        data = await self._request("POST", url, json={"title": title, "head": head, "base": base, "body": body})
        if not isinstance(data, dict):
            raise UnexpectedPayloadError("Pull request response is not an object", method="POST", url=url)
        return _pull_from_json(data, method="POST", url=url)


def _pull_from_json(data: Any, *, method: str, url: str) -> PullRequest:
    try:
        number = data["number"]
    except (KeyError, TypeError) as e:
        raise UnexpectedPayloadError("Pull request has no number", method=method, url=url) from e
    return PullRequest(
        number=number,
        html_url=data.get("html_url", ""),
        head=(data.get("head") or {}).get("ref", ""),
        base=(data.get("base") or {}).get("ref", ""),
    )


def _error_message(response: httpx.Response) -> str:
    """Extract the API's error message, falling back to the reason phrase."""
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or response.text
    if isinstance(data, dict):
        message = data.get("message") or response.reason_phrase
        details = [e.get("message") for e in data.get("errors", []) if isinstance(e, dict) and e.get("message")]
        if details:
            message = f"{message} ({'; '.join(details)})"
        return message
    return response.reason_phrase
