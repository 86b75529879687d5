"""GitHub contents API source.

Walks ``root -> category directories -> data files`` one level deep, the way
the ccf-deadlines repository is laid out, and fetches file bodies through
their ``download_url``.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from deadlines.models.domain import SourceFile
from deadlines.settings import Settings, get_settings

from .base import BaseSource, PermanentError, TransientError


class GitHubSource(BaseSource):
    name = "github"

    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None) -> None:
        self._cfg = settings or get_settings()
        super().__init__(self._cfg.file_extension)
        self._client = client
        self._owns_client = client is None
        self._semaphore = asyncio.Semaphore(self._cfg.fetch_concurrency)
        self._api_host = httpx.URL(self._cfg.github_api_base).host

    def _headers(self, url: str) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        # token is scoped to the API host
        if self._cfg.github_token and httpx.URL(url).host == self._api_host:
            headers["Authorization"] = f"Bearer {self._cfg.github_token.get_secret_value()}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=float(self._cfg.http_timeout_seconds),
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        attempts = 0
        max_attempts = int(self._cfg.http_max_attempts)
        while True:
            attempts += 1
            try:
                async with self._semaphore:
                    return await self._get_once(url, params)
            except TransientError as exc:
                if attempts >= max_attempts:
                    raise
                delay = float(self._cfg.http_retry_backoff_seconds) * (2 ** (attempts - 1))
                self._logger.info(
                    "source.retry",
                    extra={"url": url, "attempt": attempts, "delay": delay, "error": str(exc)},
                )
                await asyncio.sleep(delay)

    async def _get_once(self, url: str, params: Optional[Dict[str, str]]) -> httpx.Response:
        try:
            resp = await self._get_client().get(url, params=params, headers=self._headers(url))
        except httpx.TimeoutException as exc:
            raise TransientError(f"timeout: {url}") from exc
        except httpx.HTTPError as exc:
            raise TransientError(f"request failed: {url}: {exc}") from exc

        if resp.status_code == 429 or resp.status_code >= 500:
            raise TransientError(f"GitHub temporary error {resp.status_code}: {url}")
        if resp.status_code == 403 and resp.headers.get("x-ratelimit-remaining") == "0":
            raise TransientError(f"GitHub rate limit exhausted: {url}")
        if resp.status_code >= 400:
            raise PermanentError(f"GitHub error {resp.status_code}: {url}")
        return resp

    async def _list_dir(self, url: str, params: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
        resp = await self._get(url, params)
        try:
            entries = resp.json()
        except ValueError as exc:
            raise PermanentError(f"listing is not JSON: {url}") from exc
        if not isinstance(entries, list):
            raise PermanentError(f"listing is not a directory: {url}")
        return [e for e in entries if isinstance(e, dict)]

    async def list_files(self) -> List[SourceFile]:
        params = {"ref": self._cfg.github_ref} if self._cfg.github_ref else None
        root = await self._list_dir(self._cfg.contents_url, params)
        categories = [e for e in root if e.get("type") == "dir" and e.get("url")]

        listings = await asyncio.gather(
            *(self._list_category(entry) for entry in categories),
            return_exceptions=True,
        )

        files: List[SourceFile] = []
        for entry, listing in zip(categories, listings):
            if isinstance(listing, BaseException):
                if not isinstance(listing, Exception):
                    raise listing
                self._skip(str(entry.get("name")), listing)
                continue
            files.extend(listing)
        return files

    async def _list_category(self, entry: Dict[str, Any]) -> List[SourceFile]:
        category = str(entry.get("name") or entry.get("path"))
        files: List[SourceFile] = []
        for item in await self._list_dir(str(entry["url"])):
            name = str(item.get("name") or "")
            download_url = item.get("download_url")
            if item.get("type") != "file" or not self.matches(name) or not download_url:
                continue
            files.append(SourceFile(category=category, name=name, location=str(download_url)))
        return files

    async def read(self, file: SourceFile) -> str:
        resp = await self._get(file.location)
        return resp.text
