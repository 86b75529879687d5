from __future__ import annotations

import httpx
import pytest

pytest.importorskip("pytest_httpx")

from deadlines.connectors.base import PermanentError, TransientError
from deadlines.connectors.github import GitHubSource
from deadlines.models.domain import SourceFile
from deadlines.settings import Settings

ROOT_URL = "https://api.github.com/repos/ccfddl/ccf-deadlines/contents/conference"
RAW = "https://raw.githubusercontent.com/ccfddl/ccf-deadlines/main/conference"
AAAI_FILE = SourceFile(category="AI", name="aaai.yml", location=f"{RAW}/AI/aaai.yml")


def _settings(**overrides) -> Settings:
    values = {"http_retry_backoff_seconds": 0, "http_max_attempts": 2}
    values.update(overrides)
    return Settings(**values)


def _dir(name: str) -> dict:
    return {
        "name": name,
        "path": f"conference/{name}",
        "type": "dir",
        "url": f"{ROOT_URL}/{name}?ref=main",
        "download_url": None,
    }


def _file(category: str, name: str) -> dict:
    return {
        "name": name,
        "path": f"conference/{category}/{name}",
        "type": "file",
        "url": f"{ROOT_URL}/{category}/{name}?ref=main",
        "download_url": f"{RAW}/{category}/{name}",
    }


@pytest.mark.asyncio
async def test_traverses_root_categories_and_files(httpx_mock):
    httpx_mock.add_response(url=ROOT_URL, json=[_dir("AI"), {"name": "README.md", "type": "file", "download_url": f"{RAW}/README.md"}])
    httpx_mock.add_response(
        url=f"{ROOT_URL}/AI?ref=main",
        json=[_file("AI", "aaai.yml"), _file("AI", "notes.txt"), {**_file("AI", "nolink.yml"), "download_url": None}],
    )
    httpx_mock.add_response(url=f"{RAW}/AI/aaai.yml", text="- title: AAAI\n")

    source = GitHubSource(_settings())
    try:
        files = await source.list_files()
        assert [(f.category, f.name) for f in files] == [("AI", "aaai.yml")]
        assert await source.read(files[0]) == "- title: AAAI\n"
    finally:
        await source.aclose()

    fetched = [str(r.url) for r in httpx_mock.get_requests()]
    assert not any(url.endswith("notes.txt") for url in fetched)


@pytest.mark.asyncio
async def test_failed_category_is_skipped(httpx_mock):
    httpx_mock.add_response(url=ROOT_URL, json=[_dir("AI"), _dir("NW")])
    httpx_mock.add_response(url=f"{ROOT_URL}/AI?ref=main", status_code=404)
    httpx_mock.add_response(url=f"{ROOT_URL}/NW?ref=main", json=[_file("NW", "sigcomm.yml")])

    source = GitHubSource(_settings())
    try:
        files = await source.list_files()
    finally:
        await source.aclose()

    assert [f.name for f in files] == ["sigcomm.yml"]
    assert "AI" in source.errors


@pytest.mark.asyncio
async def test_root_failure_raises(httpx_mock):
    httpx_mock.add_response(url=ROOT_URL, status_code=404)

    source = GitHubSource(_settings())
    try:
        with pytest.raises(PermanentError):
            await source.list_files()
    finally:
        await source.aclose()


@pytest.mark.asyncio
async def test_root_that_is_not_a_directory_raises(httpx_mock):
    httpx_mock.add_response(url=ROOT_URL, json={"type": "file", "name": "conference"})

    source = GitHubSource(_settings())
    try:
        with pytest.raises(PermanentError):
            await source.list_files()
    finally:
        await source.aclose()


@pytest.mark.asyncio
async def test_transient_errors_are_retried(httpx_mock):
    httpx_mock.add_response(url=f"{RAW}/AI/aaai.yml", status_code=503)
    httpx_mock.add_response(url=f"{RAW}/AI/aaai.yml", text="- title: AAAI\n")

    source = GitHubSource(_settings())
    try:
        assert await source.read(AAAI_FILE) == "- title: AAAI\n"
    finally:
        await source.aclose()

    assert len(httpx_mock.get_requests()) == 2


@pytest.mark.asyncio
async def test_retries_give_up_after_max_attempts(httpx_mock):
    httpx_mock.add_exception(httpx.ReadTimeout("slow"), url=f"{RAW}/AI/aaai.yml")
    httpx_mock.add_exception(httpx.ReadTimeout("slow"), url=f"{RAW}/AI/aaai.yml")

    source = GitHubSource(_settings())
    try:
        with pytest.raises(TransientError):
            await source.read(AAAI_FILE)
    finally:
        await source.aclose()


@pytest.mark.asyncio
async def test_ref_and_token_are_sent(httpx_mock):
    httpx_mock.add_response(url=f"{ROOT_URL}?ref=v2", json=[])

    source = GitHubSource(_settings(github_ref="v2", github_token="ghp_x"))
    try:
        assert await source.list_files() == []
    finally:
        await source.aclose()

    request = httpx_mock.get_requests()[0]
    assert request.headers["Authorization"] == "Bearer ghp_x"


@pytest.mark.asyncio
async def test_token_is_not_sent_to_download_hosts(httpx_mock):
    httpx_mock.add_response(url=ROOT_URL, json=[_dir("AI")])
    httpx_mock.add_response(url=f"{ROOT_URL}/AI?ref=main", json=[_file("AI", "aaai.yml")])
    httpx_mock.add_response(url=f"{RAW}/AI/aaai.yml", text="- title: AAAI\n")

    source = GitHubSource(_settings(github_token="ghp_x"))
    try:
        files = await source.list_files()
        await source.read(files[0])
    finally:
        await source.aclose()

    auth = {str(r.url): r.headers.get("Authorization") for r in httpx_mock.get_requests()}
    assert auth[ROOT_URL] == "Bearer ghp_x"
    assert auth[f"{ROOT_URL}/AI?ref=main"] == "Bearer ghp_x"
    assert auth[f"{RAW}/AI/aaai.yml"] is None
