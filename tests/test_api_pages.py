"""Tests for wiki page endpoints."""

from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest
from aiohttp import FormData
from aiohttp.test_utils import TestClient
from wikistage.config import Config
from wikistage.core.page import PageStore
from wikistage.server import create_app


@pytest.fixture
def client(test_config: Config, aiohttp_client: Any) -> Any:
    """Create test client with configured app."""
    app = create_app(test_config)
    return aiohttp_client(app)


class TestFrontPage:
    """Tests for GET /."""

    @pytest.mark.asyncio
    async def test__root__redirects_to_front_page(self, client: Any) -> None:
        test_client: TestClient = await client
        response = await test_client.get("/", allow_redirects=False)

        assert response.status == 302
        assert response.headers["Location"] == "/view/FrontPage"

    @pytest.mark.asyncio
    async def test__configured_front_page__is_redirect_target(
        self, test_config: Config, aiohttp_client: Any
    ) -> None:
        config = replace(test_config, wiki=replace(test_config.wiki, front_page="Home"))
        test_client = await aiohttp_client(create_app(config))

        response = await test_client.get("/", allow_redirects=False)

        assert response.status == 302
        assert response.headers["Location"] == "/view/Home"


class TestViewPage:
    """Tests for GET /view/{title}."""

    @pytest.mark.asyncio
    async def test__existing_page__renders_body(self, data_dir: Path, client: Any) -> None:
        (data_dir / "Guide.txt").write_text("This is a guide.")

        test_client = await client
        response = await test_client.get("/view/Guide")

        assert response.status == 200
        assert "text/html" in response.headers["Content-Type"]
        text = await response.text()
        assert "<h1>Guide</h1>" in text
        assert "This is a guide." in text
        assert 'href="/edit/Guide"' in text

    @pytest.mark.asyncio
    async def test__missing_page__redirects_to_edit(self, client: Any) -> None:
        """A missing page is treated as a page waiting to be created."""
        test_client = await client
        response = await test_client.get("/view/NoSuchPage", allow_redirects=False)

        assert response.status == 302
        assert response.headers["Location"] == "/edit/NoSuchPage"

    @pytest.mark.asyncio
    async def test__head_missing_page__redirects_to_edit(self, client: Any) -> None:
        """HEAD is accepted wherever GET is."""
        test_client = await client
        response = await test_client.head("/view/NoSuchPage", allow_redirects=False)

        assert response.status == 302
        assert response.headers["Location"] == "/edit/NoSuchPage"

    @pytest.mark.asyncio
    async def test__head_existing_page__returns_200(self, data_dir: Path, client: Any) -> None:
        (data_dir / "Guide.txt").write_text("Content")

        test_client = await client
        response = await test_client.head("/view/Guide")

        assert response.status == 200

    @pytest.mark.asyncio
    async def test__post__is_not_allowed(self, data_dir: Path, client: Any) -> None:
        """A valid path with an unsupported method is 405, not 404."""
        test_client = await client
        response = await test_client.post("/view/Test", data={"body": "x"})

        assert response.status == 405
        assert not (data_dir / "Test.txt").exists()


class TestEditPage:
    """Tests for GET /edit/{title}."""

    @pytest.mark.asyncio
    async def test__missing_page__renders_empty_form(self, client: Any) -> None:
        test_client = await client
        response = await test_client.get("/edit/NoSuchPage")

        assert response.status == 200
        text = await response.text()
        assert "Editing NoSuchPage" in text
        assert 'action="/save/NoSuchPage"' in text
        assert '<textarea name="body" rows="20" cols="80"></textarea>' in text

    @pytest.mark.asyncio
    async def test__existing_page__prefills_form(self, data_dir: Path, client: Any) -> None:
        (data_dir / "Guide.txt").write_text("Old <b>content</b>")

        test_client = await client
        response = await test_client.get("/edit/Guide")

        assert response.status == 200
        text = await response.text()
        assert ">Old &lt;b&gt;content&lt;/b&gt;</textarea>" in text

    @pytest.mark.asyncio
    async def test__missing_page__is_not_created(self, data_dir: Path, client: Any) -> None:
        """Opening the editor doesn't write anything."""
        test_client = await client
        await test_client.get("/edit/Draft")

        assert not (data_dir / "Draft.txt").exists()


class TestSavePage:
    """Tests for POST /save/{title}."""

    @pytest.mark.asyncio
    async def test__save__writes_file_and_redirects_to_view(
        self, data_dir: Path, client: Any
    ) -> None:
        test_client = await client
        response = await test_client.post(
            "/save/Test", data={"body": "hello"}, allow_redirects=False
        )

        assert response.status == 302
        assert response.headers["Location"] == "/view/Test"
        assert (data_dir / "Test.txt").read_bytes() == b"hello"

    @pytest.mark.asyncio
    async def test__save_twice__view_shows_latest_body(self, client: Any) -> None:
        """A second save overwrites instead of appending."""
        test_client = await client

        await test_client.post("/save/Test", data={"body": "hello"}, allow_redirects=False)
        first = await (await test_client.get("/view/Test")).text()
        await test_client.post("/save/Test", data={"body": "world"}, allow_redirects=False)
        second = await (await test_client.get("/view/Test")).text()

        assert "hello" in first
        assert "world" in second
        assert "hello" not in second

    @pytest.mark.asyncio
    async def test__save__follows_redirect_to_rendered_page(self, client: Any) -> None:
        test_client = await client
        response = await test_client.post("/save/Notes", data={"body": "Remember ✓"})

        assert response.status == 200
        assert response.url.path == "/view/Notes"
        assert "Remember ✓" in await response.text()

    @pytest.mark.asyncio
    async def test__non_utf8_body__stored_as_submitted_bytes(
        self, data_dir: Path, client: Any
    ) -> None:
        """Percent-escaped bytes are written unchanged, whatever their encoding."""
        test_client = await client
        response = await test_client.post(
            "/save/Bin",
            data=b"body=%FF%FEok&other=1",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            allow_redirects=False,
        )

        assert response.status == 302
        assert (data_dir / "Bin.txt").read_bytes() == b"\xff\xfeok"

    @pytest.mark.asyncio
    async def test__plus_and_escapes__decoded_like_a_form(
        self, data_dir: Path, client: Any
    ) -> None:
        test_client = await client
        await test_client.post(
            "/save/Spaces",
            data=b"body=two+words%0D%0Aline",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            allow_redirects=False,
        )

        assert (data_dir / "Spaces.txt").read_bytes() == b"two words\r\nline"

    @pytest.mark.asyncio
    async def test__multipart_form__saves_text_body(
        self, data_dir: Path, client: Any
    ) -> None:
        form = FormData()
        form.add_field("body", "from multipart ✓")
        form.add_field("attachment", b"ignored", filename="a.txt")

        test_client = await client
        response = await test_client.post("/save/Multi", data=form, allow_redirects=False)

        assert response.status == 302
        assert (data_dir / "Multi.txt").read_bytes() == "from multipart ✓".encode()

    @pytest.mark.asyncio
    async def test__missing_body_field__saves_empty_page(
        self, data_dir: Path, client: Any
    ) -> None:
        test_client = await client
        response = await test_client.post("/save/Empty", data={}, allow_redirects=False)

        assert response.status == 302
        assert (data_dir / "Empty.txt").read_bytes() == b""

    @pytest.mark.asyncio
    async def test__write_failure__returns_500_with_error(
        self, data_dir: Path, client: Any
    ) -> None:
        """I/O errors during save are reported, not retried."""
        data_dir.rmdir()

        test_client = await client
        response = await test_client.post(
            "/save/Test", data={"body": "hello"}, allow_redirects=False
        )

        assert response.status == 500
        text = await response.text()
        assert "Test.txt" in text

    @pytest.mark.asyncio
    async def test__get__is_not_allowed(self, data_dir: Path, client: Any) -> None:
        test_client = await client
        response = await test_client.get("/save/Test")

        assert response.status == 405
        assert not (data_dir / "Test.txt").exists()


class TestPathValidation:
    """Tests for path validation on page routes."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE"])
    @pytest.mark.parametrize(
        "path",
        [
            "/view/",
            "/view/Front-Page",
            "/edit/Front_Page",
            "/save/Front.Page",
            "/view/FrontPage/extra",
            "/delete/FrontPage",
            "/static/app.js",
        ],
    )
    async def test__invalid_path__returns_404(
        self, client: Any, method: str, path: str
    ) -> None:
        test_client = await client
        response = await test_client.request(method, path, allow_redirects=False)

        assert response.status == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        [
            "/view/../../etc/passwd",
            "/view/..%2F..%2Fetc%2Fpasswd",
            "/edit/..%2Fsecret",
        ],
    )
    async def test__path_traversal__never_reaches_store(
        self, client: Any, monkeypatch: pytest.MonkeyPatch, path: str
    ) -> None:
        """Traversal attempts are rejected before any file access."""
        calls: list[str] = []
        monkeypatch.setattr(PageStore, "load", lambda self, title: calls.append(title))

        test_client = await client
        response = await test_client.get(path, allow_redirects=False)

        assert response.status == 404
        assert calls == []
