"""Unit tests for the command-line interface.

Tests for blob_gateway/cli.py with the HTTP layer stubbed out.

Run with:
    pytest tests/unit/test_cli.py -v
"""

import httpx
import pytest
from click.testing import CliRunner

from blob_gateway import cli


class FakeAPI:
    """Stand-in for cli._request returning canned responses."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.calls: list[tuple[str, str, dict]] = []

    def __call__(self, method: str, path: str, **kwargs) -> httpx.Response:
        content = kwargs.get("content")
        if hasattr(content, "read"):
            kwargs["content"] = content.read()
            kwargs["streamed"] = True
        self.calls.append((method, path, kwargs))
        return self.response


@pytest.fixture
def runner():
    return CliRunner()


def _install(monkeypatch, response: httpx.Response) -> FakeAPI:
    api = FakeAPI(response)
    monkeypatch.setattr(cli, "_request", api)
    return api


@pytest.mark.fast
class TestUploadCommand:
    """Tests for `blob-gateway upload`."""

    def test_upload_sends_file_and_name(self, runner, monkeypatch, tmp_path):
        file = tmp_path / "photo.png"
        file.write_bytes(b"\x89PNG")
        api = _install(
            monkeypatch,
            httpx.Response(200, json={"pathname": "img/photo.png", "url": "https://x/img/photo.png"}),
        )

        result = runner.invoke(cli.main, ["upload", str(file), "--name", "img/photo.png"])

        assert result.exit_code == 0
        method, path, kwargs = api.calls[0]
        assert (method, path) == ("POST", "/api/upload")
        assert kwargs["content"] == b"\x89PNG"
        assert kwargs["streamed"] is True
        assert kwargs["headers"] == {"x-vercel-filename": "img/photo.png"}
        assert "https://x/img/photo.png" in result.output

    @pytest.mark.parametrize("body", [["not", "an", "object"], "plain string"])
    def test_upload_error_with_non_object_json(self, runner, monkeypatch, tmp_path, body):
        file = tmp_path / "a.txt"
        file.write_text("a")
        _install(monkeypatch, httpx.Response(502, json=body))

        result = runner.invoke(cli.main, ["upload", str(file)])

        assert result.exit_code == 1
        assert not isinstance(result.exception, AttributeError)
        assert "502" in result.output

    def test_upload_error_exits_nonzero(self, runner, monkeypatch, tmp_path):
        file = tmp_path / "a.txt"
        file.write_text("a")
        _install(
            monkeypatch,
            httpx.Response(500, json={"message": "Erro ao fazer upload do arquivo.", "error": "boom"}),
        )

        result = runner.invoke(cli.main, ["upload", str(file)])

        assert result.exit_code == 1
        assert "boom" in result.output


@pytest.mark.fast
class TestListCommand:
    """Tests for `blob-gateway list`."""

    def test_list_prints_table(self, runner, monkeypatch):
        _install(
            monkeypatch,
            httpx.Response(200, json=[{"pathname": "a.txt", "url": "https://x/a.txt", "size": 2048}]),
        )
        result = runner.invoke(cli.main, ["list"])
        assert result.exit_code == 0
        assert "a.txt" in result.output
        assert "2.0 KB" in result.output

    def test_list_empty(self, runner, monkeypatch):
        _install(monkeypatch, httpx.Response(200, json=[]))
        result = runner.invoke(cli.main, ["list"])
        assert result.exit_code == 0
        assert "No files stored" in result.output


@pytest.mark.fast
class TestDeleteCommand:
    """Tests for `blob-gateway delete`."""

    def test_delete_pathname(self, runner, monkeypatch):
        api = _install(monkeypatch, httpx.Response(200, json={"message": "Excluído com sucesso"}))
        result = runner.invoke(cli.main, ["delete", "a.txt"])
        assert result.exit_code == 0
        assert api.calls[0] == ("DELETE", "/api/delete", {"params": {"pathname": "a.txt"}})

    def test_delete_url(self, runner, monkeypatch):
        api = _install(monkeypatch, httpx.Response(200, json={"message": "Excluído com sucesso"}))
        runner.invoke(cli.main, ["delete", "https://x/a.txt"])
        assert api.calls[0][2] == {"params": {"url": "https://x/a.txt"}}


@pytest.mark.fast
class TestFormatSize:
    """Tests for _format_size()."""

    def test_sizes(self):
        assert cli._format_size(None) == "-"
        assert cli._format_size(512) == "512 B"
        assert cli._format_size(1536) == "1.5 KB"
        assert cli._format_size(5 * 1024 * 1024) == "5.0 MB"
