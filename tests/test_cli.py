"""
Tests for the storagebrowser command-line interface.
"""

from unittest.mock import Mock

import pytest
import requests
from conftest import FakeRemoteFileSystem, FakeStorageClient

from storagebrowser import cli
from storagebrowser import config as config_module
from storagebrowser import log_utils
from storagebrowser.browser import StorageBrowser
from storagebrowser.config import BrowserConfig
from storagebrowser.exceptions import ConfigurationError
from storagebrowser.http_client import HttpStorageClient
from storagebrowser.nodes import Entry

CONFIG_YAML = """\
USER: user
PASSWORD: pass
ROOT_DIRECTORY_NAME: proj
BASE_URL: https://storage.example.com/api
"""


@pytest.fixture
def config_file():
    with open(config_module.CONFIG_FILE, "w", encoding="utf-8") as f:
        f.write(CONFIG_YAML)
    return config_module.CONFIG_FILE


@pytest.fixture
def fake_backend(monkeypatch, remote_tree, storage_client):
    """
    Replace the HTTP-backed browser with one over the in-memory fakes.
    """
    remote_fs = FakeRemoteFileSystem(remote_tree)
    closer = Mock()

    def create_browser(config):
        return StorageBrowser(config, storage_client, remote_fs), closer

    monkeypatch.setattr(cli, "create_browser", create_browser)
    return closer


@pytest.fixture(autouse=True)
def _restore_log_level():
    yield
    log_utils.set_log_level("INFO")


class TestMain:
    def test_no_command_prints_help(self, capsys):
        cli.main([])
        assert "usage: storagebrowser" in capsys.readouterr().out

    def test_version(self, capsys, monkeypatch):
        monkeypatch.setattr(cli, "get_version", lambda: "1.2.3")
        cli.main(["version"])
        assert capsys.readouterr().out == "storagebrowser 1.2.3\n"

    def test_resolve(self, config_file, fake_backend, capsys):
        cli.main(["resolve", "dirA/dirB/file.txt"])

        assert capsys.readouterr().out == "H2\n"
        fake_backend.close.assert_called_once()

    def test_download(self, config_file, fake_backend, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        cli.main(["download", "dirA/dirB/file.txt", "out/file.txt"])

        assert (tmp_path / "out" / "file.txt").read_bytes() == b"a" * 200
        assert capsys.readouterr().out == "<progress>50</progress>\n<progress>100</progress>\n"

    def test_download_defaults_to_remote_path(self, config_file, fake_backend, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        cli.main(["download", "top.txt"])

        assert (tmp_path / "top.txt").exists()

    def test_not_found_exits_with_error(self, config_file, fake_backend):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["resolve", "missing/file.txt"])

        assert exc_info.value.code == 1
        fake_backend.close.assert_called_once()

    def test_missing_config_exits_with_error(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["resolve", "a.txt"])
        assert exc_info.value.code == 1

    def test_explicit_config_path(self, tmp_path, fake_backend, capsys):
        path = tmp_path / "elsewhere.yaml"
        path.write_text(CONFIG_YAML, encoding="utf-8")

        cli.main(["--config", str(path), "resolve", "top.txt"])

        assert capsys.readouterr().out == "HT\n"

    def test_network_error_exits_with_error(self, config_file, monkeypatch):
        def create_browser(config):
            client = FakeStorageClient(login_error=requests.ConnectionError("refused"))
            return StorageBrowser(config, client, FakeRemoteFileSystem({})), Mock()

        monkeypatch.setattr(cli, "create_browser", create_browser)

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["resolve", "a.txt"])
        assert exc_info.value.code == 1

    def test_malformed_node_payload_exits_with_error(self, config_file, monkeypatch):
        class MalformedRemoteFileSystem(FakeRemoteFileSystem):
            def list_children(self, node):
                return [Entry.from_dict({"name": "proj", "type": 1})]

        def create_browser(config):
            remote_fs = MalformedRemoteFileSystem({})
            return StorageBrowser(config, FakeStorageClient(), remote_fs), Mock()

        monkeypatch.setattr(cli, "create_browser", create_browser)

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["resolve", "a.txt"])
        assert exc_info.value.code == 1

    def test_log_options(self, config_file, fake_backend, tmp_path):
        log_dir = tmp_path / "logs"

        cli.main(["--log-level", "DEBUG", "--log-dir", str(log_dir), "resolve", "top.txt"])

        assert (log_dir / "storagebrowser.log").exists()
        assert log_utils.logger.level == 10
        log_utils.logger.removeHandler(log_utils._file_handler)
        log_utils._file_handler.close()
        log_utils._file_handler = None


class TestCreateBrowser:
    def test_builds_http_backed_browser(self):
        config = BrowserConfig(
            user="u",
            password="p",
            root_directory_name="proj",
            base_url="http://localhost:9000",
            request_timeout=7,
        )

        browser, client = cli.create_browser(config)

        assert isinstance(client, HttpStorageClient)
        assert browser.client is client
        assert browser.remote_fs is client
        assert client.timeout == 7
        client.close()

    def test_requires_base_url(self):
        config = BrowserConfig(user="u", password="p", root_directory_name="proj")
        with pytest.raises(ConfigurationError, match="BASE_URL"):
            cli.create_browser(config)
