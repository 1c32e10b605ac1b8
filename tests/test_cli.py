"""Tests for the CLI interface."""

import json
import logging

import httpx
import pytest
import respx
from click.testing import CliRunner

from pocket_client.cli import ACCESS_TOKEN_ENV, main
from pocket_client.client import HOST
from pocket_client.config import AppConfig, load_config, save_config
from pocket_client.logging_config import HANDLER_NAME


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.toml"


@pytest.fixture
def configured(config_path):
    """Create a valid config file."""
    save_config(AppConfig(consumer_key="test_key"), config_path)
    return config_path


@pytest.fixture(autouse=True)
def no_access_token_env(monkeypatch):
    monkeypatch.delenv(ACCESS_TOKEN_ENV, raising=False)


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Pocket client" in result.output

    def test_setup_creates_config(self, runner, config_path):
        result = runner.invoke(
            main,
            ["--config", str(config_path), "setup"],
            input="my_consumer_key\n\n",
        )
        assert result.exit_code == 0
        assert "Config saved" in result.output

        config = load_config(config_path)
        assert config.consumer_key == "my_consumer_key"
        assert config.redirect_uri == "https://localhost"

    def test_status_without_config(self, runner, config_path):
        result = runner.invoke(main, ["--config", str(config_path), "status"])
        assert result.exit_code == 0
        assert "Not configured" in result.output

    def test_status_with_config(self, runner, configured):
        result = runner.invoke(main, ["--config", str(configured), "status"])
        assert result.exit_code == 0
        assert "Found" in result.output
        assert "Redirect URI: https://localhost" in result.output
        assert "test_key" not in result.output

    def test_login_without_config(self, runner, config_path):
        result = runner.invoke(main, ["--config", str(config_path), "login"])
        assert result.exit_code != 0
        assert "No config found" in result.output


class TestLoginCommand:
    @respx.mock
    def test_login_prints_access_token(self, runner, configured):
        request_route = respx.post(f"{HOST}/oauth/request").mock(
            return_value=httpx.Response(200, text="code=req-token")
        )
        respx.post(f"{HOST}/oauth/authorize").mock(
            return_value=httpx.Response(
                200, text="access_token=acc-token&username=pocketuser"
            )
        )

        result = runner.invoke(
            main, ["--config", str(configured), "login"], input="\n"
        )

        assert result.exit_code == 0
        assert (
            "https://getpocket.com/auth/authorize"
            "?request_token=req-token&redirect_uri=https://localhost"
        ) in result.output
        assert "Logged in as pocketuser" in result.output
        assert "Access token: acc-token" in result.output
        assert json.loads(request_route.calls.last.request.content) == {
            "consumer_key": "test_key",
            "redirectUri": "https://localhost",
        }

    @respx.mock
    def test_login_reports_api_error(self, runner, configured):
        respx.post(f"{HOST}/oauth/request").mock(
            return_value=httpx.Response(403, headers={"X-Error": "Invalid consumer key."})
        )

        result = runner.invoke(main, ["--config", str(configured), "login"])

        assert result.exit_code == 1
        assert "Invalid consumer key." in result.output


class TestAddCommand:
    @respx.mock
    def test_add_with_tags(self, runner, configured):
        route = respx.post(f"{HOST}/add").mock(return_value=httpx.Response(200))

        result = runner.invoke(
            main,
            [
                "--config", str(configured),
                "add", "https://example.com",
                "--title", "Example",
                "--tag", "a",
                "--tag", "b",
                "--access-token", "acc-token",
            ],
        )

        assert result.exit_code == 0
        assert "Added https://example.com" in result.output
        payload = json.loads(route.calls.last.request.content)
        assert payload["tags"] == "a,b"
        assert payload["title"] == "Example"
        assert payload["access_token"] == "acc-token"
        assert payload["consumer_key"] == "test_key"

    @respx.mock
    def test_add_reads_token_from_env(self, runner, configured):
        route = respx.post(f"{HOST}/add").mock(return_value=httpx.Response(200))

        result = runner.invoke(
            main,
            ["--config", str(configured), "add", "https://example.com"],
            env={ACCESS_TOKEN_ENV: "env-token"},
        )

        assert result.exit_code == 0
        assert json.loads(route.calls.last.request.content)["access_token"] == "env-token"

    def test_add_requires_access_token(self, runner, configured):
        result = runner.invoke(
            main, ["--config", str(configured), "add", "https://example.com"]
        )
        assert result.exit_code != 0
        assert "--access-token" in result.output

    @respx.mock
    def test_add_reports_api_error(self, runner, configured):
        respx.post(f"{HOST}/add").mock(
            return_value=httpx.Response(401, headers={"X-Error": "Invalid access token."})
        )

        result = runner.invoke(
            main,
            [
                "--config", str(configured),
                "add", "https://example.com",
                "--access-token", "stale",
            ],
        )

        assert result.exit_code == 1
        assert "Invalid access token." in result.output


class TestLogging:
    def test_repeated_runs_keep_one_handler(self, runner, config_path):
        runner.invoke(main, ["--config", str(config_path), "status"])
        runner.invoke(main, ["-v", "--config", str(config_path), "status"])

        handlers = [
            h
            for h in logging.getLogger("pocket_client").handlers
            if h.get_name() == HANDLER_NAME
        ]
        assert len(handlers) == 1

    @respx.mock
    def test_log_lines_not_repeated(self, runner, configured):
        respx.post(f"{HOST}/add").mock(return_value=httpx.Response(200))
        args = [
            "--config", str(configured),
            "add", "https://example.com",
            "--access-token", "acc-token",
        ]

        runner.invoke(main, args)
        result = runner.invoke(main, args)

        assert result.exit_code == 0
        assert result.output.count("[INFO] Added https://example.com") == 1
