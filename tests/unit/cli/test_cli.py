"""Tests for the trusty CLI."""

import pytest
from click.testing import CliRunner

from trusty.cli.main import cli
from trusty.core.config import get_settings


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    get_settings.cache_clear()
    yield CliRunner()
    get_settings.cache_clear()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_health_memory_store(runner):
    result = runner.invoke(cli, ["health"])
    assert result.exit_code == 0
    assert "healthy" in result.output


def test_init_db_without_sql_backend(runner):
    result = runner.invoke(cli, ["init-db"])
    assert result.exit_code == 0
    assert "nothing to initialize" in result.output


def test_is_allowed_unknown_user(runner):
    result = runner.invoke(
        cli,
        [
            "is-allowed",
            "--user", "auth0-nobody",
            "--tenant", "t1",
            "--product", "p1",
            "--resource", "res",
            "--action", "act",
        ],
    )
    assert result.exit_code == 1
    assert "404" in result.output


def test_is_allowed_requires_options(runner):
    result = runner.invoke(cli, ["is-allowed", "--user", "auth0-nobody"])
    assert result.exit_code == 2
