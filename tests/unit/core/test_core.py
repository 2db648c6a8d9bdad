"""Tests for settings, the error taxonomy and logging setup."""

import pytest
import structlog
from pydantic import ValidationError as SettingsValidationError

from trusty.core.config import Settings
from trusty.core.exceptions import (
    AlreadyExistsError,
    DependentsExistError,
    MissingReferenceError,
    NotFoundError,
    NotModifiedError,
    StorageError,
    TrustyError,
    UnauthorizedError,
    UniquenessViolationError,
    ValidationError,
)
from trusty.core.logging_config import configure_logging


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.STORE_BACKEND == "memory"
        assert settings.DELETE_POLICY == "permissive"
        assert settings.APP_ENV == "development"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "sql")
        monkeypatch.setenv("DELETE_POLICY", "cascade")
        settings = Settings(_env_file=None)
        assert settings.STORE_BACKEND == "sql"
        assert settings.DELETE_POLICY == "cascade"

    def test_rejects_unknown_policy(self, monkeypatch):
        monkeypatch.setenv("DELETE_POLICY", "sometimes")
        with pytest.raises(SettingsValidationError):
            Settings(_env_file=None)


class TestExceptions:

    @pytest.mark.parametrize(
        "error,status_code",
        [
            (NotFoundError("tenant", "t1"), 404),
            (AlreadyExistsError("duplicate"), 409),
            (ValidationError("bad input"), 400),
            (MissingReferenceError("tenant", "t1"), 400),
            (UniquenessViolationError("namespace", "ns1"), 409),
            (DependentsExistError("tenant", "t1", {"roles": 2}), 409),
            (UnauthorizedError(), 401),
            (StorageError("down"), 503),
            (NotModifiedError(), 304),
        ],
    )
    def test_status_codes(self, error, status_code):
        assert isinstance(error, TrustyError)
        assert error.status_code == status_code

    def test_validation_subclasses(self):
        for error in (
            MissingReferenceError("tenant", "t1"),
            UniquenessViolationError("namespace", "ns1"),
            DependentsExistError("tenant", "t1", {"roles": 2}),
        ):
            assert isinstance(error, ValidationError)
        assert not isinstance(NotFoundError(), ValidationError)

    def test_messages(self):
        assert str(NotFoundError("tenant", "t1")) == "tenant not found: t1"
        assert MissingReferenceError("product", "p1", scope="ns1").cause == (
            "Did not find product with id: p1 in namespace: ns1"
        )
        assert DependentsExistError("tenant", "t1", {"roles": 2}).cause == (
            "Cannot delete tenant t1: still referenced by 2 roles"
        )


def test_configure_logging_json():
    configure_logging(Settings(_env_file=None, LOG_FORMAT="json", LOG_LEVEL="DEBUG"))
    logger = structlog.get_logger("trusty.test")
    logger.info("Configured", component="test")
    structlog.reset_defaults()
