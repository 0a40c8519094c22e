"""Unit tests for the exception hierarchy (questboard/exceptions.py)"""
import logging
import sqlite3

from questboard.exceptions import (
    QuestBoardError,
    RecordNotFoundError,
    StorageError,
    ValidationError,
    wrap_external_exception,
)


def test_error_logs_on_creation(caplog):
    with caplog.at_level(logging.ERROR, logger="questboard.exceptions"):
        error = QuestBoardError(message="boom", profile="Alice", operation="save_state")

    assert any("boom" in r.getMessage() for r in caplog.records)
    assert error.profile == "Alice"
    assert error.request_id


def test_to_dict():
    error = RecordNotFoundError(message="Profile Ghost not found", record_type="Profile", record_id="Ghost")
    data = error.to_dict()

    assert data["error"] == "RecordNotFoundError"
    assert data["message"] == "Profile Ghost not found"
    assert data["user_message"] == "Profile not found."
    assert data["request_id"] == error.request_id


def test_validation_error_user_message():
    error = ValidationError(message="cannot be empty", field="name", value="")

    assert error.user_message == "Invalid name: cannot be empty"
    assert error.context == {"field": "name", "value": ""}
    assert isinstance(error, QuestBoardError)


def test_wrap_sqlite_error():
    wrapped = wrap_external_exception(
        sqlite3.OperationalError("database is locked"),
        operation="put",
        context={"key": "questboard-multi-Alice"}
    )

    assert isinstance(wrapped, StorageError)
    assert wrapped.key == "questboard-multi-Alice"
    assert wrapped.operation == "put"
    assert "database is locked" in wrapped.message


def test_wrap_other_error():
    cause = KeyError("x")
    wrapped = wrap_external_exception(cause, operation="load")

    assert type(wrapped) is QuestBoardError
    assert wrapped.cause is cause
