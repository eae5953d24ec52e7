import sqlite3

from lunchbook_app.errors import (
    ErrorKind, NotFoundError, StoreError, ValidationError, error_kind
)


def test_statuses():
    assert NotFoundError("x").status == 404
    assert ValidationError("x").status == 400


def test_store_error_is_sqlite_error():
    assert issubclass(sqlite3.IntegrityError, StoreError)


def test_error_kind():
    assert error_kind(NotFoundError("x")) is ErrorKind.NOT_FOUND
    assert error_kind(ValidationError("x")) is ErrorKind.VALIDATION
    assert error_kind(sqlite3.OperationalError("x")) is ErrorKind.STORE
    assert error_kind(KeyError("x")) is None
