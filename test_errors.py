"""
Tests for the error taxonomy's status codes and public messages.
"""

from pagegrab.errors import (
    GENERIC_SCRAPE_ERROR,
    AuthError,
    ExtractionError,
    NavigationError,
    ValidationError
)


def test_defaults_without_message():
    error = NavigationError()

    assert error.status_code == 500
    assert error.public_message == GENERIC_SCRAPE_ERROR
    assert str(error) == GENERIC_SCRAPE_ERROR


def test_internal_message_stays_out_of_public_message():
    error = ExtractionError("readability crashed on <svg>")

    assert str(error) == "readability crashed on <svg>"
    assert error.public_message == GENERIC_SCRAPE_ERROR


def test_public_message_override():
    error = ValidationError(public_message="Invalid request body")

    assert error.status_code == 400
    assert error.public_message == "Invalid request body"
    assert ValidationError.public_message == "URL is required"


def test_auth_error_message():
    assert AuthError.status_code == 401
    assert AuthError().public_message == "Unauthorized: Invalid API key"
