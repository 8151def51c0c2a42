from __future__ import annotations

from sitebuilder.errors import (
    ErrorResponse,
    NotFoundError,
    SiteBuilderError,
    StorageError,
    ValidationError,
    error_response,
    get_error_code,
)


def test_validation_error_to_dict() -> None:
    err = ValidationError("name cannot be empty", field="name", constraint="non_empty")

    assert err.to_dict() == {
        "type": "validation",
        "message": "name cannot be empty",
        "recoverable": False,
        "field": "name",
        "constraint": "non_empty",
    }


def test_validation_error_truncates_value() -> None:
    err = ValidationError("too long", field="title", value="x" * 500)

    assert err.context["value"] == "x" * 100 + "..."


def test_not_found_error_context() -> None:
    err = NotFoundError("Page with id 3 not found", resource_type="page", resource_id=3)

    assert err.resource_type == "page"
    assert err.resource_id == 3
    assert err.to_dict()["type"] == "notfound"
    assert err.to_dict()["resource_id"] == 3


def test_error_codes() -> None:
    assert get_error_code(ValidationError("x")) == -32000
    assert get_error_code(NotFoundError("x")) == -32003
    assert get_error_code(StorageError("x")) == -32020
    assert get_error_code(SiteBuilderError("x")) == -32603


def test_error_response_for_domain_error() -> None:
    response = error_response(StorageError("disk full", operation="transaction", table="pages"))

    assert isinstance(response, ErrorResponse)
    assert response.to_dict() == {
        "error": {
            "type": "storage",
            "code": -32020,
            "message": "disk full",
            "recoverable": False,
            "details": {"operation": "transaction", "table": "pages"},
        }
    }


def test_error_response_for_unexpected_error() -> None:
    response = error_response(RuntimeError(""))

    assert response.error_type == "internal"
    assert response.message == "An unexpected error occurred"
    assert "details" not in response.to_dict()["error"]
