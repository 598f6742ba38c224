"""Unit tests for the error taxonomy and the API exception handler."""

from __future__ import annotations

import re

import pytest
from django.db import IntegrityError
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework.exceptions import ErrorDetail as DRFErrorDetail
from rest_framework.test import APIRequestFactory

from modules.core.exceptions import (
    BusinessRuleViolation,
    ErrorDetail,
    FieldValidationFailed,
    InvalidParameter,
    ResourceNotFound,
    api_exception_handler,
    classify_integrity_error,
    collect_field_violations,
)

pytestmark = pytest.mark.unit

TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


@pytest.fixture()
def context():
    return {"request": APIRequestFactory().post("/orders")}


class TestErrorDetail:
    def test_as_dict(self):
        detail = ErrorDetail(code="X-1", description="bad", element="items[0]")
        assert detail.as_dict() == {
            "element": "items[0]",
            "code": "X-1",
            "description": "bad",
        }

    def test_as_dict_without_element(self):
        assert ErrorDetail(code="X-1", description="bad").as_dict() == {
            "code": "X-1",
            "description": "bad",
        }


class TestClassifyIntegrityError:
    @pytest.mark.parametrize(
        "message, code",
        [
            ("duplicate key value violates PRIMARY KEY constraint", "GENERIC-001"),
            ("NOT NULL constraint failed: orders.order_date", "GENERIC-002"),
            ("UNIQUE constraint failed: orders.id", "GENERIC-004"),
            ("CHECK constraint failed: order_items_quantity_range", "GENERIC-003"),
        ],
    )
    def test_classification(self, message, code):
        assert classify_integrity_error(IntegrityError(message)) == code

    def test_primary_key_wins_over_unique(self):
        exc = IntegrityError("UNIQUE constraint failed on primary key")
        assert classify_integrity_error(exc) == "GENERIC-001"


class TestCollectFieldViolations:
    def test_nested_list_positions(self):
        errors = {
            "items": [
                {},
                {"quantity": [DRFErrorDetail("ORDER_ITEM-011", code="min_value")]},
            ]
        }
        assert collect_field_violations(errors) == [
            ErrorDetail(
                code="ORDER_ITEM-011",
                description="The 'quantity' parameter must be at least 1",
                element="items[1].quantity",
            )
        ]

    def test_unknown_message_keeps_drf_code(self):
        errors = {"name": [DRFErrorDetail("This field is required.", code="required")]}
        assert collect_field_violations(errors) == [
            ErrorDetail(
                code="required", description="This field is required.", element="name"
            )
        ]

    def test_non_field_errors_have_no_element(self):
        errors = {"non_field_errors": [DRFErrorDetail("ORDER-004", code="invalid")]}
        [violation] = collect_field_violations(errors)
        assert violation.element is None
        assert violation.code == "ORDER-004"


class TestApiExceptionHandler:
    def test_field_validation_failed(self, context):
        exc = FieldValidationFailed(
            [ErrorDetail(code="ORDER-002", description="empty", element="items")]
        )
        response = api_exception_handler(exc, context)
        assert response.status_code == 400
        assert response.data["status"] == 400
        assert response.data["error"] == "Bad Request"
        assert response.data["message"] == "Request validation failed"
        assert response.data["path"] == "/orders"
        assert TIMESTAMP.match(response.data["timestamp"])
        assert response.data["details"] == [
            {"element": "items", "code": "ORDER-002", "description": "empty"}
        ]

    def test_drf_validation_error(self, context):
        exc = drf_exceptions.ValidationError({"items": ["ORDER-001"]})
        response = api_exception_handler(exc, context)
        assert response.status_code == 400
        assert response.data["details"][0]["code"] == "ORDER-001"

    def test_parse_error(self, context):
        response = api_exception_handler(drf_exceptions.ParseError(), context)
        assert response.status_code == 400
        assert response.data["message"] == "The request body is malformed"
        assert "details" not in response.data

    def test_invalid_parameter(self, context):
        response = api_exception_handler(InvalidParameter("id", "abc"), context)
        assert response.status_code == 400
        assert response.data["message"] == "The parameter 'id' has an invalid type"

    def test_business_rule_violation(self, context):
        detail = ErrorDetail(code="BOOK_NOT_FOUND", description="gone", element="x")
        response = api_exception_handler(BusinessRuleViolation(detail), context)
        assert response.status_code == 422
        assert response.data["error"] == "Unprocessable Entity"
        assert response.data["message"] == "Business rule validation failed"
        assert response.data["details"] == [detail.as_dict()]

    @pytest.mark.parametrize(
        "exc", [ResourceNotFound("Order 1 not found."), Http404("Order 1 not found.")]
    )
    def test_not_found(self, context, exc):
        response = api_exception_handler(exc, context)
        assert response.status_code == 404
        assert response.data["message"] == "Order 1 not found."
        assert "details" not in response.data

    def test_integrity_error(self, context):
        exc = IntegrityError("NOT NULL constraint failed: order_items.book_id")
        response = api_exception_handler(exc, context)
        assert response.status_code == 409
        assert response.data["error"] == "Conflict"
        assert response.data["message"] == "Required fields are missing"
        assert "order_items" not in str(response.data)

    def test_other_api_exception(self, context):
        response = api_exception_handler(drf_exceptions.MethodNotAllowed("PUT"), context)
        assert response.status_code == 405
        assert response.data["message"] == 'Method "PUT" not allowed.'

    def test_unexpected_error_hides_its_text(self, context):
        response = api_exception_handler(RuntimeError("secret internals"), context)
        assert response.status_code == 500
        assert response.data["message"] == (
            "An unexpected error has occurred. Please contact the administrator"
        )
        assert "secret internals" not in str(response.data)

    def test_without_request(self):
        response = api_exception_handler(ResourceNotFound("gone"), {})
        assert response.data["path"] == ""
