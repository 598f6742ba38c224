"""Static error-message catalogue.

Every error code exposed by the API resolves to a description template here.
Templates use positional ``str.format`` placeholders (``{0}``) and are
resolved once, when the error is built.  Descriptions are not localised.
"""

from __future__ import annotations

from typing import Any, Dict

MESSAGES: Dict[str, str] = {
    # Request body (field validation, HTTP 400)
    "ORDER-001": "The 'items' parameter is required and cannot be empty",
    "ORDER-002": "The order must contain at least one item",
    "ORDER-003": "The 'items' parameter must be a list",
    "ORDER-004": "The request body must be a JSON object",
    "ORDER_ITEM-001": "The 'bookId' parameter is required and cannot be empty",
    "ORDER_ITEM-002": "The 'bookId' parameter must be greater than 0",
    "ORDER_ITEM-003": "The 'bookId' parameter must be an integer",
    "ORDER_ITEM-010": "The 'quantity' parameter is required and cannot be empty",
    "ORDER_ITEM-011": "The 'quantity' parameter must be at least 1",
    "ORDER_ITEM-012": "The 'quantity' parameter cannot exceed 999 units",
    "ORDER_ITEM-013": "The 'quantity' parameter must be an integer",
    "ORDER_ITEM-020": "Each order item must be a JSON object",
    # Business rules (HTTP 422)
    "BOOK_NOT_FOUND": "The book with ID {0} does not exist in the catalogue",
    "BOOK_NOT_VISIBLE": "The book with ID {0} is not available for sale",
    # Data integrity (HTTP 409) and unexpected failures (HTTP 500)
    "GENERIC-001": "A record with the same identifier already exists",
    "GENERIC-002": "Required fields are missing",
    "GENERIC-003": "Data integrity error",
    "GENERIC-004": "The record already exists in the system",
    "GENERIC-005": "An unexpected error has occurred. Please contact the administrator",
}


def get_message(code: str, *args: Any) -> str:
    """Resolve *code* to its description, formatted with *args*.

    Unknown codes resolve to themselves so a missing entry never hides
    the original error.
    """
    template = MESSAGES.get(code)
    if template is None:
        return code
    return template.format(*args)


def is_known_code(code: str) -> bool:
    return code in MESSAGES
