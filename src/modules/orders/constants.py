"""Order domain constants.

Quantity bounds for a single order line and the business-rule error
codes raised while validating lines against the books catalogue.
"""

MIN_BOOK_ID = 1
MAX_BOOK_ID = 2**63 - 1

MIN_ITEM_QUANTITY = 1
MAX_ITEM_QUANTITY = 999

BOOK_NOT_FOUND = "BOOK_NOT_FOUND"
BOOK_NOT_VISIBLE = "BOOK_NOT_VISIBLE"
