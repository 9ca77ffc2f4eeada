"""Domain constants for rate resolution.

Kept as plain tuples / patterns; the tracked set is fixed and ordered so
responses list currencies consistently.
"""

import re
from typing import Pattern, Tuple

# Every provider response is reduced to exactly these codes
TRACKED_CURRENCIES: Tuple[str, ...] = ("INR", "USD", "EUR", "GBP")

# "Euro (EUR)" -> "EUR"
CURRENCY_FIELD_PATTERN: Pattern[str] = re.compile(r"\(([A-Z]{3})\)")
CURRENCY_CODE_PATTERN: Pattern[str] = re.compile(r"^[A-Z]{3}$")

UNAVAILABLE_MESSAGE = "Exchange rates unavailable"
