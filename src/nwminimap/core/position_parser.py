# -*- coding: utf-8 -*-
"""
src/nwminimap/core/position_parser.py

Turns raw OCR output into a numeric (x, y) candidate.

The HUD prints the position as something like "[8500.123, 6000.456, 120.000]",
but OCR over a small, noisy strip routinely swaps commas and periods, inserts
stray spaces or doubles punctuation. The parser is forgiving about all of that
and strict about the final magnitude: only the integer part of each component
is kept, and it must have between 3 and 5 digits.
"""

import logging
import re
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

MIN_DIGITS = 3
MAX_DIGITS = 5

# Two or more digits, optionally followed by a separator and a short
# fractional tail (at most three digits, which is what the HUD prints), and
# an optional trailing separator.
TOKEN_PATTERN = re.compile(r"\d{2,}(?:[,.\s]\s?\d{1,3}(?!\d))?[,.\s]?")


class Candidate(NamedTuple):
    """An unvalidated position in game units."""
    x: float
    y: float


def normalize_token(token: str) -> str:
    """
    Reduces one OCR token to the digit string of its integer part.

    Returns an empty string if the token cannot be a plausible coordinate.
    """
    token = re.sub(r"\s+", "", token)

    if "." in token:
        # Commas are thousands separators or noise once a period is present
        token = token.replace(",", "")
    else:
        token = token.replace(",", ".")

    token = re.sub(r"\.{2,}", ".", token)
    token = token.rstrip(".")

    if "." in token:
        token = token[:token.index(".")]

    if not MIN_DIGITS <= len(token) <= MAX_DIGITS:
        return ""
    return token


def parse_position(text: str) -> Optional[Candidate]:
    """
    Extracts the first two coordinate components from OCR text.

    Args:
        text (str): Raw OCR output, possibly empty.

    Returns:
        Optional[Candidate]: The parsed candidate, or None when fewer than two
        tokens are present or either of the first two fails normalisation.
    """
    if not text:
        return None

    tokens = TOKEN_PATTERN.findall(text)
    if len(tokens) < 2:
        logger.debug(f"Found {len(tokens)} numeric token(s) in {text!r}, need two.")
        return None

    x_value = normalize_token(tokens[0])
    y_value = normalize_token(tokens[1])
    if not x_value or not y_value:
        logger.debug(f"Rejected tokens {tokens[0]!r}, {tokens[1]!r} from {text!r}")
        return None

    return Candidate(float(x_value), float(y_value))
