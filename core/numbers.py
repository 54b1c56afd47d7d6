"""
Parse-or-skip helpers for numeric record fields.

Records arrive from forms and imports with numbers typed as strings
("2500", "0.25") or missing altogether. Rather than coercing implicitly,
every numeric read goes through parse_number, which returns None for
anything it cannot turn into a finite number. Callers treat None as
"skip this field".
"""

import math
import re
from typing import Any, Mapping, Optional, Sequence, Union

Number = Union[int, float]

THOUSANDS_REGEX = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d*)?$")


def parse_number(value: Any) -> Optional[Number]:
    """
    Parse a value as a finite number, or return None.

    Accepts ints, floats and numeric strings (surrounding whitespace and
    comma thousands separators are tolerated). Commas anywhere else, as
    in "1,2", make the string unparseable. Booleans, empty strings, NaN and
    infinities are rejected.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        return value if math.isfinite(value) else None

    if isinstance(value, str):
        text = value.strip()
        if "," in text:
            if not THOUSANDS_REGEX.match(text):
                return None
            text = text.replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() and "." not in text else number

    return None


def read_number(
    record: Mapping[str, Any],
    keys: Union[str, Sequence[str]],
) -> Optional[Number]:
    """
    Read the first parseable number found under any of the given keys.

    Args:
        record: Source record
        keys: Field name, or field name followed by aliases

    Returns:
        Parsed number, or None if no key holds a usable value
    """
    if isinstance(keys, str):
        keys = (keys,)

    for key in keys:
        number = parse_number(record.get(key))
        if number is not None:
            return number
    return None


def tidy_number(value: Number) -> Number:
    """Return integral floats as ints so JSON output stays clean."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
