"""
Display label for the registro "data" field
"""

import re

RE_ZERO_TOKEN = re.compile(r"\b0\.0\b")
RE_LINE_BREAK = re.compile(r"\r?\n")


def extract_tipo(data_field: str) -> str:
    """First line of the field with every standalone "0.0" removed, trimmed"""
    if not isinstance(data_field, str):
        return ""
    first_line = RE_LINE_BREAK.split(data_field, maxsplit=1)[0] or data_field
    return RE_ZERO_TOKEN.sub("", first_line).strip()
