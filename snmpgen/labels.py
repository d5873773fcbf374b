"""Label sanitizing for generated metric and lookup names."""

import re

_INVALID_LABEL_CHAR_RE = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_label_name(name: str) -> str:
    """Replace every character that is not valid in a label name with ``_``.

    Examples:
        >>> sanitize_label_name("myMetric-Name!1")
        'myMetric_Name_1'
    """
    return _INVALID_LABEL_CHAR_RE.sub("_", name)
