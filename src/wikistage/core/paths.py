"""URL path validation.

Every page request passes through here before any handler runs. A path either
matches the allow-list exactly or is rejected, so titles that reach the page
store are guaranteed to be alphanumeric.
"""

import re
from dataclasses import dataclass
from typing import cast

from wikistage.core.types import Action, Title

VALID_PATH = re.compile(r"^/(view|edit|save)/([a-zA-Z0-9]+)$")

_VALID_TITLE = re.compile(r"^[a-zA-Z0-9]+$")


@dataclass(frozen=True)
class PathMatch:
    """Result of a successful path match."""

    action: Action
    title: Title


def match_path(path: str) -> PathMatch | None:
    """Match a request path against the page allow-list.

    Args:
        path: Decoded URL path, e.g. "/view/FrontPage"

    Returns:
        PathMatch with action and title, or None if the path is not allowed
    """
    # fullmatch so a trailing newline is not accepted by "$"
    m = VALID_PATH.fullmatch(path)
    if m is None:
        return None
    return PathMatch(action=cast(Action, m.group(1)), title=Title(m.group(2)))


def is_valid_title(value: str) -> bool:
    """Check whether a string is usable as a page title."""
    return _VALID_TITLE.fullmatch(value) is not None
