"""Placeholder substitution for template content."""

from __future__ import annotations

import re
from collections.abc import Mapping


def placeholder(token: str) -> str:
    """Return the marker text for a token, e.g. ``{{PROJECT_NAME}}``."""
    return "{{" + token + "}}"


def substitute(content: str, replacements: Mapping[str, str]) -> str:
    """Replace every ``{{TOKEN}}`` whose token is a key of ``replacements``.

    Values are inserted as literal text in a single pass: ``$1`` or ``\\1``
    sequences are not expanded, and markers that appear inside a value are
    not substituted again. Unknown tokens are left as they are.

    Args:
        content: Template text
        replacements: Token to value mapping

    Returns:
        The substituted text
    """
    if not replacements:
        return content

    pattern = re.compile(
        "|".join(re.escape(placeholder(token)) for token in replacements),
    )
    return pattern.sub(lambda match: replacements[match.group(0)[2:-2]], content)
