"""Truncation Constants

This module defines the element set and token patterns shared by the
tokenizer and the truncator.

Usage:
    from truncatehtml.constants import VOID_ELEMENTS, TAG_PATTERN

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
"""

import re

# Void elements are never closed, so they never go on the tag stack.
VOID_ELEMENTS = frozenset(
    [
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    ]
)

# Group 1: "/" for end tags, group 2: tag name (may be empty).
TAG_PATTERN = re.compile(r"<(/?)([A-Za-z0-9]*)[^>]*>")
COMMENT_PATTERN = re.compile(r"<!--(.*?)-->", re.DOTALL)
ENTITY_PATTERN = re.compile(r"&#?[A-Za-z0-9]+;")
