"""Visible-character truncation of HTML fragments.

The truncator is a token sink: the tokenizer feeds it comments, tags,
entities and characters, and it keeps the open-tag stack and the visible
character count. Once the budget is spent it stops the scan and the
output is assembled from the scanned prefix, the suffix and one closing
tag per element still open.

An exact fit is not cut: when the budget is spent and no visible character
follows, the scan runs on to the end. ``truncate("<b>12345</b>", 5, "...")``
therefore gives ``"<b>12345</b>..."`` rather than ``"<b>12345...</b>"``, and
end tags after the last character are still checked, so ``"12345</i>"`` at 5
raises :class:`UnbalancedTagsError`.
"""

import logging

from .constants import VOID_ELEMENTS
from .tokenizer import Tokenizer
from .tokens import CharacterToken, EntityToken, Tag, TokenSinkResult, UnbalancedTagsError

logger = logging.getLogger(__name__)


class TruncateOpts:
    __slots__ = ("keep_trailing_comment", "suffix")

    def __init__(self, suffix="", keep_trailing_comment=True):
        if isinstance(suffix, (bytes, bytearray)):
            suffix = bytes(suffix).decode("utf-8")
        self.suffix = suffix or ""
        self.keep_trailing_comment = bool(keep_trailing_comment)


class Truncator:
    """Truncates markup to ``max_chars`` visible characters.

    A visible character is a printable, non-whitespace character or one
    whole entity reference such as ``&copy;``. Tags, comments and whitespace
    are free. ``max_chars=None`` never stops, which is how
    :func:`visible_length` counts a whole document.

    One instance may be reused for many inputs, but not concurrently.
    """

    __slots__ = ("max_chars", "opts", "tag_stack", "tokenizer", "visible")

    def __init__(self, max_chars, opts=None):
        if max_chars is not None and max_chars < 0:
            raise ValueError(f"max_chars must not be negative, got {max_chars}")
        self.max_chars = max_chars
        self.opts = opts or TruncateOpts()
        self.tokenizer = Tokenizer(self)
        self.tag_stack = []
        self.visible = 0

    def reset(self):
        self.tag_stack = []
        self.visible = 0

    def scan(self, text):
        """Run the tokenizer over ``text`` and return the cutoff offset."""
        self.reset()
        self.tokenizer.run(text)
        return self.tokenizer.pos

    def truncate(self, html):
        if isinstance(html, (bytes, bytearray)):
            return self.truncate(bytes(html).decode("utf-8")).encode("utf-8")

        if not html or self.max_chars == 0:
            return ""

        cutoff = self.scan(html)

        parts = [html[:cutoff], self.opts.suffix]
        parts.extend(f"</{name}>" for name in reversed(self.tag_stack))
        logger.debug(
            "cut at offset %d of %d after %d visible characters, closing %d tags",
            cutoff,
            len(html),
            self.visible,
            len(self.tag_stack),
        )

        if self.opts.keep_trailing_comment:
            comment = _trailing_comment(html, cutoff)
            if comment:
                logger.debug("reattaching trailing comment %r", comment)
                parts.append(comment)

        return "".join(parts)

    # ---------------------
    # Token sink
    # ---------------------

    def process_token(self, token):
        if isinstance(token, Tag):
            self._handle_tag(token)
        elif _is_visible(token):
            self.visible += 1
            if self.max_chars is not None and self.visible >= self.max_chars and self._visible_ahead():
                return TokenSinkResult.Stop
        return TokenSinkResult.Continue

    def _visible_ahead(self):
        # Past the budget, stop only if another visible character follows.
        # Otherwise the rest is scanned and copied whole (see module docstring).
        lookahead = _VisibleLookahead()
        Tokenizer(lookahead).run(self.tokenizer.buffer[self.tokenizer.pos :])
        return lookahead.found

    def _handle_tag(self, token):
        name = token.name
        if not name or name in VOID_ELEMENTS:
            return

        if token.kind == Tag.START:
            if not token.self_closing:
                self.tag_stack.append(name)
            return

        stack = self.tag_stack
        if not stack or stack[-1] != name:
            pos = self.tokenizer.pos - len(token.text)
            raise UnbalancedTagsError(name, expected=stack[-1] if stack else None, pos=pos)
        stack.pop()


class _VisibleLookahead:
    """Token sink that stops at the first visible character."""

    __slots__ = ("found",)

    def __init__(self):
        self.found = False

    def process_token(self, token):
        if _is_visible(token):
            self.found = True
            return TokenSinkResult.Stop
        return TokenSinkResult.Continue


def _is_visible(token):
    if isinstance(token, CharacterToken):
        c = token.data
        return c.isprintable() and not c.isspace()
    return isinstance(token, EntityToken)


def _trailing_comment(html, cutoff):
    """Return the comment ending ``html`` if it lies past ``cutoff``."""
    if not html.endswith("-->"):
        return None

    # Leftmost, non-overlapping walk, the same matches as COMMENT_PATTERN.finditer.
    last = -1
    pos = 0
    while True:
        start = html.find("<!--", pos)
        if start == -1:
            break
        end = html.find("-->", start + 4)
        if end == -1:
            break
        last = start
        pos = end + 3

    if last == -1 or pos != len(html) or last < cutoff:
        return None
    return html[last:]


def truncate(html, max_chars, suffix=None, *, opts=None):
    """Truncate ``html`` to ``max_chars`` visible characters.

    Tags still open at the cut are closed, innermost first, after ``suffix``.
    ``html`` may be ``str`` or UTF-8 ``bytes``; the result has the same type.

    Raises:
        UnbalancedTagsError: an end tag does not match the innermost open tag.
        ValueError: ``max_chars`` is negative.

    Example:
        >>> truncate("<p><b>Monty Python</b></p>", 5, "...")
        '<p><b>Monty...</b></p>'
    """
    opts = opts or TruncateOpts()
    if suffix is not None:
        opts = TruncateOpts(suffix=suffix, keep_trailing_comment=opts.keep_trailing_comment)
    return Truncator(max_chars, opts).truncate(html)


def visible_length(html):
    """Count the visible characters of ``html`` with the truncation rules."""
    if isinstance(html, (bytes, bytearray)):
        html = bytes(html).decode("utf-8")
    truncator = Truncator(None)
    truncator.scan(html or "")
    return truncator.visible
