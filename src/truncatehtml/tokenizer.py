from .constants import COMMENT_PATTERN, ENTITY_PATTERN, TAG_PATTERN
from .tokens import CharacterToken, CommentToken, EntityToken, EOFToken, Tag, TokenSinkResult


class Tokenizer:
    """Splits markup into comments, tags, entities and single characters.

    Tokens are handed to ``sink.process_token()`` one at a time. The sink
    returns ``TokenSinkResult.Stop`` to end the scan early; ``pos`` then
    points just past the last consumed token.
    """

    __slots__ = ("buffer", "comment_close", "length", "pos", "sink", "stopped", "tag_close")

    def __init__(self, sink):
        self.sink = sink
        self.buffer = ""
        self.length = 0
        self.pos = 0
        self.stopped = False
        self.comment_close = None
        self.tag_close = None

    def run(self, text):
        self.buffer = text or ""
        self.length = len(self.buffer)
        self.pos = 0
        self.stopped = False
        self.comment_close = None
        self.tag_close = None

        while self.pos < self.length:
            if self._emit_token(self._next_token()):
                self.stopped = True
                return
        self._emit_token(EOFToken())

    # ---------------------
    # Helper methods
    # ---------------------

    def _peek_char(self, offset):
        """Peek ahead at character at current position + offset without consuming"""
        peek_pos = self.pos + offset
        if peek_pos < self.length:
            return self.buffer[peek_pos]
        return None

    def _emit_token(self, token):
        return self.sink.process_token(token) == TokenSinkResult.Stop

    def _find_close(self, cached, marker, start):
        """Return the first ``marker`` at or after ``start``, reusing ``cached``.

        ``start`` never moves backwards, so a cached index that is still ahead
        (or -1, no marker left) is the answer and each marker is searched once.
        """
        if cached is not None and (cached == -1 or cached >= start):
            return cached
        return self.buffer.find(marker, start)

    # ---------------------
    # Token recognition
    # ---------------------

    def _next_token(self):
        buffer = self.buffer
        pos = self.pos
        c = buffer[pos]

        if c == "<":
            if self._peek_char(1) == "!":
                self.comment_close = self._find_close(self.comment_close, "-->", pos + 4)
                if self.comment_close != -1:
                    match = COMMENT_PATTERN.match(buffer, pos, self.comment_close + 3)
                    if match:
                        self.pos = match.end()
                        return CommentToken(match.group(1), match.group(0))
            # Declarations such as <!DOCTYPE> fall through to the tag pattern.
            self.tag_close = self._find_close(self.tag_close, ">", pos + 1)
            if self.tag_close != -1:
                match = TAG_PATTERN.match(buffer, pos, self.tag_close + 1)
                if match:
                    self.pos = match.end()
                    text = match.group(0)
                    kind = Tag.END if match.group(1) else Tag.START
                    return Tag(kind, match.group(2), text, self_closing=text.endswith("/>"))
        elif c == "&":
            match = ENTITY_PATTERN.match(buffer, pos)
            if match:
                self.pos = match.end()
                return EntityToken(match.group(0))

        # Plain character, or a "<"/"&" that starts nothing we recognize.
        self.pos = pos + 1
        return CharacterToken(c)
