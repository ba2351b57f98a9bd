class Tag:
    __slots__ = ("kind", "name", "self_closing", "text")

    START = 0
    END = 1

    def __init__(self, kind, name, text, self_closing=False):
        self.kind = kind
        self.name = name
        self.text = text
        self.self_closing = bool(self_closing)


class CharacterToken:
    __slots__ = ("data",)

    def __init__(self, data):
        self.data = data


class EntityToken:
    __slots__ = ("data",)

    def __init__(self, data):
        self.data = data


class CommentToken:
    __slots__ = ("data", "text")

    def __init__(self, data, text):
        self.data = data
        self.text = text


class EOFToken:
    __slots__ = ()


class TokenSinkResult:
    __slots__ = ()

    Continue = 0
    Stop = 1


class UnbalancedTagsError(Exception):
    """Raised when an end tag does not close the innermost open tag."""

    def __init__(self, tag, expected=None, pos=None):
        self.tag = tag
        self.expected = expected
        self.pos = pos
        super().__init__(str(self))

    def __repr__(self):
        return f"UnbalancedTagsError({self.tag!r}, expected={self.expected!r}, pos={self.pos!r})"

    def __str__(self):
        if self.expected is None:
            message = f"unbalanced tags: </{self.tag}> with no open tag"
        else:
            message = f"unbalanced tags: </{self.tag}> while <{self.expected}> is open"
        if self.pos is not None:
            return f"{message} (offset {self.pos})"
        return message
