"""Tests for the token stream produced by Tokenizer."""

import unittest

from truncatehtml.tokenizer import Tokenizer
from truncatehtml.tokens import CharacterToken, CommentToken, EntityToken, EOFToken, Tag, TokenSinkResult


class RecordingSink:
    """Collects tokens, optionally stopping after a number of them."""

    def __init__(self, stop_after=None):
        self.tokens = []
        self.stop_after = stop_after

    def process_token(self, token):
        self.tokens.append(token)
        if self.stop_after is not None and len(self.tokens) >= self.stop_after:
            return TokenSinkResult.Stop
        return TokenSinkResult.Continue


def _token_to_list(token):
    if isinstance(token, Tag):
        kind = "StartTag" if token.kind == Tag.START else "EndTag"
        return [kind, token.name, token.text, token.self_closing]
    if isinstance(token, CommentToken):
        return ["Comment", token.data]
    if isinstance(token, EntityToken):
        return ["Entity", token.data]
    if isinstance(token, CharacterToken):
        return ["Character", token.data]
    if isinstance(token, EOFToken):
        return ["EOF"]
    return None


def tokenize(text):
    sink = RecordingSink()
    Tokenizer(sink).run(text)
    return [_token_to_list(t) for t in sink.tokens]


class TestTokenizer(unittest.TestCase):
    def test_empty_input(self):
        assert tokenize("") == [["EOF"]]

    def test_token_classes(self):
        assert tokenize("<p class='x'>a&amp;<!-- c --></p>") == [
            ["StartTag", "p", "<p class='x'>", False],
            ["Character", "a"],
            ["Entity", "&amp;"],
            ["Comment", " c "],
            ["EndTag", "p", "</p>", False],
            ["EOF"],
        ]

    def test_multibyte_characters_are_single_tokens(self):
        assert tokenize("😄é") == [["Character", "😄"], ["Character", "é"], ["EOF"]]

    def test_self_closing_flag(self):
        assert tokenize("<br/>")[0] == ["StartTag", "br", "<br/>", True]
        assert tokenize("<img src='a.png' />")[0][3] is True

    def test_declaration_has_empty_name(self):
        assert tokenize("<!DOCTYPE html>")[0] == ["StartTag", "", "<!DOCTYPE html>", False]

    def test_unterminated_comment_is_text(self):
        tokens = tokenize("<!-- open")
        assert tokens[0] == ["Character", "<"]
        assert tokens[1] == ["Character", "!"]

    def test_unterminated_comment_falls_back_to_tag(self):
        assert tokenize("<!-- a >b")[0] == ["StartTag", "", "<!-- a >", False]

    def test_lone_less_than_is_text(self):
        assert tokenize("a<b") == [
            ["Character", "a"],
            ["Character", "<"],
            ["Character", "b"],
            ["EOF"],
        ]

    def test_numeric_entity(self):
        assert tokenize("&#169;")[0] == ["Entity", "&#169;"]

    def test_unterminated_entity_is_text(self):
        assert tokenize("&amp")[0] == ["Character", "&"]

    def test_comment_spans_lines(self):
        assert tokenize("<!--a\nb-->")[0] == ["Comment", "a\nb"]

    def test_end_tag(self):
        assert tokenize("</em >")[0] == ["EndTag", "em", "</em >", False]

    def test_consecutive_comments_and_tags(self):
        assert tokenize("<!--a--><i><!--b--></i>") == [
            ["Comment", "a"],
            ["StartTag", "i", "<i>", False],
            ["Comment", "b"],
            ["EndTag", "i", "</i>", False],
            ["EOF"],
        ]

    def test_close_markers_behind_cursor_are_not_reused(self):
        assert tokenize("<!--a-->x-->y<!--z-->") == [
            ["Comment", "a"],
            ["Character", "x"],
            ["Character", "-"],
            ["Character", "-"],
            ["Character", ">"],
            ["Character", "y"],
            ["Comment", "z"],
            ["EOF"],
        ]
        assert tokenize("<!-- open <i>x</i>") == [
            ["StartTag", "", "<!-- open <i>", False],
            ["Character", "x"],
            ["EndTag", "i", "</i>", False],
            ["EOF"],
        ]


class TestTokenizerStop(unittest.TestCase):
    def test_stop_sets_position(self):
        sink = RecordingSink(stop_after=2)
        tokenizer = Tokenizer(sink)
        tokenizer.run("<b>xyz</b>")
        assert tokenizer.stopped
        assert tokenizer.pos == 4
        assert len(sink.tokens) == 2

    def test_run_to_end(self):
        sink = RecordingSink()
        tokenizer = Tokenizer(sink)
        tokenizer.run("ab")
        assert not tokenizer.stopped
        assert tokenizer.pos == 2
        assert isinstance(sink.tokens[-1], EOFToken)

    def test_rerun_resets_state(self):
        sink = RecordingSink(stop_after=1)
        tokenizer = Tokenizer(sink)
        tokenizer.run("abc")
        sink.stop_after = None
        tokenizer.run("xy")
        assert not tokenizer.stopped
        assert tokenizer.pos == 2

    def test_rerun_forgets_close_markers(self):
        sink = RecordingSink()
        tokenizer = Tokenizer(sink)
        tokenizer.run("<a>")
        sink.tokens = []
        tokenizer.run("<")
        assert [_token_to_list(t) for t in sink.tokens] == [["Character", "<"], ["EOF"]]


if __name__ == "__main__":
    unittest.main()
