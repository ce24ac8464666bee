"""
Unit tests for the card text round-trip (render_card_text / parse_card_text)
"""

from unittest.mock import MagicMock

import pytest

from trellokit import Card, CardContents, CardParseError, parse_card_text, render_card_text
from trellokit.card_text import is_delimiter_line


class TestRenderCardText:
    """Test rendering a card name and description to editable text"""

    def test_render_single_line_name(self):
        """Should underline the name with '=' to its width"""
        assert render_card_text("Hello World", "This is my card") == (
            "Hello World\n===========\nThis is my card"
        )

    def test_render_multi_line_name_uses_last_line_width(self):
        """Delimiter width follows the last line of the name"""
        assert render_card_text("A\nLonger line", "") == "A\nLonger line\n===========\n"

    def test_render_empty_description(self):
        """Should end with the delimiter line followed by an empty description"""
        assert render_card_text("Title", "") == "Title\n=====\n"

    def test_render_multi_line_description_verbatim(self):
        """Description is copied verbatim, whitespace included"""
        desc = "  indented\n\n- item\ttab  "
        assert render_card_text("T", desc) == "T\n=\n" + desc

    def test_render_wide_characters(self):
        """Wide characters take two columns in the delimiter line"""
        assert render_card_text("日本", "") == "日本\n====\n"

    def test_card_render_delegates(self):
        """Card.render() should produce the same text"""
        card = Card("1", "Hello World", "This is my card")
        assert card.render() == render_card_text("Hello World", "This is my card")

    def test_render_is_deterministic(self):
        assert render_card_text("Name", "Desc") == render_card_text("Name", "Desc")


class TestParseCardText:
    """Test parsing an edited buffer back into CardContents"""

    def test_parse_basic(self):
        """Should split name and description on the delimiter line"""
        contents = parse_card_text("Hello World\n===\nThis is my card")
        assert contents == CardContents(name="Hello World", desc="This is my card")

    def test_parse_multi_line_name(self):
        """Lines before the delimiter all belong to the name"""
        contents = parse_card_text("Line One\nLine Two\n===\nDesc")
        assert contents.name == "Line One\nLine Two"
        assert contents.desc == "Desc"

    def test_parse_empty_description(self):
        """Nothing after the delimiter gives an empty description, not None"""
        contents = parse_card_text("Title\n===\n")
        assert contents.desc == ""

    def test_parse_delimiter_as_last_line(self):
        """Delimiter on the final line without a newline also gives an empty description"""
        assert parse_card_text("Title\n===") == CardContents(name="Title", desc="")

    @pytest.mark.parametrize("delimiter", ["=", "==", "=====", "=" * 80])
    def test_parse_delimiter_length_is_irrelevant(self, delimiter):
        """Users may grow or shrink the name without fixing the delimiter"""
        contents = parse_card_text(f"Title\n{delimiter}\nBody")
        assert contents == CardContents(name="Title", desc="Body")

    def test_parse_multi_line_description(self):
        """Everything after the first delimiter is description, including later delimiters"""
        contents = parse_card_text("Title\n===\nfirst\n\n===\nlast")
        assert contents.desc == "first\n\n===\nlast"

    def test_parse_first_line_is_always_name(self):
        """The first line is the name even if it looks like a delimiter"""
        contents = parse_card_text("===\n==\nBody")
        assert contents == CardContents(name="===", desc="Body")

    def test_parse_does_not_trim_whitespace(self):
        """Leading and trailing whitespace is preserved"""
        contents = parse_card_text("  Title  \n===\n  body  ")
        assert contents == CardContents(name="  Title  ", desc="  body  ")

    def test_parse_line_with_equals_and_text_is_name(self):
        """A line containing '=' and other characters is not a delimiter"""
        contents = parse_card_text("a\n=== x\n===\nb")
        assert contents.name == "a\n=== x"
        assert contents.desc == "b"

    def test_parse_without_delimiter_raises(self):
        """Single line with no delimiter should fail"""
        with pytest.raises(CardParseError, match="Unable to find name delimiter"):
            parse_card_text("Hello World")

    def test_parse_without_delimiter_multi_line_raises(self):
        with pytest.raises(CardParseError):
            parse_card_text("Hello\nWorld\nno delimiter here")

    def test_parse_empty_line_counts_as_delimiter(self):
        """An empty line is made entirely of '=' characters (vacuously)"""
        contents = parse_card_text("Title\n\nBody")
        assert contents == CardContents(name="Title", desc="Body")

    def test_parse_crlf_delimiter_is_not_recognised(self):
        """'\\r' is not stripped, so CRLF buffers must be normalised by the caller"""
        with pytest.raises(CardParseError):
            parse_card_text("Title\r\n===\r\nBody")

    def test_parse_is_deterministic(self):
        buffer = "Name\n===\nDesc"
        assert parse_card_text(buffer) == parse_card_text(buffer)

    def test_parse_logs_to_injected_logger(self):
        """Should trace the split lines and each consumed line on the given logger"""
        log = MagicMock()

        parse_card_text("Name\nMore\n===\nDesc", log=log)

        assert log.debug.call_count >= 3
        first_call = log.debug.call_args_list[0]
        assert first_call[0][1] == ["Name", "More", "===", "Desc"]

    def test_parse_error_is_not_api_error(self):
        """Callers can tell parse failures from HTTP failures"""
        from trellokit import TrelloAPIError, TrelloError

        with pytest.raises(CardParseError) as exc_info:
            parse_card_text("no delimiter")
        assert isinstance(exc_info.value, TrelloError)
        assert not isinstance(exc_info.value, TrelloAPIError)


class TestRoundTrip:
    """parse(render(name, desc)) should give back the original fields"""

    @pytest.mark.parametrize(
        "name,desc",
        [
            ("Hello World", "This is my card"),
            ("Multi\nline name", "Multi\nline\n\ndescription"),
            ("Short", ""),
            ("Name with = inside", "=====\nstarts with a delimiter-looking line"),
            ("", "description of an unnamed card"),
        ],
    )
    def test_round_trip(self, name, desc):
        assert parse_card_text(render_card_text(name, desc)) == CardContents(name=name, desc=desc)

    def test_round_trip_from_card(self):
        card = Card("1", "Buy groceries", "Milk, eggs\nand bread")
        contents = parse_card_text(card.render())
        assert (contents.name, contents.desc) == (card.name, card.desc)


class TestDelimiterLine:
    @pytest.mark.parametrize("line", ["=", "====", ""])
    def test_delimiter_lines(self, line):
        assert is_delimiter_line(line)

    @pytest.mark.parametrize("line", ["-", "== =", " ===", "===\r", "Title"])
    def test_non_delimiter_lines(self, line):
        assert not is_delimiter_line(line)
