import unittest

from razorfmt import Config, format, format_document
from razorfmt.document import find_code_regions
from razorfmt.tokens import FormatWarning


def identity(text):
    return text, None


class TestFindCodeRegions(unittest.TestCase):
    def test_regions_and_line_numbers(self):
        text = "a\n@code {\n}\nb\n@functions { int x; }"
        regions = find_code_regions(text)
        assert [(r.keyword, r.start_line, r.end_line) for r in regions] == [("code", 1, 2), ("functions", 4, 4)]
        assert regions[0].body == "\n"
        assert regions[1].body == " int x; "

    def test_indented_block_still_owns_its_lines(self):
        regions = find_code_regions("  @code {\n  int x;\n  }  ")
        assert len(regions) == 1

    def test_block_sharing_a_line_is_not_a_region(self):
        assert find_code_regions("<p>x</p> @code { int x; }") == []
        assert find_code_regions("@code { int x; } <p>x</p>") == []

    def test_sigil_inside_word_is_ignored(self):
        assert find_code_regions("mail@code {x}") == []
        assert find_code_regions("@@code {x}") == []

    def test_braces_in_strings(self):
        regions = find_code_regions('@code {\n  string s = "}";\n}')
        assert len(regions) == 1
        assert regions[0].end_line == 2

    def test_unbalanced_block(self):
        assert find_code_regions("@code {\n int x;\n") == []


class TestCodeRegions(unittest.TestCase):
    def test_kept_verbatim_without_collaborator(self):
        source = "<p>a</p>\n\n@code {\n  int  x;\n}\n"
        assert format(source) == source

    def test_collaborator_output_is_wrapped(self):
        seen = []

        def collaborator(text):
            seen.append(text)
            return "int x;", None

        result = format("<p>a</p>\n@code {\n  int  x;\n}", code_formatter=collaborator)
        assert result == "<p>a</p>\n\n@code {\n    int x;\n}"
        assert seen == ["\n  int  x;\n"]

    def test_code_indent_size(self):
        result = format("@code {\nint x;\n}", Config(code_indent_size=2), code_formatter=identity)
        assert result == "@code {\n  int x;\n}"

    def test_no_blank_line_before_code_when_disabled(self):
        config = Config(blank_line_before_code=False)
        result = format("<p>a</p>\n@code {\nint x;\n}", config, code_formatter=identity)
        assert result == "<p>a</p>\n@code {\n    int x;\n}"

    def test_functions_keyword_is_kept(self):
        result = format("@functions {\n int x;\n}", code_formatter=identity)
        assert result == "@functions {\n    int x;\n}"

    def test_empty_code_block(self):
        assert format("@code {\n}", code_formatter=identity) == "@code {\n}"

    def test_markup_between_regions(self):
        source = "@code {\n}\n\n<div><p>a</p></div>\n\n@code {\n}"
        result = format(source, code_formatter=identity)
        assert result == "@code {\n}\n\n<div>\n    <p>a</p>\n</div>\n\n@code {\n}"

    def test_inline_code_block_stays_in_markup(self):
        seen = []
        result = format("<p>x</p> @code { int x; }", code_formatter=lambda t: seen.append(t) or (t, None))
        assert result == "<p>x</p>\n\n@code { int x; }"
        assert seen == []

    def test_idempotent_with_identity_collaborator(self):
        source = "<div><p>a</p></div>\n@code {\n        private int count;\n\n        void Go() { }\n}\n"
        once = format(source, code_formatter=identity)
        assert format(once, code_formatter=identity) == once


class TestCollaboratorFailures(unittest.TestCase):
    def test_error_result_keeps_region_and_warns(self):
        source = "<p>a</p>\n@code {\n  int  x;\n}"
        result = format_document(source, code_formatter=lambda text: (None, "csharpier not found"))
        assert result.text == source
        assert result.warnings == [FormatWarning("code-formatter-error", line=2)]
        assert str(result.warnings[0]) == "(2): code-formatter-error - csharpier not found"

    def test_raising_collaborator(self):
        def boom(text):
            raise RuntimeError("boom")

        with self.assertLogs("razorfmt.collaborators", level="WARNING"):
            result = format_document("@code {\n}", code_formatter=boom)
        assert result.text == "@code {\n}"
        assert result.warnings[0].message == "RuntimeError: boom"

    def test_missing_output_is_an_error(self):
        result = format_document("@code {\n}", code_formatter=lambda text: (None, None))
        assert [w.code for w in result.warnings] == ["code-formatter-error"]

    def test_style_failure_keeps_content(self):
        def boom(text, indent_size):
            raise ValueError("bad css")

        config = Config(style={"enabled": True})
        result = format_document("<style>a{}</style>", config, style_formatter=boom)
        assert result.text == "<style>\n    a{}\n</style>"
        assert result.warnings == [FormatWarning("style-formatter-error")]

    def test_code_block_warning_from_markup(self):
        result = format_document("<div>@{ x(); }</div>", code_formatter=lambda text: (None, "nope"))
        assert [w.code for w in result.warnings] == ["code-formatter-error"]
        assert "x();" in result.text


class TestDocumentText(unittest.TestCase):
    def test_crlf_is_restored(self):
        assert format("<div><p>a</p></div>\r\n") == "<div>\r\n    <p>a</p>\r\n</div>\r\n"

    def test_trailing_newline_is_kept(self):
        assert format("<p>a</p>\n") == "<p>a</p>\n"
        assert format("<p>a</p>") == "<p>a</p>"

    def test_empty_input(self):
        assert format("") == ""
        assert format_document("").warnings == []

    def test_markup_formatting_can_be_disabled(self):
        source = "<div><p>a</p></div>\n"
        assert format(source, Config(format_html=False)) == source

    def test_format_matches_format_document(self):
        source = "<ul><li>a</li></ul>"
        assert format(source) == format_document(source).text


if __name__ == "__main__":
    unittest.main()
