"""Tests for line-directive and control-flow recognition."""

import unittest

from razorfmt.directives import (
    consume_control_flow,
    consume_line_directive,
    parse_control_flow,
    parse_switch_cases,
)


class TestLineDirectives(unittest.TestCase):
    def test_consumes_to_end_of_line(self):
        text = "@using System.Text\n<p></p>"
        end = consume_line_directive(text, 0)
        assert text[:end] == "@using System.Text"

    def test_runs_to_end_of_text(self):
        text = '@page "/counter"'
        assert consume_line_directive(text, 0) == len(text)

    def test_all_known_directives(self):
        for name in ["inject", "namespace", "model", "layout", "typeparam", "rendermode", "attribute"]:
            assert consume_line_directive(f"@{name} X", 0) == len(name) + 3

    def test_must_be_lowercase(self):
        assert consume_line_directive("@Model.Name", 0) == -1
        assert consume_line_directive("@Using X", 0) == -1

    def test_expression_forms_are_not_directives(self):
        assert consume_line_directive("@model.Name", 0) == -1
        assert consume_line_directive("@page(1)", 0) == -1
        assert consume_line_directive("@layout[0]", 0) == -1

    def test_unknown_identifier(self):
        assert consume_line_directive("@user", 0) == -1
        assert consume_line_directive("@", 0) == -1
        assert consume_line_directive("x@page", 0) == -1

    def test_offset_position(self):
        text = "<p>\n@inject IFoo Foo\n"
        end = consume_line_directive(text, 4)
        assert text[4:end] == "@inject IFoo Foo"


class TestConsumeControlFlow(unittest.TestCase):
    def test_if_block(self):
        text = "@if (x) { y } tail"
        assert text[: consume_control_flow(text, 0)] == "@if (x) { y }"

    def test_chain_is_consumed_greedily(self):
        text = "@if (a) { A } else if (b) { B } else { C }\n<p>"
        assert text[: consume_control_flow(text, 0)] == "@if (a) { A } else if (b) { B } else { C }"

    def test_try_catch_finally(self):
        text = "@try { a } catch (Exception ex) { b } catch { c } finally { d }"
        assert consume_control_flow(text, 0) == len(text)

    def test_do_while_with_semicolon(self):
        text = "@do { X } while (cond);\nrest"
        assert text[: consume_control_flow(text, 0)] == "@do { X } while (cond);"

    def test_do_while_without_semicolon(self):
        text = "@do { X } while (cond) rest"
        assert text[: consume_control_flow(text, 0)] == "@do { X } while (cond)"

    def test_while_only_chains_after_do(self):
        text = "@if (a) { A } while (b) { B }"
        assert text[: consume_control_flow(text, 0)] == "@if (a) { A }"

    def test_failed_chain_lookahead_ends_block(self):
        text = "@if (a) { A } else (b)"
        assert text[: consume_control_flow(text, 0)] == "@if (a) { A }"

    def test_code_block_and_comment(self):
        assert consume_control_flow("@{ var x = 1; }", 0) == len("@{ var x = 1; }")
        assert consume_control_flow("@* note *@ x", 0) == len("@* note *@")

    def test_unterminated_comment_runs_to_end(self):
        text = "@* never closed"
        assert consume_control_flow(text, 0) == len(text)

    def test_using_statement_needs_parenthesis(self):
        assert consume_control_flow("@using System", 0) == -1
        text = "@using (var s = Open()) { <p>a</p> }"
        assert consume_control_flow(text, 0) == len(text)

    def test_section(self):
        text = "@section Scripts { <script></script> }"
        assert consume_control_flow(text, 0) == len(text)
        assert consume_control_flow("@section { x }", 0) == -1

    def test_braces_in_strings(self):
        text = '@if (s == "}") { <p>@("{")</p> }'
        assert consume_control_flow(text, 0) == len(text)

    def test_not_recognized(self):
        assert consume_control_flow("@Model.Name", 0) == -1
        assert consume_control_flow("@if (x) no body", 0) == -1
        assert consume_control_flow("@if (x { y }", 0) == -1
        assert consume_control_flow("@if (x) { y", 0) == -1
        assert consume_control_flow("@{ x", 0) == -1
        assert consume_control_flow("@", 0) == -1
        assert consume_control_flow("@ifx (a) { }", 0) == -1

    def test_keywords_are_case_sensitive(self):
        assert consume_control_flow("@If (x) { y }", 0) == -1

    def test_opaque_code_blocks_are_recognized(self):
        text = "@code { private int count; }"
        assert consume_control_flow(text, 0) == len(text)
        assert consume_control_flow("@functions { void F() { } }", 0) == len("@functions { void F() { } }")


class TestParseControlFlow(unittest.TestCase):
    def test_header_and_body(self):
        parsed = parse_control_flow("@if   (x)   { y }")
        assert parsed.keyword == "if"
        assert parsed.header_text == "@if (x)"
        assert parsed.body_text == " y "
        assert parsed.chains == []

    def test_keyword_without_condition(self):
        parsed = parse_control_flow("@try { a } finally { b }")
        assert parsed.header_text == "@try"
        assert [c.header_text for c in parsed.chains] == ["finally"]

    def test_chain_order(self):
        parsed = parse_control_flow("@if (a) { A } else if (b) { B } else { C }")
        assert [c.header_text for c in parsed.chains] == ["else if (b)", "else"]
        assert [c.body_text.strip() for c in parsed.chains] == ["B", "C"]

    def test_catch_headers(self):
        parsed = parse_control_flow("@try { a } catch (IOException e) { b } catch { c }")
        assert [c.header_text for c in parsed.chains] == ["catch (IOException e)", "catch"]

    def test_trailing_while(self):
        parsed = parse_control_flow("@do { X } while (i < 3);")
        assert parsed.header_text == "@do"
        assert len(parsed.chains) == 1
        chain = parsed.chains[0]
        assert chain.header_text == "while (i < 3)"
        assert chain.is_trailing_while
        assert chain.body_text is None

    def test_section_header(self):
        parsed = parse_control_flow("@section Scripts\n{\n<script></script>\n}")
        assert parsed.keyword == "section"
        assert parsed.header_text == "@section Scripts"

    def test_code_block(self):
        parsed = parse_control_flow("@{ var x = 1; }")
        assert parsed.keyword == ""
        assert parsed.header_text == "@"
        assert parsed.body_text == " var x = 1; "

    def test_returns_none_for_comments_and_opaque_blocks(self):
        assert parse_control_flow("@* comment *@") is None
        assert parse_control_flow("@code { int x; }") is None
        assert parse_control_flow("@functions { int x; }") is None

    def test_returns_none_for_unparseable(self):
        assert parse_control_flow("@if (x) {") is None
        assert parse_control_flow("if (x) { }") is None
        assert parse_control_flow("") is None


class TestParseSwitchCases(unittest.TestCase):
    def test_cases_and_default(self):
        body = """
            case 1:
                <p>One</p>
                break;
            case 2:
                <p>Two</p>
                break;
            default:
                <p>Other</p>
                break;
        """
        cases = parse_switch_cases(body)
        assert [c.label_text for c in cases] == ["case 1", "case 2", "default"]
        assert cases[0].content_text.split() == ["<p>One</p>", "break;"]
        assert cases[2].content_text.rstrip() == cases[2].content_text

    def test_property_pattern_braces(self):
        body = "case { IsLoading: true }:\n    <p>Loading</p>\ncase { Items.Count: 0 }:\n    <p>Empty</p>"
        cases = parse_switch_cases(body)
        assert [c.label_text for c in cases] == ["case { IsLoading: true }", "case { Items.Count: 0 }"]
        assert cases[1].content_text.strip() == "<p>Empty</p>"

    def test_quoted_colon_in_label(self):
        cases = parse_switch_cases('case "a:b":\n    <p>x</p>')
        assert [c.label_text for c in cases] == ['case "a:b"']

    def test_nested_braces_hide_labels(self):
        body = "case 1:\n    @if (x) { case 2: }\n    break;"
        cases = parse_switch_cases(body)
        assert len(cases) == 1
        assert "case 2:" in cases[0].content_text

    def test_case_word_inside_prose_is_not_a_label(self):
        body = "case 1:\n    <p>In that case you win</p>\n    break;"
        cases = parse_switch_cases(body)
        assert len(cases) == 1

    def test_labels_on_one_line(self):
        cases = parse_switch_cases("case 1: <b>a</b> break; case 2: <b>b</b> break;")
        assert [c.label_text for c in cases] == ["case 1", "case 2"]
        assert cases[0].content_text == "<b>a</b> break;"

    def test_empty_body(self):
        assert parse_switch_cases("   \n  ") == []

    def test_unassignable_text_returns_none(self):
        assert parse_switch_cases("<p>stray</p>\ncase 1: x") is None
        assert parse_switch_cases("default x") is None
        assert parse_switch_cases("case 1 <p>no colon</p>") is None


if __name__ == "__main__":
    unittest.main()
