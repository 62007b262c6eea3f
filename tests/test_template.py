# tests/test_template.py

import pytest

from talecal.core.errors import TemplateError, TemplateSyntaxError, UndefinedVariableError
from talecal.engines.template import compile_template, parse_expression, render


def test_output_and_text():
    assert render("Hello <%= name %>!", {"name": "Ada"}) == "Hello Ada!"
    assert render("no tags", {}) == "no tags"
    assert render("<%= n %>", {"n": 7}) == "7"


def test_escaping():
    assert render("<%= x %>", {"x": "<b>&"}) == "&lt;b&gt;&amp;"
    assert render("<%- x %>", {"x": "<b>"}) == "<b>"


def test_literal_open_tag_and_comments():
    assert render("<%% not a tag", {}) == "<% not a tag"
    assert render("a<%# ignored %>b", {}) == "ab"


def test_if_else_chain():
    src = "<% if (n == 1) { %>one<% } else if (n == 2) { %>two<% } else { %>many<% } %>"
    assert render(src, {"n": 1}) == "one"
    assert render(src, {"n": 2}) == "two"
    assert render(src, {"n": 9}) == "many"
    assert render("<% if (h) { %>[<%= h %>]<% } %>.", {"h": ""}) == "."


def test_operators():
    ns = {"a": 1, "b": "x", "n": 6}
    assert render("<%= a && b %>", ns) == "x"
    assert render("<%= 0 || b %>", ns) == "x"
    assert render("<%= !a %>", ns) == "false"
    assert render("<%= 1 + 2 * 3 %>", ns) == "7"
    assert render("<%= (1 + 2) * 3 %>", ns) == "9"
    assert render("<%= n / 2 %>", ns) == "3"
    assert render("<%= 7 / 2 %>", ns) == "3.5"
    assert render("<%= n % 4 %>", ns) == "2"
    assert render("<%= -n + 1 %>", ns) == "-5"
    assert render("<%= 'Day ' + n %>", ns) == "Day 6"
    assert render("<%= n == '6' %>", ns) == "true"
    assert render("<%= n === '6' %>", ns) == "false"
    assert render("<%= n >= 6 ? 'big' : 'small' %>", ns) == "big"
    assert render('<%= "it\\"s" %>', ns) == "it&quot;s"


def test_undefined_name():
    with pytest.raises(UndefinedVariableError, match="unknownVar"):
        render("<%= unknownVar %>", {})


def test_syntax_errors():
    for bad in ("<%= x ", "<%= %>", "<% if (x) { %>open", "<% } %>", "<%= a b %>", "<% while (x) { %><% } %>", "<%= a.b %>"):
        with pytest.raises(TemplateSyntaxError):
            render(bad, {"x": 1, "a": 1, "b": 2})


def test_division_by_zero():
    with pytest.raises(TemplateError):
        render("<%= 1 / 0 %>", {})


def test_compiled_templates_are_cached():
    src = "<%= year %>"
    assert compile_template(src) is compile_template(src)
    assert parse_expression("a + 1").eval({"a": 2}) == 3


HUGE = "9" * 400


def test_remainder_and_infinity():
    assert render("<%= -7 % 3 %>", {}) == "-1"
    assert render("<%= 7 % -3 %>", {}) == "1"
    assert render("<%= 7.5 % 2 %>", {}) == "1.5"
    assert render(f"<%= {HUGE}.5 %>", {}) == "Infinity"
    assert render(f"<%= -{HUGE}.5 %>", {}) == "-Infinity"
    assert render(f"<%= {HUGE}.5 % 2 %>", {}) == "NaN"
    with pytest.raises(TemplateError):
        render("<%= 5 % 0 %>", {})


def test_numeric_overflow_is_a_template_error():
    with pytest.raises(TemplateError, match="numeric error"):
        render(f"<%= {HUGE} / 3 %>", {})
    with pytest.raises(TemplateError):
        render(f"<%= {HUGE} % 2.5 %>", {})
    # integers stay exact when they fit
    assert render(f"<%= {HUGE} - 1 %>", {}) == "9" * 399 + "8"


def test_deep_nesting_is_rejected():
    with pytest.raises(TemplateSyntaxError, match="nested deeper"):
        render("<%= " + "(" * 3000 + "1" + ")" * 3000 + " %>", {})
    with pytest.raises(TemplateSyntaxError, match="nested deeper"):
        render("<%= " + "!" * 3000 + "x %>", {"x": 1})
    with pytest.raises(TemplateSyntaxError, match="nested deeper"):
        render("<% if (x) { %>" * 40 + "y" + "<% } %>" * 40, {"x": 1})
    assert render("<%= " + "(" * 20 + "1" + ")" * 20 + " %>", {}) == "1"


def test_long_chains_are_a_template_error():
    src = "<%= " + " + ".join(["1"] * 3000) + " %>"
    with pytest.raises(TemplateError, match="too long"):
        render(src, {})
    assert render("<%= " + " + ".join(["1"] * 50) + " %>", {}) == "50"
