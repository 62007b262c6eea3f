"""
talecal.engines.template
------------------------
A restricted interpreter for the EJS-style display templates.

Supported tags:
    <%= expr %>   output, HTML-escaped
    <%- expr %>   output, raw
    <%  code %>   control flow: ``if (expr) {``, ``} else if (expr) {``, ``} else {``, ``}``
    <%# ... %>    comment
    <%%           a literal ``<%``

Expressions are a small JavaScript-like subset: number and string literals,
``true``/``false``/``null``/``undefined``, names from a fixed namespace,
unary ``!``/``-``, arithmetic ``+ - * / %``, comparisons, ``== === != !==``,
``&&``, ``||``, the conditional ``?:`` and parentheses. ``&&`` and ``||``
return an operand (not a bool), as in JavaScript.

No attribute access, calls, assignment or loops: there is no way to reach
anything outside the namespace passed to :meth:`Template.render`.
"""

from __future__ import annotations

import html
import math
import re
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.errors import TemplateError, TemplateSyntaxError, UndefinedVariableError

MAX_NESTING = 32

# ---------------------------------------------------------
# JavaScript-ish value semantics
# ---------------------------------------------------------

def truthy(v: Any) -> bool:
    if v is None or v is False:
        return False
    if isinstance(v, (int, float)):
        return v != 0 and not (isinstance(v, float) and math.isnan(v))
    if isinstance(v, str):
        return v != ""
    return True


def to_text(v: Any) -> str:
    if v is None:
        return ""
    if v is True:
        return "true"
    if v is False:
        return "false"
    if isinstance(v, float):
        if math.isnan(v):
            return "NaN"
        if math.isinf(v):
            return "Infinity" if v > 0 else "-Infinity"
        if v.is_integer():
            return str(int(v))
    try:
        return str(v)
    except ValueError as e:  # int beyond the interpreter's digit limit
        raise TemplateError(f"number too large to display: {e}") from e


def to_number(v: Any) -> float:
    if v is None:
        return 0
    if isinstance(v, bool):
        return int(v)
    if isinstance(v, (int, float)):
        return v
    try:
        return float(str(v).strip() or 0)
    except ValueError:
        return math.nan


def _loose_equal(a: Any, b: Any) -> bool:
    if isinstance(a, str) and isinstance(b, (int, float)) and not isinstance(b, bool):
        return to_number(a) == b
    if isinstance(b, str) and isinstance(a, (int, float)) and not isinstance(a, bool):
        return a == to_number(b)
    return _strict_equal(a, b)


def _strict_equal(a: Any, b: Any) -> bool:
    if isinstance(a, bool) or isinstance(b, bool):
        return a is b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    return type(a) is type(b) and a == b


# ---------------------------------------------------------
# Expression AST
# ---------------------------------------------------------

class Expr:
    def eval(self, ns: Mapping[str, Any]) -> Any:  # pragma: no cover - abstract
        raise NotImplementedError


@dataclass(frozen=True)
class Literal(Expr):
    value: Any

    def eval(self, ns):
        return self.value


@dataclass(frozen=True)
class Name(Expr):
    name: str

    def eval(self, ns):
        if self.name not in ns:
            raise UndefinedVariableError(f"{self.name} is not defined")
        return ns[self.name]


@dataclass(frozen=True)
class Unary(Expr):
    op: str
    operand: Expr

    def eval(self, ns):
        v = self.operand.eval(ns)
        if self.op == "!":
            return not truthy(v)
        return -to_number(v)


@dataclass(frozen=True)
class Binary(Expr):
    op: str
    left: Expr
    right: Expr

    def eval(self, ns):
        op = self.op
        if op == "&&":
            a = self.left.eval(ns)
            return self.right.eval(ns) if truthy(a) else a
        if op == "||":
            a = self.left.eval(ns)
            return a if truthy(a) else self.right.eval(ns)

        a, b = self.left.eval(ns), self.right.eval(ns)
        if op == "+":
            if isinstance(a, str) or isinstance(b, str):
                return to_text(a) + to_text(b)
        if op in ("==", "!="):
            eq = _loose_equal(a, b)
            return eq if op == "==" else not eq
        if op in ("===", "!=="):
            eq = _strict_equal(a, b)
            return eq if op == "===" else not eq
        if op in ("<", ">", "<=", ">="):
            if not (isinstance(a, str) and isinstance(b, str)):
                a, b = to_number(a), to_number(b)
            if op == "<":
                return a < b
            if op == ">":
                return a > b
            if op == "<=":
                return a <= b
            return a >= b

        x, y = to_number(a), to_number(b)
        if op in ("/", "%") and y == 0:
            raise TemplateError(f"division by zero in '{op}'")
        try:
            return _arithmetic(op, x, y)
        except (OverflowError, ValueError) as e:
            raise TemplateError(f"numeric error in '{op}': {e}") from e


def _arithmetic(op: str, x: Any, y: Any) -> Any:
    if op == "+":
        return x + y
    if op == "-":
        return x - y
    if op == "*":
        return x * y
    if op == "/":
        q = x / y
        return int(q) if float(q).is_integer() else q
    if isinstance(x, float) or isinstance(y, float):
        if math.isinf(x) or math.isnan(x) or math.isnan(y):
            return math.nan
        return math.fmod(x, y)
    # remainder takes the sign of the dividend
    r = abs(x) % abs(y)
    return -r if x < 0 else r


@dataclass(frozen=True)
class Conditional(Expr):
    test: Expr
    then: Expr
    otherwise: Expr

    def eval(self, ns):
        return self.then.eval(ns) if truthy(self.test.eval(ns)) else self.otherwise.eval(ns)


# ---------------------------------------------------------
# Template AST
# ---------------------------------------------------------

@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Output:
    expr: Expr
    escape: bool


@dataclass(frozen=True)
class If:
    test: Expr
    body: Tuple["Node", ...]
    orelse: Tuple["Node", ...] = ()


Node = Union[Text, Output, If]

# ---------------------------------------------------------
# Lexing
# ---------------------------------------------------------

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<num>\d+(?:\.\d+)?)
  | (?P<str>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
  | (?P<name>[A-Za-z_$][A-Za-z0-9_$]*)
  | (?P<op>===|!==|==|!=|<=|>=|&&|\|\||[-+*/%<>!?:(){};])
    """,
    re.VERBOSE,
)

_KEYWORDS = {"true": True, "false": False, "null": None, "undefined": None}
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", "'": "'", '"': '"'}


def _number(text: str) -> Any:
    if "." in text:
        return float(text)
    try:
        return int(text)
    except ValueError:  # beyond the interpreter's int-string limit
        return float(text)


@dataclass(frozen=True)
class Token:
    kind: str  # "num" | "str" | "name" | "op"
    value: Any
    text: str


def tokenize(src: str) -> List[Token]:
    out: List[Token] = []
    pos = 0
    while pos < len(src):
        m = _TOKEN_RE.match(src, pos)
        if m is None:
            raise TemplateSyntaxError(f"unexpected character {src[pos]!r} in {src.strip()!r}")
        pos = m.end()
        kind = m.lastgroup
        text = m.group()
        if kind == "ws":
            continue
        if kind == "num":
            out.append(Token("num", _number(text), text))
        elif kind == "str":
            body = re.sub(r"\\(.)", lambda e: _ESCAPES.get(e.group(1), e.group(1)), text[1:-1])
            out.append(Token("str", body, text))
        else:
            out.append(Token(kind, text, text))
    return out


def split_tags(template: str) -> List[Tuple[str, str]]:
    """Split into (kind, body) pieces; kind is text, output, raw or code."""
    pieces: List[Tuple[str, str]] = []
    pos = 0
    buf = ""
    while True:
        start = template.find("<%", pos)
        if start < 0:
            buf += template[pos:]
            break
        buf += template[pos:start]
        if template.startswith("<%%", start):
            buf += "<%"
            pos = start + 3
            continue
        end = template.find("%>", start + 2)
        if end < 0:
            raise TemplateSyntaxError(f"unclosed tag at offset {start}")
        if buf:
            pieces.append(("text", buf))
            buf = ""
        marker = template[start + 2:start + 3]
        body = template[start + 2:end]
        if marker == "=":
            pieces.append(("output", body[1:]))
        elif marker == "-":
            pieces.append(("raw", body[1:]))
        elif marker != "#":
            pieces.append(("code", body))
        pos = end + 2
    if buf:
        pieces.append(("text", buf))
    return pieces


# ---------------------------------------------------------
# Parsing
# ---------------------------------------------------------

Item = Union[Token, Node]


class _Parser:
    """Recursive descent over a stream of code tokens interleaved with text/output nodes."""

    def __init__(self, items: Sequence[Item]):
        self.items = items
        self.i = 0
        self.depth = 0

    @contextmanager
    def nested(self) -> Iterator[None]:
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise TemplateSyntaxError(f"template nested deeper than {MAX_NESTING} levels")
        try:
            yield
        finally:
            self.depth -= 1

    # -- stream helpers --
    def peek(self) -> Optional[Item]:
        return self.items[self.i] if self.i < len(self.items) else None

    def at(self, text: str) -> bool:
        it = self.peek()
        return isinstance(it, Token) and it.kind in ("op", "name") and it.text == text

    def take(self) -> Item:
        it = self.peek()
        if it is None:
            raise TemplateSyntaxError("unexpected end of template")
        self.i += 1
        return it

    def expect(self, text: str) -> None:
        if not self.at(text):
            it = self.peek()
            found = "end of template" if it is None else (it.text if isinstance(it, Token) else "template text")
            raise TemplateSyntaxError(f"expected '{text}' but found {found!r}")
        self.i += 1

    # -- statements --
    def block(self, nested: bool) -> Tuple[Node, ...]:
        nodes: List[Node] = []
        while True:
            it = self.peek()
            if it is None:
                if nested:
                    raise TemplateSyntaxError("missing '}' to close an if block")
                return tuple(nodes)
            if not isinstance(it, Token):
                nodes.append(it)
                self.i += 1
            elif self.at("}"):
                if not nested:
                    raise TemplateSyntaxError("unexpected '}'")
                return tuple(nodes)
            elif self.at(";"):
                self.i += 1
            elif self.at("if"):
                nodes.append(self.if_statement())
            else:
                raise TemplateSyntaxError(f"unsupported statement starting at {it.text!r}")

    def if_statement(self) -> If:
        with self.nested():
            self.expect("if")
            self.expect("(")
            test = self.expression()
            self.expect(")")
            self.expect("{")
            body = self.block(nested=True)
            self.expect("}")
            orelse: Tuple[Node, ...] = ()
            if self.at("else"):
                self.i += 1
                if self.at("if"):
                    orelse = (self.if_statement(),)
                else:
                    self.expect("{")
                    orelse = self.block(nested=True)
                    self.expect("}")
            return If(test, body, orelse)

    # -- expressions (lowest to highest precedence) --
    def expression(self) -> Expr:
        with self.nested():
            test = self.binary(0)
            if self.at("?"):
                self.i += 1
                then = self.expression()
                self.expect(":")
                return Conditional(test, then, self.expression())
            return test

    _LEVELS: Tuple[Tuple[str, ...], ...] = (
        ("||",),
        ("&&",),
        ("==", "!=", "===", "!=="),
        ("<", ">", "<=", ">="),
        ("+", "-"),
        ("*", "/", "%"),
    )

    def binary(self, level: int) -> Expr:
        if level == len(self._LEVELS):
            return self.unary()
        left = self.binary(level + 1)
        while True:
            it = self.peek()
            if isinstance(it, Token) and it.kind == "op" and it.text in self._LEVELS[level]:
                self.i += 1
                left = Binary(it.text, left, self.binary(level + 1))
            else:
                return left

    def unary(self) -> Expr:
        if self.at("!") or self.at("-"):
            op = self.take().text  # type: ignore[union-attr]
            with self.nested():
                return Unary(op, self.unary())
        return self.primary()

    def primary(self) -> Expr:
        it = self.take()
        if not isinstance(it, Token):
            raise TemplateSyntaxError("expression interrupted by template text")
        if it.kind in ("num", "str"):
            return Literal(it.value)
        if it.kind == "name":
            if it.text in _KEYWORDS:
                return Literal(_KEYWORDS[it.text])
            return Name(it.text)
        if it.text == "(":
            inner = self.expression()
            self.expect(")")
            return inner
        raise TemplateSyntaxError(f"unexpected {it.text!r} in expression")


def parse_expression(src: str) -> Expr:
    p = _Parser(tokenize(src))
    if p.peek() is None:
        raise TemplateSyntaxError("empty expression")
    expr = p.expression()
    if p.peek() is not None:
        raise TemplateSyntaxError(f"unexpected {p.peek().text!r} after expression")  # type: ignore[union-attr]
    return expr


# ---------------------------------------------------------
# Compiled templates
# ---------------------------------------------------------

@dataclass(frozen=True)
class Template:
    source: str
    nodes: Tuple[Node, ...]

    def render(self, ns: Mapping[str, Any]) -> str:
        out: List[str] = []
        try:
            _render(self.nodes, ns, out)
        except RecursionError as e:
            raise TemplateError("expression too long to evaluate") from e
        return "".join(out)


def _render(nodes: Sequence[Node], ns: Mapping[str, Any], out: List[str]) -> None:
    for node in nodes:
        if isinstance(node, Text):
            out.append(node.text)
        elif isinstance(node, Output):
            s = to_text(node.expr.eval(ns))
            out.append(html.escape(s) if node.escape else s)
        else:
            _render(node.body if truthy(node.test.eval(ns)) else node.orelse, ns, out)


@lru_cache(maxsize=256)
def compile_template(source: str) -> Template:
    items: List[Item] = []
    for kind, body in split_tags(source):
        if kind == "text":
            items.append(Text(body))
        elif kind == "code":
            items.extend(tokenize(body))
        else:
            items.append(Output(parse_expression(body), escape=(kind == "output")))
    return Template(source, _Parser(items).block(nested=False))


def render(source: str, ns: Mapping[str, Any]) -> str:
    """Compile (cached) and render; raises TemplateError subclasses on failure."""
    return compile_template(source).render(ns)
