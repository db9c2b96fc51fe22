from __future__ import annotations

import bisect
import html
import logging
import re

from .models import (
    ChildNode,
    DynamicExpression,
    ElementChild,
    ElementDescriptor,
    JsxAttribute,
    LiteralString,
    OtherChild,
    ParsedElement,
    TextChild,
)

logger = logging.getLogger("autotestid.parser")

_NAME_START = re.compile(r"[A-Za-z_$]")
_IDENT_CHAR = re.compile(r"[\w$]")
_TAG_NAME = re.compile(r"[A-Za-z_$][\w$-]*(?:[.:][A-Za-z_$][\w$-]*)*")
_ATTR_NAME = re.compile(r"[A-Za-z_$][\w$-]*(?::[A-Za-z_$][\w$-]*)?")
_STRING_EXPRESSION = re.compile(r"""\s*(?:"([^"\\\n]*)"|'([^'\\\n]*)')\s*""")

# Characters and keywords after which a '<' can only open a JSX element.
_EXPRESSION_PRECEDERS = frozenset("([{,;:=?!&|>}")
_EXPRESSION_KEYWORDS = frozenset({"return", "yield", "default", "case", "await", "else", "do"})


class JsxParseError(ValueError):
    pass


def parse_jsx_elements(source: str) -> list[ParsedElement]:
    return _JsxScanner(source).run()


def parse_jsx_element(snippet: str) -> ElementDescriptor:
    parsed = parse_jsx_elements(snippet)
    if not parsed:
        raise JsxParseError("No JSX element found")
    return parsed[0].element


class _JsxScanner:
    def __init__(self, source: str) -> None:
        self.source = source
        self.length = len(source)
        self.found: list[ParsedElement] = []
        self._line_starts = [0] + [match.end() for match in re.finditer(r"\n", source)]

    def run(self) -> list[ParsedElement]:
        self._scan_code(0, closing=None)
        self.found.sort(key=lambda item: item.start)
        return self.found

    def _scan_code(self, pos: int, closing: str | None) -> int:
        source = self.source
        depth = 0
        while pos < self.length:
            char = source[pos]
            if char in "\"'":
                pos = self._skip_string(pos)
                continue
            if char == "`":
                pos = self._skip_template(pos)
                continue
            if source.startswith("//", pos) or source.startswith("/*", pos):
                pos = self._skip_comment(pos)
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                if depth == 0 and closing == "}":
                    return pos + 1
                depth = max(depth - 1, 0)
            elif char == "<" and self._starts_jsx(pos):
                end = self._try_parse_element(pos)
                if end is not None:
                    pos = end
                    continue
            pos += 1

        if closing is not None:
            raise JsxParseError("Unterminated expression container")
        return pos

    def _starts_jsx(self, pos: int) -> bool:
        source = self.source
        following = source[pos + 1 : pos + 2]
        if following != ">" and not _NAME_START.match(following):
            return False

        index = pos - 1
        while index >= 0 and source[index].isspace():
            index -= 1
        if index < 0:
            return True

        previous = source[index]
        if previous in _EXPRESSION_PRECEDERS:
            return True
        if _IDENT_CHAR.match(previous):
            start = index
            while start > 0 and _IDENT_CHAR.match(source[start - 1]):
                start -= 1
            return source[start : index + 1] in _EXPRESSION_KEYWORDS
        return False

    def _try_parse_element(self, pos: int) -> int | None:
        mark = len(self.found)
        try:
            _, end = self._parse_element(pos)
        except JsxParseError as exc:
            del self.found[mark:]
            logger.debug("Skipping '<' at line %s: %s", self._position(pos)[0], exc)
            return None
        return end

    def _parse_element(self, pos: int) -> tuple[ElementDescriptor | None, int]:
        source = self.source
        if source.startswith("<>", pos):
            _, end = self._parse_children(pos + 2, closing_name="")
            return None, end

        match = _TAG_NAME.match(source, pos + 1)
        if not match:
            raise JsxParseError("Expected a tag name")
        tag_name = match.group(0)
        name_end = match.end()

        attributes, index, self_closing = self._parse_attributes(name_end)
        children: list[ChildNode] = []
        if not self_closing:
            children, index = self._parse_children(index, closing_name=tag_name)

        element = ElementDescriptor(
            tag_name=tag_name,
            attributes=tuple(attributes),
            children=tuple(children),
        )
        line, column = self._position(pos)
        self.found.append(
            ParsedElement(
                element=element,
                start=pos,
                name_end=name_end,
                line=line,
                column=column,
            )
        )
        return element, index

    def _parse_attributes(self, index: int) -> tuple[list[JsxAttribute], int, bool]:
        source = self.source
        attributes: list[JsxAttribute] = []
        while True:
            index = self._skip_trivia(index)
            if index >= self.length:
                raise JsxParseError("Unterminated opening tag")
            if source.startswith("/>", index):
                return attributes, index + 2, True
            if source[index] == ">":
                return attributes, index + 1, False
            if source[index] == "{":
                # Spread attribute, e.g. {...props}.
                index = self._scan_code(index + 1, closing="}")
                continue

            match = _ATTR_NAME.match(source, index)
            if not match:
                raise JsxParseError(f"Unexpected character {source[index]!r} in opening tag")
            name = match.group(0)
            index = self._skip_trivia(match.end())

            value: LiteralString | DynamicExpression | None = None
            if index < self.length and source[index] == "=":
                value, index = self._parse_attribute_value(self._skip_trivia(index + 1))
            attributes.append(JsxAttribute(name=name, value=value))

    def _parse_attribute_value(self, index: int) -> tuple[LiteralString | DynamicExpression, int]:
        source = self.source
        if index >= self.length:
            raise JsxParseError("Missing attribute value")

        char = source[index]
        if char in "\"'":
            end = source.find(char, index + 1)
            if end < 0:
                raise JsxParseError("Unterminated attribute string")
            return LiteralString(html.unescape(source[index + 1 : end])), end + 1

        if char == "{":
            end = self._scan_code(index + 1, closing="}")
            inner = source[index + 1 : end - 1]
            match = _STRING_EXPRESSION.fullmatch(inner)
            if match:
                literal = match.group(1) if match.group(1) is not None else match.group(2)
                return LiteralString(literal), end
            return DynamicExpression(inner.strip()), end

        if char == "<":
            _, end = self._parse_element(index)
            return DynamicExpression(source[index:end]), end

        raise JsxParseError(f"Unexpected attribute value start {char!r}")

    def _parse_children(self, index: int, closing_name: str) -> tuple[list[ChildNode], int]:
        source = self.source
        children: list[ChildNode] = []
        while True:
            if index >= self.length:
                raise JsxParseError(f"Missing closing tag for <{closing_name}>")

            char = source[index]
            if char == "{":
                index = self._scan_code(index + 1, closing="}")
                children.append(OtherChild("expression"))
                continue

            if char == "<":
                if source.startswith("</", index):
                    return children, self._parse_closing_tag(index, closing_name)
                element, index = self._parse_element(index)
                children.append(ElementChild(element) if element is not None else OtherChild("fragment"))
                continue

            stop = self._next_text_stop(index)
            children.append(TextChild(html.unescape(source[index:stop])))
            index = stop

    def _parse_closing_tag(self, index: int, closing_name: str) -> int:
        source = self.source
        index = self._skip_trivia(index + 2)
        name = ""
        match = _TAG_NAME.match(source, index)
        if match:
            name = match.group(0)
            index = match.end()
        index = self._skip_trivia(index)
        if name != closing_name or not source.startswith(">", index):
            raise JsxParseError(f"Expected closing tag </{closing_name}>")
        return index + 1

    def _next_text_stop(self, index: int) -> int:
        stops = [
            position
            for position in (self.source.find("{", index), self.source.find("<", index))
            if position >= 0
        ]
        return min(stops) if stops else self.length

    def _skip_string(self, pos: int) -> int:
        source = self.source
        quote = source[pos]
        index = pos + 1
        while index < self.length:
            char = source[index]
            if char == "\\":
                index += 2
                continue
            if char == quote or char == "\n":
                return index + 1
            index += 1
        return self.length

    def _skip_template(self, pos: int) -> int:
        source = self.source
        index = pos + 1
        while index < self.length:
            char = source[index]
            if char == "\\":
                index += 2
                continue
            if char == "`":
                return index + 1
            if source.startswith("${", index):
                try:
                    index = self._scan_code(index + 2, closing="}")
                except JsxParseError:
                    return self.length
                continue
            index += 1
        return self.length

    def _skip_comment(self, pos: int) -> int:
        source = self.source
        if source.startswith("//", pos):
            newline = source.find("\n", pos)
            return self.length if newline < 0 else newline + 1
        end = source.find("*/", pos + 2)
        return self.length if end < 0 else end + 2

    def _skip_trivia(self, index: int) -> int:
        source = self.source
        while index < self.length:
            if source[index].isspace():
                index += 1
            elif source.startswith("//", index) or source.startswith("/*", index):
                index = self._skip_comment(index)
            else:
                break
        return index

    def _position(self, offset: int) -> tuple[int, int]:
        line = bisect.bisect_right(self._line_starts, offset)
        return line, offset - self._line_starts[line - 1] + 1
