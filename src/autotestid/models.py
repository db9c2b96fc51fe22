from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class LiteralString:
    value: str


@dataclass(frozen=True, slots=True)
class DynamicExpression:
    source: str = ""


AttributeValue = Union[LiteralString, DynamicExpression]


@dataclass(frozen=True, slots=True)
class JsxAttribute:
    name: str
    value: AttributeValue | None = None

    def literal(self) -> str | None:
        if isinstance(self.value, LiteralString):
            return self.value.value
        return None


@dataclass(frozen=True, slots=True)
class TextChild:
    value: str


@dataclass(frozen=True, slots=True)
class ElementChild:
    element: ElementDescriptor


@dataclass(frozen=True, slots=True)
class OtherChild:
    kind: str = "expression"


ChildNode = Union[TextChild, ElementChild, OtherChild]


@dataclass(frozen=True, slots=True)
class ElementDescriptor:
    tag_name: str
    attributes: tuple[JsxAttribute, ...] = ()
    children: tuple[ChildNode, ...] = ()

    def find_attribute(self, name: str) -> JsxAttribute | None:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def has_attribute(self, name: str) -> bool:
        return self.find_attribute(name) is not None

    def literal_attribute(self, name: str) -> str | None:
        attribute = self.find_attribute(name)
        if attribute is None:
            return None
        return attribute.literal()

    def first_event_handler(self) -> JsxAttribute | None:
        for attribute in self.attributes:
            if attribute.name.startswith("on"):
                return attribute
        return None


@dataclass(frozen=True, slots=True)
class IdentifierTokens:
    page: str = ""
    purpose: str = ""
    element: str = ""
    context: str = ""


@dataclass(frozen=True, slots=True)
class ParsedElement:
    element: ElementDescriptor
    start: int
    name_end: int
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Fix:
    offset: int
    text: str


@dataclass(frozen=True, slots=True)
class Finding:
    file_path: str
    line: int
    column: int
    element: str
    attribute: str
    suggested_id: str
    message: str
    fix: Fix
    rule: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class LintResult:
    file_path: str
    findings: list[Finding] = field(default_factory=list)
    source: str | None = None
    fixed_source: str | None = None
    skipped: bool = False
    fixed: bool = False
    message: str = ""

    @property
    def changed(self) -> bool:
        return self.fixed_source is not None and self.source is not None and self.fixed_source != self.source
