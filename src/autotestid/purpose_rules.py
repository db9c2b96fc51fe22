from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Collection

from .models import ElementDescriptor
from .naming import extract_text_content, page_name_from_file, to_slug

CONTAINER_PURPOSE = "container"
FALLBACK_PURPOSE = "element"

DEFAULT_PURPOSES: dict[str, str] = {
    "button": "button",
    "input": "input",
    "select": "select",
    "textarea": "textarea",
    "a": "link",
    "form": "form",
    "div": CONTAINER_PURPOSE,
}

# The type attribute of these tags names a form behaviour (submit/reset), not the element's intent.
TYPE_AGNOSTIC_TAGS = frozenset({"button"})

CUSTOM_ID_ATTR_PRIORITY = ("label", "placeholder", "title", "name")


@dataclass(frozen=True, slots=True)
class PurposeRule:
    name: str
    extract: Callable[[ElementDescriptor, str], str | None]


def default_purpose(tag_name: str) -> str:
    return DEFAULT_PURPOSES.get(tag_name, FALLBACK_PURPOSE)


def is_container_tag(tag_name: str) -> bool:
    return default_purpose(tag_name) == CONTAINER_PURPOSE


def _non_empty_literal(element: ElementDescriptor, attribute_name: str) -> str | None:
    value = element.literal_attribute(attribute_name)
    if not value:
        return None
    return value


def _from_name(element: ElementDescriptor, tag_name: str) -> str | None:
    return _non_empty_literal(element, "name")


def _from_type(element: ElementDescriptor, tag_name: str) -> str | None:
    if tag_name in TYPE_AGNOSTIC_TAGS:
        return None
    return _non_empty_literal(element, "type")


def _from_href(element: ElementDescriptor, tag_name: str) -> str | None:
    href = _non_empty_literal(element, "href")
    if href is None:
        return None
    dashed = href.replace("/", "-").replace("#", "-")
    return dashed[1:] if dashed.startswith("-") else dashed


def _event_name(element: ElementDescriptor) -> str | None:
    handler = element.first_event_handler()
    if handler is None:
        return None
    return handler.name[2:].lower()


def _from_container_event(element: ElementDescriptor, tag_name: str) -> str | None:
    if not is_container_tag(tag_name):
        return None
    return _event_name(element)


def _from_text(element: ElementDescriptor, tag_name: str) -> str | None:
    text = extract_text_content(element)
    if not text:
        return None
    return to_slug(text)


def _from_event(element: ElementDescriptor, tag_name: str) -> str | None:
    return _event_name(element)


def _from_default(element: ElementDescriptor, tag_name: str) -> str | None:
    return default_purpose(tag_name)


PURPOSE_RULES: tuple[PurposeRule, ...] = (
    PurposeRule("name", _from_name),
    PurposeRule("type", _from_type),
    PurposeRule("href", _from_href),
    PurposeRule("container_event", _from_container_event),
    PurposeRule("text", _from_text),
    PurposeRule("event", _from_event),
    PurposeRule("default", _from_default),
)


def resolve_purpose(element: ElementDescriptor, tag_name: str | None = None) -> str:
    effective_tag = element.tag_name if tag_name is None else tag_name
    for rule in PURPOSE_RULES:
        purpose = rule.extract(element, effective_tag)
        if purpose is not None:
            return purpose
    return FALLBACK_PURPOSE


def resolve_context(
    element: ElementDescriptor,
    file_path: str,
    common_components: Collection[str] | None,
) -> str:
    if not common_components or element.tag_name not in common_components:
        return ""
    return f"{page_name_from_file(file_path)}-{resolve_purpose(element)}"


def custom_id_source(element: ElementDescriptor) -> str | None:
    for attribute_name in CUSTOM_ID_ATTR_PRIORITY:
        value = _non_empty_literal(element, attribute_name)
        if value is not None:
            return value
    return None


def infer_custom_id(element: ElementDescriptor, tag_name: str) -> str:
    source = custom_id_source(element)
    if source is None:
        source = tag_name.lower()
    return to_slug(source)
