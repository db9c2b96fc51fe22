from __future__ import annotations

import re

from .models import ElementChild, ElementDescriptor, TextChild

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_SOURCE_EXTENSION = re.compile(r"\.(jsx?|tsx?)$")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z])([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def to_slug(text: str) -> str:
    lowered = str(text).lower()
    return _NON_ALNUM_RUN.sub("-", lowered).strip("-")


def page_name_from_file(file_path: str) -> str:
    file_name = file_path.rsplit("/", 1)[-1]
    component_name = _SOURCE_EXTENSION.sub("", file_name)
    if not component_name:
        return ""

    # Acronym runs first: XMLHttpRequest -> XML-HttpRequest -> XML-Http-Request.
    hyphenated = _ACRONYM_BOUNDARY.sub(r"\1-\2", component_name)
    hyphenated = _WORD_BOUNDARY.sub(r"\1-\2", hyphenated)
    return hyphenated.lower()


def extract_text_content(node: ElementDescriptor | None) -> str:
    if node is None or not node.children:
        return ""

    parts: list[str] = []
    for child in node.children:
        if isinstance(child, TextChild):
            parts.append(child.value.strip())
        elif isinstance(child, ElementChild):
            parts.append(extract_text_content(child.element))
        else:
            parts.append("")
    return " ".join(parts).strip()
