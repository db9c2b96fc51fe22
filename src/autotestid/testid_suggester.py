from __future__ import annotations

from dataclasses import asdict
from typing import Collection, Mapping

from .models import ElementDescriptor, IdentifierTokens
from .naming import page_name_from_file
from .purpose_rules import resolve_context, resolve_purpose

DEFAULT_PATTERN = "{page}-{purpose}-{element}"
PLACEHOLDERS = ("page", "purpose", "element", "context")


def suggest_test_id(
    element: ElementDescriptor,
    tag_name: str,
    file_path: str,
    pattern: str = DEFAULT_PATTERN,
    custom_components: Collection[str] | None = None,
) -> str:
    tokens = IdentifierTokens(
        page=page_name_from_file(file_path),
        purpose=resolve_purpose(element, tag_name),
        element=tag_name,
        context=resolve_context(element, file_path, custom_components or ()),
    )
    return compose_pattern(pattern, tokens)


def compose_pattern(pattern: str, tokens: IdentifierTokens | Mapping[str, str]) -> str:
    values = asdict(tokens) if isinstance(tokens, IdentifierTokens) else dict(tokens)
    composed = pattern
    # Only the first occurrence of each placeholder is substituted.
    for placeholder in PLACEHOLDERS:
        composed = composed.replace(f"{{{placeholder}}}", str(values.get(placeholder) or ""), 1)
    return composed
