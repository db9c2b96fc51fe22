from __future__ import annotations

import logging
from typing import Iterable

from .config import RuleOptions
from .models import ElementDescriptor, Finding, Fix, ParsedElement
from .purpose_rules import custom_id_source, infer_custom_id
from .testid_suggester import suggest_test_id

logger = logging.getLogger("autotestid.rule")

RULE_NAME = "require-testid"
NATIVE_TEST_ID_ATTR = "data-testid"
CUSTOM_TEST_ID_ATTR = "dataTestId"
BUTTON_TYPES = frozenset({"button", "submit", "reset"})
MISSING_TEST_ID_MESSAGE = 'Interactive element "{element}" should have {attribute} attribute'


class RequireTestIdRule:
    def __init__(self, options: RuleOptions | None = None) -> None:
        self.options = options or RuleOptions()

    def is_excluded(self, file_path: str) -> bool:
        return any(pattern.search(file_path) for pattern in self.options.exclude_patterns)

    def check(self, parsed_elements: Iterable[ParsedElement], file_path: str) -> list[Finding]:
        if self.is_excluded(file_path):
            logger.debug("Excluded by configuration: %s", file_path)
            return []

        findings: list[Finding] = []
        for parsed in parsed_elements:
            finding = self.check_element(parsed, file_path)
            if finding is not None:
                findings.append(finding)
        return findings

    def check_element(self, parsed: ParsedElement, file_path: str) -> Finding | None:
        element = parsed.element
        tag_name = element.tag_name
        options = self.options

        if tag_name in options.custom_components:
            if element.has_attribute(CUSTOM_TEST_ID_ATTR):
                return None
            return _build_finding(parsed, file_path, CUSTOM_TEST_ID_ATTR, self.suggest_custom_id(element, file_path))

        if tag_name not in options.elements:
            return None
        if tag_name == "div" and not is_interactive(element):
            return None
        if element.has_attribute(NATIVE_TEST_ID_ATTR):
            return None

        suggested = suggest_test_id(
            element,
            tag_name,
            file_path,
            options.pattern,
            options.custom_components,
        )
        return _build_finding(parsed, file_path, NATIVE_TEST_ID_ATTR, suggested)

    def suggest_custom_id(self, element: ElementDescriptor, file_path: str) -> str:
        if custom_id_source(element) is not None:
            return infer_custom_id(element, element.tag_name)
        suggested = suggest_test_id(
            element,
            element.tag_name,
            file_path,
            self.options.pattern,
            self.options.custom_components,
        )
        return suggested or infer_custom_id(element, element.tag_name)


def is_interactive(element: ElementDescriptor) -> bool:
    for attribute in element.attributes:
        if attribute.name.startswith("on") or attribute.name == "href":
            return True
        if attribute.name == "type" and attribute.literal() in BUTTON_TYPES:
            return True
    return False


def _build_finding(parsed: ParsedElement, file_path: str, attribute: str, suggested_id: str) -> Finding:
    tag_name = parsed.element.tag_name
    return Finding(
        file_path=file_path,
        line=parsed.line,
        column=parsed.column,
        element=tag_name,
        attribute=attribute,
        suggested_id=suggested_id,
        message=MISSING_TEST_ID_MESSAGE.format(element=tag_name, attribute=attribute),
        fix=Fix(offset=parsed.name_end, text=f' {attribute}="{suggested_id}"'),
        rule=RULE_NAME,
    )
