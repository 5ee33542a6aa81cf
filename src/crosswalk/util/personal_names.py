"""Helpers for turning name parts into display names and back.

Nothing in here guesses a split from an unstructured name. A string such as
"Enos, Ryan (Harvard); Fowler, Anthony (Chicago)" or a name written in a
non-Latin script is passed through verbatim.
"""

from __future__ import annotations

import re

from frozendict import frozendict

PERSON = "Person"
ORGANIZATION = "Organization"

# nameType attribute values used by the XML schema, keyed by our type names.
NAME_TYPE_ATTRIBUTES: frozendict[str, str] = frozendict(
    {PERSON: "Personal", ORGANIZATION: "Organizational"}
)

_WHITESPACE = re.compile(r"\s+")


def clean_name(value: str | None) -> str | None:
    """Collapse internal whitespace and strip. Empty names become None."""
    if value is None:
        return None
    value = _WHITESPACE.sub(" ", value).strip()
    return value or None


def display_name(family_name: str, given_name: str | None = None) -> str:
    """The canonical display form: 'Family, Given', or 'Family' alone."""
    if given_name:
        return f"{family_name}, {given_name}"
    return family_name


def name_type_attribute(name_type: str | None) -> str | None:
    if name_type is None:
        return None
    return NAME_TYPE_ATTRIBUTES.get(name_type)


def name_type_from_attribute(attribute: str | None) -> str | None:
    if not attribute:
        return None
    for name_type, value in NAME_TYPE_ATTRIBUTES.items():
        if value.lower() == attribute.strip().lower():
            return name_type
    return None
