"""
Noise classification: decides whether an element is structurally irrelevant
(navigation, ads, banners, social widgets, ...). Pure function of the
element's tag and attributes; the pattern tables live in ``policy``.
"""

from __future__ import annotations

from typing import Iterable, List

from bs4 import Tag

from .policy import NOISE_PATTERNS, NOISE_ROLES, NOISE_TAGS, NOISE_TOKENS


def _attribute_values(value: object) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Iterable):
        return [str(item) for item in value]
    return [str(value)]


def class_id_signature(element: Tag) -> str:
    """Lower-cased ``"<classes> <id>"`` string matched against noise patterns."""
    classes = " ".join(_attribute_values(element.get("class")))
    element_id = " ".join(_attribute_values(element.get("id")))
    return f"{classes} {element_id}".lower()


def is_noisy(element: object) -> bool:
    """Return True when the element is navigation, ads or other page chrome."""
    if not isinstance(element, Tag):
        return False

    tag = (element.name or "").lower()
    if tag in NOISE_TAGS:
        return True

    signature = class_id_signature(element)
    if any(pattern in signature for pattern in NOISE_PATTERNS):
        return True
    if any(token in NOISE_TOKENS for token in signature.split()):
        return True

    role = element.get("role")
    if isinstance(role, list):
        role = " ".join(role)
    return (role or "").strip().lower() in NOISE_ROLES
