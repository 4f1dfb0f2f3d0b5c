"""In-memory model of a localization bundle."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple

BODY_SLOT = "body"
ATTRIBUTE_SLOT = "attribute"


@dataclass(frozen=True)
class StringEntry:
    """A single ``<string>``: its key plus the two legacy value slots.

    ``body`` is the element text, ``value`` the old attribute-style payload.
    Only one of them is authoritative; the body wins when it has content.
    """

    key: str
    body: str = ""
    value: str = ""

    @property
    def slot(self) -> str:
        if self.body.strip():
            return BODY_SLOT
        if self.value.strip():
            return ATTRIBUTE_SLOT
        return BODY_SLOT

    @property
    def text(self) -> str:
        return self.value if self.slot == ATTRIBUTE_SLOT else self.body

    def is_blank(self) -> bool:
        return not self.text.strip()

    def with_text(self, text: str) -> "StringEntry":
        if self.slot == ATTRIBUTE_SLOT:
            return replace(self, value=text)
        return replace(self, body=text)


@dataclass(frozen=True)
class Group:
    name: str
    tags: Optional[str] = None
    strings: Tuple[StringEntry, ...] = field(default_factory=tuple)
    subgroups: Tuple["Group", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LocalizationDocument:
    namespace: str
    culture: str
    module_id: str
    groups: Tuple[Group, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DocumentStats:
    culture: str
    module_id: str
    total_groups: int
    total_strings: int


def count_groups_and_strings(groups: Iterable[Group]) -> Tuple[int, int]:
    group_count = 0
    string_count = 0
    for group in groups:
        group_count += 1
        string_count += len(group.strings)
        sub_groups, sub_strings = count_groups_and_strings(group.subgroups)
        group_count += sub_groups
        string_count += sub_strings
    return group_count, string_count


def collect_stats(document: LocalizationDocument) -> DocumentStats:
    total_groups, total_strings = count_groups_and_strings(document.groups)
    return DocumentStats(
        culture=document.culture,
        module_id=document.module_id,
        total_groups=total_groups,
        total_strings=total_strings,
    )
