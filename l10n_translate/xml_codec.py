"""Reading, validating and writing localization XML bundles."""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Tuple

from .model import ATTRIBUTE_SLOT, Group, LocalizationDocument, StringEntry

ROOT_TAG = "localization"
GROUP_TAG = "group"
STRING_TAG = "string"

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'
INDENT = "  "


class ParseError(ValueError):
    """Raised when a bundle is not well-formed XML or has no localization root."""


def split_tag(tag: object) -> Tuple[str, str]:
    """Return ``(namespace, local_name)`` for an ElementTree tag."""
    if not isinstance(tag, str):
        return "", ""
    if tag.startswith("{") and "}" in tag:
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return "", tag


def tag_matches(tag: object, name: str) -> bool:
    return split_tag(tag)[1] == name


def parse_string(elem: ET.Element) -> StringEntry:
    return StringEntry(
        key=elem.attrib.get("key", ""),
        body=(elem.text or "").strip(),
        value=elem.attrib.get("value", "").strip(),
    )


def parse_group(elem: ET.Element) -> Group:
    strings: List[StringEntry] = []
    subgroups: List[Group] = []
    for child in elem:
        if tag_matches(child.tag, STRING_TAG):
            strings.append(parse_string(child))
        elif tag_matches(child.tag, GROUP_TAG):
            subgroups.append(parse_group(child))
    return Group(
        name=elem.attrib.get("name", ""),
        tags=elem.attrib.get("tags"),
        strings=tuple(strings),
        subgroups=tuple(subgroups),
    )


def parse(data: bytes) -> LocalizationDocument:
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ParseError(f"Malformed XML: {exc}") from exc

    namespace, local = split_tag(root.tag)
    if local != ROOT_TAG:
        raise ParseError(f"Expected a <{ROOT_TAG}> root element, found <{local or root.tag}>.")

    groups = tuple(parse_group(child) for child in root if tag_matches(child.tag, GROUP_TAG))
    return LocalizationDocument(
        namespace=namespace,
        culture=root.attrib.get("culture", ""),
        module_id=root.attrib.get("moduleId", ""),
        groups=groups,
    )


def _groups_are_valid(groups: object) -> bool:
    if not isinstance(groups, (tuple, list)):
        return False
    for group in groups:
        if not isinstance(group, Group) or not group.name:
            return False
        if not _groups_are_valid(group.subgroups):
            return False
    return True


def validate(document: LocalizationDocument) -> bool:
    """Check the attributes and group structure a bundle must carry.

    Reports problems as ``False`` instead of raising so callers can decide
    whether to abort.
    """
    if not (document.culture and document.module_id and document.namespace):
        return False
    if not isinstance(document.groups, (tuple, list)) or not document.groups:
        return False
    return _groups_are_valid(document.groups)


def build_group(group: Group) -> ET.Element:
    elem = ET.Element(GROUP_TAG, {"name": group.name})
    if group.tags:
        elem.set("tags", group.tags)
    for entry in group.strings:
        string_elem = ET.SubElement(elem, STRING_TAG, {"key": entry.key})
        # Legacy attribute only when it is the authoritative slot.
        if entry.slot == ATTRIBUTE_SLOT:
            string_elem.set("value", entry.value)
        string_elem.text = entry.text
    for subgroup in group.subgroups:
        elem.append(build_group(subgroup))
    return elem


def indent(elem: ET.Element, level: int = 0) -> None:
    i = "\n" + INDENT * level
    if len(elem):
        if not (elem.text and elem.text.strip()):
            elem.text = i + INDENT
        for child in elem:
            indent(child, level + 1)
        # Last child closes back at this element's depth.
        last = elem[-1]
        if not (last.tail and last.tail.strip()):
            last.tail = i
    if not (elem.tail and elem.tail.strip()):
        elem.tail = i if level else "\n"


def serialize(document: LocalizationDocument) -> bytes:
    root = ET.Element(
        ROOT_TAG,
        {
            "xmlns": document.namespace,
            "culture": document.culture,
            "moduleId": document.module_id,
        },
    )
    for group in document.groups:
        root.append(build_group(group))
    indent(root)

    body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
    return (XML_DECLARATION + body).encode("utf-8")


def read_document(path: Path) -> LocalizationDocument:
    return parse(Path(path).read_bytes())


def atomic_write(data: bytes, output: Path) -> None:
    temp_path = output.with_name(output.name + ".tmp")
    try:
        with temp_path.open("wb") as fp:
            fp.write(data)
            fp.flush()
            os.fsync(fp.fileno())
        os.replace(temp_path, output)
    except OSError:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError as cleanup_exc:
                logging.warning("Could not remove temporary file %s: %s", temp_path, cleanup_exc)
        raise


def write_document(document: LocalizationDocument, path: Path) -> None:
    atomic_write(serialize(document), Path(path))
