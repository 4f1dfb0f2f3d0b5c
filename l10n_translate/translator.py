"""Tree-level translation of localization bundles."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from . import xml_codec
from .gateway import TranslationGateway
from .model import Group, LocalizationDocument, StringEntry

DEFAULT_SOURCE_LANG = "en"
DEFAULT_TARGET_LANG = "pt"


def default_output_path(input_path: Path, target_lang: str) -> Path:
    input_path = Path(input_path)
    return input_path.with_name(f"{input_path.stem}_{target_lang}{input_path.suffix}")


class TreeTranslator:
    """Produces a translated copy of a document, leaving the input untouched.

    Each group's own strings go to the gateway as one batch. Results are
    matched back by position, so identical texts in one group never steal
    each other's translation.
    """

    def __init__(
        self,
        gateway: TranslationGateway,
        source_lang: str = DEFAULT_SOURCE_LANG,
        target_lang: str = DEFAULT_TARGET_LANG,
        progress: Optional[Callable[[int], None]] = None,
    ):
        self.gateway = gateway
        self.source_lang = source_lang
        self.target_lang = target_lang
        self.progress = progress

    def translate(self, document: LocalizationDocument) -> LocalizationDocument:
        groups = tuple(self.translate_group(group) for group in document.groups)
        return replace(document, groups=groups, culture=self.target_lang)

    def translate_group(self, group: Group) -> Group:
        strings = self.translate_strings(group.strings)
        if self.progress:
            self.progress(len(group.strings))
        subgroups = tuple(self.translate_group(subgroup) for subgroup in group.subgroups)
        return Group(name=group.name, tags=group.tags, strings=strings, subgroups=subgroups)

    def translate_strings(self, strings: Sequence[StringEntry]) -> Tuple[StringEntry, ...]:
        pending: List[int] = [idx for idx, entry in enumerate(strings) if not entry.is_blank()]
        translated: List[StringEntry] = [
            StringEntry(key=entry.key, body=entry.body, value=entry.value) for entry in strings
        ]
        if not pending:
            return tuple(translated)

        texts = [strings[idx].text for idx in pending]
        results = self.gateway.translate_batch(texts, self.source_lang, self.target_lang)
        for idx, result in zip(pending, results):
            translated[idx] = strings[idx].with_text(result.translated_text)
            logging.debug('  "%s" -> "%s"', result.original_text, result.translated_text)
        return tuple(translated)

    def translate_to_file(self, document: LocalizationDocument, output_path: Path) -> Path:
        output_path = Path(output_path)
        xml_codec.write_document(self.translate(document), output_path)
        return output_path

    def translate_file(self, input_path: Path, output_path: Optional[Path] = None) -> Path:
        input_path = Path(input_path)
        output_path = Path(output_path) if output_path else default_output_path(input_path, self.target_lang)
        return self.translate_to_file(xml_codec.read_document(input_path), output_path)
