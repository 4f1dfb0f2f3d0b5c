from l10n_translate.model import (
    ATTRIBUTE_SLOT,
    BODY_SLOT,
    Group,
    LocalizationDocument,
    StringEntry,
    collect_stats,
)


def test_string_entry_prefers_body_slot():
    entry = StringEntry(key="k", body="Body", value="Attr")
    assert entry.slot == BODY_SLOT
    assert entry.text == "Body"


def test_string_entry_falls_back_to_attribute_slot():
    entry = StringEntry(key="k", body="  ", value="Attr")
    assert entry.slot == ATTRIBUTE_SLOT
    assert entry.text == "Attr"


def test_string_entry_blank_when_both_slots_empty():
    entry = StringEntry(key="k")
    assert entry.slot == BODY_SLOT
    assert entry.is_blank()


def test_with_text_only_rewrites_authoritative_slot():
    body_entry = StringEntry(key="k", body="Body", value="Attr").with_text("Corpo")
    assert (body_entry.body, body_entry.value) == ("Corpo", "Attr")

    attr_entry = StringEntry(key="k", body="", value="Attr").with_text("Atributo")
    assert (attr_entry.body, attr_entry.value) == ("", "Atributo")


def test_collect_stats_counts_nested_groups_and_strings():
    document = LocalizationDocument(
        namespace="ns",
        culture="en",
        module_id="mod",
        groups=(
            Group(
                name="Common",
                strings=(StringEntry("a", "A"), StringEntry("b", "B")),
                subgroups=(Group(name="Errors", strings=(StringEntry("c", "C"),)),),
            ),
        ),
    )

    stats = collect_stats(document)

    assert stats.total_groups == 2
    assert stats.total_strings == 3
    assert stats.culture == "en"
    assert stats.module_id == "mod"


def test_collect_stats_empty_document():
    stats = collect_stats(LocalizationDocument(namespace="ns", culture="en", module_id="m"))
    assert (stats.total_groups, stats.total_strings) == (0, 0)
