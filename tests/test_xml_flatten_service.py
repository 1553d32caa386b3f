import pytest

from services.xml_flatten_service import (
    FALLBACK_RECORDS,
    MalformedDocument,
    NoEntries,
    NoRootElement,
    coerce_value,
    flatten_document,
    load_dataset,
)

POPULATION_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<population>
  <entry state="Ohio">
    <Men>500</Men>
    <Women> 650 </Women>
  </entry>
  <entry state="Utah" region="West">
    <Men>300</Men>
    <Women>310.5</Women>
  </entry>
</population>
"""


@pytest.mark.parametrize("raw, expected", [
    ("42", 42),
    ("  -7 ", -7),
    ("3.25", 3.25),
    (".5", 0.5),
    ("1e3", 1000.0),
    ("+2.", 2.0),
    ("", ""),
    ("  Texas ", "Texas"),
    ("0x1A", "0x1A"),
    ("NaN", "NaN"),
    ("Infinity", "Infinity"),
    ("12abc", "12abc"),
    ("2024-01-15", "2024-01-15"),
])
def test_coerce_value(raw, expected):
    value = coerce_value(raw)
    assert value == expected
    assert type(value) is type(expected)


def test_flatten_attributes_then_children():
    dataset = flatten_document(POPULATION_XML)

    assert dataset.records == [
        {"state": "Ohio", "men": 500, "women": 650},
        {"state": "Utah", "region": "West", "men": 300, "women": 310.5},
    ]
    # Union of fields in first-appearance order
    assert dataset.fields == ["state", "men", "women", "region"]


def test_child_element_shadows_attribute():
    xml = "<rows><row total='1' name='a'><total>99</total></row></rows>"
    dataset = flatten_document(xml)
    assert dataset.records == [{"total": 99, "name": "a"}]


def test_attribute_names_keep_case_and_tags_are_lowercased():
    xml = "<rows><row Code='X1'><CITY>Lyon</CITY></row></rows>"
    dataset = flatten_document(xml)
    assert dataset.records == [{"Code": "X1", "city": "Lyon"}]


def test_child_text_includes_nested_text():
    xml = "<rows><row><label>North <b>East</b></label></row></rows>"
    dataset = flatten_document(xml)
    assert dataset.records[0]["label"] == "North East"


def test_namespaces_are_stripped():
    xml = '<d:rows xmlns:d="urn:x"><d:row><d:Value>5</d:Value></d:row></d:rows>'
    dataset = flatten_document(xml)
    assert dataset.records == [{"value": 5}]


def test_no_entries():
    with pytest.raises(NoEntries):
        flatten_document("<population></population>")


def test_entries_without_fields():
    with pytest.raises(NoEntries):
        flatten_document("<population><entry/><entry/></population>")


@pytest.mark.parametrize("content", ["", "   ", '<?xml version="1.0"?>', "<!-- only a comment -->"])
def test_no_root_element(content):
    with pytest.raises(NoRootElement):
        flatten_document(content)


@pytest.mark.parametrize("content", ["not xml at all", "<a><b></a>", "<a>", "<a/><b/>"])
def test_malformed_document(content):
    with pytest.raises(MalformedDocument):
        flatten_document(content)


def test_load_dataset_success():
    result = load_dataset(POPULATION_XML, "population.xml")
    assert not result.used_fallback
    assert result.warning is None
    assert len(result.dataset.records) == 2


def test_load_dataset_no_entries_uses_fallback():
    result = load_dataset("<population></population>", "empty.xml")

    assert result.used_fallback
    assert result.error_kind == "NoEntries"
    assert "Using fallback data" in result.warning
    assert result.dataset.records == FALLBACK_RECORDS
    assert result.dataset.fields == ["state", "men", "women", "children", "other", "total"]


def test_load_dataset_malformed_uses_fallback():
    result = load_dataset("<broken", "broken.xml")
    assert result.used_fallback
    assert result.error_kind == "MalformedDocument"


def test_oversized_integer_does_not_break_loading():
    huge = "9" * 5000
    result = load_dataset(b"<root><row><n>" + huge.encode() + b"</n><k>1</k></row></root>", "huge.xml")

    assert not result.used_fallback
    # Not representable as a finite number, so it stays text
    assert result.dataset.records == [{"n": huge, "k": 1}]


def test_numbers_beyond_float_range_stay_text():
    digits = "1" + "0" * 4400
    assert coerce_value(digits) == digits
    assert coerce_value("1e999") == "1e999"
    assert coerce_value("-1e999") == "-1e999"
