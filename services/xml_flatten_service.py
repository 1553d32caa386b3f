"""
XML → flat records.

The top-level element is the container, every direct child element is one
entry. An entry becomes a record holding its attributes first and then its
child elements (lower-cased tag → trimmed text), so a child element shadows
an attribute with the same name.
"""
import logging
import math
import re
from typing import Dict, List, Optional, Union
from xml.etree.ElementTree import Element, ParseError, XMLPullParser
from xml.parsers.expat import errors as expat_errors

from pydantic import BaseModel

from models.common_models import Dataset, Record, Value

logger = logging.getLogger(__name__)

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")

_NO_ELEMENTS_CODE = expat_errors.codes[expat_errors.XML_ERROR_NO_ELEMENTS]

FALLBACK_RECORDS: List[Record] = [
    {"state": "California", "men": 1000, "women": 1200, "children": 800, "other": 300, "total": 3300},
    {"state": "Texas", "men": 900, "women": 1100, "children": 700, "other": 200, "total": 2900},
    {"state": "Florida", "men": 800, "women": 1000, "children": 600, "other": 150, "total": 2550},
]


class FlattenError(Exception):
    error_kind = "FlattenError"


class MalformedDocument(FlattenError):
    error_kind = "MalformedDocument"


class NoRootElement(FlattenError):
    error_kind = "NoRootElement"


class NoEntries(FlattenError):
    error_kind = "NoEntries"


class IngestResult(BaseModel):
    dataset: Dataset
    used_fallback: bool = False
    error_kind: Optional[str] = None
    warning: Optional[str] = None


def coerce_value(raw: str) -> Value:
    text = raw.strip()
    if not _DECIMAL_RE.match(text):
        return text
    if _INTEGER_RE.match(text):
        try:
            return int(text)
        except ValueError:
            # Past the interpreter's int digit limit
            pass
    number = float(text)
    # Too large for a finite float: keep the text
    if not math.isfinite(number):
        return text
    return number


def _local_name(name: str) -> str:
    # "{namespace}tag" -> "tag"
    return name.rsplit("}", 1)[-1]


def _parse_root(content: Union[bytes, str]) -> Element:
    parser = XMLPullParser(events=("start",))
    root: Optional[Element] = None
    try:
        parser.feed(content)
        for _event, elem in parser.read_events():
            if root is None:
                root = elem
        parser.close()
    except ParseError as exc:
        if root is None and exc.code == _NO_ELEMENTS_CODE:
            raise NoRootElement("No valid root element found in XML") from exc
        raise MalformedDocument(f"Invalid XML format: {exc}") from exc

    if root is None:
        raise NoRootElement("No valid root element found in XML")
    return root


def _entry_to_record(entry: Element) -> Record:
    record: Dict[str, Value] = {}

    for name, raw in entry.attrib.items():
        record[_local_name(name)] = coerce_value(raw)

    # Child elements go second so they win over like-named attributes
    for child in entry:
        name = _local_name(child.tag).lower()
        record[name] = coerce_value("".join(child.itertext()))

    return record


def flatten_document(content: Union[bytes, str]) -> Dataset:
    """
    Parse an XML document into a Dataset.
    Raises NoRootElement, NoEntries or MalformedDocument.
    """
    root = _parse_root(content)

    records = [_entry_to_record(entry) for entry in root]
    if not records:
        raise NoEntries("No data entries found in XML")
    if not any(records):
        raise NoEntries("XML entries carry no attributes or child elements")

    return Dataset.from_records(records)


def fallback_dataset() -> Dataset:
    return Dataset.from_records([dict(r) for r in FALLBACK_RECORDS])


def load_dataset(content: Union[bytes, str], file_name: str = "") -> IngestResult:
    """
    Flatten an uploaded document, substituting the fallback dataset when
    flattening fails. The failure is returned to the caller as a warning.
    """
    try:
        dataset = flatten_document(content)
    except FlattenError as exc:
        logger.warning("Failed to parse %r (%s): %s. Using fallback data.", file_name, exc.error_kind, exc)
        return IngestResult(
            dataset=fallback_dataset(),
            used_fallback=True,
            error_kind=exc.error_kind,
            warning=f"Failed to parse XML file ({exc.error_kind}: {exc}). Using fallback data.",
        )

    logger.info("Parsed %r: %d records, %d fields", file_name, len(dataset.records), len(dataset.fields))
    return IngestResult(dataset=dataset)
