"""
TOML serialization for gtdnota documents.

Documents are read with ``tomllib`` and written as hand-emitted TOML text, so
the layout stays fixed: top-level scalars first, then one array-of-tables
section per status in a stable order. The same store always encodes to the
same bytes, which keeps diffs under version control small.
"""

import logging
import tomllib
from datetime import date
from enum import Enum
from typing import Any, List

from .errors import DocumentDecodeError
from .migration import migrate_raw_document
from .models import Nota, NotaStatus
from .store import CURRENT_FORMAT_VERSION, ItemStore

# Section order in the written document.
SECTION_ORDER = (
    NotaStatus.inbox,
    NotaStatus.next_action,
    NotaStatus.waiting_for,
    NotaStatus.later,
    NotaStatus.calendar,
    NotaStatus.someday,
    NotaStatus.done,
    NotaStatus.reference,
    NotaStatus.context,
    NotaStatus.project,
    NotaStatus.trash,
)

_BASIC_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _escape_char(char: str, multiline: bool) -> str:
    if multiline and char in ("\n", "\t"):
        return char
    if char in _BASIC_ESCAPES:
        return _BASIC_ESCAPES[char]
    if ord(char) < 0x20 or ord(char) == 0x7F:
        return f"\\u{ord(char):04X}"
    return char


def _toml_string(value: str) -> str:
    """Render a TOML basic string."""
    return '"' + "".join(_escape_char(c, False) for c in value) + '"'


def _toml_multiline_string(value: str) -> str:
    """Render a TOML multi-line basic string; the newline after the opening quotes is not part of the value."""
    return '"""\n' + "".join(_escape_char(c, True) for c in value) + '"""'


def _toml_value(key: str, value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, date):
        return _toml_string(value.isoformat())
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        if key == "notes" and "\n" in value:
            return _toml_multiline_string(value)
        return _toml_string(value)
    raise TypeError(f"Cannot encode {key}={value!r} as TOML")


def _encode_nota(nota: Nota) -> List[str]:
    lines = [f"[[{nota.status.value}]]"]
    for key, value in nota.model_dump().items():
        if value is None:
            continue
        lines.append(f"{key} = {_toml_value(key, value)}")
    return lines


def encode_document(store: ItemStore) -> str:
    """
    Encode a store as a current-format TOML document.

    Args:
        store: The store to encode

    Returns:
        Document text ending with a single newline
    """
    lines = [f"format_version = {CURRENT_FORMAT_VERSION}"]
    if store.task_counter:
        lines.append(f"task_counter = {store.task_counter}")
    if store.project_counter:
        lines.append(f"project_counter = {store.project_counter}")

    notas = store.notas
    for status in SECTION_ORDER:
        for nota in notas:
            if nota.status == status:
                lines.append("")
                lines.extend(_encode_nota(nota))

    return "\n".join(lines) + "\n"


def decode_document(text: str) -> ItemStore:
    """
    Decode document text of any supported format version.

    Raises:
        DocumentDecodeError: If the text is not valid TOML or matches no known shape
    """
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        logging.error(f"Failed to parse document: {e}")
        raise DocumentDecodeError(f"Invalid TOML: {e}") from e
    return migrate_raw_document(raw)
