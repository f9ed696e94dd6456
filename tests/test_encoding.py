import json

from typstbib.core.config import RenderConfig
from typstbib.core.driver import RenderedBibliography, RenderedItem
from typstbib.core.encoding import encode_bibliography, encode_fields


RENDERED = RenderedBibliography(
    items=(
        RenderedItem(key="k2", prefix="[1]", content="B"),
        RenderedItem(key="k1", prefix=None, content="Ä"),
    ),
    hanging_indent=True,
    manual_sort=False,
)


def test_flat_encoding_uses_absence_marker() -> None:
    assert encode_fields(RENDERED) == ["k2", "[1]", "B", "k1", "none", "Ä", "true", "false"]


def test_encoded_buffer_is_utf8() -> None:
    payload = encode_bibliography(RENDERED)

    assert payload == "k2%%%[1]%%%B%%%k1%%%none%%%Ä%%%true%%%false".encode()


def test_empty_bibliography_only_carries_flags() -> None:
    empty = RenderedBibliography(items=(), hanging_indent=False, manual_sort=True)

    assert encode_bibliography(empty) == b"false%%%true"


def test_custom_separator_and_marker() -> None:
    config = RenderConfig(separator="|", absence_marker="-")

    assert encode_bibliography(RENDERED, config) == "k2|[1]|B|k1|-|Ä|true|false".encode()


def test_structured_encoding_emits_json_items() -> None:
    fields = encode_fields(RENDERED, RenderConfig(encoding="structured"))

    assert json.loads(fields[0]) == {"key": "k2", "prefix": "[1]", "content": "B"}
    assert json.loads(fields[1]) == {"key": "k1", "prefix": None, "content": "Ä"}
    assert fields[2:] == ["true", "false"]
