"""Reference loading exposed to the rendering pipeline.

Architecture
: `load_bibliography` dispatches on the host-supplied format tag and returns a
  `ReferenceCollection`, an ordered mapping of citation keys to
  `BibliographyEntry` objects carrying CSL-JSON variables.
: BibTeX goes through pybtex (`bibtex.py`), hayagriva YAML through PyYAML
  (`hayagriva.py`). Both mappers target the same CSL vocabulary so the
  citation engine never sees the source syntax.

Usage Example

```pycon
>>> from typstbib.core.references import load_bibliography
>>> collection = load_bibliography("k1:\\n  type: book\\n  title: A\\n", "yaml")
>>> collection.keys()
['k1']
>>> collection["k1"].fields["title"]
'A'
```
"""

from __future__ import annotations

from collections.abc import Callable
import logging

from ..exceptions import InvalidFormatError
from .bibtex import load_bibtex
from .collection import BibliographyEntry, ReferenceCollection
from .hayagriva import load_hayagriva


logger = logging.getLogger(__name__)

_LOADERS: dict[str, Callable[[str], ReferenceCollection]] = {
    "yaml": load_hayagriva,
    "bibtex": load_bibtex,
}

BIBLIOGRAPHY_FORMATS = tuple(_LOADERS)


def load_bibliography(raw_text: str, format: str) -> ReferenceCollection:
    """Parse raw bibliography text written in ``format`` (``yaml`` or ``bibtex``)."""
    loader = _LOADERS.get(format)
    if loader is None:
        raise InvalidFormatError(format)
    collection = loader(raw_text)
    logger.debug("Loaded %d %s entries", len(collection), format)
    return collection


def list_keys(raw_text: str, format: str) -> list[str]:
    """Return every citation key of a bibliography in source order."""
    return load_bibliography(raw_text, format).keys()


__all__ = [
    "BIBLIOGRAPHY_FORMATS",
    "BibliographyEntry",
    "ReferenceCollection",
    "list_keys",
    "load_bibliography",
]
