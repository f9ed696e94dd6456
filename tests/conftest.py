from __future__ import annotations

import textwrap

import pytest


def _csl(bibliography: str, *, citation: str = '<text variable="title"/>') -> str:
    return textwrap.dedent(
        f"""\
        <?xml version="1.0" encoding="utf-8"?>
        <style xmlns="http://purl.org/net/xbiblio/csl" class="in-text" version="1.0">
          <info>
            <title>Test style</title>
            <id>test-style</id>
            <updated>2024-01-01T00:00:00+00:00</updated>
          </info>
          <citation>
            <layout>{citation}</layout>
          </citation>
          {bibliography}
        </style>
        """
    )


@pytest.fixture
def unsorted_style() -> str:
    """Bibliography without <sort>: order of appearance."""
    return _csl('<bibliography><layout><text variable="title"/></layout></bibliography>')


@pytest.fixture
def sorted_style() -> str:
    """Bibliography sorted by title, with hanging indentation."""
    return _csl(
        """
        <bibliography hanging-indent="true">
          <sort><key variable="title"/></sort>
          <layout><text variable="title"/></layout>
        </bibliography>
        """
    )


@pytest.fixture
def numbered_style() -> str:
    """Bibliography with a citation-number label aligned in its own column."""
    return _csl(
        """
        <bibliography second-field-align="flush">
          <layout>
            <text variable="citation-number" prefix="[" suffix="]"/>
            <text variable="title"/>
          </layout>
        </bibliography>
        """
    )


@pytest.fixture
def citation_only_style() -> str:
    """Style without a bibliography section."""
    return _csl("")


@pytest.fixture
def yaml_bib() -> str:
    return textwrap.dedent(
        """\
        k1:
          type: book
          title: A
        k2:
          type: book
          title: B
        k3:
          type: book
          title: C
        """
    )


@pytest.fixture
def unordered_yaml_bib() -> str:
    """Source order differs from alphabetical title order."""
    return textwrap.dedent(
        """\
        late:
          type: book
          title: Beta
        early:
          type: book
          title: Alpha
        """
    )
