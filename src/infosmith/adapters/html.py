"""BeautifulSoup helpers used to parse documents and rendered artifacts."""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, FeatureNotFound
from bs4.element import Tag
from lxml import etree

from infosmith.core.diagnostics import DiagnosticEmitter, ensure_emitter


logger = logging.getLogger(__name__)

FALLBACK_PARSER = "html.parser"
RAW_ARTIFACT_CLASS = "infographic-raw"
XML_PARSERS = frozenset({"xml", "lxml-xml"})

_DECLARATION = re.compile(
    r"^\s*(?:<\?xml\b.*?\?>|<!DOCTYPE\b[^>]*>)\s*",
    re.IGNORECASE | re.DOTALL,
)


def make_soup(
    markup: str,
    parser: str = FALLBACK_PARSER,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> BeautifulSoup:
    """Parse ``markup``, falling back to the built-in parser when needed."""
    try:
        return BeautifulSoup(markup, parser)
    except FeatureNotFound:
        if parser == FALLBACK_PARSER:
            raise
        ensure_emitter(emitter).event(
            "parser_fallback", {"preferred": parser, "fallback": FALLBACK_PARSER}
        )
        return BeautifulSoup(markup, FALLBACK_PARSER)


def parse_html(
    html: str,
    parser: str = FALLBACK_PARSER,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> BeautifulSoup:
    """Parse an HTML document or fragment into a tree."""
    return make_soup(html, parser, emitter=emitter)


def strip_declarations(markup: str) -> str:
    """Remove leading XML declarations and doctypes from rendered markup."""
    previous = None
    while previous != markup:
        previous = markup
        markup = _DECLARATION.sub("", markup, count=1)
    return markup


def is_well_formed(markup: str) -> bool:
    """Return True when ``markup`` parses as strict XML."""
    parser = etree.XMLParser(recover=False, resolve_entities=False, no_network=True)
    try:
        etree.fromstring(markup.encode("utf-8"), parser)
    except etree.XMLSyntaxError:
        return False
    return True


def parse_artifact(
    markup: str,
    parser: str = "xml",
    *,
    emitter: DiagnosticEmitter | None = None,
) -> Tag | None:
    """Return the first element of rendered markup, or ``None`` if there is none.

    The XML backends recover from malformed input by dropping or moving
    content, so markup that is not well-formed XML (HTML entities such as
    ``&nbsp;``, bare ``&``, void ``<br>`` inside ``foreignObject``) is parsed
    with ``html.parser`` instead. Attribute names are lowercased on that path.
    """
    cleaned = strip_declarations(markup)
    if not cleaned.strip():
        return None

    if parser in XML_PARSERS and not is_well_formed(cleaned):
        ensure_emitter(emitter).event(
            "artifact_fallback", {"preferred": parser, "fallback": FALLBACK_PARSER}
        )
        parser = FALLBACK_PARSER

    try:
        soup = make_soup(cleaned, parser, emitter=emitter)
    except Exception as exc:  # pragma: no cover - library-controlled
        logger.debug("Rendered markup rejected by %s: %s", parser, exc)
        return None

    for child in soup.contents:
        if isinstance(child, Tag):
            return child.extract()
    return None


def raw_artifact(markup: str) -> Tag:
    """Wrap markup that cannot be parsed into a container holding it as text."""
    soup = BeautifulSoup("", FALLBACK_PARSER)
    container = soup.new_tag("div", attrs={"class": RAW_ARTIFACT_CLASS})
    container.string = markup
    return container


def serialize(tree: Tag) -> str:
    """Serialise a tree back to markup."""
    return str(tree)


__all__ = [
    "FALLBACK_PARSER",
    "RAW_ARTIFACT_CLASS",
    "XML_PARSERS",
    "is_well_formed",
    "make_soup",
    "parse_artifact",
    "parse_html",
    "raw_artifact",
    "serialize",
    "strip_declarations",
]
