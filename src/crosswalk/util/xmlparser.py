from __future__ import annotations

from io import BytesIO
from typing import TYPE_CHECKING

from lxml import etree

if TYPE_CHECKING:
    from lxml.etree import _Element, _ElementTree

XML_NS = "http://www.w3.org/XML/1998/namespace"
XML_LANG = f"{{{XML_NS}}}lang"


class XMLParser:
    """Helper functions to process XML data."""

    NAMESPACES: dict[str, str] = {}

    @classmethod
    def _xpath(
        cls, tag: _Element, expression: str, namespaces: dict[str, str] | None = None
    ) -> list[_Element]:
        """Wrapper to do a namespaced XPath expression."""
        if not namespaces:
            namespaces = cls.NAMESPACES
        return tag.xpath(expression, namespaces=namespaces)  # type: ignore[no-any-return]

    @classmethod
    def _xpath1(
        cls, tag: _Element, expression: str, namespaces: dict[str, str] | None = None
    ) -> _Element | None:
        """Wrapper to do a namespaced XPath expression."""
        values = cls._xpath(tag, expression, namespaces=namespaces)
        if not values:
            return None
        return values[0]

    @staticmethod
    def text_of(tag: _Element | None) -> str | None:
        """All text inside a tag, including text inside child tags, stripped.

        Empty text is treated as missing.
        """
        if tag is None:
            return None
        text = "".join(tag.itertext()).strip()
        return text or None

    def text_of_optional_subtag(
        self, tag: _Element, name: str, namespaces: dict[str, str] | None = None
    ) -> str | None:
        return self.text_of(self._xpath1(tag, name, namespaces=namespaces))

    @staticmethod
    def attribute(tag: _Element | None, name: str) -> str | None:
        if tag is None:
            return None
        value = tag.get(name)
        if value is None:
            return None
        return value.strip() or None

    @classmethod
    def lang(cls, tag: _Element) -> str | None:
        return cls.attribute(tag, XML_LANG)

    @staticmethod
    def _load_xml(
        xml: str | bytes | _ElementTree,
    ) -> _ElementTree:
        """
        Load an XML document from string or bytes and handle the case where
        the document has already been parsed.

        Unlike a recovering parser, this raises etree.XMLSyntaxError on
        malformed markup. A half-read document is worse than none.
        """
        # Text has already been decoded, whatever its declaration says.
        encoding = None
        if isinstance(xml, str):
            xml = xml.encode("utf8")
            encoding = "utf-8"

        if isinstance(xml, bytes):
            parser = etree.XMLParser(
                encoding=encoding,
                recover=False,
                remove_comments=True,
                resolve_entities=False,
                no_network=True,
            )
            return etree.parse(BytesIO(xml), parser)

        else:
            return xml
