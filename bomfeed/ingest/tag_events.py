"""Incremental XML tag event source.

Wraps ``lxml.etree.XMLPullParser`` in recovery mode so raw bytes can be
pushed in as they arrive and structural events come out in document order,
without keeping the whole tree in memory. Closed elements are cleared and
their earlier siblings dropped, so memory stays bounded by nesting depth
rather than document size.
"""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from lxml import etree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpenTag:
    name: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TextContent:
    content: str


@dataclass(frozen=True)
class CloseTag:
    name: str


@dataclass(frozen=True)
class MalformedInput:
    message: str
    position: tuple[int, int] | None = None

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        line, column = self.position
        if f"line {line}" in self.message:
            return self.message
        return f"{self.message} (line {line}, column {column})"


TagEvent = OpenTag | TextContent | CloseTag | MalformedInput


class TagEventSource:
    """Turns pushed byte chunks into OpenTag/TextContent/CloseTag events.

    Text is reported once per element, just before its CloseTag, which is
    when the parser guarantees it is complete. Well-formedness errors are
    recovered from: each one is reported as a MalformedInput event and the
    events for the content after it keep coming. Only an error the parser
    cannot recover from halts the source.
    """

    def __init__(self) -> None:
        self._parser: etree.XMLPullParser | None = etree.XMLPullParser(
            events=("start", "end"), recover=True
        )
        self._stack: list[etree._Element] = []
        self._errors_seen = 0
        self.halted = False
        self.closed = False

    def feed(self, chunk: bytes) -> Iterator[TagEvent]:
        """Push one chunk and return the events it completes."""
        if self.closed:
            raise RuntimeError("tag event source is closed")
        if self.halted or self._parser is None:
            return iter(())
        try:
            self._parser.feed(chunk)
        except etree.XMLSyntaxError as exc:
            self.halted = True
            logger.debug("XML parse halted: %s", exc)
            return iter([*self._drain(self._parser), _malformed(exc)])
        return self._drain(self._parser)

    def finish(self) -> Iterator[TagEvent]:
        """Signal end of input and yield any remaining events."""
        if self.closed:
            return
        parser = self._parser
        unterminated = list(self._stack)
        if parser is None or self.halted:
            self.close()
            return
        try:
            parser.close()
        except etree.XMLSyntaxError as exc:
            self.halted = True
            self.close()
            yield _malformed(exc)
            return

        reported = self._errors_seen
        yield from self._drain(parser, unterminated)
        if unterminated and self._errors_seen == reported:
            yield MalformedInput(
                f"unexpected end of input inside <{_local_name(unterminated[-1].tag)}>"
            )
        self.close()

    def close(self) -> None:
        """Release the parser without flushing; safe to call repeatedly."""
        self.closed = True
        self._parser = None
        self._stack.clear()

    def _drain(
        self,
        parser: etree.XMLPullParser,
        unterminated: Sequence[etree._Element] = (),
    ) -> Iterator[TagEvent]:
        for kind, elem in parser.read_events():
            if kind == "start":
                self._stack.append(elem)
                yield OpenTag(_local_name(elem.tag), dict(elem.attrib))
            else:
                # elements the parser closes itself at end of input never
                # saw a close tag in the feed
                if not any(elem is e for e in unterminated):
                    if elem.text:
                        yield TextContent(elem.text)
                    yield CloseTag(_local_name(elem.tag))
                self._release(elem)
        yield from self._new_errors(parser)

    def _new_errors(self, parser: etree.XMLPullParser) -> Iterator[MalformedInput]:
        errors = parser.error_log.filter_from_errors()
        for entry in list(errors)[self._errors_seen:]:
            self._errors_seen += 1
            logger.debug("Recovered from malformed XML: %s", entry.message)
            yield MalformedInput(entry.message.strip(), (entry.line, entry.column))

    def _release(self, elem: etree._Element) -> None:
        if self._stack and self._stack[-1] is elem:
            self._stack.pop()
        elem.clear(keep_tail=True)
        parent = elem.getparent()
        if parent is not None:
            while elem.getprevious() is not None:
                del parent[0]


def _local_name(tag: str) -> str:
    """Strip any '{namespace}' prefix from a tag name."""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[-1]
    return tag


def _malformed(exc: etree.XMLSyntaxError) -> MalformedInput:
    position = getattr(exc, "position", None)
    return MalformedInput(str(exc), tuple(position) if position else None)
