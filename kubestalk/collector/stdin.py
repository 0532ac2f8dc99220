"""Reads YAML or JSON documents from a stream (``kubestalk -``).

Every decoded object is emitted as a MODIFIED notification so that
successive documents describing the same object are diffed against each
other. ``*List`` documents (as printed by ``kubectl get -o yaml``) are
expanded into their items. Documents that cannot be decoded are logged
and skipped.

Decoding is incremental: a JSON value is emitted as soon as it is
complete (``kubectl get -w -o json`` never closes its output) and a YAML
document as soon as the next ``---`` separator arrives.
"""

from __future__ import annotations

import asyncio
import json
import os
import re
import stat
from collections.abc import AsyncIterator, Iterable, Iterator
from dataclasses import dataclass, field
from typing import TextIO

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from kubestalk.models.events import EventType, WatchEvent
from kubestalk.observability.logging import get_logger

_logger = get_logger("collector.stdin")

_SEPARATOR_RE = re.compile(r"^---\s*(#.*)?$")


def _is_separator(line: str) -> bool:
    return _SEPARATOR_RE.match(line.rstrip("\n")) is not None


def _decode_json_stream(text: str) -> Iterator[object]:
    """Decode concatenated JSON values."""
    decoder = json.JSONDecoder()
    index = 0
    length = len(text)
    while True:
        while index < length and text[index].isspace():
            index += 1
        if index >= length:
            return
        value, index = decoder.raw_decode(text, index)
        yield value


def decode_document(text: str) -> list[object]:
    """Decode one complete document into zero or more values.

    Raises:
        ValueError: the document is neither valid JSON nor valid YAML.
    """
    stripped = text.strip()
    if not stripped:
        return []

    if stripped.startswith("{"):
        return list(_decode_json_stream(stripped))

    yaml = YAML(typ="safe", pure=True)
    try:
        value = yaml.load(text)
    except YAMLError as exc:
        raise ValueError(str(exc)) from exc
    if value is None:
        return []
    return [value]


@dataclass(frozen=True)
class Document:
    """One decoded document, or the reason it could not be decoded."""

    number: int
    values: list[object] = field(default_factory=list)
    error: str = ""


class DocumentDecoder:
    """Line-fed decoder for a mixed stream of YAML documents and JSON values.

    A document starting with ``{`` is JSON and ends where the value ends;
    anything else is YAML and ends at the next separator line.
    """

    def __init__(self) -> None:
        self._json = json.JSONDecoder()
        self._mode: str | None = None
        self._yaml_lines: list[str] = []
        self._json_buffer = ""
        self._count = 0

    def feed(self, line: str) -> list[Document]:
        """Add one line; return the documents it completed."""
        match self._mode:
            case None:
                if not line.strip() or _is_separator(line):
                    return []
                if line.lstrip().startswith("{"):
                    self._mode = "json"
                    self._json_buffer = line
                    return self._drain_json()
                self._mode = "yaml"
                self._yaml_lines = [line]
                return []

            case "yaml":
                if _is_separator(line):
                    return [self._finish_yaml()]
                self._yaml_lines.append(line)
                return []

            case _:
                self._json_buffer += line
                return self._drain_json()

    def close(self) -> list[Document]:
        """Flush whatever is left at the end of the stream."""
        match self._mode:
            case "yaml":
                return [self._finish_yaml()]
            case "json":
                text = self._json_buffer
                self._reset()
                return [self._decode(text)]
            case _:
                return []

    def _drain_json(self) -> list[Document]:
        documents: list[Document] = []
        while True:
            text = self._json_buffer.lstrip()
            if not text:
                self._reset()
                return documents

            if not text.startswith("{"):
                # a YAML document follows the JSON values
                self._reset()
                for line in text.splitlines(keepends=True):
                    documents.extend(self.feed(line))
                return documents

            try:
                value, end = self._json.raw_decode(text)
            except json.JSONDecodeError as exc:
                # an error before the end of the buffered lines cannot be fixed by more input
                if exc.pos < len(text.rstrip()):
                    self._reset()
                    documents.append(self._next(error=str(exc)))
                else:
                    self._json_buffer = text
                return documents

            documents.append(self._next(values=[value]))
            self._json_buffer = text[end:]

    def _finish_yaml(self) -> Document:
        text = "".join(self._yaml_lines)
        self._reset()
        return self._decode(text)

    def _decode(self, text: str) -> Document:
        try:
            return self._next(values=decode_document(text))
        except ValueError as exc:
            return self._next(error=str(exc))

    def _next(self, values: list[object] | None = None, error: str = "") -> Document:
        self._count += 1
        return Document(number=self._count, values=values or [], error=error)

    def _reset(self) -> None:
        self._mode = None
        self._yaml_lines = []
        self._json_buffer = ""


def _expand(value: object) -> Iterator[object]:
    if isinstance(value, dict) and str(value.get("kind", "")).endswith("List"):
        items = value.get("items")
        if isinstance(items, list):
            yield from items
            return
    yield value


def _events(documents: Iterable[Document]) -> Iterator[WatchEvent]:
    for document in documents:
        if document.error:
            _logger.error("document_decode_failed", document=document.number, error=document.error)
            continue
        for value in document.values:
            for obj in _expand(value):
                yield WatchEvent(type=EventType.MODIFIED, object=obj)


def read_documents(lines: Iterable[str]) -> Iterator[WatchEvent]:
    """Yield a MODIFIED notification for every object read from *lines*.

    Each notification is yielded as soon as its document is complete,
    without reading ahead.
    """
    decoder = DocumentDecoder()
    for line in lines:
        yield from _events(decoder.feed(line))
    yield from _events(decoder.close())


# one line may hold a whole object in compact JSON
_READ_LIMIT = 16 * 1024 * 1024


def _is_pipe(stream: TextIO) -> bool:
    """True for pipes, sockets and terminals, which can block indefinitely."""
    try:
        mode = os.fstat(stream.fileno()).st_mode
    except (OSError, ValueError):
        return False
    return stat.S_ISFIFO(mode) or stat.S_ISSOCK(mode) or stat.S_ISCHR(mode)


async def stdin_events(stream: TextIO) -> AsyncIterator[WatchEvent]:
    """Async view of :func:`read_documents`.

    Pipes and terminals are read through the event loop, so cancelling the
    consumer returns immediately even while the writer keeps the pipe open.
    Regular files and in-memory streams never block and are read directly.
    """
    if not _is_pipe(stream):
        for event in read_documents(stream):
            yield event
            await asyncio.sleep(0)
        return

    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=_READ_LIMIT)
    transport, _ = await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), stream)

    decoder = DocumentDecoder()
    try:
        while line := await reader.readline():
            for event in _events(decoder.feed(line.decode("utf-8", errors="replace"))):
                yield event
        for event in _events(decoder.close()):
            yield event
    finally:
        transport.close()
