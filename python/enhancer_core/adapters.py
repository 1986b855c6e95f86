"""Input providers and output consumers.

The enhancer reads raw input one line at a time from an InputProvider and
hands printed output to an OutputConsumer. Neither side interprets the text:
decoding happens in the enhancer and rendering in the printing strategies.

Input providers skip blank lines and return ``None`` once exhausted.

Example:
    >>> with StringInputProvider("[1,2,3]\\n9\\n") as provider:
    ...     provider.provide_next_input()
    '[1,2,3]'
    >>>
    >>> with FileOutputConsumer("out.txt") as consumer:
    ...     consumer.consume("[0,1]")
"""

from __future__ import annotations

import io
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

import httpx

from .logging import log_debug


class InputProvider(ABC):
    """Abstract source of raw input lines."""

    @abstractmethod
    def provide_next_input(self) -> str | None:
        """Return the next non-blank input line, or None when exhausted."""
        ...

    def close(self) -> None:
        """Release any resource held by the provider."""

    def __iter__(self) -> Iterator[str]:
        while (line := self.provide_next_input()) is not None:
            yield line

    def __enter__(self) -> InputProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FileInputProvider(InputProvider):
    """Read input lines from a file path or an open text stream.

    Streams passed in are not closed by the provider; files it opened are.
    """

    def __init__(self, source: str | Path | TextIO, encoding: str = "utf-8") -> None:
        if isinstance(source, (str, Path)):
            self._stream: TextIO = open(source, encoding=encoding)  # noqa: SIM115
            self._owns_stream = True
        else:
            self._stream = source
            self._owns_stream = False

    def provide_next_input(self) -> str | None:
        while True:
            line = self._stream.readline()
            if line == "":
                return None
            stripped = line.strip()
            if stripped:
                return stripped

    def close(self) -> None:
        if self._owns_stream and not self._stream.closed:
            self._stream.close()


class StringInputProvider(FileInputProvider):
    """Read input lines from an in-memory string."""

    def __init__(self, text: str) -> None:
        super().__init__(io.StringIO(text))


class ConsoleInputProvider(FileInputProvider):
    """Read input lines from standard input."""

    def __init__(self) -> None:
        super().__init__(sys.stdin)


class HttpInputProvider(InputProvider):
    """Fetch the input document once over HTTP, then serve it line by line.

    Args:
        url: Document URL.
        client: Optional httpx client; one is created (and closed) otherwise.
        timeout: Request timeout in seconds for a created client.
    """

    def __init__(self, url: str, client: httpx.Client | None = None, timeout: float = 10.0) -> None:
        self._url = url
        self._client = client if client is not None else httpx.Client(timeout=timeout)
        self._owns_client = client is None
        self._lines: StringInputProvider | None = None

    def provide_next_input(self) -> str | None:
        if self._lines is None:
            response = self._client.get(self._url)
            response.raise_for_status()
            log_debug(f"HttpInputProvider: fetched {self._url}", {"bytes": len(response.content)})
            self._lines = StringInputProvider(response.text)
        return self._lines.provide_next_input()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class OutputConsumer(ABC):
    """Abstract sink for printed output."""

    @abstractmethod
    def consume(self, text: str) -> None:
        """Consume one printed output."""
        ...

    def close(self) -> None:
        """Release any resource held by the consumer."""

    def __enter__(self) -> OutputConsumer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FileOutputConsumer(OutputConsumer):
    """Write each output as one line to a file path or an open text stream."""

    def __init__(self, target: str | Path | TextIO, encoding: str = "utf-8") -> None:
        if isinstance(target, (str, Path)):
            self._stream: TextIO = open(target, "w", encoding=encoding)  # noqa: SIM115
            self._owns_stream = True
        else:
            self._stream = target
            self._owns_stream = False

    def consume(self, text: str) -> None:
        self._stream.write(text + "\n")
        self._stream.flush()

    def close(self) -> None:
        if self._owns_stream and not self._stream.closed:
            self._stream.close()


class ConsoleOutputConsumer(FileOutputConsumer):
    """Write outputs to standard output."""

    def __init__(self) -> None:
        super().__init__(sys.stdout)


class BufferOutputConsumer(OutputConsumer):
    """Collect outputs in memory."""

    def __init__(self) -> None:
        self.outputs: list[str] = []

    def consume(self, text: str) -> None:
        self.outputs.append(text)


__all__ = [
    "InputProvider",
    "FileInputProvider",
    "StringInputProvider",
    "ConsoleInputProvider",
    "HttpInputProvider",
    "OutputConsumer",
    "FileOutputConsumer",
    "ConsoleOutputConsumer",
    "BufferOutputConsumer",
]
