"""Stream controller: pumps network chunks through a tag event source.

The controller owns the byte stream and the parser for the duration of one
extraction. It stops pulling chunks as soon as the machine reports done,
the stream ends, or anything fails, and on every one of those paths it
closes both the byte stream and the parser before returning.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from typing import Any, Protocol

from bomfeed.ingest.tag_events import MalformedInput, TagEvent, TagEventSource

logger = logging.getLogger(__name__)


class ExtractionMachine(Protocol):
    diagnostics: list[str]

    @property
    def done(self) -> bool: ...

    def handle(self, event: TagEvent) -> Any: ...

    def result(self) -> Any: ...


class CancelToken:
    """Cooperative cancellation flag shared by the pump loop and its caller."""

    def __init__(self) -> None:
        self._cancelled = False
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._cancelled:
            self._cancelled = True
            self.reason = reason


@dataclass(frozen=True)
class ExtractionOutcome:
    result: Any
    errors: list[str] = field(default_factory=list)
    chunks_read: int = 0
    cancelled: bool = False


class StreamController:
    async def run(
        self,
        chunks: AsyncIterator[bytes],
        machine: ExtractionMachine,
        token: CancelToken | None = None,
    ) -> ExtractionOutcome:
        """Feed ``chunks`` into ``machine`` until done, exhausted or failed.

        Never raises for read or parse failures: the outcome carries whatever
        the machine accumulated plus the error list.
        """
        if token is None:
            token = CancelToken()
        source = TagEventSource()
        errors: list[str] = []
        chunks_read = 0

        try:
            async with AsyncExitStack() as stack:
                stack.callback(source.close)
                aclose = getattr(chunks, "aclose", None)
                if aclose is not None:
                    stack.push_async_callback(aclose)

                iterator = chunks.__aiter__()
                while not token.cancelled:
                    try:
                        chunk = await iterator.__anext__()
                    except StopAsyncIteration:
                        self._pump(source.finish(), machine, token, errors)
                        break
                    chunks_read += 1
                    self._pump(source.feed(chunk), machine, token, errors)
                    if source.halted:
                        token.cancel("unrecoverable markup")
        except Exception as exc:
            logger.warning("Feed extraction aborted after %d chunks: %s", chunks_read, exc)
            errors.append(f"{type(exc).__name__}: {exc}")

        errors.extend(machine.diagnostics)
        if token.cancelled:
            logger.debug(
                "Stream released after %d chunks (%s)", chunks_read, token.reason
            )
        return ExtractionOutcome(
            result=machine.result(),
            errors=errors,
            chunks_read=chunks_read,
            cancelled=token.cancelled,
        )

    @staticmethod
    def _pump(
        events, machine: ExtractionMachine, token: CancelToken, errors: list[str]
    ) -> None:
        for event in events:
            if isinstance(event, MalformedInput):
                logger.warning("Malformed feed content: %s", event)
                errors.append(str(event))
                continue
            machine.handle(event)
            if machine.done:
                token.cancel("done")
                return
