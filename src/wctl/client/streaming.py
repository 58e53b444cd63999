"""
Streaming consumers for the node's poll routes.

Each poll opens its own WebSocket and runs one reader task that decodes
messages and hands them to the caller through an ``EventStream``. Delivery is
unbuffered beyond a single in-flight value: the reader waits until the caller
takes each event, or until the stop event fires, whichever comes first.

Streams never reconnect. When the connection ends, or a message fails to
decode, iteration simply stops. ``EventStream.error`` then tells a clean close
apart from a failure for callers that care.
"""

import asyncio
import logging
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from pydantic import ValidationError
from websockets.exceptions import ConnectionClosedOK

from ..codec.wire import Transaction
from ..models import AccountUpdateEvent
from ..routes import ROUTE_ACCOUNT_POLL, ROUTE_TX_POLL
from ..runtime.errors import DecodeError
from ..transport.ws import connect_websocket, stream_url
from .dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)

T = TypeVar("T")

Message = Union[str, bytes]

_END = object()


def decode_account_update(raw: Message) -> AccountUpdateEvent:
    try:
        return AccountUpdateEvent.model_validate_json(raw)
    except ValidationError as e:
        raise DecodeError("Invalid account update event", cause=e) from e


class EventStream(Generic[T]):
    """
    Async iterator over decoded events from one WebSocket.

    The stream owns its socket; both are torn down together when the reader
    task exits. Setting the stop event makes the reader give up at its next
    delivery attempt, so an event that is in flight at that moment may be
    dropped.
    """

    def __init__(self, ws: Any, decoder: Callable[[Message], T],
                 stop: asyncio.Event, name: str = ""):
        self.name = name
        self.error: Optional[BaseException] = None
        self._ws = ws
        self._decoder = decoder
        self._stop = stop
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._closed = asyncio.Event()
        self._exhausted = False
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start the reader task. Called once by the consumer."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run())

    @property
    def closed(self) -> bool:
        """True once the reader has exited and the socket is released."""
        return self._closed.is_set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    @property
    def closed_cleanly(self) -> bool:
        """True if the stream ended without a connection or decode error."""
        return self.closed and self.error is None

    def stop(self) -> None:
        """Ask the reader to stop at its next delivery attempt."""
        self._stop.set()

    async def wait_closed(self) -> None:
        await self._closed.wait()

    async def aclose(self) -> None:
        """Stop the stream and close its socket from the caller side."""
        self._stop.set()
        await self._ws.close()
        if self._task is not None:
            await self._task

    def __aiter__(self) -> "EventStream[T]":
        return self

    async def __anext__(self) -> T:
        if self._exhausted:
            raise StopAsyncIteration
        item = await self._queue.get()
        self._queue.task_done()
        if item is _END:
            self._exhausted = True
            raise StopAsyncIteration
        return item

    async def __aenter__(self) -> "EventStream[T]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def _offer(self, item: Any) -> bool:
        """
        Hand one item to the caller unless the stop event wins the race.

        Returns only once the caller has taken the item, so the reader never
        pulls the next message off the socket while one is still pending.
        """
        if self._stop.is_set():
            return False

        # Empty here: every earlier item was taken before its offer returned.
        self._queue.put_nowait(item)

        taken = asyncio.ensure_future(self._queue.join())
        stopped = asyncio.ensure_future(self._stop.wait())
        try:
            done, _ = await asyncio.wait({taken, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            taken.cancel()
            stopped.cancel()

        return taken in done and not self._stop.is_set()

    async def _run(self) -> None:
        logger.debug(f"Reader started for {self.name}")
        try:
            while True:
                raw = await self._ws.recv()
                item = self._decoder(raw)
                if not await self._offer(item):
                    logger.debug(f"Stop requested on {self.name}")
                    break
        except ConnectionClosedOK:
            logger.info(f"Stream {self.name} closed")
        except DecodeError as e:
            logger.warning(f"Undecodable message on {self.name}: {e}")
            self.error = e
        except Exception as e:
            logger.error(f"Stream {self.name} failed: {e}")
            self.error = e
        finally:
            await self._release()

    async def _release(self) -> None:
        try:
            await self._ws.close()
        except Exception as e:
            logger.debug(f"Error closing WebSocket: {e}")

        # An event left over from a stop race is dropped so the end marker
        # always fits. The marker itself is not waited on.
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
        self._queue.put_nowait(_END)

        self._closed.set()
        logger.debug(f"Reader exited for {self.name}")


class StreamConsumer:
    """Opens poll streams with the dispatcher's session headers."""

    def __init__(self, dispatcher: RequestDispatcher):
        self.dispatcher = dispatcher

    async def poll(self, path: str, decoder: Callable[[Message], T],
                   stop: Optional[asyncio.Event] = None,
                   event: Optional[str] = None) -> EventStream[T]:
        """
        Open a stream on a poll route.

        Args:
            path: Poll route path
            decoder: Turns one message into one event; raises DecodeError
            stop: Stop event; an internal one is created when omitted, in
                which case the stream runs until the connection ends
            event: Optional sub-kind query parameter

        Returns:
            A started EventStream

        Raises:
            websockets exceptions or OSError if the handshake fails
        """
        if stop is None:
            stop = asyncio.Event()

        url = stream_url(self.dispatcher.config, path, event)
        ws = await connect_websocket(url, self.dispatcher.headers())

        stream: EventStream[T] = EventStream(ws, decoder, stop, name=url)
        stream.start()
        return stream

    async def poll_transactions(self, event: str,
                                stop: Optional[asyncio.Event] = None) -> EventStream[Transaction]:
        return await self.poll(ROUTE_TX_POLL, Transaction.from_json, stop, event=event)

    async def poll_account_updates(self, stop: Optional[asyncio.Event] = None) -> EventStream[AccountUpdateEvent]:
        return await self.poll(ROUTE_ACCOUNT_POLL, decode_account_update, stop)
