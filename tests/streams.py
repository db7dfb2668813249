"""Upstream body streams for transport tests."""

import asyncio
from typing import Iterable

import httpx


class ChunkedStream(httpx.AsyncByteStream):
    """Unread response body, delivered chunk by chunk like a socket would."""

    def __init__(self, chunks: Iterable[bytes]):
        self.chunks = [chunk for chunk in chunks if chunk]
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


class EndlessStream(ChunkedStream):
    """Body that never ends, like `logs?follow=true`."""

    def __init__(self, chunk: bytes = b"tick\n"):
        super().__init__([chunk])
        self.sent = 0

    async def __aiter__(self):
        while not self.closed:
            self.sent += 1
            yield self.chunks[0]
            await asyncio.sleep(0.01)
