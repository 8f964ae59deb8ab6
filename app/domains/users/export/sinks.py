"""Export 출력 대상(Sink)

CSV 바이트를 받는 목적지 추상화와 구현체입니다.

- FileSink: 로컬 파일 (aiofiles)
- StreamSink: HTTP 응답 스트림으로 넘기는 bounded queue
- TeeSink: 하나의 write를 여러 Sink에 동시에 전달 (하나라도 실패하면 실패)
"""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, AsyncIterator, Optional

import aiofiles
from aiofiles.threadpool.binary import AsyncBufferedIOBase


class SinkClosedError(Exception):
    """더 이상 쓰기를 받지 않는 Sink에 쓰려고 한 경우"""


class ExportSink(ABC):
    """바이트 시퀀스를 받는 출력 대상"""

    @abstractmethod
    async def write(self, data: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """버퍼링된 바이트가 모두 전달될 때까지 대기 후 종료"""
        raise NotImplementedError


class FileSink(ExportSink):
    """파일 Sink"""

    def __init__(self, path: Path):
        self.path = path
        self._file: Optional[AsyncBufferedIOBase] = None
        self.bytes_written = 0

    async def open(self) -> "FileSink":
        self._file = await aiofiles.open(self.path, "wb")
        return self

    async def write(self, data: bytes) -> None:
        if self._file is None:
            raise SinkClosedError(f"File sink is not open: {self.path}")
        await self._file.write(data)
        self.bytes_written += len(data)

    async def close(self) -> None:
        if self._file is None:
            return
        file, self._file = self._file, None
        try:
            await file.flush()
        finally:
            await file.close()


class StreamSink(ExportSink):
    """HTTP 응답으로 청크를 넘기는 Sink

    생산자(export)는 write/close로 청크를 넣고, 소비자(StreamingResponse)는
    iter_chunks()로 꺼냅니다. 큐 크기가 제한되어 있어 소비자가 느리면 생산자가
    대기합니다. close()는 소비자가 모든 청크를 가져갈 때까지 반환하지 않습니다.
    """

    _EOF: Any = object()

    def __init__(self, max_chunks: int = 16):
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=max_chunks)
        self._detached = False

    @property
    def detached(self) -> bool:
        return self._detached

    def detach(self) -> None:
        """소비자가 떠남 (클라이언트 연결 종료)"""
        self._detached = True

    async def write(self, data: bytes) -> None:
        if self._detached:
            raise SinkClosedError("Client disconnected")
        await self._queue.put(data)

    async def close(self) -> None:
        if self._detached:
            raise SinkClosedError("Client disconnected")
        await self._queue.put(self._EOF)
        await self._queue.join()

    async def abort(self, exc: BaseException) -> None:
        """소비자 쪽에서 exc가 발생하도록 전달"""
        if self._detached:
            return
        await self._queue.put(exc)

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        while True:
            item = await self._queue.get()
            if item is self._EOF:
                self._queue.task_done()
                return
            if isinstance(item, BaseException):
                self._queue.task_done()
                raise item
            yield item
            self._queue.task_done()


class TeeSink(ExportSink):
    """여러 Sink에 같은 바이트를 쓰는 조합 Sink

    write()는 모든 대상의 결과를 기다린 뒤, 하나라도 실패하면 첫 번째 예외를
    다시 발생시킵니다. close()는 나중에 등록된 Sink부터 하나씩 닫고, 실패하면
    남은 Sink는 닫지 않습니다. 응답 Sink를 맨 앞에 두면 다른 대상이 모두
    완료된 뒤에만 응답이 정상 종료됩니다.
    """

    def __init__(self, *sinks: ExportSink):
        if not sinks:
            raise ValueError("TeeSink requires at least one sink")
        self.sinks = sinks

    async def write(self, data: bytes) -> None:
        await self._fan_out(*(sink.write(data) for sink in self.sinks))

    async def close(self) -> None:
        for sink in reversed(self.sinks):
            await sink.close()

    @staticmethod
    async def _fan_out(*operations) -> None:
        results = await asyncio.gather(*operations, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
