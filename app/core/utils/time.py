"""시간 측정 유틸리티"""

import time
from contextlib import contextmanager
from typing import Iterator, Optional


class Stopwatch:
    """경과 시간 측정기

    블록 실행 중에는 현재까지의 경과 시간을, 블록 종료 후에는
    확정된 경과 시간을 elapsed_ms로 반환합니다.
    """

    def __init__(self) -> None:
        self._start = time.perf_counter()
        self._end: Optional[float] = None

    def stop(self) -> None:
        if self._end is None:
            self._end = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        end = self._end if self._end is not None else time.perf_counter()
        return (end - self._start) * 1000


@contextmanager
def measure_time() -> Iterator[Stopwatch]:
    """처리 시간을 측정하는 컨텍스트 매니저

    Usage:
        with measure_time() as timer:
            ...
        elapsed_ms = timer.elapsed_ms
    """
    timer = Stopwatch()
    try:
        yield timer
    finally:
        timer.stop()
