"""
Background loading of WAVE sources

Reading a file into memory is the only step that may block. The loader runs
it on a worker thread and hands back a future that resolves once, to the
parsed WaveFile.
"""
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from wavpeek.utils.config import WavpeekConfig
from wavpeek.utils.logger import get_logger
from wavpeek.wave.parser import ReadyState, WaveFile, WaveParser, READ_FAILED

logger = get_logger()

BUFFER_TYPES = (bytes, bytearray, memoryview)


def _is_path(source) -> bool:
    return isinstance(source, (str, Path))


def _is_readable(source) -> bool:
    return hasattr(source, 'read')


def read_source(source):
    """
    Read a whole WAVE source into memory

    Args:
        source: Bytes-like buffer, path, or binary file-like object

    Returns:
        Bytes-like buffer

    Raises:
        TypeError: If the source type is not supported
        OSError: If the source cannot be read
    """
    if isinstance(source, BUFFER_TYPES):
        return source

    if _is_path(source):
        logger.debug(f"Reading {source}")
        return Path(source).read_bytes()

    if _is_readable(source):
        data = source.read()
        if not isinstance(data, BUFFER_TYPES):
            raise TypeError("File-like source must be opened in binary mode")
        return data

    raise TypeError(f"Unsupported WAVE source: {type(source).__name__}")


def read_wave(source, config: Optional[WavpeekConfig] = None) -> WaveFile:
    """
    Read and parse a WAVE source synchronously

    Args:
        source: Bytes-like buffer, path, or binary file-like object
        config: Optional parser settings

    Returns:
        WaveFile in state DONE or UNSUPPORTED_FORMAT
    """
    return WaveParser(config).parse(read_source(source))


@dataclass
class WaveLoad:
    """A pending or completed load of one WAVE source"""

    wave: WaveFile
    future: Future

    @property
    def state(self) -> ReadyState:
        return self.wave.state

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> WaveFile:
        """Wait for the parsed WaveFile, re-raising read errors

        A failed read still leaves the WaveFile in UNSUPPORTED_FORMAT with
        error READ_FAILED.
        """
        return self.future.result(timeout)


class WaveLoader:
    """Reads WAVE sources on a worker pool and parses them"""

    def __init__(
        self,
        parser: Optional[WaveParser] = None,
        max_workers: Optional[int] = None
    ):
        """
        Initialize loader

        Args:
            parser: Parser to use (default: WaveParser with default config)
            max_workers: Reader threads (default: taken from parser config)
        """
        self.parser = parser or WaveParser()
        if max_workers is None:
            max_workers = self.parser.config.max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix='wavpeek-loader'
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        """Wait for pending loads and stop the worker pool"""
        self._executor.shutdown(wait=True)

    def load(
        self,
        source,
        on_load_end: Optional[Callable[[WaveFile], None]] = None
    ) -> WaveLoad:
        """
        Start loading a WAVE source

        Bytes-like sources are parsed immediately and the returned future
        is already resolved. Paths and file-like objects are read on a
        worker thread first.

        Args:
            source: Bytes-like buffer, path, or binary file-like object
            on_load_end: Called once with the WaveFile when it reaches a
                terminal state, including when the read itself fails

        Returns:
            WaveLoad holding the WaveFile and its future
        """
        wave = WaveFile()

        if isinstance(source, BUFFER_TYPES):
            future = Future()
            future.set_running_or_notify_cancel()
            future.set_result(self.parser.parse(source, wave))
        elif _is_path(source) or _is_readable(source):
            wave.state = ReadyState.LOADING
            future = self._executor.submit(self._read_and_parse, source, wave)
        else:
            raise TypeError(f"Unsupported WAVE source: {type(source).__name__}")

        if on_load_end is not None:
            future.add_done_callback(lambda f: on_load_end(wave))

        return WaveLoad(wave=wave, future=future)

    def _read_and_parse(self, source, wave: WaveFile) -> WaveFile:
        try:
            buffer = read_source(source)
        except (OSError, TypeError) as e:
            logger.error(f"Failed to read WAVE source {source}: {e}")
            wave.state = ReadyState.UNSUPPORTED_FORMAT
            wave.error = READ_FAILED
            raise
        return self.parser.parse(buffer, wave)

