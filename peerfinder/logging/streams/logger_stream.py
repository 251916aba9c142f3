import asyncio
import datetime
import io
import os
import pathlib
import sys
import threading
from collections import defaultdict
from typing import (
    Callable,
    Dict,
    TypeVar,
)

import msgspec

from peerfinder.logging.config import LoggingConfig, StreamType
from peerfinder.logging.models import Entry, Log


T = TypeVar('T', bound=Entry)

DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"
ERROR_TEMPLATE = "{timestamp} - {level} - {thread_id}.{filename}:{function_name}.{line_number} - {error}"
DEFAULT_LOGFILE = "peer_finder.json"


class LoggerStream:
    def __init__(self) -> None:
        self._init_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._files: Dict[str, io.BufferedWriter] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

        self._config = LoggingConfig()
        self._initialized: bool = False

    async def initialize(self):
        async with self._init_lock:
            if self._initialized:
                return

            if self._loop is None:
                self._loop = asyncio.get_running_loop()

            self._initialized = True

    async def log(
        self,
        log: Log,
        template: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        entry = log.entry

        if self._config.enabled(entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        if self._initialized is False:
            await self.initialize()

        if template is None:
            template = DEFAULT_TEMPLATE

        self._log_to_stream(log, template)

        logfile_path = self._to_logfile_path()
        if logfile_path:
            await self._log_to_file(log, logfile_path)

    def _log_to_stream(
        self,
        log: Log,
        template: str,
    ):
        stream = sys.stdout if self._config.output == StreamType.STDOUT else sys.stderr

        try:
            stream.write(
                log.entry.to_template(
                    template,
                    context={
                        "filename": log.filename,
                        "function_name": log.function_name,
                        "line_number": log.line_number,
                        "thread_id": log.thread_id,
                        "timestamp": log.timestamp,
                    },
                )
                + "\n"
            )
            stream.flush()

        except (KeyError, IndexError, ValueError) as err:
            self._write_error(log, err)

    async def _log_to_file(
        self,
        log: Log,
        logfile_path: str,
    ):
        file_lock = self._file_locks[logfile_path]

        async with file_lock:
            try:
                if self._files.get(logfile_path) is None or self._files[logfile_path].closed:
                    await self._loop.run_in_executor(
                        None,
                        self._open_file,
                        logfile_path,
                    )

                await self._loop.run_in_executor(
                    None,
                    self._write_to_file,
                    log,
                    logfile_path,
                )

            except OSError as err:
                self._write_error(log, err)

    def _to_logfile_path(self) -> str | None:
        directory = self._config.directory
        if directory is None:
            return None

        return os.path.join(directory, DEFAULT_LOGFILE)

    def _open_file(self, logfile_path: str):
        resolved_path = pathlib.Path(logfile_path).absolute().resolve()
        resolved_path.parent.mkdir(parents=True, exist_ok=True)

        self._files[logfile_path] = open(str(resolved_path), "ab")

    def _write_to_file(
        self,
        log: Log,
        logfile_path: str,
    ):
        if (
            logfile := self._files.get(logfile_path)
        ) and (
            logfile.closed is False
        ):
            logfile.write(msgspec.json.encode(log) + b"\n")
            logfile.flush()

    def _write_error(self, log: Log, err: Exception):
        sys.stderr.write(
            log.entry.to_template(
                ERROR_TEMPLATE,
                context={
                    "filename": log.filename,
                    "function_name": log.function_name,
                    "line_number": log.line_number,
                    "error": str(err),
                    "thread_id": threading.get_native_id(),
                    "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
                },
            )
            + "\n"
        )

    async def close(self):
        for logfile_path, logfile in self._files.items():
            async with self._file_locks[logfile_path]:
                if logfile.closed is False:
                    await self._loop.run_in_executor(None, logfile.close)

        self._files.clear()
        self._initialized = False
