from .logger_stream import LoggerStream


class LoggerContext:
    def __init__(self, nested: bool = False) -> None:
        self.stream = LoggerStream()
        self.nested = nested

    async def __aenter__(self):
        await self.stream.initialize()
        return self.stream

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.nested is False:
            await self.stream.close()
