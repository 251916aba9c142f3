import asyncio
from dataclasses import dataclass
from typing import Sequence

from peerfinder.discovery.errors import ActionInvocationError
from peerfinder.discovery.logging_models import ActionError, ActionInfo
from peerfinder.logging import Logger


@dataclass(slots=True)
class ActionResult:
    script: str
    return_code: int
    output: str


class ActionRunner:
    """
    Runs an on-start or on-change script with the peer list on stdin.

    The script is run through the shell with the inherited environment and
    working directory. Stdout and stderr are captured together. Any launch
    failure or non-zero exit raises ``ActionInvocationError``.
    """

    def __init__(self, logger: Logger | None = None) -> None:
        self._logger = logger or Logger()

    async def run(
        self,
        peers: Sequence[str],
        script: str,
    ) -> ActionResult:
        peer_list = "\n".join(peers)

        await self._logger.log(
            ActionInfo(
                message=f"execing: {script} with stdin: {peer_list}",
                script=script,
            )
        )

        try:
            process = await asyncio.create_subprocess_shell(
                script,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )

        except OSError as err:
            await self._logger.log(
                ActionError(
                    message=f"Failed to launch {script}: {err}",
                    script=script,
                )
            )
            raise ActionInvocationError(script, str(err)) from err

        stdout, _ = await process.communicate(
            input=f"{peer_list}\n".encode()
        )
        output = stdout.decode(errors="replace") if stdout else ""

        if process.returncode != 0:
            await self._logger.log(
                ActionError(
                    message=f"Failed to execute {script}: {output}",
                    script=script,
                    return_code=process.returncode,
                )
            )
            raise ActionInvocationError(
                script,
                f"exit status {process.returncode}",
                output=output,
                return_code=process.returncode,
            )

        await self._logger.log(
            ActionInfo(
                message=output,
                script=script,
            )
        )

        return ActionResult(
            script=script,
            return_code=process.returncode,
            output=output,
        )
