import asyncio


class CancellationToken:
    """One-shot flag shared by a bulk run and its in-flight request.

    Setting it stops the run loop before its next step and aborts whatever
    request is currently awaiting the translation service.
    """

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()
