import asyncio
import datetime
import logging
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from mcsearch.config import ServerTarget
from mcsearch.errors import PingError
from mcsearch.raw_ping import DEFAULT_PROTOCOL_VERSION, DEFAULT_TIMEOUT, probe

log = logging.getLogger(__name__)

Prober = Callable[[str, int, int, float], Awaitable[str]]


class StatusUpdater:
    """Periodically probes every configured target and caches the text per group."""

    def __init__(self, targets: Sequence[ServerTarget],
                 interval: float = 10.0,
                 timeout: float = DEFAULT_TIMEOUT,
                 workers: int = 100,
                 protocol_version: int = DEFAULT_PROTOCOL_VERSION,
                 prober: Prober = probe):
        self.targets: List[ServerTarget] = list(targets)
        self.interval = interval
        self.timeout = timeout
        self.workers = workers
        self.protocol_version = protocol_version
        self.prober = prober
        self.messages: Dict[str, str] = {}
        self.last_update: Optional[datetime.datetime] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def get(self, group: str) -> Optional[str]:
        return self.messages.get(group)

    async def refresh(self) -> Dict[str, str]:
        sem = asyncio.Semaphore(self.workers)
        async def ping_target(target: ServerTarget) -> Optional[str]:
            async with sem:
                try:
                    return await self.prober(target.ip, target.port,
                                             self.protocol_version, self.timeout)
                except PingError as e:
                    log.warning("group %s: %s (%s:%s) failed: %s",
                                target.group, target.nickname, target.ip, target.port, e)
                    return None
                except Exception:
                    log.exception("group %s: %s (%s:%s) failed unexpectedly",
                                  target.group, target.nickname, target.ip, target.port)
                    return None
        results = await asyncio.gather(*[ping_target(t) for t in self.targets])
        self.messages = compose_messages(zip(self.targets, results))
        self.last_update = datetime.datetime.now(datetime.timezone.utc)
        return self.messages

    def start(self) -> None:
        if self.running:
            log.warning("status updater is already started")
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except Exception:
                log.exception("failed to update server status")
            await asyncio.sleep(self.interval)


def compose_messages(results: Iterable[Tuple[ServerTarget, Optional[str]]]) -> Dict[str, str]:
    """Join rendered results per group, numbering the servers that answered."""
    messages: Dict[str, str] = {}
    counters: Dict[str, int] = {}
    for target, text in results:
        if text is None:
            continue
        n = counters.setdefault(target.group, 1)
        line = f"{n}. [ {target.nickname} ]{text}"
        messages[target.group] = f"{messages[target.group]}\n{line}" if target.group in messages else line
        counters[target.group] = n + 1
    return messages
