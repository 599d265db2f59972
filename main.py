import asyncio
import logging
import tkinter as tk
from typing import Awaitable, Set

from geolookup.config import LOG_LEVEL, UI_POLL_INTERVAL_SEC
from geolookup.gateway import HttpLookupGateway
from geolookup.repository import RowCollection
from geolookup.ticks import AsyncioTimer, TickScheduler
from geolookup.ui import AppUI

logger = logging.getLogger("geolookup")


async def run_app() -> None:
    loop = asyncio.get_running_loop()
    tasks: Set[asyncio.Task] = set()

    def spawn(coro: Awaitable[None]) -> None:
        task = loop.create_task(coro)
        tasks.add(task)
        task.add_done_callback(tasks.discard)

    async with HttpLookupGateway() as gateway:
        root = tk.Tk()
        scheduler = TickScheduler(AsyncioTimer(loop))
        rows = RowCollection(gateway.lookup)
        app = AppUI(root, rows, scheduler, spawn)
        logger.info("lookup backend at %s", gateway.base_url)

        # Tk and asyncio share this one thread: pump Tk events, then yield to the loop
        while not app.closed:
            try:
                root.update()
            except tk.TclError:
                break
            await asyncio.sleep(UI_POLL_INTERVAL_SEC)

        for task in list(tasks):
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


def main() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    asyncio.run(run_app())


if __name__ == "__main__":
    main()
