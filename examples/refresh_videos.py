import asyncio
import signal

from refresh_scheduler.app import run
from refresh_scheduler.config import SchedulerSettings


async def main():
    settings = SchedulerSettings.from_env()
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)
    print(f"Refreshing {settings.feed_url} into {settings.database_url}. Press Ctrl+C to stop.")
    await run(settings, stop_event)

if __name__ == "__main__":
    asyncio.run(main())
