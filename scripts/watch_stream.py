"""
Manual check of incremental delivery against a running server.

Start the server first (``wordstream serve``), then from the project root:
    PYTHONPATH=src  python scripts/watch_stream.py 8

Prints every physical read with its arrival offset, so pacing is visible.
"""

import asyncio
import os
import sys
import time

import httpx

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from wordstream.core.config import get_settings


async def main(count: int) -> None:
    settings = get_settings().consumer
    start = time.perf_counter()
    async with httpx.AsyncClient(base_url=settings.base_url, timeout=settings.read_timeout) as client:
        async with client.stream("GET", settings.stream_path, params={"count": count}) as response:
            print(f"Status: {response.status_code}")
            print(f"Headers: {dict(response.headers)}")
            print("\nReads:")
            async for chunk in response.aiter_raw():
                print(f"  +{time.perf_counter() - start:6.3f}s  {chunk!r}")

    print("\nDone!")


if __name__ == "__main__":
    asyncio.run(main(int(sys.argv[1]) if len(sys.argv) > 1 else 5))
