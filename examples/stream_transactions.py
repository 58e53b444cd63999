#!/usr/bin/env python3
"""
Example: stream accepted transactions and account updates.

Opens a session with a node, then consumes two poll streams side by side
until interrupted.

Usage:
    WCTL_PRIVATE_KEY=<hex> python stream_transactions.py [host] [port]

Requirements:
- A reachable ledger node
- pip install wctl
"""

import asyncio
import logging
import os
import signal
import sys

from wctl import Client, ClientConfig, EventStream

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def watch_transactions(stream: EventStream):
    async for tx in stream:
        logger.info(f"accepted {tx.id[:16]} tag={tx.tag} parents={len(tx.parents)} depth={tx.depth}")

    await stream.wait_closed()
    if not stream.closed_cleanly:
        logger.error(f"transaction stream ended with error: {stream.error}")


async def watch_accounts(stream: EventStream):
    async for update in stream:
        logger.info(f"account {update.account[:16]} updated fields: {sorted(update.fields)}")


async def main(host: str, port: int):
    key = os.environ.get("WCTL_PRIVATE_KEY")
    if not key:
        logger.error("WCTL_PRIVATE_KEY is not set")
        return 1

    client = Client(ClientConfig(host=host, port=port, private_key=key))
    client.init()

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    txs = await client.poll_accepted_transactions(stop)
    accounts = await client.poll_account_updates(stop)

    watchers = asyncio.gather(watch_transactions(txs), watch_accounts(accounts))
    try:
        await stop.wait()
        # A quiet node leaves the readers blocked, so close the sockets too.
        await asyncio.gather(txs.aclose(), accounts.aclose())
        await watchers
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    host = sys.argv[1] if len(sys.argv) > 1 else "localhost"
    port = int(sys.argv[2]) if len(sys.argv) > 2 else 9000
    sys.exit(asyncio.run(main(host, port)))
