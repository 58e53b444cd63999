#!/usr/bin/env python3
"""
Example: send a transfer and look it up again.

Usage:
    WCTL_PRIVATE_KEY=<hex> python send_transfer.py <recipient hex> <amount> [host] [port]
"""

import logging
import os
import sys

from wctl import Client, ClientConfig, HTTPStatusError, Tag, Transfer

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv):
    if len(argv) < 3:
        print(__doc__)
        return 2

    recipient, amount = argv[1], int(argv[2])
    host = argv[3] if len(argv) > 3 else "localhost"
    port = int(argv[4]) if len(argv) > 4 else 9000

    config = ClientConfig(host=host, port=port, private_key=os.environ["WCTL_PRIVATE_KEY"])

    with Client(config) as client:
        client.init()

        try:
            ack = client.send_transfer(Tag.TRANSFER, Transfer.to(recipient, amount))
        except HTTPStatusError as e:
            logger.error(f"transfer rejected ({e.status_code}): {e.body}")
            return 1

        logger.info(f"sent {ack.tx_id} with parents {list(ack.parent_ids)} critical={ack.is_critical}")

        tx = client.get_transaction(ack.tx_id)
        logger.info(f"node reports sender={tx.sender[:16]} depth={tx.depth}")

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
