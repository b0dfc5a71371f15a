"""Protean Engine runner for the billing domain.

Starts the Engine that processes events asynchronously:
- OutboxProcessor: polls the outbox table, publishes InvoiceStateUpdated
  and UserInvoicesScheduleRequested to the broker
- StreamSubscriptions: reads identity streams and invokes the UserDeleted
  handler and the invoice status projector

Usage:
    python src/server.py
"""

import asyncio

from billing.utils.logging import configure_logging
from billing.wiring import build_clients, install
from protean.server.engine import Engine


async def run():
    from billing.domain import billing

    billing.init()
    install(build_clients())
    await Engine(billing).run()


def main():
    configure_logging()
    asyncio.run(run())


if __name__ == "__main__":
    main()
