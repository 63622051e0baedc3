"""
Intent handler registration.

Each handler module exposes ``register_handlers()`` which binds its
functions to their categories on the router.
"""

import logging

logger = logging.getLogger("ops-intent.handlers")


def register_all_handlers() -> None:
    """Register every intent handler with the router."""
    from . import billing, clients, create_assign, inventory, jobs, revenue, schedule, team

    for module in (revenue, team, jobs, schedule, clients, inventory, billing, create_assign):
        module.register_handlers()

    logger.info("All intent handlers registered")
