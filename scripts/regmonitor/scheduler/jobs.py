"""
Scheduled job definitions for the Regulatory Monitor.

Jobs are async functions that wrap the synchronous refresh cycle in
asyncio.to_thread().
"""

import asyncio
import logging

logger = logging.getLogger(__name__)


async def refresh_job(controller):
    """Refresh the dashboard. A refresh already in progress makes this a no-op."""
    logger.info("Scheduled refresh started")
    started = await asyncio.to_thread(controller.refresh)
    if not started:
        logger.info("Refresh already in progress - skipping")
        return None

    state = controller.state
    logger.info("Scheduled refresh finished: %s, %d updates", state.status, len(state.updates))
    return {"status": state.status, "updates": len(state.updates)}
