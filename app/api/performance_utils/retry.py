import asyncio
import logging
from functools import wraps

logger = logging.getLogger(__name__)


def async_retry(exceptions, tries=3, delay=0.5, backoff=2):
    """Retry a coroutine on the given exceptions with exponential backoff."""

    def deco_retry(f):
        @wraps(f)
        async def f_retry(*args, **kwargs):
            mtries, mdelay = tries, delay
            while mtries > 1:
                try:
                    return await f(*args, **kwargs)
                except exceptions as e:
                    logger.warning("Retryable error: %s, retrying in %s sec", e, mdelay)
                    await asyncio.sleep(mdelay)
                    mtries -= 1
                    mdelay *= backoff
            return await f(*args, **kwargs)

        return f_retry

    return deco_retry
