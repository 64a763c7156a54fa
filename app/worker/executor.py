"""Worker pool running transformation tasks off the request thread."""

from concurrent.futures import ThreadPoolExecutor

from app.core.config import Settings


def create_executor(config: Settings) -> ThreadPoolExecutor:
    """Build the thread pool sized from settings."""

    return ThreadPoolExecutor(
        max_workers=max(1, config.worker_pool_size),
        thread_name_prefix="transform",
    )
