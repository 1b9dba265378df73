import time
from typing import Callable

from fastapi import Request, Response


async def add_process_time_header(
    request: Request,
    call_next: Callable[[Request], Response],
) -> Response:
    """
    Measure how long a request took and expose it as 'X-Process-Time'
    (seconds, millisecond precision).
    """
    start_time = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Process-Time"] = f"{time.perf_counter() - start_time:.3f}"
    return response
