import aiohttp

from mcprelay.stdio import LINE_LIMIT

MAX_CONNECTIONS = 10
MAX_CONNECTIONS_PER_HOST = 10
IDLE_CONNECTION_TIMEOUT = 90.0


def create_client_session() -> aiohttp.ClientSession:
    """
    One pooled session per bridge, reused for every upstream request.

    No total timeout: the push stream is meant to stay open indefinitely,
    and a slow tool call is the server's business, not the relay's.
    """
    connector = aiohttp.TCPConnector(
        limit=MAX_CONNECTIONS,
        limit_per_host=MAX_CONNECTIONS_PER_HOST,
        keepalive_timeout=IDLE_CONNECTION_TIMEOUT,
    )
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=None),
        read_bufsize=LINE_LIMIT,
    )


def is_success(status: int) -> bool:
    return 200 <= status < 300
