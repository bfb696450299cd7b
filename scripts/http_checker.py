"""Check that a wiki replies over HTTPS, one request at a time."""

import asyncio
import logging
import re

import aiohttp

USER_AGENT = "WMFDomainList Generation (https://w.wiki/69K7)"

HEADERS = {"User-Agent": USER_AGENT}

TIMEOUT = aiohttp.ClientTimeout(total=20)

logger = logging.getLogger("http_checker")


def avoid_surrogates(s):
    """Drop surrogates from the given string.

    This could happen if aiohttp gives us surrogates, in case a server
    wrongly encodes HTTP headers.
    """
    return s.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


def to_message(err):
    """Try to produce a clean and readable message from the given HTTP
    response or exception caused by an HTTP query."""
    match err:
        case aiohttp.ServerDisconnectedError():
            return "Server disconnected"
        case aiohttp.ClientResponseError():
            return f"{err.status} {avoid_surrogates(err.message)}"
        case aiohttp.ClientError():
            if hasattr(err, "certificate_error"):
                err = err.certificate_error
            if hasattr(err, "strerror") and err.strerror is not None:
                err = err.strerror
            err = re.sub(r"\([^\)]*\)", "", str(err))  # Remove parenthesed details
            err = re.sub(r"\[[^\]]*\]", "", err)  # Remove bracketed details
            err = err.split(":")[0].strip()
            if "Cannot connect to host" in err:
                return "Cannot connect"
            if "Connect call failed" in err:
                return "Connection failed"
            return err
        case asyncio.TimeoutError():
            return "Timeout"
        case aiohttp.ClientResponse():
            return f"{err.status} {avoid_surrogates(err.reason or '')}".strip()
        case _:
            return type(err).__name__ + ": " + str(err)


def client_session() -> aiohttp.ClientSession:
    return aiohttp.ClientSession(timeout=TIMEOUT)


async def http_get_status(
    url: str, client: aiohttp.ClientSession
) -> aiohttp.ClientResponse:
    """Performs an HTTP GET on the given URL, following redirections.

    Only the status line and headers are used, the body is never read.
    """
    async with client.get(url, headers=HEADERS, allow_redirects=True) as response:
        logger.debug("%s: %s %s", url, response.status, response.reason)
    return response


async def probe(url: str, client: aiohttp.ClientSession) -> bool:
    """Tell if the given URL replies with a 2xx status."""
    try:
        logger.debug("%s: Querying...", url)
        response = await http_get_status(url, client)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as err:
        # UnicodeError (malformed IDNA) is a ValueError.
        logger.info("%s: KO: %s", url, to_message(err))
        return False
    logger.info("%s: %s", url, to_message(response))
    return 200 <= response.status < 300
