"""Read the Wikimedia wiki registry (dblists) from operations/mediawiki-config.

Either from a local checkout:

    scripts/generate_domains.py --mediawiki-config ../mediawiki-config

or, by default, straight from the repository mirror on GitHub.
"""

from dataclasses import dataclass
import logging
from pathlib import Path

import requests

from http_checker import USER_AGENT

DBLISTS_URL = (
    "https://raw.githubusercontent.com/wikimedia/operations-mediawiki-config/"
    "master/dblists/"
)

LISTS = ("all", "open", "private")

logger = logging.getLogger("dblists")


class RegistryError(Exception):
    """The dblists can't be read, nothing can be generated without them."""


@dataclass(frozen=True)
class RegistrySnapshot:
    all: tuple[str, ...]
    open: tuple[str, ...]
    private: tuple[str, ...]

    @property
    def public(self) -> list[str]:
        """Open wikis that are not private, in the order of the open list."""
        private = set(self.private)
        return [dbname for dbname in self.open if dbname not in private]

    @classmethod
    def from_dblists(cls, dblists: dict[str, list[str]]):
        missing = [name for name in LISTS if name not in dblists]
        if missing:
            raise RegistryError(f"Missing dblists: {', '.join(missing)}")
        if not dblists["open"]:
            raise RegistryError("The open dblist is empty.")
        unknown = set(dblists["private"]) - set(dblists["all"])
        if unknown:
            logger.warning(
                "Private wikis missing from the all dblist: %s",
                ", ".join(sorted(unknown)),
            )
        return cls(**{name: tuple(dblists[name]) for name in LISTS})


def parse_dblist(text: str) -> list[str]:
    """Parse a dblist: one database name per line, # starts a comment."""
    dbnames = []
    for line in text.splitlines():
        line = line.split("#", maxsplit=1)[0].strip()
        if line:
            dbnames.append(line)
    return dbnames


def load_from_checkout(root: Path) -> RegistrySnapshot:
    """Read all, open, and private dblists from a mediawiki-config checkout."""
    dblists = {}
    for name in LISTS:
        path = Path(root) / "dblists" / f"{name}.dblist"
        try:
            dblists[name] = parse_dblist(path.read_text(encoding="UTF-8"))
        except OSError as err:
            raise RegistryError(f"Can't read {path}: {err}") from err
        logger.info("%s: %d wikis", path, len(dblists[name]))
    return RegistrySnapshot.from_dblists(dblists)


def fetch_from_url(base_url: str = DBLISTS_URL) -> RegistrySnapshot:
    """Download all, open, and private dblists."""
    dblists = {}
    with requests.Session() as session:
        session.headers["User-Agent"] = USER_AGENT
        for name in LISTS:
            url = base_url.rstrip("/") + f"/{name}.dblist"
            logger.debug("%s: Querying...", url)
            try:
                response = session.get(url, timeout=20)
                response.raise_for_status()
            except requests.RequestException as err:
                raise RegistryError(f"Can't fetch {url}: {err}") from err
            dblists[name] = parse_dblist(response.text)
            logger.info("%s: %d wikis", url, len(dblists[name]))
    return RegistrySnapshot.from_dblists(dblists)
