"""Generate domains.json: the public domains of Wikimedia wikis.

Reads the open and private dblists, turns each public database name into
its domain name, and (unless --no-verify) keeps only the domains whose
/w/api.php replies with a 2xx status.
"""

import argparse
import asyncio
from datetime import datetime
import json
import logging
from pathlib import Path

from tqdm import tqdm

import dblists
import http_checker
from wiki_domain import IGNORE, api_url, has_family, normalize

VERSION = "1.0.0"
SOURCE = "https://github.com/theresnotime/WMFDomainList"
GENERATED_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("generate_domains")


async def build_domain_list(
    snapshot: dblists.RegistrySnapshot,
    verify: bool = True,
    verbose: bool = False,
    probe=None,
    silent: bool = False,
) -> list[str]:
    """Get the domains of all public, non-ignored, wikis of the snapshot.

    When verifying, `probe` is an async callable taking an URL and
    returning a bool, by default http_checker.probe using a fresh session.
    Domains failing the probe are dropped with a "[VERIFY FAIL]" line.
    """
    if verify and probe is None:
        async with http_checker.client_session() as client:

            async def probe_with_client(url):
                return await http_checker.probe(url, client)

            return await build_domain_list(
                snapshot, verify, verbose, probe_with_client, silent
            )

    domains = []
    for dbname in tqdm(snapshot.public, unit="wiki", disable=verbose or silent):
        if dbname in IGNORE:
            continue
        domain = normalize(dbname)
        if not has_family(domain):
            logger.warning("%s: No known project family, keeping %r", dbname, domain)
        url = api_url(domain)
        if not verify:
            domains.append(domain)
        elif await probe(url):
            if verbose:
                tqdm.write(f"[VERIFY PASS]: {url}")
            domains.append(domain)
        else:
            tqdm.write(f"[VERIFY FAIL]: {url}")
    return domains


def write_report(domains: list[str], out: Path = Path("domains.json")) -> str:
    """Write the domains to a JSON file, returns the written JSON."""
    report = {
        "meta": {"version": VERSION, "source": SOURCE},
        "generated": datetime.now().strftime(GENERATED_FORMAT),
        "domains": list(domains),
    }
    text = json.dumps(report, indent=4, ensure_ascii=False)
    Path(out).write_text(text, encoding="UTF-8")
    return text


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output",
        type=Path,
        help="File to write the domains to.",
        default=Path("domains.json"),
    )
    parser.add_argument(
        "--no-verify",
        action="store_false",
        dest="verify",
        help="Don't check that each domain replies over HTTPS.",
    )
    registry = parser.add_mutually_exclusive_group()
    registry.add_argument(
        "--mediawiki-config",
        type=Path,
        help="Path to a local operations/mediawiki-config checkout.",
    )
    registry.add_argument(
        "--dblists-url",
        help="Where to download the dblists from.",
        default=dblists.DBLISTS_URL,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Verbosity: use -v or -vv.",
    )
    parser.add_argument(
        "-s", "--silent", action="store_true", help="Disable progress bar"
    )
    args = parser.parse_args(argv)
    args.verbose = min(args.verbose, 2)
    return args


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=[logging.WARNING, logging.INFO, logging.DEBUG][args.verbose]
    )
    if args.mediawiki_config:
        snapshot = dblists.load_from_checkout(args.mediawiki_config)
    else:
        snapshot = dblists.fetch_from_url(args.dblists_url)
    domains = asyncio.run(
        build_domain_list(
            snapshot,
            verify=args.verify,
            verbose=bool(args.verbose),
            silent=args.silent,
        )
    )
    print(write_report(domains, args.output))


if __name__ == "__main__":
    main()
