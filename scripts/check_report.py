"""Script to run a quick consistency check of a generated domains.json:

- Does it have the meta, generated, and domains keys?
- Are all domains proper domain names?
- Are all domains lowercased?
- Are there duplicates?
"""

import argparse
import json
import sys
from pathlib import Path

import validators

REQUIRED_KEYS = ("meta", "generated", "domains")


def err(*args, **kwargs):
    kwargs["file"] = sys.stderr
    print(*args, **kwargs)


def check_structure(file, report) -> bool:
    ok = True
    for key in REQUIRED_KEYS:
        if key not in report:
            err(f"{file}: Missing {key!r} key.")
            ok = False
    return ok


def check_is_valid_domain(file, index, domain) -> bool:
    if not validators.domain(domain):
        err(f"{file}: domains[{index}]: {domain!r} does not looks like a domain name.")
        return False
    return True


def check_lowercased(file, index, domain) -> bool:
    if domain != domain.lower():
        err(f"{file}: domains[{index}]: {domain!r} is not lowercased.")
        return False
    return True


class DuplicateChecker:
    def __init__(self):
        self.seen = {}

    def __call__(self, file, index, domain) -> bool:
        """Checks if the given domain has already been seen."""
        if domain in self.seen:
            err(
                f"{file}: domains[{index}]: Duplicate domain {domain!r} "
                f"(already seen at domains[{self.seen[domain]}])"
            )
            return False
        self.seen[domain] = index
        return True


def check_file(file: Path) -> bool:
    """Run all checks on the given report, returns True if it's clean."""
    try:
        report = json.loads(Path(file).read_text(encoding="UTF-8"))
    except json.JSONDecodeError as error:
        err(f"{file}: Is not valid JSON: {error}")
        return False
    if not isinstance(report, dict):
        err(f"{file}: Expected a JSON object.")
        return False
    if not check_structure(file, report):
        return False
    if not isinstance(report["domains"], list):
        err(f"{file}: 'domains' should be a list.")
        return False
    check_duplicate = DuplicateChecker()
    ok = True
    for index, domain in enumerate(report["domains"]):
        if not isinstance(domain, str):
            err(f"{file}: domains[{index}]: {domain!r} is not a string.")
            ok = False
            continue
        ok &= check_is_valid_domain(file, index, domain)
        ok &= check_lowercased(file, index, domain)
        ok &= check_duplicate(file, index, domain)
    return ok


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("file", type=Path, nargs="?", default=Path("domains.json"))
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    sys.exit(0 if check_file(args.file) else 1)


if __name__ == "__main__":
    main()
