"Turn Wikimedia database names (like enwiki) into public domain names."

import re

FAMILIES = (
    "wikipedia",
    "wiktionary",
    "wikiquote",
    "wikibooks",
    "wikinews",
    "wikisource",
    "wikiversity",
    "wikimedia",
    "wikivoyage",
)

DOMAIN_REGEX = re.compile("(" + "|".join(FAMILIES) + ")")
DOTTED_FAMILY = re.compile(r"\.(" + "|".join(FAMILIES) + r")\.org")

# Wikis whose domain doesn't follow the <lang>.<family>.org pattern:
EXCEPTIONS = {
    "metawiki": "meta.wikimedia.org",
    "mediawikiwiki": "www.mediawiki.org",
    "testwikidatawiki": "test.wikidata.org",
    "commonswiki": "commons.wikimedia.org",
    "etwiki": "et.wikipedia.org",
    "foundationwiki": "foundation.wikimedia.org",
    "incubatorwiki": "incubator.wikimedia.org",
    "loginwiki": "login.wikimedia.org",
    "outreachwiki": "outreach.wikimedia.org",
    "specieswiki": "species.wikimedia.org",
    "votewiki": "vote.wikimedia.org",
    "wikidatawiki": "www.wikidata.org",
    "wikimaniawiki": "wikimania.wikimedia.org",
}

# Administrative wikis without a stable public domain:
IGNORE = {
    "apiportalwiki",
    "labswiki",
    "labtestwiki",
    "sourceswiki",
}


def hyphenate(name: str) -> str:
    """be_x_oldwiki -> be-x-oldwiki"""
    return name.replace("_", "-")


def expand_wiki_suffix(name: str) -> str:
    """A bare "wiki" suffix means Wikipedia: frwiki -> frwikipedia."""
    if name.endswith("wiki"):
        return name[: -len("wiki")] + "wikipedia"
    return name


def dot_family(name: str) -> str:
    """frwiktionary -> fr.wiktionary.org

    Only the first family keyword is rewritten, names without one are
    returned untouched.
    """
    return DOMAIN_REGEX.sub(r".\1.org", name, count=1)


NORMALIZATION_STEPS = (hyphenate, expand_wiki_suffix, dot_family)


def normalize(dbname: str) -> str:
    """Get the public domain of the given database name."""
    if dbname in EXCEPTIONS:
        return EXCEPTIONS[dbname]
    for step in NORMALIZATION_STEPS:
        dbname = step(dbname)
    return dbname


def has_family(domain: str) -> bool:
    """Tell if the given normalized domain looks like <sub>.<family>.org."""
    return bool(DOTTED_FAMILY.search(domain)) or domain in EXCEPTIONS.values()


def api_url(domain: str) -> str:
    return f"https://{domain}/w/api.php"
