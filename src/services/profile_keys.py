"""Profile key normalization.

A profile key is the URL-safe identifier derived from a username. It is
persisted next to the username and is what every keyed lookup compares
against, so "Jane Doe", "jane doe" and "jane-doe" all resolve to the same
profile.
"""

import itertools
import re
from collections.abc import Iterator

_WHITESPACE_RUN = re.compile(r"\s+")

# Characters with special meaning inside a PostgREST like/ilike filter value
_PATTERN_SPECIALS = re.compile(r"([\\%_*])")


def derive_key(raw: str) -> str:
    """Convert a raw username into its canonical profile key.

    Args:
        raw: Username or URL segment as supplied by the client.

    Returns:
        str: Lowercased value with each whitespace run folded into one hyphen.
    """
    return _WHITESPACE_RUN.sub("-", raw.strip().lower())


def candidate_keys(username: str) -> Iterator[str]:
    """Yield the keys a username may take, in order: jane-doe, jane-doe-2, jane-doe-3, ..."""
    base = derive_key(username)
    yield base
    for suffix in itertools.count(2):
        yield f"{base}-{suffix}"


def legacy_username(raw: str) -> str:
    """Map a URL segment back to a username the old way (first hyphen becomes a space)."""
    return raw.replace("-", " ", 1)


def case_insensitive_pattern(raw: str) -> str:
    """Build an ilike pattern matching the legacy username exactly, ignoring case.

    Wildcard characters in the input are escaped so the pattern never
    matches more than the literal string. PostgREST turns * into % even when
    escaped, so an escaped * matches a literal %; legacy usernames containing
    * cannot be reached through this pattern and need a backfilled key.
    """
    return _PATTERN_SPECIALS.sub(r"\\\1", legacy_username(raw))
