"""Auth Exemptions — pure predicates behind the authentication gate.

Invariants:
    - A path is exempt when ANY pattern matches anywhere in it (re.search semantics)
    - Pattern order never changes the outcome, only how soon the scan stops
    - No side effects: both functions only inspect their arguments
"""

import re
from collections.abc import Iterable

BEARER_SCHEME = "bearer"


def compile_patterns(patterns: Iterable[str | re.Pattern]) -> tuple[re.Pattern, ...]:
    """Compile string patterns; already-compiled patterns pass through."""
    return tuple(
        p if isinstance(p, re.Pattern) else re.compile(p) for p in patterns
    )


def is_exempt(path: str, patterns: Iterable[re.Pattern]) -> bool:
    return any(pattern.search(path) for pattern in patterns)


def extract_bearer_token(header: str | None) -> str | None:
    """Token from an "Authorization: Bearer <token>" header, else None."""
    if not header:
        return None
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    return token.strip() or None
