"""Glob-style origin matching for CORS policies.

Origin patterns use shell-like wildcards rather than regular expressions:

- ``*`` matches any sequence of characters, including the empty sequence
- ``?`` matches exactly one character
- every other character matches itself literally

Patterns are always matched against the whole origin, so ``https://*.foo.com``
accepts ``https://bar.foo.com`` but rejects ``https://foo.com.evil.com``.
"""

import re
from collections.abc import Iterable


def compile_origin_pattern(pattern: str) -> re.Pattern[str]:
    """Translate a glob origin pattern into a compiled regular expression.

    Regex metacharacters are escaped first so that dots, plus signs and
    friends keep their literal meaning, then the escaped wildcards are
    expanded back.

    Args:
        pattern: Glob pattern such as ``https://*.example.com``

    Returns:
        Compiled pattern, to be used with ``fullmatch``
    """
    escaped = re.escape(pattern)
    escaped = escaped.replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(escaped)


class OriginMatcher:
    """Ordered set of compiled origin patterns.

    Built once from a policy's allowed origins and never mutated afterwards,
    so a single instance can be shared by concurrent requests.
    """

    __slots__ = ("_patterns",)

    def __init__(self, patterns: Iterable[str]) -> None:
        self._patterns = tuple(compile_origin_pattern(pattern) for pattern in patterns)

    @property
    def patterns(self) -> tuple[re.Pattern[str], ...]:
        """Compiled patterns in configuration order."""
        return self._patterns

    def matches(self, origin: str) -> bool:
        """Return True if ``origin`` fully matches any pattern.

        Matching is case-sensitive and stops at the first hit. An empty
        matcher never matches.
        """
        return any(pattern.fullmatch(origin) for pattern in self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __repr__(self) -> str:
        return f"OriginMatcher({[pattern.pattern for pattern in self._patterns]!r})"
