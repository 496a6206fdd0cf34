"""IRCv3 tag prefix parsing (``@key=value;...``)."""

from __future__ import annotations

from dataclasses import dataclass, field

BADGE_KEYS = frozenset({"badges", "badge-info"})


@dataclass
class TagSet:
    """Flat tag mapping plus the nested badge categories of one line.

    ``badges`` maps a badge category (``badges`` or ``badge-info``) to a
    mapping of badge name to badge value, e.g.
    ``{"badges": {"subscriber": "12", "premium": "1"}}``.
    """

    tags: dict[str, str] = field(default_factory=dict)
    badges: dict[str, dict[str, str]] = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.tags.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.tags


def parse_tags(raw: str) -> TagSet:
    """Parse the tag block of a line (without the leading ``@``).

    Tokens without ``=`` are dropped and the last occurrence of a key wins.
    Badge pieces without a ``/`` separated value are skipped. Values are kept
    exactly as received: IRCv3 escapes such as ``\\s`` are not decoded.
    """
    tag_set = TagSet()
    if not raw:
        return tag_set
    for token in raw.split(";"):
        if "=" not in token:
            continue
        key, value = token.split("=", 1)
        if key in BADGE_KEYS:
            tag_set.badges[key] = _parse_badges(value)
        else:
            tag_set.tags[key] = value
    return tag_set


def _parse_badges(value: str) -> dict[str, str]:
    badges: dict[str, str] = {}
    for piece in value.split(","):
        parts = piece.split("/")
        if len(parts) >= 2:
            badges[parts[0]] = parts[1]
    return badges
