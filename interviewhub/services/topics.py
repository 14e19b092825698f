import re

MAX_TOPIC_LENGTH = 50

_WHITESPACE = re.compile(r"\s+")


def normalize_topic(raw: str) -> str:
    """Normalize a coding-question topic to its stored form.

    Strips surrounding whitespace, collapses inner runs of whitespace to a
    single space, and truncates to 50 characters. Case is preserved so
    "Dynamic Programming" stays readable.
    """
    return _WHITESPACE.sub(" ", raw.strip())[:MAX_TOPIC_LENGTH]


def normalize_topics(raw_topics: list[str]) -> list[str]:
    """Apply normalize_topic to each topic, then deduplicate preserving order.

    Duplicates are detected case-insensitively; the first spelling wins.
    Empty entries are dropped.
    """
    seen: set[str] = set()
    result: list[str] = []
    for raw in raw_topics:
        normalized = normalize_topic(raw)
        key = normalized.lower()
        if normalized and key not in seen:
            seen.add(key)
            result.append(normalized)
    return result
