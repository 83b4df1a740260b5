"""Singularization and class-name helpers for symbolic entity names."""

import re

# Irregular plurals of the entity names this site manages
IRREGULAR_SINGULARS = {
    "people": "person",
    "children": "child",
    "media": "medium",
    "data": "datum",
    "statuses": "status",
    "aliases": "alias",
}

UNCOUNTABLE = {"news", "information", "equipment", "series", "settings"}

# Applied in order, first match wins
SINGULAR_RULES = [
    (re.compile(r"(quiz)zes$"), r"\1"),
    (re.compile(r"(matr|vert|ind)ices$"), r"\1ix"),
    (re.compile(r"([^aeiouy]|qu)ies$"), r"\1y"),
    (re.compile(r"(x|ch|ss|sh)es$"), r"\1"),
    (re.compile(r"(bus)es$"), r"\1"),
    (re.compile(r"(ss|us)$"), r"\1"),
    (re.compile(r"s$"), ""),
]


def singularize(word: str) -> str:
    """Return the singular form of a lower-case English noun."""
    lowered = word.lower()
    if not lowered or lowered in UNCOUNTABLE:
        return word

    if lowered in IRREGULAR_SINGULARS:
        return IRREGULAR_SINGULARS[lowered]

    for pattern, replacement in SINGULAR_RULES:
        if pattern.search(lowered):
            return pattern.sub(replacement, lowered)

    return lowered


def underscore(word: str) -> str:
    """Turn ``BlogPost`` into ``blog_post``."""
    word = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", word)
    word = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", word)
    return word.lower()


def camelize(word: str) -> str:
    """Turn ``blog_post`` or ``blog-post`` into ``BlogPost``."""
    return "".join(part.capitalize() for part in re.split(r"[_\-\s]+", word) if part)


def classify(name: str) -> str:
    """Turn a table-like name into a class name.

    Only the last word is singularized, so ``blog_posts`` becomes ``BlogPost``
    and ``feature_flags`` becomes ``FeatureFlag``.
    """
    words = [part for part in re.split(r"[_\-\s]+", underscore(name.strip())) if part]
    if not words:
        return ""

    words[-1] = singularize(words[-1])
    return camelize("_".join(words))
