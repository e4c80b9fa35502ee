"""Spelling and format variations of a search term.

Output order is generation order: case forms, separator forms, word order,
initials, typo forms, then alternate spellings. Case forms are kept exactly
(so "jon smith" and "JON SMITH" both appear); every other form is dropped when
it equals an earlier variant ignoring case.
"""

from __future__ import annotations

import re

# Alternate spellings applied wherever the source pattern occurs (case-insensitive).
ALTERNATE_SPELLINGS: dict[str, list[str]] = {
    "ph": ["f"],
    "f": ["ph"],
    "c": ["k", "s"],
    "k": ["c"],
    "s": ["c", "z"],
    "z": ["s"],
    "ei": ["ai", "ey"],
    "ai": ["ei", "ay"],
    "y": ["i"],
    "i": ["y"],
}

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


class _VariantSet:
    """Insertion-ordered variant collection."""

    def __init__(self) -> None:
        self._items: list[str] = []
        self._exact: set[str] = set()
        self._folded: set[str] = set()

    def add_exact(self, value: str) -> None:
        if value and value not in self._exact:
            self._items.append(value)
            self._exact.add(value)
            self._folded.add(value.lower())

    def add(self, value: str) -> None:
        if value and value.lower() not in self._folded:
            self._items.append(value)
            self._exact.add(value)
            self._folded.add(value.lower())

    def to_list(self) -> list[str]:
        return list(self._items)


def typo_variations(name: str) -> list[str]:
    """Adjacent transpositions, single deletions and single duplications."""
    typos: list[str] = []
    for i in range(len(name) - 1):
        typos.append(name[:i] + name[i + 1] + name[i] + name[i + 2:])
    for i in range(len(name)):
        typos.append(name[:i] + name[i + 1:])
    for i in range(len(name)):
        typos.append(name[:i] + name[i] + name[i:])
    return typos


def alternate_spellings(name: str) -> list[str]:
    """One variant per applicable substitution from ``ALTERNATE_SPELLINGS``."""
    lowered = name.lower()
    variants: list[str] = []
    for source, targets in ALTERNATE_SPELLINGS.items():
        if source not in lowered:
            continue
        pattern = re.compile(re.escape(source), re.IGNORECASE)
        for target in targets:
            variants.append(pattern.sub(target, name))
    return variants


def generate_variations(name: str) -> list[str]:
    """Generate the full variant list for ``name``.

    The set is unbounded; callers that need bounded work slice it.
    Returns an empty list for blank input.
    """
    if not name or not name.strip():
        return []

    variants = _VariantSet()
    variants.add_exact(name)
    variants.add_exact(name.lower())
    variants.add_exact(name.upper())

    variants.add(name.replace(" ", ""))
    variants.add(name.replace(" ", "_"))
    variants.add(name.replace(" ", "-"))
    variants.add(_NON_ALNUM.sub("", name))

    words = name.split()
    if len(words) >= 2:
        reversed_words = list(reversed(words))
        variants.add(" ".join(reversed_words))
        variants.add("".join(reversed_words))

        initials = "".join(word[0] for word in words)
        variants.add_exact(initials.upper())
        variants.add_exact(initials.lower())

    for typo in typo_variations(name):
        variants.add(typo)

    for alternate in alternate_spellings(name):
        variants.add(alternate)

    return variants.to_list()
