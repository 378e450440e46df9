"""Deterministic parsing of free-text task descriptions into intent and scope."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

from .config import DEFAULT_MAX_DESCRIPTION_LENGTH
from .errors import InvalidTaskDescriptionError
from .models import TaskDescription, TaskIntent

INTENT_KEYWORDS: Dict[TaskIntent, Tuple[str, ...]] = {
    "feature": ("add", "create", "implement", "build", "new", "feature", "features"),
    "bugfix": ("fix", "bug", "bugs", "broken", "error", "errors", "issue", "issues", "crash"),
    "refactor": ("refactor", "improve", "optimize", "clean", "restructure", "reorganize"),
    "documentation": ("document", "docs", "readme", "guide", "comment", "comments"),
    "test": ("test", "tests", "spec", "specs", "testing", "coverage", "unit", "integration"),
}

_FEATURE_NOUNS = frozenset({"feature", "features"})

STOP_WORDS = frozenset(
    {
        "the",
        "a",
        "an",
        "and",
        "or",
        "but",
        "in",
        "on",
        "at",
        "to",
        "for",
        "of",
        "with",
        "by",
        "from",
        "as",
        "is",
        "was",
        "are",
        "were",
        "be",
        "been",
        "being",
        "have",
        "has",
        "had",
        "do",
        "does",
        "did",
        "will",
        "would",
        "should",
        "could",
        "can",
        "may",
        "might",
        "this",
        "that",
        "these",
        "those",
        "it",
        "its",
    }
)

# Verbs describe the change, not the code it touches.
ACTION_VERBS = frozenset(
    {
        "add",
        "create",
        "implement",
        "build",
        "fix",
        "improve",
        "optimize",
        "clean",
        "restructure",
        "reorganize",
        "document",
    }
)

# Word classes are ASCII-only, so "café" tokenizes as "caf".
_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_CAMEL_CASE = re.compile(r"[a-z][A-Z]")
_HAS_LETTER = re.compile(r"[a-zA-Z]")
_HAS_ALPHANUMERIC = re.compile(r"[a-zA-Z0-9]")
_KEYWORD_PATTERNS: Dict[str, re.Pattern[str]] = {
    keyword: re.compile(rf"\b{re.escape(keyword)}\b", re.ASCII)
    for keywords in INTENT_KEYWORDS.values()
    for keyword in keywords
}


class _KeywordMatch(NamedTuple):
    intent: TaskIntent
    position: int
    keyword: str


def parse_task_description(
    raw: str, *, max_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH
) -> TaskDescription:
    """Validate ``raw`` and return its structured ``TaskDescription``."""
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidTaskDescriptionError("empty", "Task description cannot be empty")

    sanitized = raw.strip()
    if len(sanitized) > max_length:
        raise InvalidTaskDescriptionError(
            "too_long", f"Task description too long (max {max_length} characters)"
        )
    if not _HAS_ALPHANUMERIC.search(sanitized):
        raise InvalidTaskDescriptionError(
            "no_alphanumeric", "Task description must contain letters or numbers"
        )

    return TaskDescription(
        title=sanitized,
        description=sanitized,
        intent=extract_intent(sanitized),
        scope=tuple(identify_scope(sanitized)),
    )


def extract_intent(description: str) -> TaskIntent:
    """Classify ``description`` into one of the five task intents.

    Every keyword contributes its first whole-word occurrence. With a single
    matched intent that intent wins. When several are present, a lone
    specific intent beats feature matches that come only from action verbs
    ("Add unit tests" is a test task); otherwise the earliest match wins.
    """
    lowered = description.lower()
    matches: List[_KeywordMatch] = []
    for intent, keywords in INTENT_KEYWORDS.items():
        for keyword in keywords:
            found = _KEYWORD_PATTERNS[keyword].search(lowered)
            if found:
                matches.append(_KeywordMatch(intent, found.start(), keyword))

    if not matches:
        return "feature"

    intents = _unique(match.intent for match in matches)
    if len(intents) == 1:
        return intents[0]

    specific = _unique(match.intent for match in matches if match.intent != "feature")
    if len(specific) == 1:
        has_feature_noun = any(
            match.intent == "feature" and match.keyword in _FEATURE_NOUNS for match in matches
        )
        if not has_feature_noun:
            return specific[0]

    earliest = min(matches, key=lambda match: match.position)
    return earliest.intent


def identify_scope(description: str) -> List[str]:
    """Return the ordered, deduplicated keywords a task is about."""
    if not description or not description.strip():
        return []
    unique: List[str] = []
    for word in filter_words(extract_words(description)):
        if word not in unique:
            unique.append(word)
    return unique


def extract_words(description: str) -> List[str]:
    """Split ``description`` into word tokens; camelCase tokens appear twice."""
    normalized = _WHITESPACE.sub(" ", _NON_WORD.sub(" ", description)).strip()
    if not normalized:
        return []
    words: List[str] = []
    for word in normalized.split(" "):
        words.append(word)
        if is_camel_case(word):
            words.append(word)
    return words


def filter_words(words: Sequence[str]) -> List[str]:
    """Drop stop words, action verbs, one-character and letterless tokens."""
    kept: List[str] = []
    for word in words:
        lowered = word.lower()
        if lowered in STOP_WORDS or lowered in ACTION_VERBS:
            continue
        if len(word) >= 2 and _HAS_LETTER.search(word):
            kept.append(word)
    return kept


def is_camel_case(word: str) -> bool:
    return bool(_CAMEL_CASE.search(word))


def _unique(values: Iterable[TaskIntent]) -> List[TaskIntent]:
    seen: List[TaskIntent] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


__all__ = [
    "ACTION_VERBS",
    "INTENT_KEYWORDS",
    "STOP_WORDS",
    "extract_intent",
    "extract_words",
    "filter_words",
    "identify_scope",
    "is_camel_case",
    "parse_task_description",
]
