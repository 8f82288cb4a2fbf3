import re
from itertools import chain
from typing import Dict, List

# "{{ text }}" on a single line. The inner text is trimmed before it is used
# as a translation-table key.
PLACEHOLDER_PATTERN = re.compile(r'\{\{(.*?)\}\}')

# "{ { text } }" is what markdown formatters turn "{{text}}" into inside
# front matter and MDX expressions.
SPACED_PLACEHOLDER_PATTERN = re.compile(r'\{ \{(.*?)\} \}')


def _iter_placeholder_matches(text: str):
    """Matches of both brace forms, in document order."""
    return sorted(
        chain(PLACEHOLDER_PATTERN.finditer(text), SPACED_PLACEHOLDER_PATTERN.finditer(text)),
        key=lambda match: match.start()
    )


def find_placeholders(text: str) -> List[str]:
    """
    Find all placeholder keys in a document.

    Both the compact ``{{key}}`` and the formatter-spaced ``{ { key } }`` forms
    are collected; they share a table entry.

    Args:
        text (str): The document content.

    Returns:
        List[str]: The trimmed keys, de-duplicated, in order of first occurrence.
    """
    keys: Dict[str, None] = {}
    for match in _iter_placeholder_matches(text):
        key = match.group(1).strip()
        if key:
            keys.setdefault(key, None)
    return list(keys)


def replace_placeholders(text: str, table: Dict[str, str]) -> str:
    """
    Replace every placeholder that has a non-empty value in ``table``.

    Both brace-spacing variants are replaced the same way. Placeholders whose
    key is missing from the table, or maps to an empty string, are kept
    verbatim so that a later pass (e.g. a fallback locale) can resolve them.

    Args:
        text (str): The document content.
        table (Dict[str, str]): Translation table mapping keys to localized text.

    Returns:
        str: The content with known placeholders substituted.
    """
    def _substitute(match):
        value = table.get(match.group(1).strip())
        if value:
            return value
        return match.group(0)

    text = PLACEHOLDER_PATTERN.sub(_substitute, text)
    return SPACED_PLACEHOLDER_PATTERN.sub(_substitute, text)


def strip_placeholder_braces(text: str) -> str:
    """Unwrap every placeholder, in either brace form, to its trimmed inner text."""
    def _unwrap(match):
        return match.group(1).strip()

    text = PLACEHOLDER_PATTERN.sub(_unwrap, text)
    return SPACED_PLACEHOLDER_PATTERN.sub(_unwrap, text)
