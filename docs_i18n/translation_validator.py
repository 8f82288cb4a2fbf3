from typing import Dict, List, Set, Tuple
import re
from collections import Counter

# Inline code spans such as `pnpm install` or `CommandService`.
INLINE_CODE_PATTERN = re.compile(r'`([^`\n]+)`')

# 'Ã' followed by a byte in 0x80-0xFF is what UTF-8 text looks like after it
# was decoded as latin-1 or cp1252 and saved again.
MOJIBAKE_PATTERN = re.compile(r'Ã[\x80-\xff]')


def check_key_coverage(document_keys: Set[str], table_keys: Set[str]) -> Tuple[Set[str], Set[str]]:
    """
    Compares the placeholders of a source document with its translation table.

    Args:
        document_keys: Placeholder keys found in the source document.
        table_keys: Keys present in the translation table.

    Returns:
        A tuple containing two sets:
        - missing_keys: Keys used by the document but absent from the table
          (extraction has not been run since the document changed).
        - extra_keys: Keys kept in the table that the document no longer uses.
    """
    missing_keys = document_keys - table_keys
    extra_keys = table_keys - document_keys
    return missing_keys, extra_keys


def find_untranslated_keys(table: Dict[str, str]) -> Set[str]:
    """Return the keys whose value is still empty."""
    return {key for key, value in table.items() if not value}


def check_inline_code_parity(source_text: str, translated_text: str) -> bool:
    """
    Checks that a translation keeps the inline code spans of its source text.

    Code identifiers must not be translated, so the multiset of `code` spans
    has to be identical. Reordering is allowed.

    Args:
        source_text: The placeholder key (default-locale text).
        translated_text: The localized value.

    Returns:
        True if both texts contain the same inline code spans, False otherwise.
    """
    source_spans = Counter(INLINE_CODE_PATTERN.findall(source_text))
    translated_spans = Counter(INLINE_CODE_PATTERN.findall(translated_text))
    return source_spans == translated_spans


def find_code_parity_mismatches(table: Dict[str, str]) -> List[str]:
    """Return the keys whose non-empty translation drops or alters inline code."""
    return [
        key for key, value in table.items()
        if value and not check_inline_code_parity(key, value)
    ]


def check_encoding_and_mojibake(file_path: str) -> List[str]:
    """
    Checks a document or translation table for UTF-8 encoding problems.

    Args:
        file_path: The path to the file to check.

    Returns:
        A list of string error messages. An empty list means the file is valid.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except UnicodeDecodeError:
        return [f"File '{file_path}' is not a valid UTF-8 file."]
    except OSError as e:
        return [f"Could not read file '{file_path}'. Reason: {e}"]

    errors = []
    if MOJIBAKE_PATTERN.search(content):
        errors.append(f"Potential mojibake detected in '{file_path}'. Found patterns like 'Ã¼', 'Ã¤', etc.")

    if '\uFFFD' in content:
        errors.append(
            f"File '{file_path}' contains the Unicode replacement character (\uFFFD), "
            "indicating a previous encoding/decoding error."
        )

    return errors
