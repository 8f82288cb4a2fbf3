"""
Extract ``{{placeholder}}`` keys from the source docs into translation tables.

Usage:
    extract-placeholders <locale>

For every source document one JSON table is written to
``i18n/<locale>/translation/``. Existing translations are preserved, new keys
are added empty, and for the default locale new keys map to themselves.
"""
import logging
import os
import sys
from typing import Dict, List, Optional

from tqdm import tqdm

from docs_i18n.app_config import AppConfig, load_app_config, parse_locale_argument
from docs_i18n.placeholders import find_placeholders
from docs_i18n.translation_store import (
    load_translation_table,
    save_translation_table,
    translation_table_path
)

logger = logging.getLogger(__name__)


def list_source_documents(docs_dir: str, extensions: List[str]) -> List[str]:
    """
    List the source documents under ``docs_dir``.

    Args:
        docs_dir (str): The canonical docs directory.
        extensions (List[str]): Accepted file suffixes, e.g. ['.md', '.mdx'].

    Returns:
        List[str]: Document paths relative to ``docs_dir``, sorted, using '/' as separator.
    """
    documents = []
    for root, _, files in os.walk(docs_dir):
        for filename in files:
            if os.path.splitext(filename)[1] in extensions:
                full_path = os.path.join(root, filename)
                documents.append(os.path.relpath(full_path, docs_dir).replace(os.sep, '/'))
    return sorted(documents)


def merge_translation_table(
        tokens: List[str],
        existing: Dict[str, str],
        identity: bool = False
) -> Dict[str, str]:
    """
    Build the new translation table of a document.

    Discovered tokens come first, in document order. A token keeps its existing
    non-empty translation; otherwise it maps to itself when ``identity`` is set
    (default locale) or to an empty string. Existing keys that no longer occur
    in the document are kept unchanged after the discovered ones.

    Args:
        tokens (List[str]): Placeholder keys found in the document.
        existing (Dict[str, str]): The previously persisted table, if any.
        identity (bool): Whether new keys should map to themselves.

    Returns:
        Dict[str, str]: The merged table.
    """
    table: Dict[str, str] = {}
    for token in tokens:
        value = existing.get(token, '')
        if not value and identity:
            value = token
        table[token] = value

    for key, value in existing.items():
        if key not in table:
            table[key] = value

    return table


def extract_locale(config: AppConfig, locale: str) -> int:
    """
    Run the extraction for every source document.

    Returns:
        int: The number of translation tables written.
    """
    translation_dir = config.translation_dir(locale)
    identity = locale == config.default_locale

    if not os.path.isdir(config.docs_dir):
        logger.warning(f"Docs directory not found: {config.docs_dir}, skipping...")
        return 0

    documents = list_source_documents(config.docs_dir, config.document_extensions)
    if not documents:
        logger.warning(f"No source documents found in '{config.docs_dir}'.")
        return 0

    written = 0
    for relative_path in tqdm(documents, desc=f"Extracting {locale}", unit="doc", disable=None):
        with open(os.path.join(config.docs_dir, relative_path), 'r', encoding='utf-8') as f:
            template = f.read()

        tokens = find_placeholders(template)

        table_path = translation_table_path(translation_dir, relative_path)
        existing = load_translation_table(table_path) if os.path.exists(table_path) else {}

        table = merge_translation_table(tokens, existing, identity=identity)
        new_keys = len(table) - len(existing)
        save_translation_table(table_path, table, dry_run=config.dry_run)
        written += 1

        logger.info(
            f"Extracted placeholders from {relative_path} and saved to {table_path} "
            f"({len(tokens)} found, {new_keys} new)"
        )

    return written


def main(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None) -> int:
    locale = parse_locale_argument(
        argv,
        prog='extract-placeholders',
        description='Extract {{placeholder}} keys from the source docs into translation tables.'
    )
    if locale is None:
        return 1

    if config is None:
        config = load_app_config()

    if not config.is_known_locale(locale):
        logger.warning(f"Locale '{locale}' is not in the configured locales {config.locales}.")

    written = extract_locale(config, locale)
    logger.info(f"Extraction for '{locale}' complete: {written} translation table(s) written.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
