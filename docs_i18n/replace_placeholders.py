"""
Render the source docs for one locale.

Usage:
    replace-placeholders <locale>

The docs tree is copied to ``i18n/<locale>/docusaurus-plugin-content-docs/current``
and every placeholder is replaced with the locale's translation, falling back
per placeholder to the default locale.
"""
import logging
import os
import shutil
import sys
from typing import Dict, List, Optional

from tqdm import tqdm

from docs_i18n.app_config import AppConfig, load_app_config, parse_locale_argument
from docs_i18n.extract_placeholders import list_source_documents
from docs_i18n.placeholders import find_placeholders, replace_placeholders
from docs_i18n.translation_store import load_translation_table, translation_table_path

logger = logging.getLogger(__name__)


def copy_source_documents(docs_dir: str, output_dir: str, dry_run: bool = False) -> None:
    """Copy the whole docs tree, assets included, over the locale's output directory."""
    if dry_run:
        logger.info(f"[Dry Run] Would copy '{docs_dir}' to '{output_dir}'.")
        return
    os.makedirs(output_dir, exist_ok=True)
    shutil.copytree(docs_dir, output_dir, dirs_exist_ok=True)


def render_document(
        text: str,
        locale_table: Dict[str, str],
        fallback_table: Optional[Dict[str, str]] = None
) -> str:
    """
    Substitute placeholders in two passes.

    The first pass uses the locale's table. The second pass uses the default
    locale's table and therefore only touches placeholders the first pass left
    unresolved (missing or empty in the locale).
    """
    text = replace_placeholders(text, locale_table)
    if fallback_table:
        text = replace_placeholders(text, fallback_table)
    return text


def _load_document_table(translation_dir: str, relative_path: str, locale: str) -> Optional[Dict[str, str]]:
    table_path = translation_table_path(translation_dir, relative_path)
    if not os.path.exists(table_path):
        logger.info(f"JSON file not found for {locale}/{relative_path}, skipping...")
        return None
    return load_translation_table(table_path)


def replace_locale(config: AppConfig, locale: str) -> int:
    """
    Copy and render every source document for ``locale``.

    Returns:
        int: The number of documents that had at least one translation table applied.
    """
    if not os.path.isdir(config.docs_dir):
        logger.warning(f"Docs directory not found: {config.docs_dir}, skipping...")
        return 0

    output_dir = config.content_dir(locale)
    copy_source_documents(config.docs_dir, output_dir, dry_run=config.dry_run)
    logger.info(f"Update content for {locale} language")

    use_fallback = locale != config.default_locale
    if use_fallback:
        logger.info(f"Fallback content for {locale} language. Using {config.default_locale}")

    documents = list_source_documents(config.docs_dir, config.document_extensions)
    rendered = 0
    for relative_path in tqdm(documents, desc=f"Rendering {locale}", unit="doc", disable=None):
        locale_table = _load_document_table(config.translation_dir(locale), relative_path, locale)
        fallback_table = None
        if use_fallback:
            fallback_table = _load_document_table(
                config.translation_dir(config.default_locale), relative_path, config.default_locale
            )

        if locale_table is None and fallback_table is None:
            # The copied document keeps its raw placeholders.
            continue

        with open(os.path.join(config.docs_dir, relative_path), 'r', encoding='utf-8') as f:
            template = f.read()

        content = render_document(template, locale_table or {}, fallback_table)

        unresolved = find_placeholders(content)
        if unresolved:
            logger.debug(f"{locale}/{relative_path} still has {len(unresolved)} unresolved placeholder(s).")

        output_path = os.path.join(output_dir, relative_path)
        if config.dry_run:
            logger.info(f"[Dry Run] Would write rendered document to '{output_path}'.")
        else:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(content)
            logger.info(f"Processed {locale}/{relative_path} successfully")
        rendered += 1

    return rendered


def main(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None) -> int:
    locale = parse_locale_argument(
        argv,
        prog='replace-placeholders',
        description='Render the source docs for a locale, replacing {{placeholder}} keys.'
    )
    if locale is None:
        return 1

    if config is None:
        config = load_app_config()

    if not config.is_known_locale(locale):
        logger.warning(f"Locale '{locale}' is not in the configured locales {config.locales}.")

    rendered = replace_locale(config, locale)
    logger.info(f"Rendering for '{locale}' complete: {rendered} document(s) processed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
