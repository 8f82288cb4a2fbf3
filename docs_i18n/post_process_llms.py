"""
Replace leftover placeholders in the generated AI-discovery index files.

Usage:
    post-process-llms

Runs after the static build. ``build/llms.txt`` and ``build/llms-full.txt``
are resolved with the default locale's tables; ``build/<locale>/...`` with the
locale's tables on top of the default locale's ones.
"""
import argparse
import logging
import os
import sys
from typing import Dict, List, Optional

from docs_i18n.app_config import AppConfig, load_app_config
from docs_i18n.placeholders import replace_placeholders
from docs_i18n.translation_store import load_all_translations, overlay_translations

logger = logging.getLogger(__name__)


def process_llms_file(file_path: str, translations: Dict[str, str], dry_run: bool = False) -> bool:
    """
    Substitute placeholders in a generated text file, in place.

    Returns:
        bool: False if the file does not exist.
    """
    if not os.path.exists(file_path):
        logger.warning(f"File not found: {file_path}")
        return False

    with open(file_path, 'r', encoding='utf-8') as f:
        content = f.read()

    content = replace_placeholders(content, translations)

    if dry_run:
        logger.info(f"[Dry Run] Would write processed content to '{file_path}'.")
        return True

    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(content)
    logger.info(f"Processed: {file_path}")
    return True


def load_locale_translations(config: AppConfig, locale: str) -> Dict[str, str]:
    """Merged tables of ``locale``, with the default locale as fallback."""
    default_translations = load_all_translations(config.translation_dir(config.default_locale))
    if locale == config.default_locale:
        return default_translations
    return overlay_translations(default_translations, load_all_translations(config.translation_dir(locale)))


def post_process_locale(config: AppConfig, locale: str) -> int:
    """
    Process the index files of one locale.

    Returns:
        int: The number of files processed.
    """
    build_dir = config.locale_build_dir(locale)
    if locale != config.default_locale and not os.path.isdir(build_dir):
        logger.warning(f"Build directory for '{locale}' not found: {build_dir}, skipping...")
        return 0

    translations = load_locale_translations(config, locale)
    processed = 0
    for filename in config.llms_files:
        if process_llms_file(os.path.join(build_dir, filename), translations, dry_run=config.dry_run):
            processed += 1
    return processed


def main(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='post-process-llms',
        description='Replace leftover placeholders in the built llms.txt files.'
    )
    parser.parse_args(argv)

    if config is None:
        config = load_app_config()

    for locale in [config.default_locale] + config.secondary_locales:
        post_process_locale(config, locale)

    logger.info("llms.txt post-processing complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
