import json
import logging
import os
from typing import Dict

import jsonschema

logger = logging.getLogger(__name__)

# A translation table is a flat JSON object whose values are all strings.
TRANSLATION_TABLE_SCHEMA = {
    "type": "object",
    "patternProperties": {
        "^.*$": {"type": "string"}
    },
    "additionalProperties": False
}


def translation_table_path(translation_dir: str, relative_doc_path: str) -> str:
    """
    Map a source document to its translation table file.

    ``architecture/cqrs-flow.md`` becomes ``<translation_dir>/architecture/cqrs-flow.json``.
    """
    stem, _ = os.path.splitext(relative_doc_path)
    return os.path.join(translation_dir, stem + '.json')


def load_translation_table(path: str) -> Dict[str, str]:
    """
    Load and validate a translation table.

    Args:
        path (str): The path to the JSON file.

    Returns:
        Dict[str, str]: The key to localized text mapping.

    Raises:
        json.JSONDecodeError: If the file is not valid JSON.
        jsonschema.ValidationError: If the file is not a flat string-to-string object.
    """
    with open(path, 'r', encoding='utf-8') as f:
        table = json.load(f)
    try:
        jsonschema.validate(instance=table, schema=TRANSLATION_TABLE_SCHEMA)
    except jsonschema.ValidationError as e:
        logger.error(f"Translation table '{path}' is malformed: {e.message}")
        raise
    return table


def save_translation_table(path: str, table: Dict[str, str], dry_run: bool = False) -> None:
    """Write a translation table as pretty-printed UTF-8 JSON."""
    if dry_run:
        logger.info(f"[Dry Run] Would write {len(table)} key(s) to '{path}'.")
        return
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(table, f, ensure_ascii=False, indent=2)
        f.write('\n')


def load_all_translations(translation_dir: str) -> Dict[str, str]:
    """
    Merge every translation table found under ``translation_dir`` into one map.

    Tables are visited in a stable, sorted order. Keys are expected to be disjoint
    across documents; when they are not, the table loaded last wins and the
    conflict is logged.

    Args:
        translation_dir (str): The translation directory of a single locale.

    Returns:
        Dict[str, str]: The merged key to localized text mapping.
    """
    translations: Dict[str, str] = {}
    if not os.path.isdir(translation_dir):
        logger.warning(f"Translation directory not found: {translation_dir}")
        return translations

    for root, dirs, files in os.walk(translation_dir):
        dirs.sort()
        for filename in sorted(files):
            if not filename.endswith('.json'):
                continue
            table_path = os.path.join(root, filename)
            for key, value in load_translation_table(table_path).items():
                previous = translations.get(key)
                if previous is not None and previous != value:
                    logger.warning(
                        f"Key '{key}' has conflicting values across tables; "
                        f"using the one from '{table_path}'."
                    )
                translations[key] = value

    logger.info(f"Loaded {len(translations)} translations from '{translation_dir}'")
    return translations


def overlay_translations(base: Dict[str, str], overrides: Dict[str, str]) -> Dict[str, str]:
    """
    Overlay ``overrides`` on top of ``base``.

    Only non-empty override values win, so an untranslated key in a locale
    keeps the default locale's text.
    """
    merged = dict(base)
    for key, value in overrides.items():
        if value:
            merged[key] = value
    return merged
