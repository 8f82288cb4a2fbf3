"""
Report the state of a locale's translation tables.

Usage:
    check-translations <locale>

Errors (exit status 1): a document without a translation table, placeholders
missing from a table, encoding problems. Warnings: stale keys, untranslated
keys of secondary locales and translations that alter inline code.
"""
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Set

from docs_i18n.app_config import AppConfig, load_app_config, parse_locale_argument
from docs_i18n.extract_placeholders import list_source_documents
from docs_i18n.placeholders import find_placeholders
from docs_i18n.translation_store import load_translation_table, translation_table_path
from docs_i18n.translation_validator import (
    check_encoding_and_mojibake,
    check_key_coverage,
    find_code_parity_mismatches,
    find_untranslated_keys
)

logger = logging.getLogger(__name__)


@dataclass
class DocumentReport:
    relative_path: str
    table_missing: bool = False
    missing_keys: Set[str] = field(default_factory=set)
    extra_keys: Set[str] = field(default_factory=set)
    untranslated_keys: Set[str] = field(default_factory=set)
    code_mismatches: List[str] = field(default_factory=list)
    encoding_errors: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.table_missing or self.missing_keys or self.encoding_errors)


def check_document(config: AppConfig, locale: str, relative_path: str) -> DocumentReport:
    """Compare one source document with its translation table for ``locale``."""
    report = DocumentReport(relative_path=relative_path)
    doc_path = os.path.join(config.docs_dir, relative_path)
    table_path = translation_table_path(config.translation_dir(locale), relative_path)

    report.encoding_errors.extend(check_encoding_and_mojibake(doc_path))
    if report.encoding_errors:
        return report

    if not os.path.exists(table_path):
        report.table_missing = True
        return report

    report.encoding_errors.extend(check_encoding_and_mojibake(table_path))
    if report.encoding_errors:
        return report

    with open(doc_path, 'r', encoding='utf-8') as f:
        document_keys = set(find_placeholders(f.read()))
    table = load_translation_table(table_path)

    report.missing_keys, report.extra_keys = check_key_coverage(document_keys, set(table))
    if locale != config.default_locale:
        report.untranslated_keys = find_untranslated_keys(table)
    report.code_mismatches = find_code_parity_mismatches(table)
    return report


def check_locale(config: AppConfig, locale: str) -> List[DocumentReport]:
    documents = list_source_documents(config.docs_dir, config.document_extensions)
    return [check_document(config, locale, relative_path) for relative_path in documents]


def log_report(report: DocumentReport, locale: str) -> None:
    name = f"{locale}/{report.relative_path}"
    for error in report.encoding_errors:
        logger.error(f"{name}: {error}")
    if report.table_missing:
        logger.error(f"{name}: translation table not found. Run extract-placeholders {locale}.")
    if report.missing_keys:
        logger.error(f"{name}: {len(report.missing_keys)} placeholder(s) missing from the table: "
                     f"{sorted(report.missing_keys)}")
    if report.extra_keys:
        logger.warning(f"{name}: {len(report.extra_keys)} stale key(s) no longer used by the document.")
    if report.untranslated_keys:
        logger.warning(f"{name}: {len(report.untranslated_keys)} key(s) not translated yet.")
    for key in report.code_mismatches:
        logger.warning(f"{name}: translation of '{key}' does not keep its inline code.")


def main(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None) -> int:
    locale = parse_locale_argument(
        argv,
        prog='check-translations',
        description='Report missing, stale and untranslated placeholder keys for a locale.'
    )
    if locale is None:
        return 1

    if config is None:
        config = load_app_config()

    reports = check_locale(config, locale)
    for report in reports:
        log_report(report, locale)

    failed = [report for report in reports if report.has_errors]
    if failed:
        logger.error(f"{len(failed)} of {len(reports)} document(s) failed the '{locale}' translation check.")
        return 1

    logger.info(f"All {len(reports)} document(s) passed the '{locale}' translation check.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
