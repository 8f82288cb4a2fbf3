"""
Generate the AI-discovery index files (llms.txt and llms-full.txt).

Usage:
    generate-llms-txt

Reads the rendered docs of every locale and writes ``llms.txt`` (one link
line per page, grouped by category) and ``llms-full.txt`` (every page's full
content) into the build directory, following the llmstxt.org convention.
Run ``post-process-llms`` afterwards to resolve any placeholder left behind.
"""
import argparse
import logging
import os
import re
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import yaml

from docs_i18n.app_config import AppConfig, load_app_config
from docs_i18n.extract_placeholders import list_source_documents

logger = logging.getLogger(__name__)

OTHER_CATEGORY = 'Other'
DEFAULT_SITE_TITLE = 'Documentation'
DEFAULT_PAGE_DESCRIPTION = 'Documentation page.'
MAX_DESCRIPTION_LENGTH = 300

FRONTMATTER_PATTERN = re.compile(r'\A---\s*\n([\s\S]*?)\n---[^\n]*\n?')
HEADING_PATTERN = re.compile(r'^#\s+(.+)$', re.MULTILINE)
TITLE_HEADING_PATTERN = re.compile(r'\A#\s+.+\n+')

# Inline markdown reduced to its text for descriptions.
INLINE_MARKUP_PATTERNS = [
    (re.compile(r'\[([^\]]+)\]\([^)]+\)'), r'\1'),
    (re.compile(r'\*\*([^*]+)\*\*'), r'\1'),
    (re.compile(r'\*([^*]+)\*'), r'\1'),
    (re.compile(r'`([^`]+)`'), r'\1'),
]


@dataclass
class DocInfo:
    doc_id: str
    title: str
    description: str
    content: str
    category: str
    url: str


def split_frontmatter(content: str) -> Tuple[Dict, str]:
    """
    Split a document into its YAML front matter and body.

    Invalid or non-mapping front matter is treated as empty.
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return {}, content
    body = content[match.end():].lstrip()
    try:
        frontmatter = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.debug(f"Ignoring invalid front matter: {e}")
        return {}, body
    if not isinstance(frontmatter, dict):
        return {}, body
    return frontmatter, body


def extract_title(content: str) -> str:
    frontmatter, body = split_frontmatter(content)
    title = frontmatter.get('title')
    if title:
        return str(title).strip()

    heading_match = HEADING_PATTERN.search(body)
    if heading_match:
        return heading_match.group(1).strip()

    return "Untitled"


def extract_description(content: str, default: str = DEFAULT_PAGE_DESCRIPTION) -> str:
    """
    Return the first prose paragraph of a document as plain text.

    Front matter, the title heading, other headings, tables, list items,
    admonitions and fenced code are skipped. Long paragraphs are truncated.
    """
    _, body = split_frontmatter(content)
    body = TITLE_HEADING_PATTERN.sub('', body, count=1)

    paragraph_lines: List[str] = []
    in_code_block = False
    for line in body.split('\n'):
        if line.startswith('```'):
            in_code_block = not in_code_block
            continue
        if in_code_block:
            continue

        stripped = line.strip()
        if not stripped:
            if paragraph_lines:
                break
            continue
        if stripped.startswith(('#', '|', '-', ':::')):
            if paragraph_lines:
                break
            continue

        paragraph_lines.append(stripped)

    paragraph = ' '.join(paragraph_lines)
    for pattern, replacement in INLINE_MARKUP_PATTERNS:
        paragraph = pattern.sub(replacement, paragraph)
    paragraph = paragraph.strip()

    if len(paragraph) > MAX_DESCRIPTION_LENGTH:
        paragraph = paragraph[:MAX_DESCRIPTION_LENGTH - 3] + "..."

    return paragraph or default


def get_category_for_doc(doc_id: str, categories: Dict[str, List[str]]) -> str:
    for category, doc_ids in categories.items():
        if doc_id in doc_ids:
            return category
    return OTHER_CATEGORY


def doc_url(base_url: str, locale: str, default_locale: str, doc_id: str) -> str:
    if locale == default_locale:
        return f"{base_url}/docs/{doc_id}"
    return f"{base_url}/{locale}/docs/{doc_id}"


def collect_docs(config: AppConfig, locale: str, docs_dir: str) -> List[DocInfo]:
    """Read every rendered document of ``locale`` into a DocInfo."""
    page_description = config.llms_site.get(locale, {}).get('page_description', DEFAULT_PAGE_DESCRIPTION)
    docs = []
    for relative_path in list_source_documents(docs_dir, config.document_extensions):
        doc_id = os.path.splitext(relative_path)[0]
        with open(os.path.join(docs_dir, relative_path), 'r', encoding='utf-8') as f:
            content = f.read()
        docs.append(DocInfo(
            doc_id=doc_id,
            title=extract_title(content),
            description=extract_description(content, default=page_description),
            content=content,
            category=get_category_for_doc(doc_id, config.llms_categories),
            url=doc_url(config.site_base_url, locale, config.default_locale, doc_id),
        ))
    return docs


def _group_by_category(docs: List[DocInfo], category_order: List[str]) -> List[Tuple[str, List[DocInfo]]]:
    """Group docs by category: configured categories first, in order, then the rest."""
    by_category: Dict[str, List[DocInfo]] = {}
    for doc in docs:
        by_category.setdefault(doc.category, []).append(doc)

    ordered = [category for category in category_order if by_category.get(category)]
    ordered += [category for category in by_category if category not in category_order]
    return [(category, by_category[category]) for category in ordered]


def _site_header(title: str, description: str, note: str) -> str:
    header = f"# {title}\n\n"
    if description:
        header += f"> {description}\n\n"
    return header + note + "\n\n"


def generate_llms_txt(docs: List[DocInfo], site: Dict[str, str], category_order: List[str]) -> str:
    output = _site_header(
        site.get('title', DEFAULT_SITE_TITLE),
        site.get('description', ''),
        "This file contains links to documentation sections following the llmstxt.org standard."
    )

    for category, category_docs in _group_by_category(docs, category_order):
        output += f"## {category}\n\n"
        for doc in category_docs:
            output += f"- [{doc.title}]({doc.url}): {doc.description}\n"
        output += "\n"

    return output


def generate_llms_full_txt(docs: List[DocInfo], site: Dict[str, str], category_order: List[str]) -> str:
    title = site.get('full_title') or f"{site.get('title', DEFAULT_SITE_TITLE)} - Full Documentation"
    output = _site_header(
        title,
        site.get('description', ''),
        "This file contains the full documentation content following the llmstxt.org standard."
    )
    output += "---\n\n"

    for category, category_docs in _group_by_category(docs, category_order):
        output += f"# {category}\n\n"
        for doc in category_docs:
            _, body = split_frontmatter(doc.content)
            output += f"## {doc.title}\n\n"
            output += f"URL: {doc.url}\n\n"
            output += body
            output += "\n\n---\n\n"

    return output


def generate_locale(config: AppConfig, locale: str) -> bool:
    """
    Write both index files for one locale.

    Returns:
        bool: False if the locale has no rendered docs.
    """
    docs_dir = config.content_dir(locale)
    if not os.path.isdir(docs_dir):
        logger.warning(f"'{locale}' docs directory not found: {docs_dir}")
        return False

    docs = collect_docs(config, locale, docs_dir)
    logger.info(f"Found {len(docs)} '{locale}' documents")

    site = config.llms_site.get(locale, {})
    category_order = list(config.llms_categories)
    outputs = {
        'llms.txt': generate_llms_txt(docs, site, category_order),
        'llms-full.txt': generate_llms_full_txt(docs, site, category_order),
    }

    build_dir = config.locale_build_dir(locale)
    for filename, content in outputs.items():
        output_path = os.path.join(build_dir, filename)
        if config.dry_run:
            logger.info(f"[Dry Run] Would write '{output_path}'.")
            continue
        os.makedirs(build_dir, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(content)
        logger.info(f"Generated: {output_path}")
    return True


def main(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='generate-llms-txt',
        description='Generate llms.txt and llms-full.txt from the rendered docs.'
    )
    parser.parse_args(argv)

    if config is None:
        config = load_app_config()

    for locale in [config.default_locale] + config.secondary_locales:
        generate_locale(config, locale)

    logger.info("llms.txt generation complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
