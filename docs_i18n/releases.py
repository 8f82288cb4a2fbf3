"""
Generate the "recent releases" JSON feed from the changelog.

Usage:
    generate-releases-json

The default-locale changelog (``docs/changelog.md``) is written to
``static/api/releases.json``. For every secondary locale whose rendered
changelog exists, ``static/api/releases-<locale>.json`` is written as well.
The feed is fetched by external sites, so it only carries the newest releases.
"""
import argparse
import json
import logging
import os
import re
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any

from docs_i18n.app_config import AppConfig, load_app_config
from docs_i18n.placeholders import PLACEHOLDER_PATTERN, SPACED_PLACEHOLDER_PATTERN, strip_placeholder_braces

logger = logging.getLogger(__name__)

# ## [1.0.25](https://github.com/org/repo/compare/v1.0.24...v1.0.25) (2026-01-19)
RELEASE_HEADING_PATTERN = re.compile(
    r'## \[(\d+\.\d+\.\d+)\]\((https://[^)]+)\) \((\d{4}-\d{2}-\d{2})\)'
)

# The default-locale changelog keeps its sub-section labels as placeholders.
PLACEHOLDER_SECTION_LABELS = {
    'features': '{{Features}}',
    'bug_fixes': '{{Bug Fixes}}',
    'security': '{{Security}}',
}

# A sub-section runs until the next heading, a horizontal rule or the end.
SUBSECTION_END = r'(?=###|\n---|\n## |\Z)'

# "- **package:** text" or "- text", one item per line.
LIST_ITEM_PATTERN = re.compile(r'^- (?:\*\*[^*\n]+?:\*\* )?([^\n]+)', re.MULTILINE)
# Items end with an optional " ([abc1234](https://...))" commit reference.
ITEM_TEXT_PATTERN = re.compile(r'(.+?)(?:\s*\(\[|$)')


@dataclass
class Release:
    """A single changelog entry."""
    version: str
    date: str
    url: str
    features: List[str] = field(default_factory=list)
    bug_fixes: List[str] = field(default_factory=list)
    security: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': self.version,
            'date': self.date,
            'url': self.url,
            'features': self.features,
            'bugFixes': self.bug_fixes,
            'security': self.security,
        }


def _parse_items(subsection: str, localized: bool) -> List[str]:
    items = []
    for line in LIST_ITEM_PATTERN.findall(subsection):
        if not localized:
            # Default-locale items are placeholder-wrapped; anything else is not a release note.
            if not (PLACEHOLDER_PATTERN.match(line) or SPACED_PLACEHOLDER_PATTERN.match(line)):
                continue
            line = strip_placeholder_braces(line)
        text_match = ITEM_TEXT_PATTERN.match(line)
        if text_match and text_match.group(1).strip():
            items.append(text_match.group(1).strip())
    return items


def _extract_subsection(section: str, label: str) -> Optional[str]:
    match = re.search('### ' + re.escape(label) + r'([\s\S]*?)' + SUBSECTION_END, section)
    if match:
        return match.group(1)
    return None


def parse_changelog(
        content: str,
        localized: bool = False,
        section_headers: Optional[Dict[str, str]] = None,
        limit: int = 5
) -> List[Release]:
    """
    Parse the release sections of a changelog.

    Args:
        content (str): The full changelog text.
        localized (bool): Whether the changelog is a rendered, translated one. Its
            sub-section labels and items are plain text instead of placeholders.
        section_headers (Optional[Dict[str, str]]): Localized labels for the
            'features', 'bug_fixes' and 'security' sub-sections. Required when
            ``localized`` is set.
        limit (int): Maximum number of releases to parse.

    Returns:
        List[Release]: Releases in document order (newest first).
    """
    if localized:
        if not section_headers:
            raise ValueError("Localized changelogs need their section headers.")
        labels = section_headers
    else:
        labels = PLACEHOLDER_SECTION_LABELS

    headings = list(RELEASE_HEADING_PATTERN.finditer(content))

    releases = []
    for i, heading in enumerate(headings[:limit]):
        next_index = headings[i + 1].start() if i + 1 < len(headings) else len(content)
        section = content[heading.start():next_index]

        parsed: Dict[str, List[str]] = {}
        for name in ('features', 'bug_fixes', 'security'):
            subsection = _extract_subsection(section, labels[name]) if labels.get(name) else None
            parsed[name] = _parse_items(subsection, localized) if subsection is not None else []

        releases.append(Release(
            version=heading.group(1),
            date=heading.group(3),
            url=heading.group(2),
            features=parsed['features'],
            bug_fixes=parsed['bug_fixes'],
            security=parsed['security'],
        ))

    return releases


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def build_releases_feed(
        releases: List[Release],
        recent_count: int = 4,
        generated: Optional[str] = None
) -> Dict[str, Any]:
    """Wrap parsed releases in the ``{latest, recent, generated}`` envelope."""
    if not releases:
        raise ValueError("Cannot build a releases feed without releases.")
    return {
        'latest': releases[0].to_dict(),
        'recent': [release.to_dict() for release in releases[:recent_count]],
        'generated': generated or _utc_timestamp(),
    }


def generate_releases_json(
        changelog_path: str,
        output_path: str,
        localized: bool,
        label: str,
        section_headers: Optional[Dict[str, str]] = None,
        limit: int = 5,
        recent_count: int = 4,
        dry_run: bool = False
) -> bool:
    """
    Parse one changelog and write its releases feed.

    Returns:
        bool: False when no release could be parsed; nothing is written then.
    """
    with open(changelog_path, 'r', encoding='utf-8') as f:
        content = f.read()

    releases = parse_changelog(content, localized=localized, section_headers=section_headers, limit=limit)
    if not releases:
        logger.error(f"No releases found in {label} changelog")
        return False

    data = build_releases_feed(releases, recent_count=recent_count)

    if dry_run:
        logger.info(f"[Dry Run] Would write releases feed to '{output_path}'.")
    else:
        output_dir = os.path.dirname(output_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.info(f"Generated: {output_path}")

    logger.info(f"  Latest release: v{data['latest']['version']} ({data['latest']['date']})")
    logger.info(f"  Total releases: {len(data['recent'])}")
    return True


def main(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='generate-releases-json',
        description='Generate the recent releases JSON feed from the changelog.'
    )
    parser.parse_args(argv)

    if config is None:
        config = load_app_config()

    primary_changelog = os.path.join(config.docs_dir, config.changelog_file)
    if not os.path.exists(primary_changelog):
        logger.error(f"Changelog not found: {primary_changelog}")
        return 1

    generated = generate_releases_json(
        primary_changelog,
        os.path.join(config.static_api_dir, 'releases.json'),
        localized=False,
        label=f"'{config.default_locale}'",
        limit=config.releases_parse_limit,
        recent_count=config.releases_recent_count,
        dry_run=config.dry_run
    )
    if not generated:
        return 1

    for locale in config.secondary_locales:
        changelog_path = os.path.join(config.content_dir(locale), config.changelog_file)
        if not os.path.exists(changelog_path):
            logger.info(f"'{locale}' changelog not found, skipping...")
            continue

        section_headers = config.changelog_section_headers.get(locale)
        if not section_headers:
            logger.warning(f"No changelog section headers configured for '{locale}', skipping...")
            continue

        generate_releases_json(
            changelog_path,
            os.path.join(config.static_api_dir, f'releases-{locale}.json'),
            localized=True,
            label=f"'{locale}'",
            section_headers=section_headers,
            limit=config.releases_parse_limit,
            recent_count=config.releases_recent_count,
            dry_run=config.dry_run
        )

    return 0


if __name__ == "__main__":
    sys.exit(main())
