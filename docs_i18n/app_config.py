"""Application configuration module for the documentation i18n toolchain."""
import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

import yaml
from dotenv import load_dotenv

from docs_i18n.logging_config import setup_logger

DEFAULT_LOCALE = 'en'
TRANSLATION_SUBDIR = 'translation'
CONTENT_DOCS_SUBDIR = os.path.join('docusaurus-plugin-content-docs', 'current')

MISSING_LOCALE_MESSAGE = "Please specify a language, e.g., 'en' or 'ja'."

# Sub-section labels of a localized changelog. The default locale keeps the
# placeholder-wrapped English labels and needs no entry here.
DEFAULT_CHANGELOG_SECTION_HEADERS: Dict[str, Dict[str, str]] = {
    'ja': {
        'features': '新機能',
        'bug_fixes': 'バグ修正',
        'security': 'セキュリティ',
    },
}


@dataclass
class AppConfig:
    """Application configuration dataclass."""
    # Core paths
    project_root: str
    docs_dir: str
    i18n_dir: str
    build_dir: str
    static_api_dir: str

    # Locale configuration
    default_locale: str = DEFAULT_LOCALE
    locales: List[str] = field(default_factory=lambda: [DEFAULT_LOCALE])
    document_extensions: List[str] = field(default_factory=lambda: ['.md', '.mdx'])

    # Release feed settings
    changelog_file: str = 'changelog.md'
    changelog_section_headers: Dict[str, Dict[str, str]] = field(
        default_factory=lambda: dict(DEFAULT_CHANGELOG_SECTION_HEADERS)
    )
    releases_parse_limit: int = 5
    releases_recent_count: int = 4

    # AI-discovery index settings
    site_base_url: str = ''
    llms_files: List[str] = field(default_factory=lambda: ['llms.txt', 'llms-full.txt'])
    llms_site: Dict[str, Dict[str, str]] = field(default_factory=dict)
    llms_categories: Dict[str, List[str]] = field(default_factory=dict)

    # Processing settings
    dry_run: bool = False

    @property
    def secondary_locales(self) -> List[str]:
        return [locale for locale in self.locales if locale != self.default_locale]

    def is_known_locale(self, locale: str) -> bool:
        return locale in self.locales

    def translation_dir(self, locale: str) -> str:
        """Directory holding the per-document translation tables of ``locale``."""
        return os.path.join(self.i18n_dir, locale, TRANSLATION_SUBDIR)

    def content_dir(self, locale: str) -> str:
        """Directory the rendered documents of ``locale`` are written to."""
        return os.path.join(self.i18n_dir, locale, CONTENT_DOCS_SUBDIR)

    def locale_build_dir(self, locale: str) -> str:
        """Static build output of ``locale``; the default locale lives at the build root."""
        if locale == self.default_locale:
            return self.build_dir
        return os.path.join(self.build_dir, locale)


def _compute_project_root() -> str:
    """Compute the project root directory."""
    project_root = os.environ.get('DOCS_I18N_PROJECT_ROOT')
    if project_root:
        return os.path.abspath(project_root)
    return os.getcwd()


def _resolve_path(project_root: str, path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.abspath(os.path.join(project_root, path))


def _load_dotenv_files(project_root: str) -> None:
    """Load the .env file from the project root, if there is one."""
    dotenv_path = os.path.join(project_root, '.env')
    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path)


def _load_yaml_config(project_root: str) -> Dict[str, Any]:
    """Load the YAML configuration file, falling back to defaults on any problem."""
    default_config_path = os.path.join(project_root, 'config.yaml')
    config_file = os.environ.get('DOCS_I18N_CONFIG_FILE', default_config_path)

    if not os.path.isabs(config_file):
        config_file = os.path.abspath(config_file)

    config = {}
    try:
        if not os.path.exists(config_file):
            print(f"Warning: Configuration file '{config_file}' not found. Using default configuration.",
                  file=sys.stderr)
            print(f"Tip: Create a config.yaml file in '{project_root}' or set DOCS_I18N_CONFIG_FILE.",
                  file=sys.stderr)
            return config

        if not os.access(config_file, os.R_OK):
            print(f"Error: Configuration file '{config_file}' exists but is not readable. Check file permissions.",
                  file=sys.stderr)
            return config

        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)
            if loaded_config is None:
                print(f"Warning: Configuration file '{config_file}' is empty. Using default configuration.",
                      file=sys.stderr)
            elif isinstance(loaded_config, dict):
                config = loaded_config
            else:
                print(f"Error: Configuration file '{config_file}' must contain a YAML dictionary. Using defaults.",
                      file=sys.stderr)

    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file '{config_file}': {e}", file=sys.stderr)
        print("Please check your YAML syntax. Using default configuration.", file=sys.stderr)
    except OSError as e:
        print(f"Error: Could not read configuration file '{config_file}': {e}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)

    return config


def _setup_logger_from_config(config: Dict[str, Any], project_root: str) -> logging.Logger:
    """Set up logger based on configuration."""
    log_config = config.get('logging') or {}
    log_level_str = os.environ.get('DOCS_I18N_LOG_LEVEL', log_config.get('log_level', 'INFO')).upper()
    log_file_path = log_config.get('log_file_path', 'logs/docs_i18n.log')
    if log_file_path:
        log_file_path = _resolve_path(project_root, log_file_path)
    log_to_console = log_config.get('log_to_console', True)
    return setup_logger(log_level_str, log_file_path, log_to_console)


def _build_locale_list(config: Dict[str, Any], default_locale: str) -> List[str]:
    """Return the configured locales with the default locale guaranteed first."""
    locales = [str(locale) for locale in config.get('locales') or []]
    if default_locale in locales:
        locales.remove(default_locale)
    return [default_locale] + locales


def load_app_config() -> AppConfig:
    """
    Load application configuration from the YAML file and environment variables.

    Returns:
        AppConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()

    _load_dotenv_files(project_root)

    config = _load_yaml_config(project_root)

    logger = _setup_logger_from_config(config, project_root)
    logger.debug("Project root: %s", project_root)

    default_locale = config.get('default_locale', DEFAULT_LOCALE)
    locales = _build_locale_list(config, default_locale)

    section_headers = dict(DEFAULT_CHANGELOG_SECTION_HEADERS)
    section_headers.update(config.get('changelog_section_headers') or {})

    build_dir = os.environ.get('DOCS_I18N_BUILD_DIR', config.get('build_dir', 'build'))

    return AppConfig(
        project_root=project_root,
        docs_dir=_resolve_path(project_root, config.get('docs_dir', 'docs')),
        i18n_dir=_resolve_path(project_root, config.get('i18n_dir', 'i18n')),
        build_dir=_resolve_path(project_root, build_dir),
        static_api_dir=_resolve_path(project_root, config.get('static_api_dir', 'static/api')),
        default_locale=default_locale,
        locales=locales,
        document_extensions=config.get('document_extensions', ['.md', '.mdx']),
        changelog_file=config.get('changelog_file', 'changelog.md'),
        changelog_section_headers=section_headers,
        releases_parse_limit=int(config.get('releases_parse_limit', 5)),
        releases_recent_count=int(config.get('releases_recent_count', 4)),
        site_base_url=str(config.get('site_base_url', '')).rstrip('/'),
        llms_files=config.get('llms_files', ['llms.txt', 'llms-full.txt']),
        llms_site=config.get('llms_site') or {},
        llms_categories=config.get('llms_categories') or {},
        dry_run=bool(config.get('dry_run', False)),
    )


def parse_locale_argument(argv: Optional[List[str]], prog: str, description: str) -> Optional[str]:
    """
    Parse the single positional locale argument of a command-line script.

    Returns:
        The locale, or None after printing the usage error when it is missing.
    """
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument('locale', nargs='?', help="Target locale, e.g. 'en' or 'ja'.")
    args = parser.parse_args(argv)
    if not args.locale:
        print(MISSING_LOCALE_MESSAGE, file=sys.stderr)
        return None
    return args.locale
