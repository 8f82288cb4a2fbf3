import json
import os
import textwrap

import pytest

from docs_i18n.app_config import AppConfig
from docs_i18n.translation_store import translation_table_path

INTRO_DOC = textwrap.dedent("""\
    ---
    title: Introduction
    ---

    # {{Example Title}}

    {{Welcome to the framework.}} See [the guide](./guide).

    ```ts
    // {{Create a command}}
    const command = new CommandService();
    ```
""")

CQRS_FLOW_DOC = textwrap.dedent("""\
    # {{CQRS Flow}}

    {{Commands are written to the command table.}}

    - { { Events are synchronized to the read model } }
""")

CHANGELOG_DOC = textwrap.dedent("""\
    # {{Changelog}}

    ## [1.2.0](https://github.com/example/framework/compare/v1.1.0...v1.2.0) (2026-02-01)

    ### {{Features}}

    - **core:** {{Add widget}} ([a1b2c3d](https://github.com/example/framework/commit/a1b2c3d))
    - **cli:** {{Add `new` command}}

    ### {{Bug Fixes}}

    - **core:** {{Fix version conflict}}

    ### {{Security}}

    - {{Bump dependencies}}

    ---

    ## [1.1.0](https://github.com/example/framework/compare/v1.0.0...v1.1.0) (2026-01-10)

    ### {{Bug Fixes}}

    - **sequence:** {{Handle empty prefix}}
""")


def write_text(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)


@pytest.fixture
def site_root(tmp_path):
    """A minimal documentation site with a nested doc, a changelog and an image asset."""
    docs_dir = tmp_path / 'docs'
    write_text(str(docs_dir / 'intro.md'), INTRO_DOC)
    write_text(str(docs_dir / 'architecture' / 'cqrs-flow.md'), CQRS_FLOW_DOC)
    write_text(str(docs_dir / 'changelog.md'), CHANGELOG_DOC)
    write_text(str(docs_dir / 'images' / 'diagram.svg'), '<svg></svg>')
    return tmp_path


@pytest.fixture
def app_config(site_root):
    return AppConfig(
        project_root=str(site_root),
        docs_dir=str(site_root / 'docs'),
        i18n_dir=str(site_root / 'i18n'),
        build_dir=str(site_root / 'build'),
        static_api_dir=str(site_root / 'static' / 'api'),
        default_locale='en',
        locales=['en', 'ja'],
        site_base_url='https://docs.example.com',
    )


@pytest.fixture
def write_table(app_config):
    """Write a translation table for a document and return its path."""
    def _write(locale, relative_path, table):
        path = translation_table_path(app_config.translation_dir(locale), relative_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(table, f, ensure_ascii=False, indent=2)
        return path
    return _write
