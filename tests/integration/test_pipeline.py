"""
End-to-end run of the documentation build steps:
extract -> replace -> (static build) -> generate llms.txt -> post-process.
"""
import json
import os

from docs_i18n import (
    check_translations,
    extract_placeholders,
    generate_llms_txt,
    post_process_llms,
    replace_placeholders
)
from docs_i18n.placeholders import strip_placeholder_braces
from docs_i18n.translation_store import translation_table_path


def _read(path):
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _translate(config, locale, relative_path, translations):
    path = translation_table_path(config.translation_dir(locale), relative_path)
    with open(path, 'r', encoding='utf-8') as f:
        table = json.load(f)
    table.update(translations)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(table, f, ensure_ascii=False, indent=2)


def test_default_locale_round_trip_strips_braces(app_config):
    assert extract_placeholders.main(['en'], config=app_config) == 0
    assert replace_placeholders.main(['en'], config=app_config) == 0

    for relative_path in ('intro.md', 'changelog.md', 'architecture/cqrs-flow.md'):
        source = _read(os.path.join(app_config.docs_dir, relative_path))
        rendered = _read(os.path.join(app_config.content_dir('en'), relative_path))
        assert rendered == strip_placeholder_braces(source)
        assert '{{' not in rendered
        assert '{ {' not in rendered


def test_brand_new_locale_falls_back_to_default_locale(app_config):
    extract_placeholders.main(['en'], config=app_config)
    extract_placeholders.main(['ja'], config=app_config)

    replace_placeholders.main(['ja'], config=app_config)

    source = _read(os.path.join(app_config.docs_dir, 'intro.md'))
    rendered = _read(os.path.join(app_config.content_dir('ja'), 'intro.md'))
    assert rendered == strip_placeholder_braces(source)


def test_full_pipeline(app_config):
    extract_placeholders.main(['en'], config=app_config)
    extract_placeholders.main(['ja'], config=app_config)
    _translate(app_config, 'ja', 'intro.md', {
        'Example Title': 'サンプルタイトル',
        'Welcome to the framework.': 'フレームワークへようこそ。',
    })
    _translate(app_config, 'ja', 'architecture/cqrs-flow.md', {'CQRS Flow': 'CQRSフロー'})

    replace_placeholders.main(['en'], config=app_config)
    replace_placeholders.main(['ja'], config=app_config)

    ja_intro = _read(os.path.join(app_config.content_dir('ja'), 'intro.md'))
    assert '# サンプルタイトル\n' in ja_intro
    assert 'フレームワークへようこそ。' in ja_intro
    assert '// Create a command\n' in ja_intro

    assert generate_llms_txt.main([], config=app_config) == 0
    # The rendered docs carry no placeholders; simulate one left in the index by the site build.
    ja_llms = os.path.join(app_config.build_dir, 'ja', 'llms.txt')
    with open(ja_llms, 'a', encoding='utf-8') as f:
        f.write("{{CQRS Flow}}\n")

    assert post_process_llms.main([], config=app_config) == 0

    ja_index = _read(ja_llms)
    assert '- [Introduction](https://docs.example.com/ja/docs/intro): フレームワークへようこそ。 See the guide.' in ja_index
    assert ja_index.endswith("CQRSフロー\n")
    en_index = _read(os.path.join(app_config.build_dir, 'llms.txt'))
    assert '- [Introduction](https://docs.example.com/docs/intro): Welcome to the framework. See the guide.' in en_index

    assert check_translations.main(['ja'], config=app_config) == 0
