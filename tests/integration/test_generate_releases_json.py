import json
import os
import textwrap

from docs_i18n import releases
from docs_i18n.releases import generate_releases_json

JA_CHANGELOG = textwrap.dedent("""\
    # 変更履歴

    ## [1.2.0](https://github.com/example/framework/compare/v1.1.0...v1.2.0) (2026-02-01)

    ### 新機能

    - **core:** ウィジェットを追加 ([a1b2c3d](https://github.com/example/framework/commit/a1b2c3d))

    ### バグ修正

    - **core:** バージョン競合を修正
""")


def _read_json(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def _write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)


def test_main_writes_default_locale_feed(app_config):
    assert releases.main([], config=app_config) == 0

    feed = _read_json(os.path.join(app_config.static_api_dir, 'releases.json'))
    assert feed['latest'] == {
        'version': '1.2.0',
        'date': '2026-02-01',
        'url': 'https://github.com/example/framework/compare/v1.1.0...v1.2.0',
        'features': ['Add widget', 'Add `new` command'],
        'bugFixes': ['Fix version conflict'],
        'security': ['Bump dependencies'],
    }
    assert [release['version'] for release in feed['recent']] == ['1.2.0', '1.1.0']
    assert feed['recent'][1]['bugFixes'] == ['Handle empty prefix']
    assert feed['generated'].endswith('Z')


def test_main_skips_missing_secondary_changelog(app_config):
    assert releases.main([], config=app_config) == 0
    assert not os.path.exists(os.path.join(app_config.static_api_dir, 'releases-ja.json'))


def test_main_writes_secondary_locale_feed(app_config):
    _write(os.path.join(app_config.content_dir('ja'), 'changelog.md'), JA_CHANGELOG)

    assert releases.main([], config=app_config) == 0

    feed = _read_json(os.path.join(app_config.static_api_dir, 'releases-ja.json'))
    assert feed['latest']['features'] == ['ウィジェットを追加']
    assert feed['latest']['bugFixes'] == ['バージョン競合を修正']
    with open(os.path.join(app_config.static_api_dir, 'releases-ja.json'), 'r', encoding='utf-8') as f:
        assert 'ウィジェットを追加' in f.read()


def test_secondary_locale_without_releases_does_not_fail(app_config):
    _write(os.path.join(app_config.content_dir('ja'), 'changelog.md'), "# 変更履歴\n")

    assert releases.main([], config=app_config) == 0
    assert os.path.exists(os.path.join(app_config.static_api_dir, 'releases.json'))
    assert not os.path.exists(os.path.join(app_config.static_api_dir, 'releases-ja.json'))


def test_main_fails_without_releases(app_config):
    _write(os.path.join(app_config.docs_dir, 'changelog.md'), "# {{Changelog}}\n\nNothing released yet.\n")

    assert releases.main([], config=app_config) == 1
    assert not os.path.exists(os.path.join(app_config.static_api_dir, 'releases.json'))


def test_main_fails_without_changelog(app_config):
    os.remove(os.path.join(app_config.docs_dir, 'changelog.md'))

    assert releases.main([], config=app_config) == 1
    assert not os.path.exists(app_config.static_api_dir)


def test_generate_releases_json_respects_counts(app_config, tmp_path):
    changelog = "\n\n".join(
        f"## [1.0.{i}](https://github.com/example/framework/releases/v1.0.{i}) (2026-01-0{i})"
        for i in range(9, 0, -1)
    )
    changelog_path = str(tmp_path / 'changelog.md')
    output_path = str(tmp_path / 'out' / 'releases.json')
    _write(changelog_path, changelog)

    assert generate_releases_json(changelog_path, output_path, localized=False, label='test',
                                  limit=5, recent_count=4)

    feed = _read_json(output_path)
    assert feed['latest']['version'] == '1.0.9'
    assert len(feed['recent']) == 4
