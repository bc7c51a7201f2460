from __future__ import annotations

import stat
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from host_provisioner.engine.errors import TemplateRenderError
from host_provisioner.engine.handlers import EngineContext
from host_provisioner.engine.template_handler import TemplateHandler
from host_provisioner.engine.templates import render_template
from host_provisioner.resources import TemplateResource

if TYPE_CHECKING:
    from host_provisioner.core.host import Host

_TOML = """\
[slack]
url = "{{ url }}"
token = "{{ token }}"
"""


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "templates" / "notify_slack.toml.j2"
    path.parent.mkdir()
    path.write_text(_TOML)
    return path


def _resource(dest: Path, source: Path | str, **kwargs: object) -> TemplateResource:
    return TemplateResource(name=str(dest), source=str(source), **kwargs)  # type: ignore[arg-type]


class TestRenderTemplate:
    def test_renders_and_writes(self, tmp_path: Path, source: Path) -> None:
        dest = tmp_path / "etc" / "notify_slack.toml"
        r = _resource(dest, source)

        written = render_template(r, {"url": "https://hooks", "token": "xoxb"}, base_dir=tmp_path)

        assert written == dest
        assert dest.read_text() == '[slack]\nurl = "https://hooks"\ntoken = "xoxb"\n'

    def test_source_relative_to_base_dir(self, tmp_path: Path, source: Path) -> None:
        _ = source
        dest = tmp_path / "out.toml"
        r = _resource(dest, "templates/notify_slack.toml.j2")

        render_template(r, {"url": "u", "token": "t"}, base_dir=tmp_path)

        assert 'token = "t"' in dest.read_text()

    def test_always_overwrites(self, tmp_path: Path, source: Path) -> None:
        dest = tmp_path / "out.toml"
        dest.write_text("stale\n")
        r = _resource(dest, source)

        render_template(r, {"url": "u", "token": "t"}, base_dir=tmp_path)

        assert "stale" not in dest.read_text()

    def test_mode_applied(self, tmp_path: Path, source: Path) -> None:
        dest = tmp_path / "out.toml"
        r = _resource(dest, source, mode="0600")

        render_template(r, {"url": "u", "token": "t"}, base_dir=tmp_path)

        assert stat.S_IMODE(dest.stat().st_mode) == 0o600

    def test_existing_mode_kept_without_mode(self, tmp_path: Path, source: Path) -> None:
        dest = tmp_path / "out.toml"
        dest.write_text("old")
        dest.chmod(0o640)
        r = _resource(dest, source)

        render_template(r, {"url": "u", "token": "t"}, base_dir=tmp_path)

        assert stat.S_IMODE(dest.stat().st_mode) == 0o640

    def test_undefined_variable(self, tmp_path: Path, source: Path) -> None:
        dest = tmp_path / "out.toml"
        r = _resource(dest, source)

        with pytest.raises(TemplateRenderError, match="token"):
            render_template(r, {"url": "u"}, base_dir=tmp_path)
        assert not dest.exists()

    def test_syntax_error(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.j2"
        bad.write_text("{% if %}")
        r = _resource(tmp_path / "out", bad)

        with pytest.raises(TemplateRenderError):
            render_template(r, {}, base_dir=tmp_path)

    def test_missing_source(self, tmp_path: Path) -> None:
        r = _resource(tmp_path / "out", tmp_path / "missing.j2")

        with pytest.raises(TemplateRenderError, match="cannot read template"):
            render_template(r, {}, base_dir=tmp_path)

    def test_no_html_escaping(self, tmp_path: Path, source: Path) -> None:
        dest = tmp_path / "out.toml"
        r = _resource(dest, source)

        render_template(r, {"url": "https://h/?a=1&b=2", "token": "<t>"}, base_dir=tmp_path)

        assert "a=1&b=2" in dest.read_text()
        assert "<t>" in dest.read_text()


class TestTemplateHandler:
    def test_validate_reports_missing_env(self, host: Host, tmp_path: Path, source: Path) -> None:
        r = _resource(tmp_path / "out", source, variables={"token": {"env": "SLACK_TOKEN"}})
        ctx = EngineContext(host=host, environment={})

        errors = TemplateHandler().validate(ctx, r)

        assert errors == [
            f"template[{tmp_path / 'out'}]: environment variable 'SLACK_TOKEN' is not set"
        ]

    def test_validate_reports_missing_source(self, host: Host, tmp_path: Path) -> None:
        r = _resource(tmp_path / "out", "nope.j2")
        ctx = EngineContext(host=host, base_dir=tmp_path)

        errors = TemplateHandler().validate(ctx, r)

        assert len(errors) == 1
        assert "template source not found" in errors[0]

    def test_run_resolves_from_snapshot(self, host: Host, tmp_path: Path, source: Path) -> None:
        dest = tmp_path / "out.toml"
        r = _resource(
            dest,
            source,
            variables={"token": {"env": "SLACK_TOKEN"}, "url": "https://hooks"},
        )
        ctx = EngineContext(host=host, environment={"SLACK_TOKEN": "xoxb"})

        TemplateHandler().run(ctx, r)

        assert 'token = "xoxb"' in dest.read_text()

    def test_run_missing_env_raises(self, host: Host, tmp_path: Path, source: Path) -> None:
        r = _resource(tmp_path / "out", source, variables={"token": {"env": "SLACK_TOKEN"}})
        ctx = EngineContext(host=host, environment={})

        with pytest.raises(TemplateRenderError, match="SLACK_TOKEN"):
            TemplateHandler().run(ctx, r)

    def test_never_satisfied(self, host: Host, tmp_path: Path, source: Path) -> None:
        r = _resource(tmp_path / "out", source)
        assert TemplateHandler().check(EngineContext(host=host), r) is False
