"""
Tests for the webinfra command line interface.
"""

import io
import json

import pytest
import yaml

from webinfra.cli import BufferedOutput, ConsoleOutput, build_parser, main
from webinfra.settings import MemorySettings


@pytest.fixture
def out():
    return BufferedOutput()


class TestParser:
    def test_context_arguments(self):
        args = build_parser().parse_args(["context", "staging-ta", "chrome-fr", "-f", "c.json"])
        assert args.command == "context"
        assert args.environment == "staging-ta"
        assert args.config_key == "chrome-fr"
        assert args.file == "c.json"
        assert args.format == "yaml"

    def test_alias(self):
        assert build_parser().parse_args(["ctx", "qa", "k"]).command == "ctx"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_invalid_format(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["context", "qa", "k", "--format", "xml"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("webinfra ")


class TestContextCommand:
    def test_flat(self, out, context_file):
        code = main(["context", "staging-ta", "chrome-fr", "-f", str(context_file), "--format", "flat"], out=out)
        assert code == 0
        assert "web.gui.lang=fr" in out.lines
        assert "test.hub.use=true" in out.lines
        assert "sauce.username=ci-bot" in out.lines
        assert out.lines == sorted(out.lines)

    def test_json(self, out, context_file):
        main(["ctx", "production", "chrome-fr", "-f", str(context_file), "--format", "json"], out=out)
        data = json.loads(out.text)
        assert data["web.app.url"] == "https://www.example.com"
        assert data["sauce.accessKey"] == "s3cret"

    def test_yaml(self, out, context_file):
        main(["context", "staging-ta", "firefox-en", "--file", str(context_file)], out=out)
        data = yaml.safe_load(out.text)
        assert data["browser"] == "firefox"
        assert data["test.hub.use"] == "false"
        assert data["data.manager"] == "staging-data"

    def test_unknown_environment_prints_overlay(self, out, context_file):
        main(["context", "qa", "chrome-fr", "-f", str(context_file), "--format", "json"], out=out)
        assert set(json.loads(out.text)) == {
            "sauce.username",
            "sauce.accessKey",
            "web.gui.lang",
            "test.hub.url",
        }

    @pytest.mark.parametrize("output_format", ["yaml", "json"])
    def test_missing_file(self, out, tmp_path, output_format):
        missing = str(tmp_path / "missing.json")
        main(["context", "qa", "k", "-f", missing, "--format", output_format], out=out)
        assert out.text == "{}"

    @pytest.mark.usefixtures("clean_env")
    def test_file_from_environment(self, out, context_file, monkeypatch):
        monkeypatch.setenv("WEBINFRA_CONTEXT_FILE", str(context_file))
        main(["context", "production", "chrome-fr", "--format", "flat"], out=out)
        assert "web.app.url=https://www.example.com" in out.lines


class TestEnvCommand:
    def test_local(self, out):
        assert main(["env"], out=out, settings=MemorySettings()) == 0
        assert out.lines == [
            "pipeline_mode=false",
            "test_environment=",
            "ci_pipeline=false",
            "ci_system=Local",
        ]

    def test_pipeline(self, out):
        settings = MemorySettings({"testEnvironment": "staging-ta", "GITLAB_CI": "true"})
        main(["env"], out=out, settings=settings)
        assert out.lines == [
            "pipeline_mode=true",
            "test_environment=staging-ta",
            "ci_pipeline=true",
            "ci_system=GitLab CI",
        ]


class TestOutput:
    def test_console_output(self):
        buffer = io.StringIO()
        ConsoleOutput(buffer).write("hello")
        ConsoleOutput(buffer).write()
        assert buffer.getvalue() == "hello\n\n"

    def test_buffered_output_splits_lines(self):
        out = BufferedOutput()
        out.write("a\nb")
        assert out.lines == ["a", "b"]
