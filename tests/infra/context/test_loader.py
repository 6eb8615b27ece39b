"""
Tests for ContextConfigLoader.

Covers:
- Singleton lifecycle (get_instance, reset_instance, configure_instance)
- Pipeline mode and the testEnvironment signal
- Merge precedence across the saucelabs, environment and config key layers
- Publishing merged entries into settings
- Graceful handling of missing arguments, environments and files
"""

import json
import os

import pytest

from webinfra.context import (
    CONTEXT_FILE_ENV_VAR,
    ContextConfigLoader,
    DictContextSource,
    FileContextSource,
)
from webinfra.settings import (
    APP_URL,
    GUI_LANG,
    HUB_USE,
    TEST_ENVIRONMENT,
    EnvironSettings,
    MemorySettings,
)

PUBLISHED_KEYS = (GUI_LANG, APP_URL, HUB_USE)


# =============================================================================
# Singleton Lifecycle
# =============================================================================


class TestSingleton:
    """Test process-wide instance management."""

    def test_get_instance_returns_same_object(self):
        loader1 = ContextConfigLoader.get_instance()
        loader2 = ContextConfigLoader.get_instance()
        assert loader1 is loader2

    def test_reset_instance_creates_new_instance(self):
        loader1 = ContextConfigLoader.get_instance()
        ContextConfigLoader.reset_instance()
        loader2 = ContextConfigLoader.get_instance()
        assert loader1 is not loader2

    def test_reset_without_instance_does_not_raise(self):
        ContextConfigLoader.reset_instance()
        ContextConfigLoader.reset_instance()

    def test_reset_does_not_clear_settings(self, dict_source):
        settings = MemorySettings()
        loader = ContextConfigLoader.configure_instance(source=dict_source, settings=settings)
        loader.load_config("staging-ta", "chrome-fr")

        ContextConfigLoader.reset_instance()

        assert settings.get(GUI_LANG) == "fr"

    def test_default_collaborators(self):
        loader = ContextConfigLoader.get_instance()
        assert isinstance(loader.settings, EnvironSettings)
        assert isinstance(loader.source, FileContextSource)

    def test_configure_instance_replaces_singleton(self, dict_source, settings):
        before = ContextConfigLoader.get_instance()
        configured = ContextConfigLoader.configure_instance(source=dict_source, settings=settings)

        assert configured is not before
        assert ContextConfigLoader.get_instance() is configured
        assert configured.source is dict_source
        assert configured.settings is settings


# =============================================================================
# Pipeline Mode
# =============================================================================


@pytest.mark.usefixtures("clean_env")
class TestPipelineMode:
    """Test the testEnvironment signal read from the process environment."""

    def test_pipeline_mode_when_unset(self):
        assert ContextConfigLoader.get_instance().is_pipeline_mode() is False

    def test_pipeline_mode_when_set(self, monkeypatch):
        monkeypatch.setenv(TEST_ENVIRONMENT, "staging-ta")
        assert ContextConfigLoader.get_instance().is_pipeline_mode() is True

    def test_pipeline_mode_when_empty(self, monkeypatch):
        monkeypatch.setenv(TEST_ENVIRONMENT, "")
        assert ContextConfigLoader.get_instance().is_pipeline_mode() is False

    def test_get_test_environment_returns_value(self, monkeypatch):
        monkeypatch.setenv(TEST_ENVIRONMENT, "production")
        assert ContextConfigLoader.get_instance().get_test_environment() == "production"

    def test_get_test_environment_returns_none(self):
        assert ContextConfigLoader.get_instance().get_test_environment() is None

    def test_get_test_environment_returns_empty_string(self, monkeypatch):
        monkeypatch.setenv(TEST_ENVIRONMENT, "")
        assert ContextConfigLoader.get_instance().get_test_environment() == ""

    def test_signal_from_injected_settings(self, dict_source):
        settings = MemorySettings({TEST_ENVIRONMENT: "staging-ta"})
        loader = ContextConfigLoader(source=dict_source, settings=settings)
        assert loader.is_pipeline_mode() is True
        assert loader.get_test_environment() == "staging-ta"


# =============================================================================
# Merging
# =============================================================================


class TestGetMergedConfig:
    """Test merge results and precedence."""

    def test_full_merge(self, loader):
        merged = loader.get_merged_config("staging-ta", "chrome-fr")
        assert merged == {
            "sauce.username": "ci-bot",
            "sauce.accessKey": "s3cret",
            "web.gui.lang": "fr",
            "test.hub.url": "https://ondemand.eu-central-1.saucelabs.com/wd/hub",
            "data.manager": "staging-data",
            "test.hub.use": "true",
            "web.app.url": "https://staging.example.com",
            "web.browsers.config": "configuration/config_chrome_win10.json",
        }

    def test_config_key_overrides_saucelabs(self):
        source = DictContextSource(
            {"_saucelabs": {"lang": "en"}, "staging-ta": {"chrome-fr": {"lang": "fr"}}}
        )
        loader = ContextConfigLoader(source=source, settings=MemorySettings())
        assert loader.get_merged_config("staging-ta", "chrome-fr")["lang"] == "fr"

    def test_environment_scalar_overrides_saucelabs(self):
        source = DictContextSource(
            {"_saucelabs": {"lang": "en"}, "staging-ta": {"lang": "de", "chrome-fr": {}}}
        )
        loader = ContextConfigLoader(source=source, settings=MemorySettings())
        assert loader.get_merged_config("staging-ta", "chrome-fr")["lang"] == "de"

    def test_config_key_overrides_environment_scalar(self, loader):
        merged = loader.get_merged_config("staging-ta", "firefox-en")
        assert merged["test.hub.use"] == "false"
        assert merged["browser"] == "firefox"

    def test_none_environment_returns_empty(self, loader):
        assert loader.get_merged_config(None, "chrome-fr") == {}

    def test_empty_environment_returns_empty(self, loader):
        assert loader.get_merged_config("", "chrome-fr") == {}

    def test_unknown_environment_returns_saucelabs_only(self, loader, context_data):
        merged = loader.get_merged_config("non-existent-env", "chrome-fr")
        assert merged == context_data["_saucelabs"]

    def test_unknown_environment_without_overlay_returns_empty(self):
        source = DictContextSource({"staging-ta": {"chrome-fr": {"lang": "fr"}}})
        loader = ContextConfigLoader(source=source, settings=MemorySettings())
        result = loader.get_merged_config("non-existent-env", "chrome-fr")
        assert result == {}
        assert result is not None

    def test_unknown_config_key_keeps_lower_layers(self, loader):
        merged = loader.get_merged_config("staging-ta", "safari-fr")
        assert merged["web.gui.lang"] == "en"
        assert merged["data.manager"] == "staging-data"
        assert "web.app.url" not in merged

    def test_none_config_key_keeps_lower_layers(self, loader):
        merged = loader.get_merged_config("staging-ta", None)
        assert merged["data.manager"] == "staging-data"

    def test_config_key_of_other_environment_not_used(self):
        source = DictContextSource({"a": {"k1": {"x": "1"}}, "b": {"k2": {"y": "2"}}})
        loader = ContextConfigLoader(source=source, settings=MemorySettings())
        assert loader.get_merged_config("a", "k2") == {}

    def test_nested_objects_are_ignored(self):
        source = DictContextSource(
            {
                "_saucelabs": {"tunnel": {"name": "x"}, "user": "ci"},
                "env": {"key": {"opts": {"deep": True}, "lang": "fr"}},
            }
        )
        loader = ContextConfigLoader(source=source, settings=MemorySettings())
        assert loader.get_merged_config("env", "key") == {"user": "ci", "lang": "fr"}

    def test_values_are_stringified(self):
        source = DictContextSource(
            {
                "env": {
                    "key": {
                        "flag": True,
                        "off": False,
                        "port": 4444,
                        "ratio": 0.5,
                        "args": ["--a", "--b"],
                        "unset": None,
                    }
                }
            }
        )
        loader = ContextConfigLoader(source=source, settings=MemorySettings())
        assert loader.get_merged_config("env", "key") == {
            "flag": "true",
            "off": "false",
            "port": "4444",
            "ratio": "0.5",
            "args": "--a,--b",
            "unset": "",
        }

    def test_merge_is_idempotent(self, loader):
        first = loader.get_merged_config("staging-ta", "chrome-fr")
        second = loader.get_merged_config("staging-ta", "chrome-fr")
        assert first == second
        assert first is not second

    def test_merge_reflects_source_changes(self, loader, dict_source, context_data):
        assert loader.get_merged_config("staging-ta", "chrome-fr")["web.gui.lang"] == "fr"

        context_data["staging-ta"]["chrome-fr"]["web.gui.lang"] = "nl"
        dict_source.update(context_data)

        assert loader.get_merged_config("staging-ta", "chrome-fr")["web.gui.lang"] == "nl"

    def test_merge_does_not_publish(self, loader, settings):
        loader.get_merged_config("staging-ta", "chrome-fr")
        assert len(settings) == 0

    def test_mutating_result_does_not_affect_source(self, loader):
        merged = loader.get_merged_config("staging-ta", "chrome-fr")
        merged["web.gui.lang"] = "xx"
        assert loader.get_merged_config("staging-ta", "chrome-fr")["web.gui.lang"] == "fr"

    def test_unknown_environment_is_logged(self, loader, log_buffer):
        loader.get_merged_config("non-existent-env", "chrome-fr")
        output = log_buffer.getvalue()
        assert "environment not found" in output
        assert "[env:non-existent-env]" in output

    def test_unknown_config_key_is_logged(self, loader, log_buffer):
        loader.get_merged_config("staging-ta", "safari-fr")
        assert "config key not found" in log_buffer.getvalue()


# =============================================================================
# Publishing
# =============================================================================


class TestLoadConfig:
    """Test publishing merged configuration into settings."""

    def test_publishes_all_merged_entries(self, loader, settings):
        published = loader.load_config("staging-ta", "chrome-fr")

        assert settings.to_dict() == published
        assert settings.get(GUI_LANG) == "fr"
        assert settings.get(APP_URL) == "https://staging.example.com"
        assert settings.get(HUB_USE) == "true"

    def test_overwrites_existing_values(self, loader, settings):
        settings.set(GUI_LANG, "es")
        loader.load_config("staging-ta", "chrome-fr")
        assert settings.get(GUI_LANG) == "fr"

    def test_leaves_other_settings_untouched(self, loader, settings):
        settings.set("unrelated", "keep")
        settings.set(APP_URL, "https://old.example.com")

        loader.load_config("staging-ta", "firefox-en")

        assert settings.get("unrelated") == "keep"
        assert settings.get(APP_URL) == "https://old.example.com"

    @pytest.mark.parametrize(
        "environment,config_key",
        [
            (None, "chrome-fr"),
            ("", "chrome-fr"),
            ("staging-ta", None),
            ("staging-ta", ""),
        ],
    )
    def test_missing_arguments_are_noop(self, loader, settings, environment, config_key):
        result = loader.load_config(environment, config_key)
        assert result == {}
        assert len(settings) == 0

    def test_missing_config_key_logs_warning(self, loader, log_buffer):
        loader.load_config("staging-ta", "")
        output = log_buffer.getvalue()
        assert "[W]" in output
        assert "no config key" in output

    def test_missing_environment_logs_debug(self, loader, log_buffer):
        loader.load_config(None, "chrome-fr")
        output = log_buffer.getvalue()
        assert "[D]" in output
        assert "no test environment" in output

    def test_empty_merge_publishes_nothing(self, settings, capture_lg, log_buffer):
        loader = ContextConfigLoader(
            source=DictContextSource({}), settings=settings, lg=capture_lg
        )
        assert loader.load_config("staging-ta", "chrome-fr") == {}
        assert len(settings) == 0
        assert "no context configuration found" in log_buffer.getvalue()

    def test_success_is_logged(self, loader, log_buffer):
        loader.load_config("staging-ta", "chrome-fr")
        output = log_buffer.getvalue()
        assert "loaded context configuration" in output
        assert "[count:8]" in output

    def test_load_from_signal(self, dict_source):
        settings = MemorySettings({TEST_ENVIRONMENT: "production"})
        loader = ContextConfigLoader(source=dict_source, settings=settings)

        loader.load_from_signal("chrome-fr")

        assert settings.get(APP_URL) == "https://www.example.com"

    def test_load_from_signal_without_signal_is_noop(self, loader, settings):
        assert loader.load_from_signal("chrome-fr") == {}
        assert len(settings) == 0


# =============================================================================
# Process Environment and Files
# =============================================================================


@pytest.mark.integration
@pytest.mark.usefixtures("clean_env")
class TestProcessWideLoader:
    """Test the default loader against os.environ and context files."""

    @pytest.mark.parametrize(
        "environment,config_key",
        [
            (None, "chrome-fr"),
            ("", "chrome-fr"),
            ("staging-ta", None),
            ("staging-ta", ""),
        ],
    )
    def test_missing_arguments_leave_environ_untouched(
        self, monkeypatch, context_file, environment, config_key
    ):
        monkeypatch.setenv(CONTEXT_FILE_ENV_VAR, str(context_file))

        ContextConfigLoader.get_instance().load_config(environment, config_key)

        for key in PUBLISHED_KEYS:
            assert key not in os.environ

    def test_publishes_into_environ(self, monkeypatch, context_file):
        monkeypatch.setenv(CONTEXT_FILE_ENV_VAR, str(context_file))

        ContextConfigLoader.get_instance().load_config("staging-ta", "chrome-fr")

        assert os.environ[GUI_LANG] == "fr"
        assert os.environ[APP_URL] == "https://staging.example.com"
        assert os.environ[HUB_USE] == "true"

    def test_missing_context_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        loader = ContextConfigLoader.get_instance()

        result = loader.get_merged_config("non-existent-env", "chrome-fr")
        assert result == {}

        loader.load_config("staging-ta", "chrome-fr")
        assert GUI_LANG not in os.environ

    def test_malformed_context_file(self, tmp_path):
        path = tmp_path / "context.json"
        path.write_text('{"staging-ta": {"chrome-fr": ')
        loader = ContextConfigLoader(source=FileContextSource(path), settings=MemorySettings())

        assert loader.get_merged_config("staging-ta", "chrome-fr") == {}
        assert loader.load_config("staging-ta", "chrome-fr") == {}

    def test_file_edits_visible_between_calls(self, context_file):
        loader = ContextConfigLoader(
            source=FileContextSource(context_file), settings=MemorySettings()
        )
        assert loader.get_merged_config("production", "chrome-fr")["web.gui.lang"] == "fr"

        context_file.write_text('{"production": {"chrome-fr": {"web.gui.lang": "en"}}}')

        assert loader.get_merged_config("production", "chrome-fr") == {"web.gui.lang": "en"}

    def test_tab_indented_json_context_file(self, tmp_path):
        path = tmp_path / "context.json"
        path.write_text(
            json.dumps({"staging-ta": {"chrome-fr": {"web.gui.lang": "fr"}}}, indent="\t")
        )
        loader = ContextConfigLoader(source=FileContextSource(path), settings=MemorySettings())

        assert loader.get_merged_config("staging-ta", "chrome-fr") == {"web.gui.lang": "fr"}

    def test_keys_rejected_by_environ_are_skipped(self, capture_lg, log_buffer):
        source = DictContextSource(
            {"staging-ta": {"chrome-fr": {"web.a": "1", "web.bad=key": "x", "web.z": "2"}}}
        )
        loader = ContextConfigLoader(source=source, settings=EnvironSettings(), lg=capture_lg)

        published = loader.load_config("staging-ta", "chrome-fr")

        assert published == {"web.a": "1", "web.z": "2"}
        assert os.environ["web.a"] == "1"
        assert os.environ["web.z"] == "2"
        assert "skipping setting rejected by settings store" in log_buffer.getvalue()
        assert "[key:web.bad=key]" in log_buffer.getvalue()

    def test_values_rejected_by_environ_are_skipped(self, capture_lg):
        source = DictContextSource(
            {"staging-ta": {"chrome-fr": {"web.a": "nul\x00byte", "web.z": "2"}}}
        )
        loader = ContextConfigLoader(source=source, settings=EnvironSettings(), lg=capture_lg)

        assert loader.load_config("staging-ta", "chrome-fr") == {"web.z": "2"}
        assert "web.a" not in os.environ
