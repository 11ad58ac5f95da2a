"""Unit tests for the project configuration models."""

from datetime import timedelta
from pathlib import Path

import pytest

from i3_project_starter.errors import ConfigParseError, LayoutNotSpecified
from i3_project_starter.models.config import (
    Application,
    ApplicationCommand,
    Exec,
    ExecType,
    LayoutContents,
    LayoutPath,
    ManagedLayoutRef,
    ProjectConfig,
    classify_layout,
)

from fixtures.sample_configs import FULL_PROJECT, INLINE_LAYOUT, MINIMAL_PROJECT, project_document


class TestApplicationCommand:
    """Tests for the command forms of an application."""

    def test_string_split_honors_quotes(self):
        command = ApplicationCommand.model_validate("termite --title 'Web Server' -e \"vim x\"")
        assert command.argv == ["termite", "--title", "Web Server", "-e", "vim x"]

    def test_list_form(self):
        command = ApplicationCommand.model_validate(["termite", "--role", "split left"])
        assert command.program == "termite"
        assert command.args == ["--role", "split left"]

    def test_table_form(self):
        command = ApplicationCommand.model_validate({"program": "termite", "args": ["-e", "htop"]})
        assert command.argv == ["termite", "-e", "htop"]

    def test_str_is_shell_quoted(self):
        command = ApplicationCommand.model_validate(["termite", "--title", "Web Server"])
        assert str(command) == "termite --title 'Web Server'"

    def test_unbalanced_quote_is_a_parse_error(self):
        document = project_document(INLINE_LAYOUT, "command = \"termite --title 'oops\"")

        with pytest.raises(ConfigParseError, match="command splitting failed"):
            ProjectConfig.from_toml(document)

    @pytest.mark.parametrize("command", ['""', "[]", '"   "'])
    def test_empty_command_is_rejected(self, command):
        document = project_document(INLINE_LAYOUT, f"command = {command}")

        with pytest.raises(ConfigParseError, match="command"):
            ProjectConfig.from_toml(document)


class TestExec:
    """Tests for the exec forms of an application."""

    def test_single_string(self):
        exec_config = Exec.model_validate("echo hi")
        assert exec_config.commands == ["echo hi"]
        assert exec_config.exec_type == ExecType.TEXT
        assert exec_config.timeout == timedelta(seconds=5)

    def test_list_of_strings(self):
        exec_config = Exec.model_validate(["echo one", "echo two"])
        assert exec_config.commands == ["echo one", "echo two"]
        assert exec_config.exec_type == ExecType.TEXT

    def test_table_with_keys_and_timeout(self):
        exec_config = Exec.model_validate(
            {"commands": ["ctrl+r", "Return"], "exec_type": "keys", "timeout": 2}
        )
        assert exec_config.exec_type == ExecType.KEYS
        assert exec_config.timeout == timedelta(seconds=2)
        assert exec_config.timeout_seconds == 2.0

    def test_fractional_timeout(self):
        exec_config = Exec.model_validate({"commands": ["x"], "timeout": 0.5})
        assert exec_config.timeout_seconds == 0.5

    @pytest.mark.parametrize("timeout", [0, -1, True])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ValueError):
            Exec.model_validate({"commands": ["x"], "timeout": timeout})

    def test_unknown_exec_type(self):
        with pytest.raises(ValueError):
            Exec.model_validate({"commands": ["x"], "exec_type": "mouse"})

    def test_empty_commands(self):
        with pytest.raises(ValueError):
            Exec.model_validate([])


class TestLayoutClassification:
    """Tests for classify_layout."""

    def test_braces_mean_contents(self):
        assert classify_layout(INLINE_LAYOUT) == LayoutContents(contents=INLINE_LAYOUT)

    def test_existing_managed_layout(self, config_context):
        config_context.layouts.create_from_template("editor", b"{}")

        layout = classify_layout("editor", config_context.layouts)

        assert layout == ManagedLayoutRef(name="editor")

    def test_unknown_name_is_a_path(self, config_context):
        layout = classify_layout("editor", config_context.layouts)

        assert isinstance(layout, LayoutPath)
        assert layout.path == Path("editor")

    def test_contents_win_over_managed_names(self, config_context):
        config_context.layouts.create_from_template("{odd}", b"{}")

        assert isinstance(classify_layout("{odd}", config_context.layouts), LayoutContents)

    def test_path_expands_home(self):
        layout = classify_layout("~/layouts/web.json")
        assert layout.path == Path.home() / "layouts" / "web.json"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_layout(self, value):
        with pytest.raises(LayoutNotSpecified):
            classify_layout(value)

    def test_empty_layout_in_document(self):
        with pytest.raises(LayoutNotSpecified):
            ProjectConfig.from_toml(project_document("", "command = 'x'"))


class TestProjectConfig:
    """Tests for parsing and writing whole project documents."""

    def test_minimal_document(self):
        config = ProjectConfig.from_toml(MINIMAL_PROJECT)

        assert isinstance(config.general.layout, LayoutContents)
        assert config.general.workspace is None
        assert config.general.working_directory is None
        assert [a.command.program for a in config.applications] == ["mycommand"]

    def test_full_document(self):
        config = ProjectConfig.from_toml(FULL_PROJECT)

        assert config.general.working_directory == Path.home() / "development" / "web"
        assert config.general.workspace == "1"
        first, second = config.applications
        assert first.command.argv == ["termite", "--role", "split-left", "--title", "Web Server"]
        assert first.exec.commands == ["echo Hello", "echo World"]
        assert second.working_directory == Path("/srv/web")
        assert second.exec.exec_type == ExecType.KEYS

    def test_applications_keep_document_order(self):
        document = project_document(
            INLINE_LAYOUT, "command = 'first'", "command = 'second'", "command = 'third'"
        )

        config = ProjectConfig.from_toml(document)

        assert [a.command.program for a in config.applications] == ["first", "second", "third"]

    def test_application_working_directory_expands_home(self):
        application = Application.model_validate({"command": "x", "working_directory": "~/src"})
        assert application.working_directory == Path.home() / "src"

    @pytest.mark.parametrize(
        "document",
        [
            project_document(INLINE_LAYOUT, "command = 'x'", colour="red"),
            project_document(INLINE_LAYOUT, "command = 'x'\nenv = 'FOO=1'"),
            "[general]\nlayout = '{}'\n",
        ],
        ids=["unknown-general-key", "unknown-application-key", "missing-applications"],
    )
    def test_schema_violations(self, document):
        with pytest.raises(ConfigParseError):
            ProjectConfig.from_toml(document)

    def test_invalid_toml_names_the_file(self):
        with pytest.raises(ConfigParseError, match="web.toml"):
            ProjectConfig.from_toml("[general\n", path=Path("/x/web.toml"))

    def test_to_toml_parses_back(self):
        config = ProjectConfig.from_toml(FULL_PROJECT)

        assert ProjectConfig.from_toml(config.to_toml()) == config

    def test_to_toml_without_applications(self):
        config = ProjectConfig.from_toml(project_document("/tmp/layout.json"))

        text = config.to_toml()

        assert text.index("applications") < text.index("[general]")
        assert ProjectConfig.from_toml(text).applications == []
