# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests for command registration and dispatch."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest
from click.testing import CliRunner

from cliscaffold.cli.registry import CLIRegistry
from cliscaffold.cli.runtime import RuntimeContext
from cliscaffold.cli.spec import CommandSpec, OptionSpec, OptionType
from cliscaffold.errors import CLIError
from cliscaffold.logging import CLILogger


@dataclass
class Recorder:
    """Collect handler invocations."""

    calls: list[tuple[tuple[str, ...], dict[str, Any]]] = field(default_factory=list)
    runtimes: list[RuntimeContext] = field(default_factory=list)

    def factory(self, runtime: RuntimeContext) -> RecordingHandler:
        self.runtimes.append(runtime)
        return RecordingHandler(self)


@dataclass
class RecordingHandler:
    recorder: Recorder

    async def execute(self, args: Sequence[str], flags: Mapping[str, Any]) -> int:
        self.recorder.calls.append((tuple(args), dict(flags)))
        return 0


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def deploy_registry(registry: CLIRegistry, recorder: Recorder) -> CLIRegistry:
    return registry.initialize(
        commands={
            "deploy": CommandSpec(
                desc="Deploy the application",
                usage="[flags] [targets...]",
                options={
                    "f": OptionSpec(desc="Force the deploy", alias="force", group="Flags", default=False),
                    "env": OptionSpec(
                        desc="Target environment",
                        type=OptionType.CHOICE,
                        choices=("dev", "prod"),
                        default="dev",
                    ),
                },
                handler=recorder.factory,
            ),
        },
    )


def test_handler_executes_once_with_positional_args(deploy_registry: CLIRegistry, recorder: Recorder) -> None:
    runner = CliRunner()

    result = runner.invoke(deploy_registry.build_app(), ["deploy", "web", "worker", "--force", "--env", "prod"])

    assert result.exit_code == 0, result.output
    assert len(recorder.calls) == 1
    args, flags = recorder.calls[0]
    assert args == ("web", "worker")
    assert flags["force"] is True
    assert flags["env"] == "prod"
    assert "args" not in flags


def test_commands_register_in_insertion_order(deploy_registry: CLIRegistry) -> None:
    app = deploy_registry.build_app()

    assert list(app.commands) == ["config", "delete-everything", "deploy"]


@pytest.mark.parametrize(
    ("argv", "expected"),
    [
        (["deploy"], "info"),
        (["deploy", "-v"], "verbose"),
        (["-v", "deploy", "-v"], "debug"),
        (["deploy", "-vvv"], "silly"),
        (["deploy", "-vvvv"], "silly"),
        (["-q", "deploy", "-vv"], "error"),
        (["deploy", "--quiet"], "error"),
    ],
)
def test_verbosity_from_global_flags(
    deploy_registry: CLIRegistry,
    recorder: Recorder,
    argv: list[str],
    expected: str,
) -> None:
    runner = CliRunner()

    result = runner.invoke(deploy_registry.build_app(), argv)

    assert result.exit_code == 0, result.output
    assert recorder.runtimes[0].settings.verbosity == expected


def test_config_flag_selects_config_file(deploy_registry: CLIRegistry, recorder: Recorder, tmp_path) -> None:
    runner = CliRunner()
    custom = tmp_path / "custom.ini"

    result = runner.invoke(deploy_registry.build_app(), ["--config", str(custom), "deploy"])

    assert result.exit_code == 0, result.output
    assert recorder.runtimes[0].settings.config_path == custom
    assert recorder.calls[0][1]["config"] == str(custom)


def test_default_config_file_location(deploy_registry: CLIRegistry, recorder: Recorder, config_file) -> None:
    runner = CliRunner()

    result = runner.invoke(deploy_registry.build_app(), ["deploy"])

    assert result.exit_code == 0, result.output
    assert recorder.runtimes[0].settings.config_path == config_file


def test_explicit_ansi_wins_on_terminal(
    deploy_registry: CLIRegistry,
    recorder: Recorder,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("cliscaffold.cli.runtime.detect_tty", lambda: True)
    runner = CliRunner()

    result = runner.invoke(deploy_registry.build_app(), ["--no-ansi", "deploy"])
    assert result.exit_code == 0, result.output
    assert recorder.runtimes[-1].settings.colorize is False

    result = runner.invoke(deploy_registry.build_app(), ["deploy"])
    assert result.exit_code == 0, result.output
    assert recorder.runtimes[-1].settings.colorize is True


def test_colors_disabled_off_terminal(deploy_registry: CLIRegistry, recorder: Recorder) -> None:
    runner = CliRunner()

    result = runner.invoke(deploy_registry.build_app(), ["deploy", "--ansi"])

    assert result.exit_code == 0, result.output
    assert recorder.runtimes[0].settings.colorize is False


def test_inline_func_return_value_is_exit_code(registry: CLIRegistry) -> None:
    seen: list[tuple[tuple[str, ...], bool]] = []

    def status(args: Sequence[str], flags: Mapping[str, Any]) -> int:
        seen.append((tuple(args), flags["quiet"]))
        return 3

    registry.initialize(commands={"status": CommandSpec(desc="Show status", func=status)})
    runner = CliRunner()

    result = runner.invoke(registry.build_app(), ["status", "one", "-q"])

    assert result.exit_code == 3
    assert seen == [(("one",), True)]


def test_async_inline_func_is_awaited(registry: CLIRegistry) -> None:
    async def ping(args: Sequence[str], flags: Mapping[str, Any]) -> int:
        return 4

    registry.initialize(commands={"ping": CommandSpec(func=ping)})

    result = CliRunner().invoke(registry.build_app(), ["ping"])

    assert result.exit_code == 4


def test_handler_error_sets_exit_code(registry: CLIRegistry) -> None:
    def explode(args: Sequence[str], flags: Mapping[str, Any]) -> int:
        raise CLIError("deployment target unreachable", exit_code=5)

    registry.initialize(commands={"explode": CommandSpec(func=explode)})

    result = CliRunner().invoke(registry.build_app(), ["explode"])

    assert result.exit_code == 5
    assert "deployment target unreachable" in result.output


def test_command_without_handler_shows_help(registry: CLIRegistry) -> None:
    registry.initialize(commands={"docs": CommandSpec(desc="Documentation topics")})

    result = CliRunner().invoke(registry.build_app(), ["docs"])

    assert result.exit_code == 0
    assert "Documentation topics" in result.output


def test_no_command_shows_help(registry: CLIRegistry) -> None:
    result = CliRunner().invoke(registry.build_app(), [])

    assert result.exit_code == 0
    assert "config" in result.output
    assert "delete-everything" in result.output


def test_unknown_command_fails_with_suggestion(registry: CLIRegistry) -> None:
    result = CliRunner().invoke(registry.build_app(), ["confgi"])

    assert result.exit_code == 1
    assert "No such command" in result.output
    assert "Did you mean" in result.output


def test_unknown_flag_fails(registry: CLIRegistry) -> None:
    result = CliRunner().invoke(registry.build_app(), ["config", "--bogus"])

    assert result.exit_code == 1
    assert "No such option" in result.output


@pytest.mark.parametrize(
    ("argv", "expected"),
    [
        (["config", "--bogus"], True),
        (["--no-ansi", "config", "--bogus"], False),
        (["--no-ansi", "confgi"], False),
    ],
)
def test_failure_output_honours_ansi_flag(
    registry: CLIRegistry,
    monkeypatch: pytest.MonkeyPatch,
    argv: list[str],
    expected: bool,
) -> None:
    monkeypatch.setattr("cliscaffold.cli.registry.detect_tty", lambda: True)
    colors: list[bool] = []

    def record(*, verbosity: str = "info", colorize: bool = False) -> CLILogger:
        colors.append(colorize)
        return CLILogger(verbosity=verbosity, colorize=False)

    monkeypatch.setattr("cliscaffold.cli.registry.build_cli_logger", record)

    result = CliRunner().invoke(registry.build_app(), argv)

    assert result.exit_code == 1
    assert colors == [expected]


def test_invalid_choice_fails(deploy_registry: CLIRegistry, recorder: Recorder) -> None:
    result = CliRunner().invoke(deploy_registry.build_app(), ["deploy", "--env", "staging"])

    assert result.exit_code == 1
    assert recorder.calls == []


def test_missing_required_flag_fails(registry: CLIRegistry) -> None:
    registry.initialize(
        commands={
            "push": CommandSpec(
                options={"remote": OptionSpec(desc="Remote name", type=OptionType.STRING, demand=True)},
                func=lambda args, flags: 0,
            ),
        },
    )

    result = CliRunner().invoke(registry.build_app(), ["push"])

    assert result.exit_code == 1
    assert "--remote" in result.output


def test_demand_count_enforced(registry: CLIRegistry) -> None:
    registry.initialize(commands={"open": CommandSpec(usage="<file>", demand=1, func=lambda args, flags: 0)})

    failed = CliRunner().invoke(registry.build_app(), ["open"])
    passed = CliRunner().invoke(registry.build_app(), ["open", "notes.txt"])

    assert failed.exit_code == 1
    assert "Not enough non-option arguments" in failed.output
    assert passed.exit_code == 0


def test_nested_commands(registry: CLIRegistry) -> None:
    seen: list[tuple[str, ...]] = []

    def add(args: Sequence[str], flags: Mapping[str, Any]) -> int:
        seen.append(tuple(args))
        return 0

    registry.initialize(
        commands={
            "remote": CommandSpec(
                desc="Manage remotes",
                commands={"add": CommandSpec(desc="Add a remote", usage="<name> <url>", func=add)},
            ),
        },
    )
    runner = CliRunner()

    nested = runner.invoke(registry.build_app(), ["remote", "add", "origin", "https://example.test", "-v"])
    bare = runner.invoke(registry.build_app(), ["remote"])

    assert nested.exit_code == 0, nested.output
    assert seen == [("origin", "https://example.test")]
    assert bare.exit_code == 0
    assert "add" in bare.output


def test_version_flag(registry: CLIRegistry) -> None:
    result = CliRunner().invoke(registry.build_app(), ["-V"])

    assert result.exit_code == 0
    assert "demo version 1.2.3" in result.output


def test_help_flag_lists_global_flags(registry: CLIRegistry) -> None:
    result = CliRunner().invoke(registry.build_app(), ["-h"])

    assert result.exit_code == 0
    assert "Demo banner" in result.output
    assert "--verbose" in result.output
    assert "--config" in result.output


def test_run_returns_exit_code_without_exiting(registry: CLIRegistry) -> None:
    registry.initialize(commands={"seven": CommandSpec(func=lambda args, flags: 7)})

    assert registry.run(["seven"], standalone_mode=False) == 7
    assert registry.run(["unknown"], standalone_mode=False) == 1


def test_run_exits_process(registry: CLIRegistry) -> None:
    with pytest.raises(SystemExit) as excinfo:
        registry.run(["nope"])

    assert excinfo.value.code == 1
