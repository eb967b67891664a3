"""
Tests for command runners — mock, dry-run, event stream and subprocess.
"""

import queue
import shutil

import pytest

from alacarte.adapters.dry_run import DryRunRunner
from alacarte.adapters.mock import MockRunner
from alacarte.adapters.shell import command as command_module
from alacarte.adapters.shell.command import SubprocessRunner, build_command
from alacarte.adapters.shell.streaming import EventStreamRunner, LogEvent
from alacarte.core.services.provision.errors import CommandError
from alacarte.core.services.provision.execution.script_template import (
    ChezmoiTemplateRenderer,
    PassthroughRenderer,
)

# ── Mock Runner Tests ────────────────────────────────────────────────


class TestMockRunner:
    def test_default_success(self):
        mock = MockRunner()
        mock.run("apt", "bat")
        assert mock.commands == ["apt bat"]
        assert mock.call_count == 1

    def test_pseudo_commands_tracked_separately(self):
        mock = MockRunner()
        mock.section("Planning")
        mock.info("hello")
        mock.run("brew", "install", "bat")
        assert mock.sections == ["Planning"]
        assert mock.notes == ["hello"]
        assert mock.commands == ["brew install bat"]

    def test_set_failure_by_line(self):
        mock = MockRunner()
        mock.set_failure("apt bat", error="Intentional failure")
        with pytest.raises(CommandError) as exc:
            mock.run("apt", "bat")
        assert exc.value.returncode == 1
        assert "Intentional failure" in str(exc.value)
        mock.run("apt", "fd")

    def test_set_failure_by_command(self):
        mock = MockRunner()
        mock.set_failure("dpkg")
        with pytest.raises(CommandError):
            mock.output("dpkg", "-l")

    def test_set_output(self):
        mock = MockRunner()
        mock.set_output("brew list -1", "bat\n")
        assert mock.output("brew", "list", "-1") == b"bat\n"
        assert mock.output("pipx", "list") == b""

    def test_reset(self):
        mock = MockRunner()
        mock.set_failure("apt bat")
        mock.run("info", "x")
        mock.reset()
        assert mock.call_log == []
        mock.run("apt", "bat")


# ── Dry-run Runner Tests ─────────────────────────────────────────────


class TestDryRunRunner:
    def test_records_instead_of_running(self):
        runner = DryRunRunner()
        runner.run("section", "Installing")
        runner.run("apt", "bat")
        assert runner.planned == ["apt bat"]

    def test_queries_without_delegate_are_empty(self):
        assert DryRunRunner().output("dpkg", "-l") == b""

    def test_queries_delegate(self):
        real = MockRunner()
        real.set_output("dpkg -l", "ii  bat 1.0 amd64 x\n")
        runner = DryRunRunner(query_runner=real)
        assert runner.output("dpkg", "-l") == b"ii  bat 1.0 amd64 x\n"
        runner.run("apt", "bat")
        assert real.commands == ["dpkg -l"]


# ── Event Stream Runner Tests ────────────────────────────────────────


def _drain(events: queue.Queue) -> list:
    out = []
    while not events.empty():
        out.append(events.get_nowait())
    return out


class TestEventStreamRunner:
    def test_success_events(self):
        inner = MockRunner()
        stream = EventStreamRunner(inner)
        stream.run("section", "Installing")
        stream.run("apt", "bat")
        assert _drain(stream.events) == [
            LogEvent("section", "Installing"),
            LogEvent("info", "apt bat"),
            LogEvent("success", "Success: apt bat"),
        ]
        assert inner.call_log == [("section", "Installing"), ("apt", "bat")]

    def test_error_event_and_reraise(self):
        inner = MockRunner()
        inner.set_failure("apt bat", "gone")
        stream = EventStreamRunner(inner)
        with pytest.raises(CommandError):
            stream.run("apt", "bat")
        events = _drain(stream.events)
        assert events[-1].level == "error"
        assert "gone" in events[-1].text

    def test_output_passthrough(self):
        inner = MockRunner()
        inner.set_output("brew list -1", "fd\n")
        assert EventStreamRunner(inner).output("brew", "list", "-1") == b"fd\n"

    def test_bounded_queue_and_sentinel(self):
        stream = EventStreamRunner(MockRunner())
        assert stream.events.maxsize > 0
        stream.emit("output", "line")
        stream.close()
        assert _drain(stream.events) == [LogEvent("output", "line"), None]

    def test_custom_queue(self):
        events: queue.Queue = queue.Queue(maxsize=4)
        stream = EventStreamRunner(MockRunner(), events)
        stream.info("hi")
        assert events.get_nowait() == LogEvent("info", "hi")


# ── Command Shaping Tests ────────────────────────────────────────────


class TestBuildCommand:
    @pytest.fixture(autouse=True)
    def not_root(self, monkeypatch):
        monkeypatch.setattr(command_module, "_is_root", lambda: False)

    def test_apt(self):
        assert build_command("apt", "bat") == [
            "sudo", "env", "DEBIAN_FRONTEND=noninteractive", "apt-get",
            "-o", "DPkg::Options::=--force-confdef",
            "install", "-y", "--no-install-recommends", "--ignore-missing", "bat",
        ]

    def test_apk(self):
        assert build_command("apk", "bat") == ["sudo", "apk", "add", "--no-cache", "bat"]

    @pytest.mark.parametrize("pm", ["dnf", "yum"])
    def test_rpm_family(self, pm):
        assert build_command(pm, "bat") == [
            "sudo", pm, "install", "-y",
            "--setopt=skip_if_unavailable=True",
            "--setopt=skip_missing_names_on_install=True",
            "bat",
        ]

    def test_zypper(self):
        assert build_command("zypper", "bat") == [
            "sudo", "zypper", "--non-interactive", "install", "-y", "bat",
        ]

    def test_cask(self):
        assert build_command("cask", "install", "iterm2") == ["brew", "install", "--cask", "iterm2"]

    def test_npm(self):
        assert build_command("npm", "install", "tldr") == ["npm", "install", "-g", "tldr"]

    def test_plain_verb_installer(self):
        assert build_command("brew", "install", "bat") == ["brew", "install", "bat"]

    def test_unknown_runs_as_given(self):
        assert build_command("mkdir", "-p", "/tmp/x") == ["mkdir", "-p", "/tmp/x"]

    def test_root_drops_sudo(self, monkeypatch):
        monkeypatch.setattr(command_module, "_is_root", lambda: True)
        assert build_command("apk", "bat") == ["apk", "add", "--no-cache", "bat"]


# ── Subprocess Runner Tests ──────────────────────────────────────────


@pytest.mark.skipif(shutil.which("bash") is None, reason="needs bash")
class TestSubprocessRunner:
    def _runner(self, **kwargs) -> SubprocessRunner:
        return SubprocessRunner(renderer=PassthroughRenderer(), **kwargs)

    def test_success(self):
        self._runner().run("true")

    def test_non_zero_exit(self):
        with pytest.raises(CommandError) as exc:
            self._runner().run("false")
        assert exc.value.returncode == 1

    def test_missing_binary(self):
        with pytest.raises(CommandError) as exc:
            self._runner().run("alacarte-no-such-binary-xyz")
        assert exc.value.returncode == 127

    def test_pseudo_commands_spawn_nothing(self):
        self._runner().run("section", "Installing")
        self._runner().run("info", "alacarte-no-such-binary-xyz")

    def test_output(self):
        assert self._runner().output("echo", "hello") == b"hello\n"

    def test_output_failure(self):
        with pytest.raises(CommandError):
            self._runner().output("false")

    def test_streaming_output(self):
        lines: list[str] = []
        self._runner(on_output=lines.append).run("echo", "streamed")
        assert lines == ["streamed"]

    def test_script(self, tmp_path):
        marker = tmp_path / "ran"
        self._runner().run("script", f"echo ok > '{marker}'")
        assert marker.read_text() == "ok\n"

    def test_script_failure(self):
        with pytest.raises(CommandError) as exc:
            self._runner().run("script", "exit 3")
        assert exc.value.returncode == 3
        assert exc.value.command == "script"

    def test_script_is_rendered_first(self, tmp_path):
        class PlaceholderRenderer:
            def render(self, script):
                return script.replace("PLACEHOLDER", "rendered")

        marker = tmp_path / "out"
        SubprocessRunner(renderer=PlaceholderRenderer()).run("script", f"echo PLACEHOLDER > '{marker}'")
        assert marker.read_text() == "rendered\n"


class TestChezmoiTemplateRenderer:
    def test_missing_executable(self):
        renderer = ChezmoiTemplateRenderer(executable="alacarte-no-such-chezmoi")
        with pytest.raises(CommandError) as exc:
            renderer.render("echo {{ .chezmoi.os }}")
        assert exc.value.returncode == 127

    def test_passthrough(self):
        assert PassthroughRenderer().render("echo {{ x }}") == "echo {{ x }}"
