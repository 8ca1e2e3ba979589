"""Tests for command discovery and validation."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from cybernaut.command_base import Command
from cybernaut.command_loader import CommandLoader, build_registry, command_from_module
from cybernaut.exceptions import CommandDirectoryError, CommandLoadError


async def _noop(message, args, client, config):
    return None


def _write_command(directory: Path, filename: str, body: str) -> Path:
    path = directory / filename
    path.write_text(body)
    return path


VALID_PING = (
    "name = 'ping'\n"
    "aliases = ['p']\n"
    "description = 'Pong'\n"
    "async def execute(message, args, client, config):\n"
    "    await message.reply('Pong!')\n"
)


# -------------------------------------------------------------------
# command_from_module
# -------------------------------------------------------------------

class TestCommandFromModule:

    def test_valid_module_builds_command(self):
        module = SimpleNamespace(name="Ping", aliases=["P", " "], execute=_noop)
        command = command_from_module(module, source="ping.py")
        assert command.name == "ping"
        assert command.aliases == ["p"]
        assert command.source == "ping.py"
        assert command.execute is _noop

    def test_missing_name_rejected(self):
        with pytest.raises(CommandLoadError, match="name"):
            command_from_module(SimpleNamespace(execute=_noop), source="x.py")

    def test_blank_name_rejected(self):
        with pytest.raises(CommandLoadError, match="name"):
            command_from_module(SimpleNamespace(name="   ", execute=_noop), source="x.py")

    def test_missing_execute_rejected(self):
        with pytest.raises(CommandLoadError, match="execute"):
            command_from_module(SimpleNamespace(name="ping"), source="x.py")

    def test_non_callable_execute_rejected(self):
        with pytest.raises(CommandLoadError, match="execute"):
            command_from_module(SimpleNamespace(name="ping", execute="nope"), source="x.py")

    def test_model_rejects_non_callable_handler(self):
        with pytest.raises(ValidationError, match="execute"):
            Command(name="ping", execute="nope")

    def test_string_aliases_rejected(self):
        module = SimpleNamespace(name="ping", aliases="p", execute=_noop)
        with pytest.raises(CommandLoadError, match="invalid command definition"):
            command_from_module(module, source="x.py")

    def test_error_carries_source(self):
        with pytest.raises(CommandLoadError) as excinfo:
            command_from_module(SimpleNamespace(), source="broken.py")
        assert excinfo.value.source == "broken.py"
        assert "broken.py" in str(excinfo.value)

    def test_sync_execute_accepted(self):
        def execute(message, args, client, config):
            return None

        command = command_from_module(SimpleNamespace(name="sync", execute=execute))
        assert command.name == "sync"


# -------------------------------------------------------------------
# CommandLoader.load (explicit registration)
# -------------------------------------------------------------------

class TestLoad:

    def test_partial_success_skips_invalid(self):
        loader = CommandLoader()
        registry = loader.load([
            SimpleNamespace(name="ping", execute=_noop),
            SimpleNamespace(name="", execute=_noop),
            SimpleNamespace(name="orphan"),
            SimpleNamespace(execute=_noop),
            SimpleNamespace(name="echo", execute=_noop),
        ])
        assert registry.command_names == frozenset({"ping", "echo"})
        assert len(loader.skipped) == 3

    def test_skipped_modules_are_logged_as_warnings(self):
        with patch("cybernaut.command_loader.logger") as mock_logger:
            CommandLoader().load([SimpleNamespace(name="orphan", __name__="orphan_mod")])
        events = [c.args[0] for c in mock_logger.warning.call_args_list]
        assert events == ["command_load_skipped"]
        assert mock_logger.warning.call_args.kwargs["source"] == "orphan_mod"

    def test_result_is_frozen(self):
        registry = CommandLoader().load([SimpleNamespace(name="ping", execute=_noop)])
        assert registry.frozen is True

    def test_empty_batch_gives_empty_registry(self):
        registry = CommandLoader().load([])
        assert len(registry) == 0


# -------------------------------------------------------------------
# Directory discovery
# -------------------------------------------------------------------

class TestDirectoryDiscovery:

    def test_loads_valid_files(self, tmp_path):
        _write_command(tmp_path, "ping.py", VALID_PING)
        registry = build_registry(tmp_path)
        command = registry.resolve("ping")
        assert command is not None
        assert command.source.endswith("ping.py")

    def test_invalid_file_skipped_valid_kept(self, tmp_path):
        _write_command(tmp_path, "ping.py", VALID_PING)
        _write_command(tmp_path, "noname.py", "def execute(m, a, c, cfg):\n    pass\n")
        _write_command(tmp_path, "broken.py", "this is not python(\n")
        _write_command(tmp_path, "raises.py", "raise RuntimeError('boom')\n")

        loader = CommandLoader(tmp_path)
        registry = loader.build()

        assert registry.command_names == frozenset({"ping"})
        skipped = sorted(Path(s).name for s in loader.skipped)
        assert skipped == ["broken.py", "noname.py", "raises.py"]

    def test_ignores_private_and_non_python_files(self, tmp_path):
        _write_command(tmp_path, "ping.py", VALID_PING)
        _write_command(tmp_path, "_helpers.py", "name = 'helper'\ndef execute(*a):\n    pass\n")
        _write_command(tmp_path, "notes.txt", "name = 'txt'")
        (tmp_path / "subdir.py").mkdir()

        files = CommandLoader(tmp_path).discover_files()
        assert [f.name for f in files] == ["ping.py"]

    def test_discovery_order_is_sorted(self, tmp_path):
        for stem in ("zeta", "alpha", "mid"):
            _write_command(
                tmp_path, f"{stem}.py",
                f"name = '{stem}'\ndef execute(m, a, c, cfg):\n    pass\n",
            )
        registry = build_registry(tmp_path)
        assert [c.name for c in registry] == ["alpha", "mid", "zeta"]

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(CommandDirectoryError) as excinfo:
            build_registry(tmp_path / "does-not-exist")
        assert excinfo.value.path == str(tmp_path / "does-not-exist")

    def test_file_instead_of_directory_raises(self, tmp_path):
        target = _write_command(tmp_path, "file.py", "")
        with pytest.raises(CommandDirectoryError):
            build_registry(target)

    def test_no_directory_configured_raises(self):
        with pytest.raises(CommandDirectoryError):
            CommandLoader().discover_files()

    def test_bundled_commands_load(self):
        commands_dir = Path(__file__).parent.parent / "commands"
        registry = build_registry(commands_dir)
        assert {"ping", "echo", "help"} <= registry.command_names
        assert registry.resolve("say").name == "echo"
        assert registry.resolve("commands").name == "help"
