"""Tests for the widgetdeck CLI."""

import json
import re

from typer.testing import CliRunner

from widgetdeck import __version__
from widgetdeck.main import app

runner = CliRunner()


def _out(result) -> str:
    """Strip ANSI escape sequences."""
    return re.sub(r"\x1b\[[0-9;]*m", "", result.stdout)


def _stored(isolated_config, scope="main"):
    data = json.loads((isolated_config / "layouts.json").read_text())
    return json.loads(data[f"layout:{scope}"])


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in _out(result)


class TestLayoutShow:
    def test_show_seed(self):
        result = runner.invoke(app, ["layout", "show"])
        assert result.exit_code == 0
        out = _out(result)
        assert "system" in out
        assert "sessions" in out

    def test_show_json(self):
        result = runner.invoke(app, ["layout", "show", "--scope", "left-rail", "--json"])
        assert result.exit_code == 0
        document = json.loads(result.stdout)
        assert [w["type"] for w in document] == ["projects"]

    def test_unknown_scope(self):
        result = runner.invoke(app, ["layout", "show", "--scope", "bottom"])
        assert result.exit_code == 1
        assert "Unknown layout scope" in _out(result)


class TestLayoutEdits:
    def test_add(self, isolated_config):
        result = runner.invoke(app, ["layout", "add", "docker"])
        assert result.exit_code == 0
        assert "Added docker" in _out(result)
        assert _stored(isolated_config)[-1]["type"] == "docker"

    def test_add_twice_reports_already_added(self, isolated_config):
        runner.invoke(app, ["layout", "add", "docker"])
        result = runner.invoke(app, ["layout", "add", "docker"])
        assert result.exit_code == 0
        assert "already" in _out(result)
        assert [w["type"] for w in _stored(isolated_config)].count("docker") == 1

    def test_add_unknown_type(self):
        result = runner.invoke(app, ["layout", "add", "kubernetes"])
        assert result.exit_code == 1
        assert "Unknown widget type" in _out(result)

    def test_remove(self, isolated_config):
        result = runner.invoke(app, ["layout", "remove", "github"])
        assert result.exit_code == 0
        assert "github" not in [w["id"] for w in _stored(isolated_config)]

    def test_remove_unknown_id(self):
        result = runner.invoke(app, ["layout", "remove", "ghost"])
        assert result.exit_code == 1
        assert "No widget 'ghost'" in _out(result)

    def test_move(self, isolated_config):
        result = runner.invoke(app, ["layout", "move", "sessions", "system"])
        assert result.exit_code == 0
        assert [w["id"] for w in _stored(isolated_config)][:2] == ["sessions", "system"]

    def test_size(self, isolated_config):
        result = runner.invoke(app, ["layout", "size", "ports", "fill"])
        assert result.exit_code == 0
        ports = next(w for w in _stored(isolated_config) if w["id"] == "ports")
        assert ports["heightClass"] == "fill"

    def test_size_invalid(self):
        result = runner.invoke(app, ["layout", "size", "ports", "huge"])
        assert result.exit_code == 1
        assert "Invalid height" in _out(result)

    def test_toggle(self, isolated_config):
        result = runner.invoke(app, ["layout", "toggle", "projects", "--scope", "left-rail"])
        assert result.exit_code == 0
        assert "collapsed" in _out(result)
        assert _stored(isolated_config, "left-rail")[0]["expanded"] is False

    def test_rename(self, isolated_config):
        result = runner.invoke(app, ["layout", "rename", "github", "Repos"])
        assert result.exit_code == 0
        github = next(w for w in _stored(isolated_config) if w["id"] == "github")
        assert github["title"] == "Repos"

    def test_reset(self, isolated_config):
        runner.invoke(app, ["layout", "remove", "system"])
        result = runner.invoke(app, ["layout", "reset", "--force"])
        assert result.exit_code == 0
        assert _stored(isolated_config)[0]["id"] == "system"

    def test_reset_cancelled(self, isolated_config):
        runner.invoke(app, ["layout", "remove", "system"])
        result = runner.invoke(app, ["layout", "reset"], input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in _out(result)
        assert "system" not in [w["id"] for w in _stored(isolated_config)]


class TestLayoutTypes:
    def test_types(self):
        result = runner.invoke(app, ["layout", "types", "--scope", "main"])
        assert result.exit_code == 0
        out = _out(result)
        assert "docker" in out
        assert "agents" in out
