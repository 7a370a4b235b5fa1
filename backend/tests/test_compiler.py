"""
Tests for the compiler backends and the Node.js bridge.

Requires Python 3.11+.
"""

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from compiler import BabelBackend, TypeScriptBackend, create_backend
from compiler.base import BackendOptions
from compiler.node import run_node_script
from utils.config import CompilerSettings
from utils.errors import BackendError, DiagnosticError


def _completed(reply: dict | str, returncode: int = 0, stderr: str = "") -> MagicMock:
    proc = MagicMock()
    proc.returncode = returncode
    proc.stdout = reply if isinstance(reply, str) else json.dumps(reply)
    proc.stderr = stderr
    return proc


class TestNodeBridge:
    """Test cases for run_node_script."""

    def test_sends_request_and_decodes_reply(self):
        """Test the stdin/stdout JSON round trip."""
        with patch("compiler.node.subprocess.run", return_value=_completed({"ok": True})) as run:
            reply = run_node_script(
                "function handle(r) { return r; }",
                {"filename": "a.ts"},
                node_binary="/opt/node",
                cwd=Path("/project"),
                timeout=3.0,
            )

        assert reply == {"ok": True}
        args, kwargs = run.call_args
        assert args[0][0] == "/opt/node"
        assert args[0][1] == "-e"
        assert json.loads(kwargs["input"]) == {"filename": "a.ts"}
        assert kwargs["cwd"] == str(Path("/project"))
        assert kwargs["timeout"] == 3.0

    def test_missing_node(self):
        """Test that a missing executable becomes a BackendError."""
        with patch("compiler.node.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(BackendError, match="not found"):
                run_node_script("", {"filename": "a.ts"})

    def test_timeout(self):
        """Test that a timeout becomes a BackendError."""
        error = subprocess.TimeoutExpired(cmd="node", timeout=1.0)
        with patch("compiler.node.subprocess.run", side_effect=error):
            with pytest.raises(BackendError, match="timed out"):
                run_node_script("", {"filename": "a.ts"}, timeout=1.0)

    def test_nonzero_exit(self):
        """Test that a crashed process reports its last stderr line."""
        proc = _completed("", returncode=1, stderr="at foo\nError: Cannot find module 'typescript'")
        with patch("compiler.node.subprocess.run", return_value=proc):
            with pytest.raises(BackendError, match="Cannot find module"):
                run_node_script("", {"filename": "a.ts"})

    def test_malformed_reply(self):
        """Test that non-JSON output becomes a BackendError."""
        with patch("compiler.node.subprocess.run", return_value=_completed("not json")):
            with pytest.raises(BackendError, match="malformed"):
                run_node_script("", {"filename": "a.ts"})


class TestTypeScriptBackend:
    """Test cases for TypeScriptBackend."""

    def test_compile_success(self):
        """Test that transpiled code is returned."""
        reply = {"ok": True, "code": "var a = 1;\n"}
        with patch("compiler.node.subprocess.run", return_value=_completed(reply)) as run:
            result = TypeScriptBackend().compile("let a: number = 1;", "a.ts")

        assert result == "var a = 1;\n"
        request = json.loads(run.call_args.kwargs["input"])
        assert request["target"] == "ES5"
        assert request["module"] == "CommonJS"
        assert request["filename"] == "a.ts"

    def test_first_diagnostic_with_position(self):
        """Test the diagnostic message format."""
        reply = {"ok": False, "message": "';' expected.", "line": 3, "character": 7}
        with patch("compiler.node.subprocess.run", return_value=_completed(reply)):
            with pytest.raises(DiagnosticError) as excinfo:
                TypeScriptBackend().compile("let a =", "a.ts")

        error = excinfo.value
        assert str(error) == "';' expected. on Line 3, Character 7"
        assert (error.filename, error.line, error.character) == ("a.ts", 3, 7)

    @pytest.mark.parametrize(
        ("src", "out"),
        [("a.ts", "a.js"), ("lib/b.ts", "lib/b.js"), ("c.js", "c.js"), ("a.ts.d/x.js", "a.ts.d/x.js")],
    )
    def test_output_path(self, src: str, out: str):
        """Test the .ts to .js rewrite."""
        assert TypeScriptBackend().output_path(src) == out


class TestBabelBackend:
    """Test cases for BabelBackend."""

    def test_compile_success_with_options(self):
        """Test that options reach the transform request."""
        options = BackendOptions(retain_lines=False, babel_presets=["@babel/preset-env"], babel_plugins=[])
        reply = {"ok": True, "code": "\"use strict\";"}
        with patch("compiler.node.subprocess.run", return_value=_completed(reply)) as run:
            result = BabelBackend(options).compile("const a = 1;", "a.js")

        assert result == "\"use strict\";"
        request = json.loads(run.call_args.kwargs["input"])
        assert request["retainLines"] is False
        assert request["presets"] == ["@babel/preset-env"]
        assert request["plugins"] == []

    def test_retain_lines_default(self):
        """Test that line numbers are retained by default."""
        assert BabelBackend().options.retain_lines is True

    def test_transform_error(self):
        """Test that a thrown transform error becomes a DiagnosticError."""
        reply = {"ok": False, "message": "Unexpected token (1:8)", "line": 1, "character": 8}
        with patch("compiler.node.subprocess.run", return_value=_completed(reply)):
            with pytest.raises(DiagnosticError, match="Unexpected token") as excinfo:
                BabelBackend().compile("const a =", "a.js")
        assert excinfo.value.line == 1

    def test_output_path_unchanged(self):
        """Test that Babel keeps the source extension."""
        assert BabelBackend().output_path("a.ts") == "a.ts"


class TestCreateBackend:
    """Test cases for backend selection."""

    def test_selection(self):
        """Test that only "ts" selects TypeScript."""
        assert isinstance(create_backend("ts"), TypeScriptBackend)
        assert isinstance(create_backend("babel"), BabelBackend)
        assert isinstance(create_backend(""), BabelBackend)

    def test_options_from_settings(self):
        """Test building backend options from settings."""
        settings = CompilerSettings(node_binary="nodejs", ts_target="ES2017", retain_lines=False)
        options = BackendOptions.from_settings(settings)
        assert options.node_binary == "nodejs"
        assert options.ts_target == "ES2017"
        assert options.retain_lines is False
