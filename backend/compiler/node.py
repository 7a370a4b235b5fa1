"""
WatchCompile Node.js Bridge.

Runs a small inline Node.js program that reads one JSON request on stdin
and writes one JSON reply on stdout.
Requires Python 3.11+.
"""

import json
import subprocess
from pathlib import Path
from typing import Any

from utils.errors import BackendError
from utils.logger import get_logger

logger = get_logger(__name__)

# Shared prelude: buffer stdin, hand the parsed request to handle(), print
# whatever it returns.
_PRELUDE = """
let input = '';
process.stdin.setEncoding('utf8');
process.stdin.on('data', chunk => { input += chunk; });
process.stdin.on('end', () => {
  const request = JSON.parse(input);
  let reply;
  try {
    reply = handle(request);
  } catch (e) {
    const loc = e && e.loc ? e.loc : {};
    reply = {
      ok: false,
      message: String(e && e.message ? e.message : e),
      line: loc.line === undefined ? null : loc.line,
      character: loc.column === undefined ? null : loc.column,
    };
  }
  process.stdout.write(JSON.stringify(reply));
});
"""


def run_node_script(
    handler: str,
    request: dict[str, Any],
    node_binary: str = "node",
    cwd: Path | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """
    Run a JavaScript handler against a JSON request.

    Args:
        handler: JavaScript source defining ``function handle(request)``
        request: JSON-serializable request
        node_binary: Node.js executable
        cwd: Working directory; node_modules are resolved from here
        timeout: Seconds before the process is killed

    Returns:
        The decoded JSON reply

    Raises:
        BackendError: If node cannot be run or its reply is unusable
    """
    filename = request.get("filename")
    try:
        proc = subprocess.run(
            [node_binary, "-e", handler + _PRELUDE],
            input=json.dumps(request),
            capture_output=True,
            text=True,
            encoding="utf-8",
            cwd=str(cwd) if cwd is not None else None,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise BackendError(f"Node.js executable not found: {node_binary}", filename) from e
    except subprocess.TimeoutExpired as e:
        raise BackendError(f"Compiler timed out after {timeout}s", filename) from e

    if proc.returncode != 0:
        stderr = proc.stderr.strip()
        logger.debug("node_process_failed", returncode=proc.returncode, stderr=stderr)
        detail = stderr.splitlines()[-1] if stderr else f"exit status {proc.returncode}"
        raise BackendError(f"Compiler process failed: {detail}", filename)

    try:
        reply = json.loads(proc.stdout)
    except json.JSONDecodeError as e:
        raise BackendError("Compiler returned malformed output", filename) from e

    if not isinstance(reply, dict):
        raise BackendError("Compiler returned malformed output", filename)
    return reply
