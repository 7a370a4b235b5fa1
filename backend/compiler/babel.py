"""
WatchCompile Babel Backend.

Transforms single files with @babel/core using a fixed preset/plugin set.
Requires Python 3.11+.
"""

from compiler.base import CompilerBackend
from compiler.node import run_node_script
from utils.errors import DiagnosticError

_TRANSFORM_JS = """
const babel = require('@babel/core');
function handle(request) {
  const result = babel.transformSync(request.content, {
    filename: request.filename,
    retainLines: request.retainLines,
    babelrc: false,
    configFile: false,
    presets: request.presets.map(name => [name, {loose: request.loose}]),
    plugins: request.plugins,
  });
  return {ok: true, code: result ? result.code : ''};
}
"""


class BabelBackend(CompilerBackend):
    """Babel-style transform; output keeps the source extension."""

    name = "Babel"

    def compile(self, content: str, filename: str) -> str:
        opts = self._options
        reply = run_node_script(
            _TRANSFORM_JS,
            {
                "content": content,
                "filename": filename,
                "retainLines": opts.retain_lines,
                "presets": opts.babel_presets,
                "plugins": opts.babel_plugins,
                "loose": opts.babel_loose,
            },
            node_binary=opts.node_binary,
            cwd=opts.project_root,
            timeout=opts.timeout_seconds,
        )
        if not reply.get("ok"):
            raise DiagnosticError(
                reply.get("message") or "Unknown Babel error",
                filename,
                reply.get("line"),
                reply.get("character"),
            )
        return reply.get("code") or ""
