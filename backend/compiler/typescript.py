"""
WatchCompile TypeScript Backend.

Transpiles single files with the typescript package's transpileModule.
Requires Python 3.11+.
"""

import re

from compiler.base import CompilerBackend
from compiler.node import run_node_script
from utils.errors import DiagnosticError

_TRANSPILE_JS = """
const ts = require('typescript');
function handle(request) {
  const result = ts.transpileModule(request.content, {
    fileName: request.filename,
    reportDiagnostics: true,
    compilerOptions: {
      module: ts.ModuleKind[request.module],
      target: ts.ScriptTarget[request.target],
    },
  });
  const diagnostics = result.diagnostics || [];
  if (diagnostics.length) {
    const first = diagnostics[0];
    let pos = {line: 0, character: 0};
    if (first.file && first.start !== undefined) {
      pos = first.file.getLineAndCharacterOfPosition(first.start);
    }
    return {
      ok: false,
      message: ts.flattenDiagnosticMessageText(first.messageText, '\\n'),
      line: pos.line + 1,
      character: pos.character,
    };
  }
  return {ok: true, code: result.outputText};
}
"""

_TS_SUFFIX = re.compile(r"\.ts$")


class TypeScriptBackend(CompilerBackend):
    """
    TypeScript transpiler.

    Only the first diagnostic is reported. Output files take a .js
    extension in place of .ts.
    """

    name = "TypeScript"

    def compile(self, content: str, filename: str) -> str:
        opts = self._options
        reply = run_node_script(
            _TRANSPILE_JS,
            {
                "content": content,
                "filename": filename,
                "target": opts.ts_target,
                "module": opts.ts_module,
            },
            node_binary=opts.node_binary,
            cwd=opts.project_root,
            timeout=opts.timeout_seconds,
        )
        if not reply.get("ok"):
            raise diagnostic_from_reply(reply, filename)
        return reply.get("code", "")

    def output_path(self, rel_path: str) -> str:
        return _TS_SUFFIX.sub(".js", rel_path)


def diagnostic_from_reply(reply: dict, filename: str) -> DiagnosticError:
    """Build the error for a failed transpile, positioned when possible."""
    message = reply.get("message") or "Unknown TypeScript error"
    line = reply.get("line")
    character = reply.get("character")
    if line is not None:
        message = f"{message} on Line {line}, Character {character}"
    return DiagnosticError(message, filename, line, character)
