"""Tests for the stepviz command-line entry point."""

import json

from stepviz.cli import main

CPP_SOURCE = """\
#include <iostream>
using namespace std;

int main() {
    int n = 3;
    cout << n << endl;
    return 0;
}
"""


def _write(tmp_path, name: str, text: str) -> str:
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def _trace_payload(out: str) -> dict:
    return json.loads(out.split("═══ Trace ═══", 1)[1])


class TestFullRun:
    def test_javascript_file(self, tmp_path, capsys):
        path = _write(tmp_path, "prog.js", "let a = 2;\na = a + 1;\n")
        assert main([path]) == 0
        out = capsys.readouterr().out
        assert "═══ Complexity: O(1) ═══" in out
        payload = _trace_payload(out)
        assert payload["status"] == "ok"
        assert [s["scope"]["a"] for s in payload["trace"]["steps"]] == [2, 3]

    def test_cpp_file(self, tmp_path, capsys):
        path = _write(tmp_path, "prog.cpp", CPP_SOURCE)
        assert main([path, "--language", "cpp"]) == 0
        payload = _trace_payload(capsys.readouterr().out)
        assert payload["language"] == "cpp"
        steps = payload["trace"]["steps"]
        assert len(steps) == 3
        assert [s["scope"]["n"] for s in steps if "n" in s["scope"]] == [3, 3]
        assert steps[-1]["scope"] == {}

    def test_demo_when_no_file(self, capsys):
        assert main([]) == 0
        out = capsys.readouterr().out
        assert "No file provided" in out
        assert "═══ Complexity: O(n) ═══" in out

    def test_failed_program_exit_code(self, tmp_path, capsys):
        path = _write(tmp_path, "bad.js", "let a = 1;\nnope();\n")
        assert main([path]) == 1
        payload = _trace_payload(capsys.readouterr().out)
        assert payload["message"] == "Sim Error: ReferenceError: nope is not defined"

    def test_python_is_unsupported(self, tmp_path, capsys):
        path = _write(tmp_path, "prog.py", "x = 1\n")
        assert main([path, "-l", "python"]) == 1
        payload = _trace_payload(capsys.readouterr().out)
        assert payload["status"] == "unsupported"

    def test_max_steps(self, tmp_path, capsys):
        path = _write(tmp_path, "loop.js", "let n = 0;\nwhile (true) {\n  n++;\n}\n")
        assert main([path, "--max-steps", "4"]) == 0
        payload = _trace_payload(capsys.readouterr().out)
        assert payload["trace"]["truncated"] is True
        assert len(payload["trace"]["steps"]) == 4


class TestSingleStageModes:
    def test_analyze_only(self, tmp_path, capsys):
        path = _write(tmp_path, "prog.cpp", CPP_SOURCE)
        assert main([path, "-l", "cpp", "--analyze-only"]) == 0
        out = capsys.readouterr().out
        report = json.loads(out.split("═══ Structure ═══", 1)[1])
        assert report["complexity"] == "O(1)"
        assert report["functions"] == [{"name": "main", "line": 4}]

    def test_transpile_only(self, tmp_path, capsys):
        path = _write(tmp_path, "prog.cpp", CPP_SOURCE)
        assert main([path, "-l", "cpp", "--transpile-only"]) == 0
        out = capsys.readouterr().out
        assert "async function main() {" in out
        assert "console.log(n);" in out

    def test_transpile_only_without_path(self, tmp_path, capsys):
        path = _write(tmp_path, "prog.py", "x = 1\n")
        assert main([path, "-l", "python", "--transpile-only"]) == 2
        assert "python" in capsys.readouterr().err

    def test_instrumented(self, tmp_path, capsys):
        path = _write(tmp_path, "prog.js", "let a = 2;\n")
        assert main([path, "--instrumented"]) == 0
        assert "/* capture: step(1, scope) */" in capsys.readouterr().out
