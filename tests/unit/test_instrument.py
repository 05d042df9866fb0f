"""Tests for capture planning over HostLang programs."""

from stepviz.instrument import InstrumentedProgram, candidate_identifiers, instrument

SCENARIO = "let x = 1;\nfor (let i=0;i<2;i++){ x = x*2; }"

SYNC_HELPER = """\
function add(a, b) {
  const s = a + b;
  return s;
}
let total = add(1, 2);
"""

ASYNC_MAIN = """\
async function main() {
  let x = 1;
  x = x + 1;
}
await main();
"""


class TestCandidateIdentifiers:
    def test_first_seen_order(self):
        assert candidate_identifiers(SCENARIO) == ("x", "i")

    def test_keywords_and_runtime_names_excluded(self):
        candidates = candidate_identifiers("const total = Math.max(a, b);\nconsole.log(total);\n")
        assert candidates == ("total", "max", "a", "b")

    def test_literal_globals_excluded(self):
        candidates = candidate_identifiers("let v = undefined;\nlet w = NaN;\nlet z = true;\n")
        assert candidates == ("v", "w", "z")

    def test_identifiers_inside_strings_are_still_candidates(self):
        # A token scan, not a parse: misses are dropped at capture time.
        assert "hello" in candidate_identifiers('let s = "hello";\n')

    def test_duplicates_collapsed(self):
        assert candidate_identifiers("a = a + a;") == ("a",)


class TestCaptureLines:
    def test_scenario_lines(self):
        program = instrument(SCENARIO)
        assert program.capture_lines == frozenset({1, 2})
        assert program.candidates == ("x", "i")

    def test_blank_and_comment_lines_skipped(self):
        program = instrument("let a = 1;\n\n// note\n/* block */\nlet b = 2;\n")
        assert program.capture_lines == frozenset({1, 5})

    def test_sync_function_body_not_captured(self):
        program = instrument(SYNC_HELPER)
        assert not program.is_capture_line(2)
        assert not program.is_capture_line(3)
        assert program.is_capture_line(5)
        assert program.non_suspending_ranges == ((1, 3),)

    def test_async_function_body_captured(self):
        program = instrument(ASYNC_MAIN)
        assert {2, 3, 5} <= program.capture_lines
        assert program.non_suspending_ranges == ()

    def test_single_line_arrow_has_no_body_range(self):
        program = instrument("const double = (n) => n * 2;\nlet y = double(4);\n")
        assert program.capture_lines == frozenset({1, 2})
        assert program.non_suspending_ranges == ()

    def test_multi_line_arrow_body_skipped(self):
        source = "const square = (n) => {\n  const r = n * n;\n  return r;\n};\nlet y = square(3);\n"
        program = instrument(source)
        assert program.in_non_suspending_body(2)
        assert program.is_capture_line(5)

    def test_nested_sync_function_inside_async(self):
        source = (
            "async function main() {\n"
            "  function helper() {\n"
            "    let hidden = 1;\n"
            "  }\n"
            "  let seen = 2;\n"
            "}\n"
        )
        program = instrument(source)
        assert not program.is_capture_line(3)
        assert program.is_capture_line(5)
        assert program.non_suspending_ranges == ((2, 3),)

    def test_unterminated_sync_body_runs_to_end(self):
        program = instrument("function broken() {\n  let a = 1;\n")
        assert program.non_suspending_ranges == ((1, 3),)

    def test_explicit_candidates_kept(self):
        program = instrument(SCENARIO, candidates=("x",))
        assert program.candidates == ("x",)


class TestListing:
    def test_marker_follows_captured_line(self):
        listing = instrument(SCENARIO).listing().split("\n")
        assert listing[0] == "let x = 1;"
        assert listing[1] == "/* capture: step(1, scope) */"
        assert listing[3] == "/* capture: step(2, scope) */"

    def test_marker_keeps_indentation(self):
        listing = instrument(ASYNC_MAIN).listing()
        assert "  let x = 1;\n  /* capture: step(2, scope) */" in listing

    def test_program_is_a_frozen_record(self):
        program = InstrumentedProgram(source="", candidates=(), capture_lines=frozenset())
        assert program.listing() == ""
        assert program.non_suspending_ranges == ()
