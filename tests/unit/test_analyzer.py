"""Tests for the loop-nesting structure analyzer."""

from stepviz.analyzer import ComplexityClass, StructureReport, analyze, classify_nesting

SCENARIO = "let x = 1;\nfor (let i=0;i<2;i++){ x = x*2; }"


def _nested_loops(depth: int) -> str:
    lines = []
    for level in range(depth):
        lines.append("  " * level + f"for (int i{level} = 0; i{level} < n; i{level}++) {{")
    lines.append("  " * depth + "total++;")
    for level in reversed(range(depth)):
        lines.append("  " * level + "}")
    return "\n".join(lines)


class TestNestingClassification:
    def test_straight_line_code_is_constant(self):
        report = analyze("int x = 1;\nint y = x + 2;\n")
        assert report.complexity == ComplexityClass.CONSTANT
        assert report.max_nesting == 0

    def test_single_loop_is_linear(self):
        report = analyze(_nested_loops(1))
        assert report.max_nesting == 1
        assert report.complexity == ComplexityClass.LINEAR

    def test_two_nested_loops_are_quadratic(self):
        report = analyze(_nested_loops(2))
        assert report.max_nesting == 2
        assert report.complexity == ComplexityClass.QUADRATIC

    def test_three_nested_loops_are_cubic(self):
        assert analyze(_nested_loops(3)).complexity == ComplexityClass.CUBIC

    def test_deeper_nesting_saturates_at_cubic(self):
        report = analyze(_nested_loops(5))
        assert report.max_nesting == 5
        assert report.complexity == ComplexityClass.CUBIC

    def test_sequential_loops_do_not_nest(self):
        source = "for (let i = 0; i < n; i++) {\n  a++;\n}\nwhile (b > 0) {\n  b--;\n}\n"
        report = analyze(source)
        assert report.max_nesting == 1
        assert report.complexity == ComplexityClass.LINEAR

    def test_loop_keyword_must_start_the_line(self):
        report = analyze("let formatted = format(x);\nlet awhile = 1;\n")
        assert report.complexity == ComplexityClass.CONSTANT

    def test_mapping_table(self):
        assert classify_nesting(0) == ComplexityClass.CONSTANT
        assert classify_nesting(1) == ComplexityClass.LINEAR
        assert classify_nesting(2) == ComplexityClass.QUADRATIC
        assert classify_nesting(3) == ComplexityClass.CUBIC
        assert classify_nesting(7) == ComplexityClass.CUBIC

    def test_labels(self):
        assert ComplexityClass.QUADRATIC.value == "O(n²)"
        assert ComplexityClass.LOGARITHMIC.value == "O(log n)"


class TestLogarithmicMarker:
    def test_compound_multiply_on_loop_line(self):
        report = analyze("for (let i = 1; i < n; i *= 2) {\n  count++;\n}\n")
        assert report.complexity == ComplexityClass.LOGARITHMIC

    def test_compound_divide_on_while_line(self):
        assert analyze("while (n > 1) { n /= 2; }").complexity == ComplexityClass.LOGARITHMIC

    def test_self_scaling_assignment(self):
        assert analyze(SCENARIO).complexity == ComplexityClass.LOGARITHMIC

    def test_marker_overrides_deeper_nesting(self):
        source = _nested_loops(2) + "\nfor (let k = 1; k < n; k <<= 1) {\n}\n"
        report = analyze(source)
        assert report.max_nesting == 2
        assert report.complexity == ComplexityClass.LOGARITHMIC

    def test_multiply_outside_loop_line_ignored(self):
        source = "for (let i = 0; i < n; i++) {\n  x *= 2;\n}\n"
        assert analyze(source).complexity == ComplexityClass.LINEAR

    def test_comparison_is_not_an_update(self):
        source = "while (x == x * 1) {\n}\n"
        assert analyze(source).complexity == ComplexityClass.LINEAR


class TestFunctionOutline:
    def test_cpp_functions_in_order(self):
        source = "int add(int a, int b) {\n  return a + b;\n}\n\nvoid show() {\n}\n\nint main() {\n}\n"
        report = analyze(source, "cpp")
        assert report.function_names() == ["add", "show", "main"]
        assert [f.line for f in report.functions] == [1, 5, 8]

    def test_javascript_function_keyword(self):
        report = analyze("function helper(x) {\n  return x;\n}\nconst y = helper(2);\n")
        assert report.function_names() == ["helper"]

    def test_python_def(self):
        report = analyze("def bar(x):\n    return x\n", "python")
        assert report.function_names() == ["bar"]

    def test_java_method_with_array_parameter(self):
        report = analyze("public static void main(String[] args) {\n}\n", "java")
        assert report.function_names() == ["main"]

    def test_calls_are_not_declarations(self):
        report = analyze("let total = add(1, 2);\nprint(total);\n")
        assert report.functions == []

    def test_nested_functions_still_recorded(self):
        source = "for (let i = 0; i < n; i++) {\n  function inner(v) {\n  }\n}\n"
        assert analyze(source).function_names() == ["inner"]


class TestIndentationScoped:
    def test_python_nested_loops(self):
        source = "for i in range(n):\n    for j in range(n):\n        total += i * j\nprint(total)\n"
        report = analyze(source, "python")
        assert report.max_nesting == 2
        assert report.complexity == ComplexityClass.QUADRATIC

    def test_python_sequential_loops(self):
        source = "for i in range(n):\n    x += 1\nfor j in range(n):\n    y += 1\n"
        report = analyze(source, "python")
        assert report.max_nesting == 1

    def test_update_in_python_body_not_detected(self):
        source = "while n > 1:\n    n //= 2\n"
        assert analyze(source, "python").complexity == ComplexityClass.LINEAR


class TestNeverRaises:
    def test_empty_source(self):
        report = analyze("")
        assert isinstance(report, StructureReport)
        assert report.complexity == ComplexityClass.CONSTANT
        assert report.functions == []

    def test_unbalanced_braces(self):
        report = analyze("}\n}\nfor (;;) {\n")
        assert report.max_nesting == 1

    def test_report_serializes(self):
        dumped = analyze(SCENARIO).model_dump(mode="json")
        assert dumped["complexity"] == "O(log n)"
