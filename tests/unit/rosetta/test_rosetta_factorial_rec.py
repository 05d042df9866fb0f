"""Rosetta test: recursive factorial across every visualized language."""

import pytest

from tests.unit.rosetta.conftest import (
    VISUALIZED_LANGUAGES,
    assert_clean_transpile,
    assert_cross_language_consistency,
    extract_answer,
    visualize_for_language,
)

# ---------------------------------------------------------------------------
# Programs: recursive factorial, each computing factorial(5) into `answer`.
# ---------------------------------------------------------------------------

PROGRAMS: dict[str, str] = {
    "javascript": """\
function factorial(n) {
    if (n <= 1) {
        return 1;
    }
    return n * factorial(n - 1);
}

let answer = factorial(5);
""",
    "cpp": """\
#include <iostream>
using namespace std;

int factorial(int n) {
    if (n <= 1) {
        return 1;
    }
    return n * factorial(n - 1);
}

int main() {
    int answer = factorial(5);
    cout << answer << endl;
    return 0;
}
""",
    "java": """\
public class Main {
    static int factorial(int n) {
        if (n <= 1) {
            return 1;
        }
        return n * factorial(n - 1);
    }

    public static void main(String[] args) {
        int answer = factorial(5);
        System.out.println(answer);
    }
}
""",
}

EXPECTED_ANSWER = 120


class TestFactorialRecExecution:
    @pytest.fixture(params=sorted(PROGRAMS.keys()), ids=lambda lang: lang, scope="class")
    def visualization(self, request):
        lang = request.param
        return lang, visualize_for_language(lang, PROGRAMS[lang])

    def test_clean_transpile(self, visualization):
        lang, result = visualization
        assert_clean_transpile(result, lang)

    def test_correct_result(self, visualization):
        lang, result = visualization
        answer = extract_answer(result.trace, lang)
        assert answer == EXPECTED_ANSWER, f"[{lang}] expected answer={EXPECTED_ANSWER}, got {answer}"

    def test_recursive_calls_capture_nothing_themselves(self, visualization):
        lang, result = visualization
        assert all("n" not in step.scope for step in result.trace.steps), f"[{lang}]"


class TestFactorialRecCrossLanguage:
    @pytest.fixture(scope="class")
    def all_results(self):
        return {lang: visualize_for_language(lang, PROGRAMS[lang]) for lang in PROGRAMS}

    def test_all_languages_covered(self):
        assert set(PROGRAMS.keys()) == set(VISUALIZED_LANGUAGES)

    def test_cross_language_consistency(self, all_results):
        assert_cross_language_consistency(all_results)
