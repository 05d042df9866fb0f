"""Rosetta test: iterative factorial across every visualized language."""

import pytest

from tests.unit.rosetta.conftest import (
    VISUALIZED_LANGUAGES,
    assert_clean_transpile,
    assert_cross_language_consistency,
    extract_answer,
    visualize_for_language,
)

# ---------------------------------------------------------------------------
# Programs: iterative factorial, each computing factorial(5) into `answer`.
# ---------------------------------------------------------------------------

PROGRAMS: dict[str, str] = {
    "javascript": """\
function factorial(n) {
    let result = 1;
    for (let i = 2; i <= n; i++) {
        result = result * i;
    }
    return result;
}

let answer = factorial(5);
""",
    "cpp": """\
#include <iostream>
using namespace std;

int factorial(int n) {
    int result = 1;
    for (int i = 2; i <= n; i++) {
        result = result * i;
    }
    return result;
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
        int result = 1;
        for (int i = 2; i <= n; i++) {
            result = result * i;
        }
        return result;
    }

    public static void main(String[] args) {
        int answer = factorial(5);
        System.out.println(answer);
    }
}
""",
}

EXPECTED_ANSWER = 120


class TestFactorialIterExecution:
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


class TestFactorialIterSteps:
    @pytest.mark.parametrize("lang", ["cpp", "java"])
    def test_running_product(self, lang):
        trace = visualize_for_language(lang, PROGRAMS[lang]).trace
        assert trace.values_of("result") == [1, 2, 6, 24, 120]
        assert trace.values_of("i") == [2, 3, 4, 5]
        assert len(trace.steps) == 8

    @pytest.mark.parametrize("lang", ["cpp", "java"])
    def test_entry_call_is_last_step(self, lang):
        result = visualize_for_language(lang, PROGRAMS[lang])
        last_line = result.host_source.rstrip().split("\n")[-1]
        assert last_line == "await main();"
        assert result.trace.steps[-1].line_number == result.host_source.rstrip().count("\n") + 1


class TestFactorialIterCrossLanguage:
    @pytest.fixture(scope="class")
    def all_results(self):
        return {lang: visualize_for_language(lang, PROGRAMS[lang]) for lang in PROGRAMS}

    def test_all_languages_covered(self):
        assert set(PROGRAMS.keys()) == set(VISUALIZED_LANGUAGES)

    def test_cross_language_consistency(self, all_results):
        assert_cross_language_consistency(all_results)
