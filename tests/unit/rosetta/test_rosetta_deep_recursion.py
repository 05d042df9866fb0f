"""Rosetta test: recursion 500 calls deep across every visualized language."""

import pytest

from tests.unit.rosetta.conftest import (
    VISUALIZED_LANGUAGES,
    assert_clean_transpile,
    assert_cross_language_consistency,
    extract_answer,
    visualize_for_language,
)

# ---------------------------------------------------------------------------
# Programs: recursive sum of 1..500, each storing the result in `answer`.
# ---------------------------------------------------------------------------

PROGRAMS: dict[str, str] = {
    "javascript": """\
async function sum(n) {
    if (n === 0) {
        return 0;
    }
    return n + await sum(n - 1);
}

let answer = await sum(500);
""",
    "cpp": """\
#include <iostream>
using namespace std;

int sum(int n) {
    if (n == 0) {
        return 0;
    }
    return n + sum(n - 1);
}

int main() {
    int answer = sum(500);
    cout << answer << endl;
    return 0;
}
""",
    "java": """\
public class Main {
    static int sum(int n) {
        if (n == 0) {
            return 0;
        }
        return n + sum(n - 1);
    }

    public static void main(String[] args) {
        int answer = sum(500);
        System.out.println(answer);
    }
}
""",
}

EXPECTED_ANSWER = 125250


class TestDeepRecursionExecution:
    @pytest.fixture(params=sorted(PROGRAMS.keys()), ids=lambda lang: lang, scope="class")
    def visualization(self, request):
        lang = request.param
        return lang, visualize_for_language(lang, PROGRAMS[lang])

    def test_clean_transpile(self, visualization):
        lang, result = visualization
        assert_clean_transpile(result, lang)

    def test_no_stack_overflow(self, visualization):
        lang, result = visualization
        assert result.trace.error is None, f"[{lang}] {result.trace.error}"

    def test_correct_result(self, visualization):
        lang, result = visualization
        answer = extract_answer(result.trace, lang)
        assert answer == EXPECTED_ANSWER, f"[{lang}] expected answer={EXPECTED_ANSWER}, got {answer}"


class TestDeepRecursionCrossLanguage:
    @pytest.fixture(scope="class")
    def all_results(self):
        return {lang: visualize_for_language(lang, PROGRAMS[lang]) for lang in PROGRAMS}

    def test_all_languages_covered(self):
        assert set(PROGRAMS.keys()) == set(VISUALIZED_LANGUAGES)

    def test_cross_language_consistency(self, all_results):
        assert_cross_language_consistency(all_results)
