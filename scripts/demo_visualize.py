"""Demo: trace the same algorithm written in C++, Java and JavaScript side by side."""

import json

from stepviz.api import analyze_source, transpile_source, visualize

SOURCES = {
    "cpp": """\
#include <iostream>
using namespace std;

int main() {
    int total = 0;
    for (int i = 1; i <= 4; i++) {
        total += i * i;
    }
    cout << total << endl;
    return 0;
}
""",
    "java": """\
public class Main {
    public static void main(String[] args) {
        int total = 0;
        for (int i = 1; i <= 4; i++) {
            total += i * i;
        }
        System.out.println(total);
    }
}
""",
    "javascript": """\
let total = 0;
for (let i = 1; i <= 4; i++) {
  total += i * i;
}
""",
}


def _show_steps(result):
    for step in result.trace.steps:
        print(f"    line {step.line_number:>3}  {json.dumps(step.scope)}")


def main():
    for language, source in SOURCES.items():
        print("=" * 60)
        print(f"{language.upper()}  ({analyze_source(source, language).complexity.value})")
        print("=" * 60)
        print(transpile_source(source, language))
        result = visualize(source, language)
        print(f"\nStatus: {result.status.value} {result.message}".rstrip())
        _show_steps(result)
        print()


if __name__ == "__main__":
    main()
