"""Regression corpus runner.

- YAML test suites: raw input → expected outcome (kind + value/sections/reason)
- Recovery is deterministic: one run per case
- Suite threshold: 100%
- Run: python -m tests.regression.runner
"""

import sys
from pathlib import Path
from typing import Any

import yaml

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from jsonmend import Failed, Parsed, PartialSections, recover

CORPUS_DIR = Path(__file__).parent


def load_suites() -> list[Path]:
    """Find every YAML suite in the corpus directory, sorted by name."""
    return sorted(CORPUS_DIR.glob("test_*.yaml"))


def load_cases(test_file: Path) -> tuple[str, list[dict[str, Any]]]:
    """Load a suite.

    Returns:
        Tuple of (suite_name, test cases)
    """
    with open(test_file, "r", encoding="utf-8") as f:
        suite_data = yaml.safe_load(f)
    return suite_data.get("name", test_file.stem), suite_data.get("tests", [])


class RegressionRunner:
    """Runs the regression corpus against recover()."""

    def __init__(self) -> None:
        """Initialize runner."""
        self.suite_threshold = 1.0

    def run_test_case(self, test_case: dict[str, Any]) -> tuple[bool, str]:
        """Run a single test case.

        Args:
            test_case: Test case dict with 'input' and 'expected'

        Returns:
            Tuple of (passed, error_message)
        """
        outcome = recover(test_case.get("input", ""))
        expected = test_case.get("expected", {})
        errors = []

        expected_kind = expected.get("kind", "parsed")
        if outcome.kind != expected_kind:
            errors.append(f"Expected kind '{expected_kind}', got '{outcome.kind}'")
        elif isinstance(outcome, Parsed) and "value" in expected:
            if outcome.value != expected["value"]:
                errors.append(f"Value mismatch: {outcome.value!r} != {expected['value']!r}")
        elif isinstance(outcome, PartialSections) and "sections" in expected:
            if outcome.sections != expected["sections"]:
                errors.append(f"Sections mismatch: {outcome.sections!r} != {expected['sections']!r}")
        elif isinstance(outcome, Failed) and "reason" in expected:
            if outcome.reason.value != expected["reason"]:
                errors.append(f"Expected reason '{expected['reason']}', got '{outcome.reason.value}'")

        error_msg = "; ".join(errors) if errors else ""
        return not errors, error_msg

    def run_test_suite(self, test_file: Path) -> dict[str, Any]:
        """Run a test suite from YAML file.

        Args:
            test_file: Path to YAML test file

        Returns:
            Dict with test results
        """
        suite_name, tests = load_cases(test_file)

        results = {
            "suite_name": suite_name,
            "total_tests": len(tests),
            "passed": 0,
            "failed": 0,
            "test_results": [],
        }

        for test in tests:
            test_name = test.get("name", "unnamed")
            print(f"  Running: {test_name}...", end=" ")

            passed, error_msg = self.run_test_case(test)
            if passed:
                results["passed"] += 1
                print("✓ PASS")
            else:
                results["failed"] += 1
                print(f"✗ FAIL ({error_msg})")

            results["test_results"].append({"name": test_name, "passed": passed, "error": error_msg})

        return results

    def run_all_suites(self) -> int:
        """Run all test suites.

        Returns:
            Exit code (0 = success, 1 = failure)
        """
        test_files = load_suites()

        if not test_files:
            print("No test files found!")
            return 1

        print(f"Running {len(test_files)} test suite(s)...\n")

        total_tests = 0
        total_passed = 0

        for test_file in test_files:
            print(f"Suite: {test_file.stem}")
            results = self.run_test_suite(test_file)

            total_tests += results["total_tests"]
            total_passed += results["passed"]

            print(f"  Passed: {results['passed']}/{results['total_tests']}\n")

        pass_rate = total_passed / total_tests if total_tests > 0 else 0.0

        print("=" * 60)
        print(f"Total: {total_passed}/{total_tests} tests passed ({pass_rate:.1%})")
        print(f"Threshold: {self.suite_threshold:.0%}")

        if pass_rate >= self.suite_threshold:
            print("✓ Suite threshold met")
            return 0
        else:
            print(f"✗ Suite threshold NOT met ({pass_rate:.1%} < {self.suite_threshold:.0%})")
            return 1


def main() -> int:
    """Main entry point."""
    return RegressionRunner().run_all_suites()


if __name__ == "__main__":
    sys.exit(main())
