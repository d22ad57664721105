#!/usr/bin/env python3
"""Test runner script for the Passage Outline API."""
import subprocess
import sys
import os


def run_unit_tests():
    """Run only unit tests (fast)."""
    print("🧪 Running Unit Tests (Fast)")
    print("=" * 30)

    cmd = [
        sys.executable, "-m", "pytest",
        "tests/", "-v",
        "-m", "not integration",
        "--tb=short"
    ]

    return subprocess.run(cmd).returncode


def run_integration_tests():
    """Run integration tests against the database configured in DB_* / DATABASE_URL."""
    print("🧪 Running Integration Tests")
    print("=" * 30)

    cmd = [
        sys.executable, "-m", "pytest",
        "tests/integration/", "-v",
        "-m", "integration",
        "--tb=short"
    ]
    env = dict(os.environ, RUN_INTEGRATION_TESTS="1")
    return subprocess.run(cmd, env=env).returncode


def run_all_tests():
    """Run all tests."""
    print("🧪 Running All Tests")
    print("=" * 20)

    unit_result = run_unit_tests()
    if unit_result != 0:
        print("❌ Unit tests failed, skipping integration tests")
        return unit_result

    print("\n" + "=" * 50)

    integration_result = run_integration_tests()

    if integration_result == 0:
        print("\n🎉 All tests passed!")
        return 0
    print(f"\n❌ Tests failed. Unit: {unit_result}, Integration: {integration_result}")
    return 1


def run_coverage():
    """Run unit tests with coverage report."""
    print("🧪 Running Tests with Coverage")
    print("=" * 35)

    cmd = [
        sys.executable, "-m", "pytest",
        "tests/", "-v",
        "-m", "not integration",
        "--cov=outline_api",
        "--cov-report=term-missing",
        "--cov-report=html:htmlcov"
    ]

    result = subprocess.run(cmd).returncode

    if result == 0:
        print("\n📊 Coverage report generated in htmlcov/index.html")

    return result


MODES = {
    "unit": run_unit_tests,
    "integration": run_integration_tests,
    "all": run_all_tests,
    "coverage": run_coverage,
}


def main():
    """Main function to handle different test modes."""
    if len(sys.argv) < 2:
        print("Usage: python run_tests.py [unit|integration|all|coverage]")
        print("  unit        - Run unit tests only (fast)")
        print("  integration - Run integration tests only (needs PostgreSQL)")
        print("  all         - Run all tests")
        print("  coverage    - Run unit tests with coverage report")
        sys.exit(1)

    mode = sys.argv[1].lower()

    # Ensure we're in the project directory
    project_dir = os.path.dirname(os.path.abspath(__file__))
    os.chdir(project_dir)

    runner = MODES.get(mode)
    if runner is None:
        print(f"❌ Unknown test mode: {mode}")
        print("Available modes: " + ", ".join(MODES))
        sys.exit(1)

    sys.exit(runner())


if __name__ == "__main__":
    main()
