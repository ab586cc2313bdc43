#!/usr/bin/env python3
import unittest
import sys
import os

TEST_DIRS = ["", "unit"]

def run_tests():
    """Run all k2n tests (tests/ and tests/unit/)."""
    # Add project root to path
    sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    for sub in TEST_DIRS:
        start_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), sub)
        # tests/unit is not a package, so discover it as its own top level
        suite.addTests(loader.discover(start_dir, pattern='test_*.py', top_level_dir=start_dir))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    if not result.wasSuccessful():
        sys.exit(1)

if __name__ == "__main__":
    run_tests()
