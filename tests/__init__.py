"""Test package for the release publisher suites."""
