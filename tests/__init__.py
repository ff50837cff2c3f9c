# Star Registry Test Suite
"""
Test suite including:
- Unit tests per component
- Integration tests (end-to-end submission, concurrent appends)
- Tamper detection tests

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
