"""
Test Package

Contains unit tests for all modules.
Run with: pytest tests/ -v

Test files follow the pattern:
    test_<module_name>.py

Example:
    tests/test_notes.py       - Tests for tabgen/rules/notes.py
    tests/test_phrases.py     - Tests for tabgen/rules/phrases.py
    tests/test_cli.py         - Tests for tabgen/app/cli.py
"""
