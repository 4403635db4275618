# tests/unit/__init__.py
"""
Unit tests for individual components.

Unit tests focus on testing individual functions, classes, and modules
in isolation. They should be fast, focused, and not depend on external
resources like databases or APIs.

Guidelines:
- Mock external dependencies
- Test one thing at a time
- Use descriptive test names
- Aim for high code coverage
- Keep tests fast (< 1 second each)
"""
