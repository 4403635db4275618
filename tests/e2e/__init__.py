# tests/e2e/__init__.py
"""
End-to-end tests for complete workflows.

E2E tests drive the application only through its HTTP API, the way an
admin, an operator and a remote agent would, against the test database
and the fake agent.
"""
