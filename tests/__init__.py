# tests/__init__.py
"""
Test suite for Agent Service.

This package contains all tests for the agent service application:
- unit: Unit tests for individual components
- integration: Integration tests for component interactions
- e2e: End-to-end tests for complete workflows
- security: Security-focused tests
- factories: Test data factories using Factory Boy
"""
