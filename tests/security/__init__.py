# tests/security/__init__.py
"""
Security-focused tests.

Security tests probe the trust boundaries of the API:
- Forged, tampered or foreign bearer tokens
- Role and service-link boundaries
- Agent API key handling
- Malicious input reaching the document store
- Security headers and CORS
"""
