# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the contacts directory API:
# - test_models.py: Unit tests for Pydantic model behaviour
# - test_validation.py: Tests for the record validator
# - test_security.py: Tests for password hashing and tokens
# - test_contact_store.py: Tests for both contact store backends
# - test_contact_service.py: Tests for the six contact operations
# - test_api.py: Integration tests for the HTTP endpoints
# - test_config.py: Tests for settings validation
#
# Run tests with: poetry run pytest
# =============================================================================
