# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for StaffDesk:
# - test_config.py: Settings parsing
# - test_models.py: Pydantic schema and form validation
# - test_validators.py: Username and password validators
# - test_user_service.py: Account service against a real SQLite database
# - test_pages.py: Login/logout/registration/home page flow
# - test_admin.py: Staff admin pages
# - test_api.py: Token auth and user directory API
# - test_health.py: Health checks, middleware and static files
# - test_manage.py: Management commands
#
# Run tests with: pytest
# =============================================================================
