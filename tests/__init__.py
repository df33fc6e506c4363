# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Spark Links API:
# - fake_supabase.py: In-memory stand-in for the Supabase client
# - test_models.py: Unit tests for Pydantic model validation
# - test_workflow_service.py: Accept / reject / withdraw transitions
# - test_request_services.py: Creating and listing applications / invitations
# - test_project_service.py, test_user_service.py: Listings, profiles, auth
# - test_route_guard.py: Page redirect rules
# - test_api.py: End-to-end tests through the FastAPI app
#
# Run tests with: poetry run pytest
# =============================================================================
