# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for Concert With Friends:
# - test_event_parser.py: Ticketmaster response adapter
# - test_event_models.py: Search parameter validation and query building
# - test_ticketmaster_client.py: Outbound requests against a mock transport
# - test_templates.py: Rendering fallbacks and hot reload
# - test_config.py: Settings precedence
# - test_middleware.py: Rate limiting and request tracing
# - test_routes.py: HTTP endpoints end to end
#
# Run tests with: pytest
# =============================================================================
