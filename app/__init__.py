# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the web application:
# - main.py: App factory, middleware setup, error handlers
# - config.py: Layered settings (TOML files + environment)
# - middleware.py: Rate limiting and request tracing
# - exceptions.py: Exception hierarchy and HTML error handlers
# - routers/: Page, static file and event search endpoints
#
# The app layer is thin - it handles HTTP concerns and delegates
# parsing and rendering to the core/ and lib/ packages.
# =============================================================================
