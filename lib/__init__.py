# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - templates.py: Hot-reloadable Jinja2 environment and safe rendering
# - ticketmaster_client.py: Discovery API event search
#
# Submodules are imported directly (e.g. `from lib.templates import ...`).
# =============================================================================
