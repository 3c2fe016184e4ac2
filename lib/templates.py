# =============================================================================
# lib/templates.py - Template Rendering With Error Fallback
# =============================================================================
# Wraps a Jinja2 environment behind a reloader that can rebuild it when the
# template files change, and renders templates into (status, html) pairs.
#
# Rendering never raises: any failure collapses into an HTML 500 page.
# Outside production the page includes the underlying error message.
#
# Usage:
#   from lib.templates import TemplateReloader, render_template
#   reloader = TemplateReloader("static/html", autoreload=True, debug=True)
#   status, html = render_template(reloader, "index.j2")
# =============================================================================

from __future__ import annotations

import html
import logging
import threading
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

logger = logging.getLogger(__name__)

INTERNAL_ERROR_TEMPLATE = "internal_error.j2"

ERROR_500 = """
<!doctype html>
<html>
    <head>
        <title>Concert With Friends - 500 Error</title>
    </head>
<body>
<h1>Status Code 500: Internal Server Error</h1>
</body>
</html>
"""

ERROR_500_DEBUG_START = """
<!doctype html>
<html>
    <head>
        <title>Concert With Friends - 500 Error</title>
    </head>
<body>
<h1>Status Code 500: Internal Server Error</h1>
<div>
<p>
"""

ERROR_500_DEBUG_END = """
</p>
</div>
</body>
</html>
"""


class TemplateEnvironmentError(Exception):
    """Raised when no template environment can be built."""


class TemplateReloader:
    """
    Owns the shared Jinja2 environment.

    With autoreload on, every acquire fingerprints the template tree and,
    when it changed, builds a fresh environment and publishes it in a
    single reference swap. Readers never block on a reload and never see
    a half-built environment.

    Example:
        reloader = TemplateReloader(settings.template_dir, autoreload=True)
        env = reloader.acquire_env()
        env.get_template("index.j2").render()
    """

    def __init__(
        self,
        template_dir: str | Path,
        autoreload: bool = False,
        debug: bool = False,
    ):
        self.template_dir = Path(template_dir)
        self.autoreload = autoreload
        self.debug = debug
        self._lock = threading.Lock()
        # (fingerprint, environment), swapped as a whole
        self._state: tuple[tuple, Environment] | None = None

    def acquire_env(self) -> Environment:
        """
        Return the current environment, rebuilding it if templates changed.

        Raises:
            TemplateEnvironmentError: If the template directory is missing
        """
        state = self._state
        if state is not None and not self.autoreload:
            return state[1]

        fingerprint = self._fingerprint()
        if state is not None and state[0] == fingerprint:
            return state[1]

        with self._lock:
            # Another request may have finished the rebuild while we waited
            state = self._state
            if state is None or state[0] != fingerprint:
                state = (fingerprint, self._build_env())
                self._state = state
                logger.info(f"Loaded templates from {self.template_dir}")
            return state[1]

    def _build_env(self) -> Environment:
        return Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(enabled_extensions=("html", "j2")),
            # Reloading is handled by swapping whole environments
            auto_reload=False,
        )

    def _fingerprint(self) -> tuple:
        """Snapshot of (relative path, mtime, size) for every template file."""
        if not self.template_dir.is_dir():
            raise TemplateEnvironmentError(
                f"Template directory not found: {self.template_dir}"
            )

        entries = []
        for path in self.template_dir.rglob("*"):
            try:
                stat = path.stat()
            except FileNotFoundError:
                # Removed mid-scan; the next acquire sees the final state
                continue
            if path.is_file():
                entries.append((str(path.relative_to(self.template_dir)), stat.st_mtime_ns, stat.st_size))
        return tuple(sorted(entries))


def internal_error(
    body: str | None = None,
    error: BaseException | None = None,
    debug: bool = False,
) -> tuple[int, str]:
    """
    Build a 500 response.

    Args:
        body: Pre-rendered error page; returned as-is when given
        error: Failure to describe when no body could be rendered
        debug: Include the error message in the page

    Returns:
        A 500 status code and the HTML to display
    """
    if body is not None:
        return 500, body
    if error is not None and debug:
        return 500, ERROR_500_DEBUG_START + html.escape(str(error)) + ERROR_500_DEBUG_END
    return 500, ERROR_500


def render_template(
    reloader: TemplateReloader,
    template: str,
    context: Mapping[str, Any] | None = None,
) -> tuple[int, str]:
    """
    Render the template with the given name.

    If the render fails for whatever reason (environment unavailable,
    template not found, render failure), returns an error 500 page
    instead of raising.

    Args:
        reloader: Source of the template environment
        template: Name of the template, relative to the template directory
        context: Variables passed to the template

    Returns:
        A status code (200 on success, 500 on failure) and the HTML body
    """
    try:
        env = reloader.acquire_env()
    except Exception as e:
        logger.error(f"Failed to get template environment: {e}")
        return internal_error()

    try:
        compiled = env.get_template(template)
    except TemplateError as e:
        logger.error(f"Failed to get template {template}: {e}")
        return _render_error_page(e, env, reloader.debug)

    try:
        return 200, compiled.render(dict(context or {}))
    except Exception as e:
        # The exception goes to the log only; the page is the generic one
        logger.exception(f"Failed to render template {template}: {e}")
        return internal_error()


def _render_error_page(error: BaseException, env: Environment, debug: bool) -> tuple[int, str]:
    """Render internal_error.j2 describing `error`, falling back to the built-in page."""
    try:
        page = env.get_template(INTERNAL_ERROR_TEMPLATE).render(
            debug=debug,
            error_message=str(error),
        )
    except Exception as e:
        logger.error(f"Failed to get template {INTERNAL_ERROR_TEMPLATE}: {e}")
        return internal_error(error=e, debug=debug)
    return internal_error(body=page)
