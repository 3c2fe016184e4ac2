# =============================================================================
# app/routers/pages.py - Page, Environment and Static File Endpoints
# =============================================================================
# Thin handlers: render a template, report the environment, or serve a
# file from the static root.
# =============================================================================

import logging
import mimetypes
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from app.dependencies import SettingsDep, TemplatesDep
from lib.templates import render_template

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def index(templates: TemplatesDep):
    """Render the landing page."""
    status, text = render_template(templates, "index.j2")
    return HTMLResponse(text, status_code=status)


@router.get("/env", response_class=PlainTextResponse)
def read_env(settings: SettingsDep):
    """Name of the environment the server runs in."""
    return PlainTextResponse(settings.env.value)


# =============================================================================
# Static Files
# =============================================================================

def resolve_static_path(root: Path, path: str) -> Path | None:
    """
    Map a request path onto a file under `root`.

    Returns None when the file doesn't exist or the path resolves outside
    `root` (e.g. "../../etc/passwd" or a symlink pointing elsewhere).
    """
    try:
        base = root.resolve()
        candidate = (base / path.lstrip("/")).resolve()
    except (OSError, ValueError):
        return None

    if not candidate.is_relative_to(base) or not candidate.is_file():
        return None
    return candidate


@router.get("/static/{path:path}")
def static_file(path: str, settings: SettingsDep):
    """
    Serve a file under the static root.

    The content type is guessed from the extension (text/plain when
    unknown). Missing files and paths escaping the root get an empty 404.
    """
    file_path = resolve_static_path(settings.static_dir, path)
    if file_path is None:
        logger.debug(f"Static file not found: {path}")
        return Response(status_code=404)

    try:
        contents = file_path.read_bytes()
    except OSError as e:
        logger.warning(f"Failed to read static file {file_path}: {e}")
        return Response(status_code=404)

    mime_type, _ = mimetypes.guess_type(file_path.name)
    return Response(contents, media_type=mime_type or "text/plain")
