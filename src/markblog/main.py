"""markblog FastAPI application."""

import logging
from datetime import date
from functools import partial
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from markblog.config import settings
from markblog.core.models import LookupStatus, Post
from markblog.core.parser import highlight_css, render_markdown
from markblog.core.repository import FilePostRepository

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize app
app = FastAPI(
    title=settings.site_title,
    debug=settings.debug,
)

# Setup templates and static files
templates_path = Path(__file__).parent / "templates"
static_path = Path(__file__).parent / "static"

templates = Jinja2Templates(directory=str(templates_path))
app.mount("/static", StaticFiles(directory=str(static_path)), name="static")


def long_date_filter(value: str) -> str:
    """Format a YYYY-MM-DD string as e.g. "March 1, 2024"."""
    try:
        d = date.fromisoformat(value)
    except (TypeError, ValueError):
        return value
    return f"{d.strftime('%B')} {d.day}, {d.year}"


templates.env.filters["long_date"] = long_date_filter

# Initialize repository
repository = FilePostRepository(
    settings.posts_dir,
    renderer=partial(render_markdown, guess_language=settings.guess_language),
    default_date=settings.default_date,
)


# Template context helper
def get_context(request: Request, **kwargs) -> dict:
    """Create base context for templates."""
    return {
        "request": request,
        "site_title": settings.site_title,
        "site_description": settings.site_description,
        **kwargs,
    }


def post_to_json(post: Post) -> dict:
    """Serialize a post, leaving out content when it was not rendered."""
    return post.model_dump(exclude_none=True)


@app.get("/", response_class=HTMLResponse)
async def index(request: Request, q: str = ""):
    """Home page - list all posts, optionally filtered."""
    try:
        posts = await repository.search_posts(q)
    except Exception:
        logger.exception("Failed to load posts")
        return templates.TemplateResponse(
            request,
            "error.html",
            get_context(request, message="Failed to load posts"),
            status_code=500,
        )
    return templates.TemplateResponse(
        request,
        "post/list.html",
        get_context(request, posts=posts, query=q),
    )


@app.get("/posts/{slug}", response_class=HTMLResponse)
async def view_post(request: Request, slug: str):
    """View a single post."""
    lookup = await repository.lookup_post(slug)

    if lookup.status is LookupStatus.NOT_FOUND:
        return templates.TemplateResponse(
            request,
            "not_found.html",
            get_context(request, slug=slug),
            status_code=404,
        )
    if not lookup.found:
        return templates.TemplateResponse(
            request,
            "error.html",
            get_context(request, message="This post could not be displayed"),
            status_code=500,
        )

    return templates.TemplateResponse(
        request,
        "post/view.html",
        get_context(request, post=lookup.post),
    )


@app.get("/highlight.css")
async def highlight_stylesheet():
    """Pygments stylesheet for highlighted code blocks."""
    return Response(
        content=highlight_css(settings.highlight_style),
        media_type="text/css",
    )


# ========== JSON API ==========


@app.get("/api/posts")
async def api_posts():
    """Return all posts (without content) as a JSON array."""
    try:
        posts = await repository.list_posts()
    except Exception:
        logger.exception("Failed to load posts")
        return JSONResponse({"error": "Failed to load posts"}, status_code=500)
    return [post_to_json(p) for p in posts]


@app.get("/api/posts/{slug}")
async def api_post(slug: str):
    """Return a single rendered post."""
    lookup = await repository.lookup_post(slug)
    if lookup.status is LookupStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Post not found")
    if not lookup.found:
        raise HTTPException(status_code=500, detail="Failed to load post")
    return post_to_json(lookup.post)
