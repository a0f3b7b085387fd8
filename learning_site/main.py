import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from client_reporter.core.logging import setup_logging
from learning_site.config import get_site_settings
from learning_site.content import ContentLibrary, get_library, level_for_key
from learning_site.markdown import render_markdown
from learning_site.navigation import (
    MILESTONES,
    ROADMAP_LEVELS,
    ROADMAP_PHASES,
    build_navigation,
    milestone_for,
)

settings = get_site_settings()

# Configure logging
setup_logging(
    log_level=settings.LOG_LEVEL,
    log_dir=settings.LOG_DIR,
    log_filename="learning_site.log",
    log_to_file=settings.LOG_TO_FILE,
)
logger = logging.getLogger("learning_site")

app = FastAPI(title=settings.SITE_NAME)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))
templates.env.filters["thousands"] = lambda n: f"{n:,}"


def _render(request: Request, name: str, context: Dict[str, Any], status_code: int = status.HTTP_200_OK):
    page = {
        "site_name": settings.SITE_NAME,
        "navigation": build_navigation(request.url.path, request.url.query),
    }
    page.update(context)
    return templates.TemplateResponse(request, name, page, status_code=status_code)


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    return _render(request, "not_found.html", {"message": exc.detail}, status_code=exc.status_code)


@app.get("/", response_class=HTMLResponse)
async def home(request: Request, library: ContentLibrary = Depends(get_library)):
    guides = library.get_guides()
    projects = library.get_projects()
    return _render(
        request,
        "home.html",
        {
            "guides": guides,
            "stats": [
                ("📚", "Guides", len(guides)),
                ("💻", "Projects", len(projects)),
                ("📝", "Lines of Docs", sum(g.line_count for g in guides)),
                ("🎯", "Levels", len(ROADMAP_LEVELS)),
            ],
        },
    )


@app.get("/guides", response_class=HTMLResponse)
async def guides_index(request: Request, library: ContentLibrary = Depends(get_library)):
    return _render(request, "guides.html", {"guides": library.get_guides()})


@app.get("/guides/{slug}", response_class=HTMLResponse)
async def guide_page(slug: str, request: Request, library: ContentLibrary = Depends(get_library)):
    guide = library.get_guide(slug)
    if not guide:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guide not found")
    return _render(request, "guide.html", {"guide": guide, "doc": render_markdown(guide.content)})


@app.get("/projects", response_class=HTMLResponse)
async def projects_index(
    request: Request,
    level: Optional[str] = None,
    library: ContentLibrary = Depends(get_library),
):
    grouped = library.get_projects_by_level()
    selected = level_for_key(level)
    if selected:
        grouped = {selected.name: grouped[selected.name]}
    return _render(request, "projects.html", {"grouped": grouped, "selected": selected})


@app.get("/projects/{level}/{slug}", response_class=HTMLResponse)
async def project_page(
    level: str,
    slug: str,
    request: Request,
    library: ContentLibrary = Depends(get_library),
):
    project = library.get_project(level, slug)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return _render(request, "project.html", {"project": project, "doc": render_markdown(project.content)})


@app.get("/roadmap", response_class=HTMLResponse)
async def roadmap(request: Request):
    return _render(
        request,
        "roadmap.html",
        {
            "levels": [(lv, milestone_for(lv.number)) for lv in ROADMAP_LEVELS],
            "milestones": MILESTONES,
            "phases": ROADMAP_PHASES,
        },
    )


@app.get("/health")
async def health():
    return {"status": "ok"}
