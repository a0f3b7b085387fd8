"""
Guide and project discovery for the learning site.

Guides live in ``<root>/docs/guides`` and are only published when listed in
``GUIDE_METADATA``. Projects live in ``<root>/projects/<level>/<project>/README.md``.
"""
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from client_reporter.core.logging import log_error, log_skip
from learning_site.config import get_site_settings
from learning_site.markdown import strip_emoji

logger = logging.getLogger(__name__)

GUIDE_SUFFIX = "_COMPLETE_GUIDE.md"


@dataclass(frozen=True)
class GuideMeta:
    title: str
    icon: str
    filename: str
    description: str
    topics: Tuple[str, ...]
    level: str


GUIDE_METADATA: Dict[str, GuideMeta] = {
    "linux": GuideMeta(
        "Linux", "🐧", "LINUX_COMPLETE_GUIDE.md",
        "Master the command line and Linux administration fundamentals.",
        ("File system", "Commands", "Scripting", "Networking", "Security"),
        "Beginner",
    ),
    "docker": GuideMeta(
        "Docker", "🐳", "DOCKER_COMPLETE_GUIDE.md",
        "Learn containerization from basics to production-ready deployments.",
        ("Containers", "Images", "Networking", "Compose", "Production"),
        "Beginner",
    ),
    "git": GuideMeta(
        "Git", "📦", "GIT_COMPLETE_GUIDE.md",
        "Version control mastery for team collaboration and code management.",
        ("Workflows", "Branching", "Merging", "Rebasing", "Advanced"),
        "Beginner",
    ),
    "kubernetes": GuideMeta(
        "Kubernetes", "☸️", "KUBERNETES_COMPLETE_GUIDE.md",
        "Container orchestration at scale with Kubernetes.",
        ("Architecture", "Workloads", "Networking", "Storage", "Security"),
        "Intermediate",
    ),
    "terraform": GuideMeta(
        "Terraform", "🏗️", "TERRAFORM_COMPLETE_GUIDE.md",
        "Infrastructure as Code for cloud-native environments.",
        ("HCL", "State", "Modules", "Workspaces", "Best Practices"),
        "Intermediate",
    ),
    "ansible": GuideMeta(
        "Ansible", "⚙️", "ANSIBLE_COMPLETE_GUIDE.md",
        "Configuration management and automation at scale.",
        ("Playbooks", "Modules", "Roles", "Vault", "Inventory"),
        "Intermediate",
    ),
    "argocd": GuideMeta(
        "ArgoCD", "🚀", "ARGOCD_COMPLETE_GUIDE.md",
        "GitOps continuous delivery for Kubernetes.",
        ("GitOps", "Applications", "Sync Strategies", "ApplicationSets"),
        "Advanced",
    ),
    "circleci": GuideMeta(
        "CircleCI", "🔄", "CIRCLECI_COMPLETE_GUIDE.md",
        "Build powerful CI/CD pipelines with CircleCI.",
        ("Pipelines", "Jobs", "Orbs", "Workflows", "Caching"),
        "Advanced",
    ),
    "argo_workflows": GuideMeta(
        "Argo Workflows", "🔀", "ARGO_WORKFLOWS_COMPLETE_GUIDE.md",
        "Kubernetes-native workflow engine for complex pipelines.",
        ("Workflows", "DAGs", "Templates", "Artifacts"),
        "Advanced",
    ),
}


@dataclass(frozen=True)
class Level:
    directory: str
    name: str
    number: int
    key: str


LEVELS: Dict[str, Level] = {
    level.directory: level
    for level in [
        Level("01-beginner", "Beginner", 1, "beginner"),
        Level("02-intermediate", "Intermediate", 2, "intermediate"),
        Level("03-advanced", "Advanced", 3, "advanced"),
        Level("04-platform-engineering", "Platform Engineering", 4, "platform"),
    ]
}
LEVEL_NAMES = [level.name for level in sorted(LEVELS.values(), key=lambda lv: lv.number)]

TITLE_RE = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)
SKILLS_RE = re.compile(r"Skills\**\s*\|\s*([^|\n]+?)\s*\|")
DELIVERABLE_RE = re.compile(r"Deliverable\**\s*\|\s*([^|\n]+?)\s*\|")


@dataclass
class Guide:
    slug: str
    title: str
    icon: str
    description: str
    filename: str
    content: str
    line_count: int
    topics: List[str] = field(default_factory=list)
    level: str = ""

    @property
    def url(self) -> str:
        return f"/guides/{self.slug}"


@dataclass
class Project:
    slug: str
    title: str
    level: str
    level_number: int
    level_dir: str
    path: str
    content: str
    skills: List[str] = field(default_factory=list)
    deliverable: str = ""

    @property
    def url(self) -> str:
        return f"/projects/{self.path}"


def guide_slug(filename: str) -> str:
    return filename.replace(GUIDE_SUFFIX, "").lower()


def level_for_key(key: Optional[str]) -> Optional[Level]:
    return next((lv for lv in LEVELS.values() if lv.key == key), None)


def parse_project_readme(content: str, fallback_title: str) -> Tuple[str, List[str], str]:
    """Title, skills and deliverable from a project README."""
    title_match = TITLE_RE.search(content)
    title = strip_emoji(title_match.group(1)) if title_match else ""

    skills_match = SKILLS_RE.search(content)
    skills = [s.strip() for s in skills_match.group(1).split(",") if s.strip()] if skills_match else []

    deliverable_match = DELIVERABLE_RE.search(content)
    deliverable = deliverable_match.group(1).strip() if deliverable_match else ""

    return title or fallback_title, skills, deliverable


class ContentLibrary:
    """Reads guides and projects from a content root on every call."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.guides_dir = self.root / "docs" / "guides"
        self.projects_dir = self.root / "projects"

    # Guides

    def get_guides(self) -> List[Guide]:
        try:
            files = {p.name for p in self.guides_dir.iterdir() if p.is_file()}
        except OSError as e:
            log_error(logger, f"Error reading guides from {self.guides_dir}: {e}")
            return []

        guides = []
        for meta in GUIDE_METADATA.values():
            if meta.filename not in files:
                continue
            guide = self._load_guide(meta)
            if guide:
                guides.append(guide)
        return guides

    def _load_guide(self, meta: GuideMeta) -> Optional[Guide]:
        path = self.guides_dir / meta.filename
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            log_error(logger, f"Error reading guide {path}: {e}")
            return None
        return Guide(
            slug=guide_slug(meta.filename),
            title=meta.title,
            icon=meta.icon,
            description=meta.description,
            filename=meta.filename,
            content=content,
            line_count=len(content.split("\n")),
            topics=list(meta.topics),
            level=meta.level,
        )

    def get_guide(self, slug: str) -> Optional[Guide]:
        meta = GUIDE_METADATA.get(slug)
        if not meta or not (self.guides_dir / meta.filename).is_file():
            return None
        return self._load_guide(meta)

    # Projects

    def get_projects(self) -> List[Project]:
        projects: List[Project] = []
        try:
            level_dirs = sorted(p for p in self.projects_dir.iterdir() if p.is_dir())
        except OSError as e:
            log_error(logger, f"Error reading projects from {self.projects_dir}: {e}")
            return []

        for level_dir in level_dirs:
            level = LEVELS.get(level_dir.name)
            if not level:
                log_skip(logger, f"Ignoring unknown project level {level_dir.name}")
                continue
            for project_dir in sorted(p for p in level_dir.iterdir() if p.is_dir()):
                project = self._load_project(level, project_dir)
                if project:
                    projects.append(project)

        return sorted(projects, key=lambda p: p.level_number)

    def _load_project(self, level: Level, project_dir: Path) -> Optional[Project]:
        readme = project_dir / "README.md"
        if not readme.is_file():
            return None
        try:
            content = readme.read_text(encoding="utf-8")
        except OSError as e:
            log_error(logger, f"Error reading project {readme}: {e}")
            return None

        title, skills, deliverable = parse_project_readme(content, project_dir.name)
        return Project(
            slug=project_dir.name,
            title=title,
            level=level.name,
            level_number=level.number,
            level_dir=level.directory,
            path=f"{level.directory}/{project_dir.name}",
            content=content,
            skills=skills,
            deliverable=deliverable,
        )

    def get_project(self, level: str, slug: str) -> Optional[Project]:
        level_info = LEVELS.get(level)
        # Reject anything that is not a plain directory name
        if not level_info or not slug or "/" in slug or slug.startswith("."):
            return None
        return self._load_project(level_info, self.projects_dir / level / slug)

    def get_projects_by_level(self) -> Dict[str, List[Project]]:
        grouped: Dict[str, List[Project]] = {name: [] for name in LEVEL_NAMES}
        for project in self.get_projects():
            grouped[project.level].append(project)
        return grouped

    def static_params(self) -> Dict[str, list]:
        """Every guide slug and (level, slug) project pair that has a page."""
        return {
            "guides": [g.slug for g in self.get_guides()],
            "projects": [(p.level_dir, p.slug) for p in self.get_projects()],
        }


@lru_cache()
def get_library() -> ContentLibrary:
    return ContentLibrary(Path(get_site_settings().CONTENT_ROOT))
