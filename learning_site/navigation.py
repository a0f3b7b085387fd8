from dataclasses import dataclass, field
from typing import List, Optional

from learning_site.content import GUIDE_METADATA, LEVELS


@dataclass
class NavItem:
    title: str
    href: Optional[str] = None
    icon: Optional[str] = None
    children: List["NavItem"] = field(default_factory=list)
    active: bool = False


def navigation_tree() -> List[NavItem]:
    guides = [NavItem("All Guides", "/guides")] + [
        NavItem(meta.title, f"/guides/{slug}") for slug, meta in GUIDE_METADATA.items()
    ]
    projects = [NavItem("All Projects", "/projects")] + [
        NavItem(level.name, f"/projects?level={level.key}")
        for level in sorted(LEVELS.values(), key=lambda lv: lv.number)
    ]
    return [
        NavItem(
            "Getting Started",
            icon="🚀",
            children=[NavItem("Overview", "/"), NavItem("Roadmap", "/roadmap")],
        ),
        NavItem("Guides", icon="📚", children=guides),
        NavItem("Projects", icon="💻", children=projects),
    ]


def is_active(href: Optional[str], path: str, query: str = "") -> bool:
    """A link is active when it matches the current path and query exactly."""
    if not href:
        return False
    current = f"{path}?{query}" if query else path
    return href == current


def build_navigation(path: str, query: str = "") -> List[NavItem]:
    sections = navigation_tree()
    for section in sections:
        for child in section.children:
            child.active = is_active(child.href, path, query)
        section.active = any(child.active for child in section.children)
    return sections


@dataclass(frozen=True)
class RoadmapLevel:
    number: int
    name: str
    skills: tuple
    duration: str
    phase: str


@dataclass(frozen=True)
class Milestone:
    level: int
    title: str
    description: str


ROADMAP_LEVELS = [
    RoadmapLevel(1, "Linux Foundations", ("File system", "CLI", "Scripting"), "1-2 weeks", "beginner"),
    RoadmapLevel(2, "Containerization", ("Docker", "Images", "Volumes"), "2 weeks", "beginner"),
    RoadmapLevel(3, "CI/CD Introduction", ("GitHub Actions", "Testing", "Automation"), "2 weeks", "beginner"),
    RoadmapLevel(4, "Kubernetes Basics", ("Pods", "Services", "Deployments"), "3 weeks", "intermediate"),
    RoadmapLevel(5, "Infrastructure as Code", ("Terraform", "Ansible", "State"), "3 weeks", "intermediate"),
    RoadmapLevel(6, "Monitoring & Observability", ("Prometheus", "Grafana", "Logging"), "2 weeks", "intermediate"),
    RoadmapLevel(7, "GitOps & CD", ("ArgoCD", "Flux", "Progressive Delivery"), "3 weeks", "advanced"),
    RoadmapLevel(8, "Service Mesh & Security", ("Istio", "Vault", "OPA"), "3 weeks", "advanced"),
    RoadmapLevel(9, "Advanced Infrastructure", ("Multi-cluster", "Crossplane", "DR"), "4 weeks", "advanced"),
    RoadmapLevel(10, "Platform Engineering", ("Backstage", "Operators", "Golden Paths"), "8-12 weeks", "platform"),
]

MILESTONES = [
    Milestone(3, "🎉 DevOps Fundamentals Complete", "Ready for infrastructure work"),
    Milestone(6, "🎉 Infrastructure Mastery", "Ready for advanced operations"),
    Milestone(9, "🎉 Advanced Operations Complete", "Ready for platform engineering"),
    Milestone(10, "🏆 Platform Engineer!", "Full stack mastery achieved"),
]

ROADMAP_PHASES = [
    ("1-3", "Beginner", "4-6 weeks"),
    ("4-6", "Intermediate", "6-8 weeks"),
    ("7-9", "Advanced", "8-10 weeks"),
    ("10", "Platform", "8-12 weeks"),
]


def milestone_for(level_number: int) -> Optional[Milestone]:
    return next((m for m in MILESTONES if m.level == level_number), None)
