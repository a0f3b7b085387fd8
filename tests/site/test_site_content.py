from learning_site.content import (
    GUIDE_METADATA,
    LEVEL_NAMES,
    ContentLibrary,
    guide_slug,
    level_for_key,
    parse_project_readme,
)
from learning_site.navigation import build_navigation, milestone_for, navigation_tree


def test_guide_slug():
    assert guide_slug("ARGO_WORKFLOWS_COMPLETE_GUIDE.md") == "argo_workflows"
    assert set(GUIDE_METADATA) >= {"linux", "docker", "argo_workflows"}


def test_parse_project_readme():
    title, skills, deliverable = parse_project_readme(
        "# ☸️ Kubernetes Lab\n\n| **Skills** | kubectl, Helm |\n", "fallback"
    )
    assert title == "Kubernetes Lab"
    assert skills == ["kubectl", "Helm"]
    assert deliverable == ""
    assert parse_project_readme("no heading here", "fallback") == ("fallback", [], "")


def test_guides_follow_metadata(library):
    guides = library.get_guides()

    assert [g.slug for g in guides] == ["docker", "git"]
    docker = guides[0]
    assert docker.title == "Docker"
    assert docker.icon == "🐳"
    assert docker.url == "/guides/docker"
    assert docker.line_count == len(docker.content.split("\n"))


def test_get_guide(library):
    assert library.get_guide("git").title == "Git"
    assert library.get_guide("linux") is None
    assert library.get_guide("unlisted") is None


def test_projects_are_discovered_by_level(library):
    projects = library.get_projects()

    assert [(p.level_number, p.slug) for p in projects] == [(1, "static-site"), (3, "gitops"), (4, "idp")]
    static_site = projects[0]
    assert static_site.title == "Deploy a Static Site"
    assert static_site.skills == ["Linux", "Nginx", "Bash"]
    assert static_site.deliverable == "A site served over HTTPS"
    assert static_site.url == "/projects/01-beginner/static-site"
    assert projects[2].title == "idp"


def test_get_project_rejects_odd_paths(library):
    assert library.get_project("03-advanced", "gitops").title == "GitOps Pipeline"
    assert library.get_project("advanced", "gitops") is None
    assert library.get_project("01-beginner", "no-readme") is None
    assert library.get_project("01-beginner", "../03-advanced") is None
    assert library.get_project("01-beginner", ".hidden") is None


def test_projects_by_level_lists_empty_levels(library):
    grouped = library.get_projects_by_level()

    assert list(grouped) == LEVEL_NAMES
    assert grouped["Intermediate"] == []
    assert [p.slug for p in grouped["Platform Engineering"]] == ["idp"]


def test_static_params(library):
    assert library.static_params() == {
        "guides": ["docker", "git"],
        "projects": [("01-beginner", "static-site"), ("03-advanced", "gitops"), ("04-platform-engineering", "idp")],
    }


def test_missing_content_root(tmp_path):
    empty = ContentLibrary(tmp_path / "nowhere")
    assert empty.get_guides() == []
    assert empty.get_projects() == []
    assert empty.static_params() == {"guides": [], "projects": []}


def test_level_for_key():
    assert level_for_key("platform").directory == "04-platform-engineering"
    assert level_for_key("expert") is None
    assert level_for_key(None) is None


def test_navigation_marks_exact_matches():
    sections = {s.title: s for s in build_navigation("/projects", "level=beginner")}

    projects = {c.title: c.active for c in sections["Projects"].children}
    assert projects["Beginner"] is True
    assert projects["All Projects"] is False
    assert sections["Projects"].active is True
    assert sections["Guides"].active is False

    overview = {s.title: s for s in build_navigation("/")}
    assert overview["Getting Started"].children[0].active is True


def test_navigation_tree_shape():
    tree = navigation_tree()
    assert [s.title for s in tree] == ["Getting Started", "Guides", "Projects"]
    assert len(tree[1].children) == len(GUIDE_METADATA) + 1
    assert tree[2].children[-1].href == "/projects?level=platform"


def test_milestones():
    assert milestone_for(3).title == "🎉 DevOps Fundamentals Complete"
    assert milestone_for(4) is None
