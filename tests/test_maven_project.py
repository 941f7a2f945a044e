from __future__ import annotations

from pathlib import Path

import pytest
from conftest import LATIN1_POM_XML, POM_XML

from adapters.file_manager import DiskFileManager
from adapters.maven_project import MavenProjectOperations, ModulePathResolver
from core.domain.models import Dependency, Plugin, Repository
from core.domain.paths import LogicalPath
from core.errors import PreconditionError
from core.xml_utils import read_xml

SERVER = Dependency(group_id="org.cometd.java", artifact_id="cometd-java-server", version="2.5.0")
JQUERY = Dependency(
    group_id="org.cometd.javascript", artifact_id="cometd-javascript-jquery", version="2.5.0", type="war"
)
JETTY_7 = Plugin(group_id="org.mortbay.jetty", artifact_id="jetty-maven-plugin", version="7.6.0.v20120127")
JETTY_8 = Plugin(group_id="org.mortbay.jetty", artifact_id="jetty-maven-plugin", version="8.1.7.v20120910")


@pytest.fixture
def project(tmp_path: Path) -> MavenProjectOperations:
    (tmp_path / "pom.xml").write_text(POM_XML, encoding="utf-8")
    return MavenProjectOperations(tmp_path, file_manager=DiskFileManager())


def _reload(project: MavenProjectOperations) -> MavenProjectOperations:
    return MavenProjectOperations(project.module_root, file_manager=DiskFileManager())


def test_reads_existing_registrations(project):
    assert [d.coordinates for d in project.get_dependencies()] == ["junit:junit:4.10"]
    assert project.get_dependencies()[0].scope == "test"
    # Sin groupId, el plugin es de org.apache.maven.plugins.
    assert [p.coordinates for p in project.get_build_plugins()] == [
        "org.mortbay.jetty:jetty-maven-plugin:7.6.0.v20120127",
        "org.apache.maven.plugins:maven-war-plugin:2.2",
    ]
    assert project.get_repositories() == []


def test_add_dependencies_writes_once_in_the_pom_namespace(project):
    assert project.add_dependencies([SERVER, JQUERY]) == [SERVER, JQUERY]
    assert project.add_dependencies([SERVER]) == []
    assert project.flush()

    text = project.pom_path.read_text(encoding="utf-8")
    assert "ns0:" not in text
    assert "<type>war</type>" in text
    reloaded = _reload(project)
    assert reloaded.get_dependencies()[1:] == [SERVER, JQUERY]


def test_dependency_management_is_left_alone(project):
    project.add_dependencies([SERVER])
    project.flush()

    root = read_xml(project.pom_path.read_text(encoding="utf-8")).getroot()
    managed = root.xpath("//*[local-name()='dependencyManagement']//*[local-name()='version']")
    assert [v.text for v in managed] == ["1.0"]


def test_existing_dependency_with_other_version_is_kept(project, caplog):
    junit_5 = Dependency(group_id="junit", artifact_id="junit", version="4.12", scope="test")

    assert project.add_dependencies([junit_5]) == []
    assert not project.flush()
    assert "Keeping junit:junit:4.10" in caplog.text


def test_flush_without_changes_keeps_user_formatting(project):
    original = project.pom_path.read_text(encoding="utf-8")

    project.get_dependencies()
    project.remove_dependencies([SERVER])

    assert not project.flush()
    assert project.pom_path.read_text(encoding="utf-8") == original


def test_plugins_are_removed_by_coordinates_and_added(project):
    assert project.remove_build_plugins([JETTY_8]) == []
    assert project.remove_build_plugins([JETTY_7]) == [JETTY_7]
    assert project.add_build_plugins([JETTY_8]) == [JETTY_8]
    project.flush()

    plugins = _reload(project).get_build_plugins()
    assert [p for p in plugins if p.key == JETTY_8.key] == [JETTY_8]
    assert len(plugins) == 2


def test_repositories_section_is_created_on_demand(project):
    repo = Repository(id="roo-cometd-addon", name="Cometd Roo add-on repository", url="https://example.org/repo")

    assert project.add_repositories([repo]) == [repo]
    assert project.add_repositories([repo]) == []
    project.flush()

    reloaded = _reload(project)
    assert reloaded.get_repositories() == [repo]
    assert reloaded.remove_repositories([repo]) == [repo]
    assert reloaded.flush()
    assert _reload(reloaded).get_repositories() == []


def test_missing_pom_is_a_precondition_error(tmp_path):
    project = MavenProjectOperations(tmp_path, file_manager=DiskFileManager(), module="web")

    assert not project.is_focused_project_available()
    with pytest.raises(PreconditionError, match="Project metadata required"):
        project.get_dependencies()


def test_module_paths_resolve_under_the_focused_module(tmp_path):
    project = MavenProjectOperations(tmp_path, file_manager=DiskFileManager(), module="web")
    resolver = ModulePathResolver(project.module_root)

    assert project.pom_path == tmp_path / "web" / "pom.xml"
    assert resolver.focused_identifier(LogicalPath.SRC_MAIN_WEBAPP, "WEB-INF/web.xml") == (
        tmp_path / "web" / "src" / "main" / "webapp" / "WEB-INF" / "web.xml"
    )
    assert resolver.focused_identifier(LogicalPath.ROOT, "pom.xml") == tmp_path / "web" / "pom.xml"


def test_latin1_pom_is_edited_in_its_own_encoding(tmp_path):
    (tmp_path / "pom.xml").write_bytes(LATIN1_POM_XML.encode("iso-8859-1"))
    project = MavenProjectOperations(tmp_path, file_manager=DiskFileManager())

    project.add_dependencies([SERVER])
    assert project.flush()

    data = project.pom_path.read_bytes()
    assert "<name>José's petclinic</name>".encode("iso-8859-1") in data
    assert b"ISO-8859-1" in data.splitlines()[0]
    assert _reload(project).get_dependencies()[1:] == [SERVER]
