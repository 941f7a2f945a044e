from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pytest

from core.config import AddonSettings
from core.domain.models import AddonConfiguration, Dependency, Plugin, Repository
from core.domain.paths import LogicalPath

JAVAEE_WEB_XML = """<?xml version="1.0" encoding="UTF-8"?>
<web-app xmlns="http://java.sun.com/xml/ns/javaee"
         xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
         xsi:schemaLocation="http://java.sun.com/xml/ns/javaee http://java.sun.com/xml/ns/javaee/web-app_2_5.xsd"
         version="2.5">
    <display-name>petclinic</display-name>
    <!-- Spring security -->
    <filter>
        <filter-name>springSecurityFilterChain</filter-name>
        <filter-class>org.springframework.web.filter.DelegatingFilterProxy</filter-class>
    </filter>
    <filter-mapping>
        <filter-name>springSecurityFilterChain</filter-name>
        <url-pattern>/*</url-pattern>
    </filter-mapping>
    <servlet>
        <servlet-name>petclinic</servlet-name>
        <servlet-class>org.springframework.web.servlet.DispatcherServlet</servlet-class>
        <load-on-startup>1</load-on-startup>
    </servlet>
    <servlet-mapping>
        <servlet-name>petclinic</servlet-name>
        <url-pattern>/</url-pattern>
    </servlet-mapping>
</web-app>
"""

POM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0"
         xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
         xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 http://maven.apache.org/maven-v4_0_0.xsd">
    <modelVersion>4.0.0</modelVersion>
    <groupId>com.example</groupId>
    <artifactId>petclinic</artifactId>
    <version>0.1.0</version>
    <packaging>war</packaging>
    <dependencyManagement>
        <dependencies>
            <dependency>
                <groupId>org.cometd.java</groupId>
                <artifactId>cometd-java-server</artifactId>
                <version>1.0</version>
            </dependency>
        </dependencies>
    </dependencyManagement>
    <dependencies>
        <dependency>
            <groupId>junit</groupId>
            <artifactId>junit</artifactId>
            <version>4.10</version>
            <scope>test</scope>
        </dependency>
    </dependencies>
    <build>
        <plugins>
            <plugin>
                <groupId>org.mortbay.jetty</groupId>
                <artifactId>jetty-maven-plugin</artifactId>
                <version>7.6.0.v20120127</version>
            </plugin>
            <plugin>
                <artifactId>maven-war-plugin</artifactId>
                <version>2.2</version>
            </plugin>
        </plugins>
    </build>
</project>
"""


LATIN1_WEB_XML = JAVAEE_WEB_XML.replace('encoding="UTF-8"', 'encoding="ISO-8859-1"').replace(
    "<display-name>petclinic</display-name>", "<display-name>Clínica</display-name>"
)

LATIN1_POM_XML = POM_XML.replace('encoding="UTF-8"', 'encoding="ISO-8859-1"').replace(
    "<packaging>war</packaging>", "<packaging>war</packaging>\n    <name>José's petclinic</name>"
)


class FakeFileManager:
    """In-memory FileManager that records every write; text is stored as UTF-8 bytes."""

    def __init__(self, files: dict[Path, bytes | str] | None = None) -> None:
        self.files: dict[Path, bytes] = {
            path: content.encode("utf-8") if isinstance(content, str) else content
            for path, content in (files or {}).items()
        }
        self.reads: list[Path] = []
        self.writes: list[Path] = []

    def exists(self, path: Path) -> bool:
        return path in self.files

    def read_bytes(self, path: Path) -> bytes:
        self.reads.append(path)
        return self.files[path]

    def read_text(self, path: Path) -> str:
        return self.read_bytes(path).decode("utf-8")

    def create_or_update_file_if_required(self, path: Path, content: bytes) -> bool:
        if self.files.get(path) == content:
            return False
        self.files[path] = content
        self.writes.append(path)
        return True

    def create_or_update_text_file_if_required(self, path: Path, content: str) -> bool:
        return self.create_or_update_file_if_required(path, content.encode("utf-8"))


class FakePathResolver:
    def __init__(self, root: Path = Path("/project")) -> None:
        self.root = root

    def focused_identifier(self, path: LogicalPath, relative: str) -> Path:
        return self.root / path.value / relative


class FakeProjectOperations:
    """In-memory ProjectOperations; `flushes` counts flush calls."""

    def __init__(
        self,
        *,
        available: bool = True,
        dependencies: Iterable[Dependency] = (),
        plugins: Iterable[Plugin] = (),
        repositories: Iterable[Repository] = (),
    ) -> None:
        self.available = available
        self.dependencies = list(dependencies)
        self.plugins = list(plugins)
        self.repositories = list(repositories)
        self.removed_plugins: list[Plugin] = []
        self.flushes = 0
        self.dirty = False

    def is_focused_project_available(self) -> bool:
        return self.available

    def get_dependencies(self) -> list[Dependency]:
        return list(self.dependencies)

    def add_dependencies(self, dependencies):
        added = []
        for dependency in dependencies:
            if any(d.key == dependency.key for d in self.dependencies):
                continue
            self.dependencies.append(dependency)
            added.append(dependency)
        self.dirty |= bool(added)
        return added

    def remove_dependencies(self, dependencies):
        removed = [d for d in self.dependencies if d in list(dependencies)]
        self.dependencies = [d for d in self.dependencies if d not in removed]
        self.dirty |= bool(removed)
        return removed

    def get_build_plugins(self) -> list[Plugin]:
        return list(self.plugins)

    def add_build_plugins(self, plugins):
        added = [p for p in plugins if p not in self.plugins]
        self.plugins.extend(added)
        self.dirty |= bool(added)
        return added

    def remove_build_plugins(self, plugins):
        wanted = list(plugins)
        removed = [p for p in self.plugins if p in wanted]
        self.plugins = [p for p in self.plugins if p not in removed]
        self.removed_plugins.extend(removed)
        self.dirty |= bool(removed)
        return removed

    def get_repositories(self) -> list[Repository]:
        return list(self.repositories)

    def add_repositories(self, repositories):
        added = [r for r in repositories if all(r.id != x.id for x in self.repositories)]
        self.repositories.extend(added)
        self.dirty |= bool(added)
        return added

    def remove_repositories(self, repositories):
        ids = {r.id for r in repositories}
        removed = [r for r in self.repositories if r.id in ids]
        self.repositories = [r for r in self.repositories if r.id not in ids]
        self.dirty |= bool(removed)
        return removed

    def flush(self) -> bool:
        self.flushes += 1
        written, self.dirty = self.dirty, False
        return written


@pytest.fixture
def settings() -> AddonSettings:
    return AddonSettings(_env_file=None)


@pytest.fixture
def addon_config() -> AddonConfiguration:
    return AddonConfiguration(
        repositories=[Repository(id="roo-cometd-addon", url="https://example.org/repo")],
        dependencies=[
            Dependency(group_id="org.cometd.java", artifact_id="cometd-java-server", version="2.5.0"),
            Dependency(group_id="org.eclipse.jetty", artifact_id="jetty-servlets", version="8.1.7.v20120910"),
        ],
        plugins=[
            Plugin(group_id="org.mortbay.jetty", artifact_id="jetty-maven-plugin", version="8.1.7.v20120910"),
        ],
    )


@pytest.fixture
def web_project(tmp_path: Path) -> Path:
    """A Maven web module on disk with a Java EE 2.5 descriptor."""

    (tmp_path / "pom.xml").write_text(POM_XML, encoding="utf-8")
    web_inf = tmp_path / "src" / "main" / "webapp" / "WEB-INF"
    web_inf.mkdir(parents=True)
    (web_inf / "web.xml").write_text(JAVAEE_WEB_XML, encoding="utf-8")
    return tmp_path
