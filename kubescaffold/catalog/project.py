"""Templates rendered in the bootstrap batch, before any version catalog.

None of these depend on the boilerplate header: the header is one of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from kubescaffold.config import DEFAULT_BOILERPLATE_PATH, ScaffoldSettings
from kubescaffold.errors import ContentResolutionError
from kubescaffold.model.file import Template

if TYPE_CHECKING:
    from kubescaffold.machinery.renderer import TemplateRenderer
    from kubescaffold.model.universe import Universe

LICENSES: dict[str, str] = {
    "apache2": """Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
""",
    "none": "",
}


@dataclass
class Boilerplate(Template):
    """The license header prepended to every generated Go source file.

    The license text is picked here rather than in the template body, which
    only ever substitutes ``notice``.  The notice is built only when the body
    is rendered, so the path resolves whatever the license.
    """

    license: str = "apache2"
    owner: str = ""
    year: int = 1970
    path: str = DEFAULT_BOILERPLATE_PATH

    template_body = "/*\n{{ notice }}*/"

    def notice(self) -> str:
        if self.license not in LICENSES:
            raise ContentResolutionError(f"unknown license {self.license!r}", field="license")
        sections = []
        if self.owner:
            # An owner such as "Example Inc." already ends the sentence.
            period = "" if self.owner.endswith(".") else "."
            sections.append(f"Copyright {self.year} {self.owner}{period}\n")
        if LICENSES[self.license]:
            sections.append(LICENSES[self.license])
        return "\n".join(sections)

    def resolve_content(self, universe: Universe, renderer: TemplateRenderer) -> bytes:
        context = {**self.context(universe), "notice": self.notice()}
        return renderer.render_content(self.template_body, context).encode("utf-8")


class GitIgnore(Template):
    path = ".gitignore"
    template_body = """
# Binaries for programs and plugins
*.exe
*.exe~
*.dll
*.so
*.dylib
bin

# Test binary, build with `go test -c`
*.test

# Output of the go coverage tool, specifically when used with LiteIDE
*.out

# Kubernetes Generated files - skip generated files, except for vendored files

!vendor/**/zz_generated.*

# editor and IDE paraphernalia
.idea
*.swp
*.swo
*~
"""


class AuthProxyRole(Template):
    path = "config/rbac/auth_proxy_role.yaml"
    template_body = """apiVersion: rbac.authorization.k8s.io/v1
kind: ClusterRole
metadata:
  name: proxy-role
rules:
- apiGroups: ["authentication.k8s.io"]
  resources:
  - tokenreviews
  verbs: ["create"]
- apiGroups: ["authorization.k8s.io"]
  resources:
  - subjectaccessreviews
  verbs: ["create"]
"""


class AuthProxyRoleBinding(Template):
    path = "config/rbac/auth_proxy_role_binding.yaml"
    template_body = """apiVersion: rbac.authorization.k8s.io/v1
kind: ClusterRoleBinding
metadata:
  name: proxy-rolebinding
roleRef:
  apiGroup: rbac.authorization.k8s.io
  kind: ClusterRole
  name: proxy-role
subjects:
- kind: ServiceAccount
  name: default
  namespace: system
"""


def boilerplate_unit(settings: ScaffoldSettings) -> Boilerplate:
    return Boilerplate(
        license=settings.license,
        owner=settings.owner,
        year=settings.year,
        path=settings.boilerplate_path,
    )


def static_project_files() -> list[Template]:
    """Project files that render without the boilerplate header."""
    return [GitIgnore(), AuthProxyRole(), AuthProxyRoleBinding()]


def bootstrap_catalog(settings: ScaffoldSettings) -> list[Template]:
    """The first batch of every run: the header plus the static project files."""
    return [boilerplate_unit(settings), *static_project_files()]
