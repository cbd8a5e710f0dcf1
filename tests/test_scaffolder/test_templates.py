"""Tests for Jinja2 template rendering (stackwright.scaffolder.templates).

Covers:
- Every template renders for every valid stack under StrictUndefined
- Template context flags
- Atomic file writes
"""

from __future__ import annotations

import itertools
from pathlib import Path

import pytest
from jinja2 import UndefinedError

from stackwright.scaffolder.templates import TemplateRenderer, build_context, write_text
from stackwright.stack.models import Auth, Backend, Database, Frontend, StackSelection
from stackwright.stack.validator import validate

pytestmark = pytest.mark.unit

TEMPLATE_DIR = Path(__file__).resolve().parents[2] / "stackwright" / "scaffolder" / "templates"
ALL_TEMPLATES = sorted(
    p.relative_to(TEMPLATE_DIR).as_posix() for p in TEMPLATE_DIR.rglob("*.j2")
)
VALID_SELECTIONS = [
    StackSelection(frontend=Frontend.REACT, backend=b, database=d, auth=a)
    for b, d, a in itertools.product(Backend, Database, Auth)
    if not validate(b, d, a)
]


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


class TestRenderer:
    def test_templates_discovered(self):
        assert "README.md.j2" in ALL_TEMPLATES
        assert "node/express/app.js.j2" in ALL_TEMPLATES

    @pytest.mark.parametrize("template", ALL_TEMPLATES)
    @pytest.mark.parametrize("selection", VALID_SELECTIONS, ids=lambda s: s.describe())
    def test_renders_for_every_valid_stack(self, renderer, config, template, selection):
        content = renderer.render(template, build_context(config, selection))
        assert "{{" not in content
        assert "{%" not in content

    def test_missing_variable_is_an_error(self, renderer):
        with pytest.raises(UndefinedError):
            renderer.render("README.md.j2", {})

    def test_has(self, renderer):
        assert renderer.has("flask/app.py.j2")
        assert not renderer.has("flask/missing.py.j2")

    def test_custom_template_dir(self, tmp_path: Path):
        (tmp_path / "hello.txt.j2").write_text("Hello {{ project_name }}")
        assert TemplateRenderer(tmp_path).render("hello.txt.j2", {"project_name": "x"}) == "Hello x"

    def test_readme_mentions_stack(self, renderer, config, mern_selection):
        content = renderer.render("README.md.j2", build_context(config, mern_selection))
        assert "demo-app" in content
        assert "MongoDB" in content

    async def test_render_to_file_creates_parents(self, renderer, config, mern_selection, tmp_path: Path):
        out = tmp_path / "server" / "config" / "db.js"
        result = await renderer.render_to_file(
            "node/db/mongodb.js.j2", out, build_context(config, mern_selection)
        )
        assert result == out
        assert out.read_text()


class TestBuildContext:
    def test_node_flags(self, config, mern_selection):
        ctx = build_context(config, mern_selection)
        assert ctx["is_node"] and ctx["is_express"] and ctx["is_mongodb"]
        assert not ctx["is_sql"]
        assert ctx["uses_jwt"] and not ctx["uses_firebase_auth"]
        assert ctx["start_command"] == "npm start"

    def test_flask_commands(self, config, flask_selection):
        ctx = build_context(config, flask_selection)
        assert ctx["is_flask"] and ctx["is_sql"]
        assert ctx["install_command"] == "pip install -r requirements.txt"
        assert ctx["start_command"] == "python app.py"

    def test_django_start_command(self, config, flask_selection):
        selection = flask_selection.model_copy(update={"backend": Backend.DJANGO})
        assert build_context(config, selection)["start_command"] == "python manage.py runserver"

    def test_values_are_labels(self, config, mern_selection):
        ctx = build_context(config, mern_selection)
        assert ctx["backend"] == "Node + Express"
        assert ctx["project_slug"] == "demo-app"


class TestWriteText:
    async def test_single_write(self, tmp_path: Path):
        path = await write_text(tmp_path / "a" / "b.txt", "content\n")
        assert path.read_text() == "content\n"

    async def test_overwrites(self, tmp_path: Path):
        path = tmp_path / "b.txt"
        await write_text(path, "one")
        await write_text(path, "two")
        assert path.read_text() == "two"
