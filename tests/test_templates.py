"""Tests for twigsmith.templates."""

from __future__ import annotations

import os.path
from pathlib import Path

import pytest
from jinja2 import Environment, TemplateNotFound

from twigsmith.config import EnvironmentConfig
from twigsmith.errors import ConfigurationError, TemplateResolutionError
from twigsmith.templates import (
    ModuleLoader,
    SiteEnvironment,
    configure_environment,
    find_workspace_root,
    load_filter,
    render_source,
)


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def shout(value):
    return str(value).upper()


# ---------------------------------------------------------------------------
# ModuleLoader
# ---------------------------------------------------------------------------


class TestModuleLoader:
    def test_first_root_wins(self, tmp_path):
        a = tmp_path / "a"
        b = tmp_path / "b"
        write(a / "page.twig", "from a")
        write(b / "page.twig", "from b")

        loader = ModuleLoader([a, b], cwd=tmp_path)
        env = Environment(loader=loader)
        assert env.get_template("page.twig").render() == "from a"

    def test_later_root_without_module_fallback(self, tmp_path):
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.mkdir()
        write(b / "only_b.twig", "from b")
        write(tmp_path / "node_modules" / "only_b.twig", "from modules")

        loader = ModuleLoader([a, b], cwd=tmp_path)
        assert loader.find("only_b.twig") == b / "only_b.twig"
        assert loader.reporter == {}

    def test_falls_back_to_modules_dir(self, tmp_path):
        root = tmp_path / "site"
        root.mkdir()
        theme = write(tmp_path / "node_modules" / "theme" / "base.twig", "theme")

        loader = ModuleLoader([root], cwd=tmp_path)
        env = Environment(loader=loader)
        assert env.get_template("theme/base.twig").render() == "theme"
        assert loader.reporter == {"theme/base.twig": str(theme.resolve())}

    def test_falls_back_to_workspace_root(self, tmp_path):
        workspace = tmp_path / "ws"
        cwd = workspace / "packages" / "site"
        cwd.mkdir(parents=True)
        shared = write(workspace / "node_modules" / "shared" / "nav.twig", "nav")

        loader = ModuleLoader([cwd], cwd=cwd, workspace_root=workspace)
        assert loader.find("shared/nav.twig") == shared.resolve()

    def test_workspace_not_searched_when_unset(self, tmp_path):
        workspace = tmp_path / "ws"
        cwd = workspace / "packages" / "site"
        cwd.mkdir(parents=True)
        write(workspace / "node_modules" / "shared" / "nav.twig", "nav")

        loader = ModuleLoader([cwd], cwd=cwd)
        assert loader.find("shared/nav.twig") is None

    def test_unreadable_modules_dir_counts_as_missing(self, tmp_path, monkeypatch):
        workspace = tmp_path / "ws"
        cwd = workspace / "packages" / "site"
        cwd.mkdir(parents=True)
        write(cwd / "node_modules" / "shared" / "nav.twig", "local")
        shared = write(workspace / "node_modules" / "shared" / "nav.twig", "nav")

        blocked = str(cwd / "node_modules")
        is_file = Path.is_file

        def guarded_is_file(self, *args, **kwargs):
            if str(self).startswith(blocked):
                raise PermissionError(13, "Permission denied", str(self))
            return is_file(self, *args, **kwargs)

        monkeypatch.setattr(Path, "is_file", guarded_is_file)

        loader = ModuleLoader([cwd], cwd=cwd, workspace_root=workspace)
        assert loader.find("shared/nav.twig") == shared.resolve()
        assert ModuleLoader([cwd], cwd=cwd).find("shared/nav.twig") is None

    def test_custom_modules_dir(self, tmp_path):
        write(tmp_path / "vendor" / "x.twig", "vendored")
        loader = ModuleLoader([], cwd=tmp_path, modules_dir="vendor")
        assert loader.find("x.twig") == (tmp_path / "vendor" / "x.twig").resolve()

    def test_missing_template_raises(self, tmp_path):
        env = Environment(loader=ModuleLoader([tmp_path], cwd=tmp_path))
        with pytest.raises(TemplateResolutionError):
            env.get_template("nonexistent.twig")

    def test_resolution_error_is_template_not_found(self, tmp_path):
        env = Environment(loader=ModuleLoader([tmp_path], cwd=tmp_path))
        with pytest.raises(TemplateNotFound):
            env.get_template("nonexistent.twig")

    def test_front_matter_is_stripped(self, tmp_path):
        write(tmp_path / "fm.twig", "---\ntitle: x\n---\nHello {{ name }}!")
        env = Environment(loader=ModuleLoader([tmp_path], cwd=tmp_path))
        assert env.get_template("fm.twig").render(name="World") == "Hello World!"

    def test_records_resolved_names(self, tmp_path):
        path = write(tmp_path / "a.twig", "a")
        loader = ModuleLoader([tmp_path], cwd=tmp_path)
        Environment(loader=loader).get_template("a.twig")
        assert loader.paths_to_names == {str(path): "a.twig"}

    def test_no_cache_marks_templates_stale(self, tmp_path):
        write(tmp_path / "a.twig", "a")
        loader = ModuleLoader([tmp_path], cwd=tmp_path, no_cache=True)
        _, _, uptodate = loader.get_source(Environment(), "a.twig")
        assert uptodate() is False

    def test_mtime_uptodate(self, tmp_path):
        write(tmp_path / "a.twig", "a")
        loader = ModuleLoader([tmp_path], cwd=tmp_path)
        _, filename, uptodate = loader.get_source(Environment(), "a.twig")
        assert filename == str(tmp_path / "a.twig")
        assert uptodate() is True


class TestResolveRelative:
    def test_sibling_of_referencing_template(self, tmp_path):
        nav = write(tmp_path / "pages" / "partials" / "nav.twig", "nav")
        loader = ModuleLoader([], cwd=tmp_path)
        assert loader.resolve_relative("pages/about.twig", "partials/nav.twig") == str(nav.resolve())

    def test_referencing_template_as_directory(self, tmp_path):
        part = write(tmp_path / "pages" / "about.twig" / "part.twig", "part")
        loader = ModuleLoader([], cwd=tmp_path)
        assert loader.resolve_relative("pages/about.twig", "part.twig") == str(part.resolve())

    def test_searches_roots_after_cwd(self, tmp_path):
        root = tmp_path / "src"
        target = write(root / "layouts" / "base.twig", "base")
        loader = ModuleLoader([root], cwd=tmp_path / "elsewhere")
        assert loader.resolve_relative("index.twig", "layouts/base.twig") == str(target.resolve())

    def test_unresolved_returns_none(self, tmp_path):
        loader = ModuleLoader([tmp_path], cwd=tmp_path)
        assert loader.resolve_relative("index.twig", "missing.twig") is None


class TestFindWorkspaceRoot:
    def test_detects_manifest_two_levels_up(self, tmp_path):
        cwd = tmp_path / "packages" / "site"
        cwd.mkdir(parents=True)
        write(tmp_path / "lerna.json", "{}")
        assert find_workspace_root(cwd) == tmp_path.resolve()

    def test_no_manifest(self, tmp_path):
        cwd = tmp_path / "packages" / "site"
        cwd.mkdir(parents=True)
        assert find_workspace_root(cwd) is None

    def test_custom_manifest(self, tmp_path):
        cwd = tmp_path / "packages" / "site"
        cwd.mkdir(parents=True)
        write(tmp_path / "pnpm-workspace.yaml", "packages: []")
        assert find_workspace_root(cwd, "pnpm-workspace.yaml") == tmp_path.resolve()


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


class TestConfigureEnvironment:
    def test_source_is_appended_to_roots(self, tmp_path):
        source = tmp_path / "src"
        env = configure_environment(EnvironmentConfig(paths=["themes"]), source, cwd=tmp_path)
        assert isinstance(env, SiteEnvironment)
        assert [str(p) for p in env.loader.search_paths] == ["themes", str(source)]

    def test_remove_source_from_path(self, tmp_path):
        config = EnvironmentConfig(paths=["themes"], remove_source_from_path=True)
        env = configure_environment(config, tmp_path / "src", cwd=tmp_path)
        assert [str(p) for p in env.loader.search_paths] == ["themes"]

    def test_default_options(self, tmp_path):
        env = configure_environment(EnvironmentConfig(paths=[]), tmp_path, cwd=tmp_path)
        assert env.autoescape is True
        assert env.trim_blocks is True
        assert env.lstrip_blocks is True

    def test_raw_aliases_safe(self, tmp_path):
        env = configure_environment(EnvironmentConfig(paths=[]), tmp_path, cwd=tmp_path)
        assert env.filters["raw"] is env.filters["safe"]
        assert env.from_string("{{ x | raw }}").render(x="<b>") == "<b>"

    def test_custom_filters(self, tmp_path):
        config = EnvironmentConfig(
            paths=[],
            custom_filters={"basename": "os.path:basename", "shout": shout},
        )
        env = configure_environment(config, tmp_path, cwd=tmp_path)
        assert env.filters["basename"] is os.path.basename
        assert env.from_string("{{ 'a/b.txt' | basename | shout }}").render() == "B.TXT"

    def test_bad_filter_reference_raises(self, tmp_path):
        config = EnvironmentConfig(paths=[], custom_filters={"x": "no_such_module:thing"})
        with pytest.raises(ConfigurationError):
            configure_environment(config, tmp_path, cwd=tmp_path)

    def test_custom_environment_hook(self, tmp_path):
        seen = {}

        def factory(loaders, config, source):
            seen["loaders"] = loaders
            seen["source"] = source
            return Environment(loader=loaders[0])

        config = EnvironmentConfig(paths=[], custom_environment=factory)
        env = configure_environment(config, tmp_path, cwd=tmp_path)
        assert type(env) is Environment
        assert isinstance(seen["loaders"][0], ModuleLoader)
        assert seen["source"] == tmp_path
        assert "raw" in env.filters

    def test_custom_post_processing_hook(self, tmp_path):
        def custom(env):
            env.globals["site_name"] = "Example"
            return env

        config = EnvironmentConfig(paths=[], custom=custom)
        env = configure_environment(config, tmp_path, cwd=tmp_path)
        assert env.from_string("{{ site_name }}").render() == "Example"

    def test_new_loader_per_call(self, tmp_path):
        config = EnvironmentConfig(paths=[])
        first = configure_environment(config, tmp_path, cwd=tmp_path)
        second = configure_environment(config, tmp_path, cwd=tmp_path)
        assert first.loader is not second.loader


class TestLoadFilter:
    def test_dotted_reference(self):
        assert load_filter("os.path.basename") is os.path.basename

    def test_callable_passes_through(self):
        assert load_filter(shout) is shout

    def test_missing_attribute(self):
        with pytest.raises(ConfigurationError):
            load_filter("os.path:no_such_function")

    def test_not_callable(self):
        with pytest.raises(ConfigurationError, match="not callable"):
            load_filter("os.path:sep")


class TestRenderSource:
    def test_relative_extends(self, tmp_path):
        write(tmp_path / "layouts" / "base.twig", "<main>{% block body %}{% endblock %}</main>")
        env = configure_environment(EnvironmentConfig(paths=[]), tmp_path, cwd=tmp_path)
        source = "{% extends 'layouts/base.twig' %}{% block body %}{{ x }}{% endblock %}"
        assert render_source(env, source, {"x": "hi"}, "index.twig") == "<main>hi</main>"

    def test_include_next_to_page(self, tmp_path):
        write(tmp_path / "pages" / "_nav.twig", "<nav></nav>")
        env = configure_environment(EnvironmentConfig(paths=[]), tmp_path, cwd=tmp_path)
        out = render_source(env, "{% include '_nav.twig' %}", {}, "pages/about.twig")
        assert out == "<nav></nav>"
