"""Tests for the built-in drivers and the layer composition they share."""

import json
import re

import pytest

from code_cortex.drivers import (
    BLADE,
    COMPOSER_JSON,
    JAVASCRIPT,
    JSON,
    PACKAGE_JSON,
    PHP,
    REACT,
    REACT_TYPESCRIPT,
    TYPESCRIPT,
    VUE,
    Driver,
    DriverDescriptor,
    ExtractionContext,
    Layer,
)
from code_cortex.drivers.text import calculate_complexity, count_lines
from code_cortex.metrics import error_record

JS_SOURCE = "\n".join(
    [
        "import React from 'react';",
        "// a comment",
        "export function add(a, b) { return a + b; }",
        "const mul = (a, b) => a * b;",
        "class Calc {}",
    ]
)

TS_SOURCE = "\n".join(
    [
        "interface User { name: string }",
        "type Id = number;",
        "enum Color { Red }",
        "function id<T>(x: T): T { return x; }",
    ]
)

TSX_SOURCE = "\n".join(
    [
        "import React, { useState, useEffect } from 'react';",
        "interface Props { label: string }",
        "const Counter = (props) => {",
        "  const [n, setN] = useState(0);",
        "  useEffect(() => {}, []);",
        "  return <Button label={props.label} />;",
        "};",
    ]
)

VUE_SOURCE = "\n".join(
    [
        "<template>",
        '  <div v-if="show" v-for="i in items">{{ msg }}</div>',
        "</template>",
        "<script>",
        "export default {",
        "  data() { return { msg: 'hi' } },",
        "  methods: { greet() {} },",
        "}",
        "</script>",
        "<style>.a { color: red; }</style>",
    ]
)


class TestDescriptorMatching:
    def test_extension_match(self):
        assert PHP.can_handle("src/User.php")
        assert not PHP.can_handle("src/user.js")

    def test_exclude_pattern_vetoes_extension(self):
        assert not PHP.can_handle("resources/views/view.blade.php")

    def test_include_patterns_override_extensions(self):
        assert PACKAGE_JSON.can_handle("/project/package.json")
        assert not PACKAGE_JSON.can_handle("/project/data.json")

    def test_patterns_apply_to_basename_only(self):
        assert not PACKAGE_JSON.can_handle("/package.json/settings.json")

    def test_json_excludes_lockfiles_and_tsconfig(self):
        assert JSON.can_handle("data.json")
        assert not JSON.can_handle("package-lock.json")
        assert not JSON.can_handle("tsconfig.json")

    def test_string_patterns_are_compiled(self):
        descriptor = DriverDescriptor("X", include_patterns=(r"\.x$",))
        assert all(isinstance(p, re.Pattern) for p in descriptor.include_patterns)
        assert descriptor.matches("file.x")


class TestTextHelpers:
    def test_count_lines(self):
        assert count_lines("a\n\nb", "a\n\nb") == {"loc": 3, "cloc": 1, "ncloc": 2}

    def test_complexity_counts_decision_points(self):
        assert calculate_complexity("x = 1;") == 1
        assert calculate_complexity("if (a && b) { while (c) {} }") == 4


class TestPHPDriver:
    def test_class_and_method(self, php_class):
        record = PHP.parse(php_class, "a.php")
        assert record["classes"] == 1
        assert record["concreteClasses"] == 1
        assert record["methods"] == 1
        assert record["publicMethods"] == 1
        assert record["files"] == 1
        assert record["loc"] == 1

    def test_structure(self):
        source = "\n".join(
            [
                "<?php",
                "namespace App\\Models;",
                "use Foo\\Bar;",
                "// class Ignored {}",
                "abstract class Base {",
                "    const LIMIT = 10;",
                "    protected static function make() {}",
                "    private function hide() {}",
                "}",
                "interface Shape {}",
                "trait Greets {}",
            ]
        )
        record = PHP.parse(source, "Base.php")
        assert record["namespaces"] == {"App\\Models"}
        assert record["classes"] == 1
        assert record["abstractClasses"] == 1
        assert record["interfaces"] == 1
        assert record["traits"] == 1
        assert record["constants"] == 1
        assert record["useStatements"] == 1
        assert record["protectedMethods"] == 1
        assert record["privateMethods"] == 1
        assert record["staticMethods"] == 1
        assert record["nonStaticMethods"] == 1
        assert record["cloc"] == 1

    def test_repeated_parse_is_identical(self, php_class):
        assert PHP.parse(php_class, "a.php") == PHP.parse(php_class, "a.php")

    def test_format_metrics_sections(self, php_class):
        sections = PHP.format_metrics(PHP.parse(php_class, "a.php"))
        assert sections["Structure"]["Classes"] == 1
        assert sections["Methods"]["  Public Methods"] == {"value": 1, "percentage": 100.0}


class TestBladeDriver:
    def test_blade_scenario(self, blade_template):
        record = BLADE.parse(blade_template, "b.blade.php")
        assert record["bladeDirectives"] == 2
        assert record["bladeEchos"] == 1
        assert record["bladeRawEchos"] == 0

    def test_includes_php_metrics(self, blade_template):
        record = BLADE.parse(blade_template, "b.blade.php")
        assert set(PHP.parse(blade_template, "b.blade.php")) <= set(record)

    def test_specializes_php(self):
        assert BLADE.extends == "PHP"
        assert BLADE.priority > PHP.priority
        assert BLADE.can_handle("view.blade.php")
        assert not BLADE.can_handle("plain.php")

    def test_sections_extend_php(self, blade_template):
        sections = BLADE.format_metrics(BLADE.parse(blade_template, "b.blade.php"))
        assert "Structure" in sections
        assert sections["Blade Features"]["Directives"] == 2


class TestJavaScriptFamily:
    def test_javascript_counts(self):
        record = JAVASCRIPT.parse(JS_SOURCE, "calc.js")
        assert record["namedFunctions"] == 1
        assert record["arrowFunctions"] == 1
        assert record["functions"] == 2
        assert record["classes"] == 1
        assert record["imports"] == 1
        assert record["exports"] == 1
        assert record["loc"] == 5
        assert record["cloc"] == 1
        assert record["ncloc"] == 4

    def test_typescript_adds_type_features(self):
        record = TYPESCRIPT.parse(TS_SOURCE, "id.ts")
        assert record["interfaces"] == 1
        assert record["types"] == 1
        assert record["enums"] == 1
        assert record["generics"] == 1
        assert "namedFunctions" in record

    def test_react_metrics(self):
        record = REACT.parse(TSX_SOURCE, "Counter.jsx")
        assert record["components"] == 1
        assert record["hooks"] == 2
        assert record["useState"] == 2
        assert record["useEffect"] == 2
        assert record["jsxElements"] == 1
        assert record["propsUsage"] == 1

    def test_react_typescript_contains_every_ancestor_key(self):
        record = REACT_TYPESCRIPT.parse(TSX_SOURCE, "Counter.tsx")
        js = JAVASCRIPT.parse(TSX_SOURCE, "Counter.tsx")
        ts = TYPESCRIPT.parse(TSX_SOURCE, "Counter.tsx")
        react = REACT.parse(TSX_SOURCE, "Counter.tsx")

        assert set(js) <= set(record)
        assert set(ts) <= set(record)
        assert set(react) <= set(record)
        for key, value in js.items():
            assert record[key] == value
        assert record["interfaces"] == 1

    def test_extension_ownership(self):
        assert TYPESCRIPT.can_handle("a.ts") and not TYPESCRIPT.can_handle("a.tsx")
        assert REACT_TYPESCRIPT.can_handle("a.tsx")
        assert REACT.can_handle("a.jsx")
        assert JAVASCRIPT.can_handle("a.mjs")

    def test_specialization_chain(self):
        assert TYPESCRIPT.extends == "JavaScript"
        assert REACT_TYPESCRIPT.extends == "TypeScript"
        assert [layer.name for layer in REACT_TYPESCRIPT.layers] == ["JavaScript", "TypeScript", "React"]

    def test_react_typescript_sections(self):
        sections = REACT_TYPESCRIPT.format_metrics(REACT_TYPESCRIPT.parse(TSX_SOURCE, "Counter.tsx"))
        for title in ("Structure", "TypeScript Features", "React Structure", "React Hooks"):
            assert title in sections


class TestVueDriver:
    def test_single_file_component(self):
        record = VUE.parse(VUE_SOURCE, "Hello.vue")
        assert record["components"] == 1
        assert record["hasTemplate"] is True
        assert record["hasScript"] is True
        assert record["hasStyle"] is True
        assert record["scriptSetup"] is False
        assert record["templateBlocks"] == 1
        assert record["vDirectives"] == 2
        assert record["data"] == 1
        assert record["methods"] == 1

    def test_javascript_runs_on_script_block_only(self):
        record = VUE.parse(VUE_SOURCE, "Hello.vue")
        assert record["exports"] == 1
        assert record["loc"] == len(VUE_SOURCE.split("\n"))

    def test_missing_script(self):
        record = VUE.parse("<template><p>hi</p></template>", "Static.vue")
        assert record["hasScript"] is False
        assert record["functions"] == 0
        assert record["files"] == 1

    def test_script_setup_composition_api(self):
        source = "<script setup>\nconst count = ref(0);\nconst state = reactive({});\n</script>"
        record = VUE.parse(source, "Setup.vue")
        assert record["scriptSetup"] is True
        assert record["scriptSetupComponents"] == 1
        assert record["ref"] == 1
        assert record["reactive"] == 1


class TestJSONDriver:
    def test_valid_json(self):
        record = JSON.parse('{"a": 1, "b": [1, 2]}', "data.json")
        assert record == {
            "loc": 1,
            "cloc": 0,
            "ncloc": 1,
            "lloc": 2,
            "jsonObjects": 1,
            "topLevelKeys": 2,
            "files": 1,
        }

    def test_malformed_json_yields_error_record(self):
        assert JSON.parse("{invalid", "broken.json") == error_record()

    def test_malformed_manifest_yields_error_record(self):
        assert PACKAGE_JSON.parse("{invalid", "package.json") == error_record()
        assert COMPOSER_JSON.parse("{invalid", "composer.json") == error_record()

    def test_scalar_json(self):
        record = JSON.parse("42", "n.json")
        assert record["topLevelKeys"] == 0
        assert record["files"] == 1


class TestPackageJsonDriver:
    def test_react_with_yarn_lock(self, tmp_path):
        (tmp_path / "yarn.lock").write_text("")
        path = tmp_path / "package.json"
        content = json.dumps({"dependencies": {"react": "^18.0.0"}})
        record = PACKAGE_JSON.parse(content, path)
        assert record["frameworks"]["react"] is True
        assert record["packageManager"] == "yarn"
        assert record["jsonObjects"] == 1

    def test_package_manager_fallbacks(self, tmp_path):
        path = tmp_path / "package.json"
        assert PACKAGE_JSON.parse("{}", path)["packageManager"] == "unknown"
        (tmp_path / "package-lock.json").write_text("{}")
        assert PACKAGE_JSON.parse("{}", path)["packageManager"] == "npm"
        (tmp_path / "pnpm-lock.yaml").write_text("")
        assert PACKAGE_JSON.parse("{}", path)["packageManager"] == "pnpm"

    def test_manifest_details(self, tmp_path):
        content = json.dumps(
            {
                "name": "web",
                "version": "1.2.0",
                "scripts": {"dev": "vite", "build": "vite build"},
                "dependencies": {"vue": "^3.0.0"},
                "devDependencies": {"vite": "^5.0.0", "vitest": "^1.0.0", "typescript": "^5.0.0"},
            }
        )
        record = PACKAGE_JSON.parse(content, tmp_path / "package.json")
        assert record["projectName"] == "web"
        assert record["projectVersion"] == "1.2.0"
        assert record["totalDependencies"] == 1
        assert record["totalDevDependencies"] == 3
        assert record["buildTools"]["vite"] is True
        assert record["testingFrameworks"]["vitest"] is True
        assert record["hasTypeScript"] is True
        assert record["scripts"] == 2

    def test_sections(self, tmp_path):
        content = json.dumps({"name": "web", "dependencies": {"react": "1"}})
        sections = PACKAGE_JSON.format_metrics(PACKAGE_JSON.parse(content, tmp_path / "package.json"))
        assert sections["Project Info"]["Name"] == "web"
        assert sections["Detected Frameworks"]["Frameworks"] == "react"


class TestComposerJsonDriver:
    def test_laravel_manifest(self, tmp_path, laravel_composer):
        record = COMPOSER_JSON.parse(json.dumps(laravel_composer), tmp_path / "composer.json")
        assert record["projectName"] == "acme/shop"
        assert record["phpVersion"] == "^8.1"
        assert record["hasLaravel"] is True
        assert record["laravelVersion"] == "^10.0"
        assert record["frameworks"]["laravel"] is True
        assert record["autoloadPsr4"] == 1
        assert record["hasViteSetup"] is False

    def test_peeks_sibling_package_json(self, tmp_path, laravel_composer):
        (tmp_path / "package.json").write_text(
            json.dumps({"devDependencies": {"vite": "^5.0.0"}, "dependencies": {"vue": "^3.0.0"}})
        )
        record = COMPOSER_JSON.parse(json.dumps(laravel_composer), tmp_path / "composer.json")
        assert record["hasViteSetup"] is True
        assert record["viteWithFramework"] == "Vue"

    def test_frontend_integration(self, tmp_path):
        content = json.dumps({"require": {"livewire/livewire": "^3.0"}})
        record = COMPOSER_JSON.parse(content, tmp_path / "composer.json")
        assert record["frontendIntegration"] == {"inertia": False, "livewire": True}
        assert record["laravelPackages"]["livewire"] is True
        assert record["hasLaravel"] is False

    def test_text_fields_are_strings(self, tmp_path):
        content = json.dumps({"name": 42, "description": None, "require": {"php": 8, "laravel/framework": 10}})
        record = COMPOSER_JSON.parse(content, tmp_path / "composer.json")
        assert record["projectName"] == "42"
        assert record["projectDescription"] == ""
        assert record["phpVersion"] == "8"
        assert record["laravelVersion"] == "10"


class TestComposition:
    def test_later_layers_win_collisions(self):
        first = Layer("first", lambda ctx: {"a": 1, "b": 1})
        second = Layer("second", lambda ctx: {"b": 2})
        driver = Driver(DriverDescriptor("X", extensions=frozenset({".x"})), layers=(first, second))
        assert driver.parse("", "f.x") == {"a": 1, "b": 2}

    def test_specialize_inherits_descriptor(self):
        extra = Layer("extra", lambda ctx: {"extra": 1})
        child = PHP.specialize("PHP Plus", extra, priority=12)
        assert child.name == "PHP Plus"
        assert child.extends == "PHP"
        assert child.extensions == PHP.extensions
        assert child.exclude_patterns == PHP.exclude_patterns
        assert child.layers[:-1] == PHP.layers

    def test_narrowed_layers_see_narrowed_content(self):
        seen = []
        base = Driver(
            DriverDescriptor("Base", extensions=frozenset({".x"})),
            layers=(Layer("base", lambda ctx: seen.append(ctx.content) or {}),),
        )
        child = base.specialize("Child", narrow=lambda ctx: ctx.narrow(ctx.content.upper()))
        child.parse("abc", "f.x")
        assert seen == ["ABC"]

    def test_extraction_context_caches_json_errors(self):
        ctx = ExtractionContext("{bad", "f.json")
        for _ in range(2):
            with pytest.raises(ValueError):
                ctx.decode_json()
