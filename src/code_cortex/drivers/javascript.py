"""JavaScript, TypeScript and React drivers."""

import re

from ..metrics.record import MetricRecord
from .base import Driver, DriverDescriptor, ExtractionContext, Layer, Sections
from .text import JS_COMMENTS, calculate_complexity, count, count_lines, count_logical_lines

CLASS = re.compile(r"\bclass\s+(\w+)")
FUNCTION = re.compile(r"\bfunction\s+(\w+)\s*\(")
ARROW_FUNCTION = re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:\([^)]*\)|[\w$]+)\s*=>")
METHOD = re.compile(r"(\w+)\s*\([^)]*\)\s*\{")
IMPORT = re.compile(r"\bimport\s+.*?\bfrom\b")
EXPORT = re.compile(r"\bexport\s+(default|const|let|var|function|class|\{)")
ASYNC_FUNCTION = re.compile(r"\basync\s+(function|\(|[\w$]+\s*=>)")

TS_INTERFACE = re.compile(r"\binterface\s+(\w+)")
TS_TYPE = re.compile(r"\btype\s+(\w+)\s*=")
TS_ENUM = re.compile(r"\benum\s+(\w+)")
TS_DECORATOR = re.compile(r"@\w+")
TS_GENERIC = re.compile(r"<[^>]+>")

REACT_COMPONENT = re.compile(
    r"(?:class\s+(\w+)\s+extends\s+(?:React\.)?(?:Component|PureComponent)"
    r"|(?:function|const|let|var)\s+([A-Z]\w+)\s*=)"
)
REACT_HOOK = re.compile(r"\buse[A-Z]\w*")
JSX_ELEMENT = re.compile(r"<[A-Z]\w+")
PROPS_ACCESS = re.compile(r"\bprops\.")
HOOKS = ("useState", "useEffect", "useContext", "useMemo", "useCallback", "useRef")


def extract_javascript(ctx: ExtractionContext) -> MetricRecord:
    clean = ctx.stripped(JS_COMMENTS)
    named = count(FUNCTION, clean)
    arrows = count(ARROW_FUNCTION, clean)

    return {
        **count_lines(ctx.content, clean),
        "lloc": count_logical_lines(clean),
        "classes": count(CLASS, clean),
        "functions": named + arrows,
        "namedFunctions": named,
        "arrowFunctions": arrows,
        "methods": count(METHOD, clean),
        "imports": count(IMPORT, clean),
        "exports": count(EXPORT, clean),
        "asyncFunctions": count(ASYNC_FUNCTION, clean),
        "complexity": calculate_complexity(clean),
        "files": 1,
    }


def javascript_sections(metrics: MetricRecord) -> Sections:
    return {
        "Structure": {
            "Classes": metrics.get("classes", 0),
            "Functions": metrics.get("functions", 0),
            "  Named Functions": metrics.get("namedFunctions", 0),
            "  Arrow Functions": metrics.get("arrowFunctions", 0),
            "  Async Functions": metrics.get("asyncFunctions", 0),
            "Methods": metrics.get("methods", 0),
        },
        "Dependencies": {
            "Imports": metrics.get("imports", 0),
            "Exports": metrics.get("exports", 0),
        },
    }


def extract_typescript(ctx: ExtractionContext) -> MetricRecord:
    clean = ctx.stripped(JS_COMMENTS)
    return {
        "interfaces": count(TS_INTERFACE, clean),
        "types": count(TS_TYPE, clean),
        "enums": count(TS_ENUM, clean),
        "decorators": count(TS_DECORATOR, clean),
        "generics": count(TS_GENERIC, clean),
    }


def typescript_sections(metrics: MetricRecord) -> Sections:
    return {
        "TypeScript Features": {
            "Interfaces": metrics.get("interfaces", 0),
            "Type Aliases": metrics.get("types", 0),
            "Enums": metrics.get("enums", 0),
            "Decorators": metrics.get("decorators", 0),
            "Generic Usage": metrics.get("generics", 0),
        }
    }


def extract_react(ctx: ExtractionContext) -> MetricRecord:
    clean = ctx.stripped(JS_COMMENTS)
    record: MetricRecord = {
        "components": count(REACT_COMPONENT, clean),
        # Distinct hook names per file; the aggregate sums them per file.
        "hooks": len(set(REACT_HOOK.findall(clean))),
        "jsxElements": count(JSX_ELEMENT, clean),
        "propsUsage": count(PROPS_ACCESS, clean),
    }
    for hook in HOOKS:
        record[hook] = clean.count(hook)
    return record


def react_sections(metrics: MetricRecord) -> Sections:
    hooks = {"Unique Hooks": metrics.get("hooks", 0)}
    hooks.update((hook, metrics.get(hook, 0)) for hook in HOOKS)
    return {
        "React Structure": {
            "Components": metrics.get("components", 0),
            "JSX Elements": metrics.get("jsxElements", 0),
            "Props Usage": metrics.get("propsUsage", 0),
        },
        "React Hooks": hooks,
    }


JAVASCRIPT_LAYER = Layer("JavaScript", extract_javascript, javascript_sections)
TYPESCRIPT_LAYER = Layer("TypeScript", extract_typescript, typescript_sections)
REACT_LAYER = Layer("React", extract_react, react_sections)

JAVASCRIPT = Driver(
    DriverDescriptor(
        name="JavaScript",
        extensions=frozenset({".js", ".mjs", ".cjs"}),
        priority=10,
    ),
    layers=(JAVASCRIPT_LAYER,),
)

TYPESCRIPT = JAVASCRIPT.specialize(
    "TypeScript", TYPESCRIPT_LAYER, extensions=frozenset({".ts"}), priority=15
)

REACT = JAVASCRIPT.specialize("React", REACT_LAYER, extensions=frozenset({".jsx"}), priority=20)

REACT_TYPESCRIPT = TYPESCRIPT.specialize(
    "React TypeScript", REACT_LAYER, extensions=frozenset({".tsx"}), priority=25
)
