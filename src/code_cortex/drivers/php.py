"""PHP and Blade template drivers."""

import re

from ..metrics.record import MetricRecord
from .base import Driver, DriverDescriptor, ExtractionContext, Layer, Sections, share
from .text import PHP_COMMENTS, calculate_complexity, count, count_lines, count_logical_lines

CLASS = re.compile(r"\b(abstract\s+)?class\s+(\w+)")
INTERFACE = re.compile(r"\binterface\s+(\w+)")
TRAIT = re.compile(r"\btrait\s+(\w+)")
NAMESPACE = re.compile(r"namespace\s+([\w\\]+)")
METHOD = re.compile(r"(public|private|protected)?\s*(static)?\s*function\s+(\w+)")
FUNCTION = re.compile(r"^function\s+(\w+)\s*\(", re.MULTILINE)
USE_STATEMENT = re.compile(r"^use\s+", re.MULTILINE)
CONSTANT = re.compile(r"const\s+(\w+)")

BLADE_DIRECTIVE = re.compile(
    r"@(if|elseif|else|endif|foreach|endforeach|for|endfor|while|endwhile|unless|endunless"
    r"|isset|empty|auth|guest|can|cannot|include|extends|section|endsection|yield|component"
    r"|slot|push|stack|props|php|endphp)"
)
BLADE_ECHO = re.compile(r"\{\{.*?\}\}")
BLADE_RAW_ECHO = re.compile(r"\{!!.*?!!\}")
BLADE_COMMENT = re.compile(r"\{\{--[\s\S]*?--\}\}")


def extract_php(ctx: ExtractionContext) -> MetricRecord:
    clean = ctx.stripped(PHP_COMMENTS)

    abstract = concrete = 0
    for match in CLASS.finditer(clean):
        if match.group(1):
            abstract += 1
        else:
            concrete += 1

    visibility = {"public": 0, "protected": 0, "private": 0}
    static = 0
    for match in METHOD.finditer(clean):
        visibility[match.group(1) or "public"] += 1
        if match.group(2):
            static += 1
    methods = sum(visibility.values())

    return {
        **count_lines(ctx.content, clean),
        "lloc": count_logical_lines(clean),
        "classes": abstract + concrete,
        "abstractClasses": abstract,
        "concreteClasses": concrete,
        "interfaces": count(INTERFACE, clean),
        "traits": count(TRAIT, clean),
        "namespaces": {m.group(1) for m in NAMESPACE.finditer(clean)},
        "methods": methods,
        "publicMethods": visibility["public"],
        "protectedMethods": visibility["protected"],
        "privateMethods": visibility["private"],
        "staticMethods": static,
        "nonStaticMethods": methods - static,
        "functions": count(FUNCTION, clean),
        "useStatements": count(USE_STATEMENT, clean),
        "constants": count(CONSTANT, clean),
        "complexity": calculate_complexity(clean),
        "files": 1,
    }


def php_sections(metrics: MetricRecord) -> Sections:
    classes = metrics.get("classes", 0)
    sections: Sections = {
        "Structure": {
            "Namespaces": len(metrics.get("namespaces") or ()),
            "Interfaces": metrics.get("interfaces", 0),
            "Traits": metrics.get("traits", 0),
            "Classes": classes,
            "  Abstract Classes": share(metrics.get("abstractClasses"), classes),
            "  Concrete Classes": share(metrics.get("concreteClasses"), classes),
        }
    }

    methods = metrics.get("methods", 0)
    if methods > 0:
        sections["Methods"] = {
            "Total Methods": methods,
            "  Public Methods": share(metrics.get("publicMethods"), methods),
            "  Protected Methods": share(metrics.get("protectedMethods"), methods),
            "  Private Methods": share(metrics.get("privateMethods"), methods),
            "  Static Methods": share(metrics.get("staticMethods"), methods),
        }

    if metrics.get("functions", 0) > 0:
        sections["Functions"] = {"Total Functions": metrics["functions"]}

    return sections


def extract_blade(ctx: ExtractionContext) -> MetricRecord:
    content = ctx.content
    return {
        "bladeDirectives": count(BLADE_DIRECTIVE, content),
        "bladeEchos": count(BLADE_ECHO, content),
        "bladeRawEchos": count(BLADE_RAW_ECHO, content),
        "bladeComments": count(BLADE_COMMENT, content),
    }


def blade_sections(metrics: MetricRecord) -> Sections:
    return {
        "Blade Features": {
            "Directives": metrics.get("bladeDirectives", 0),
            "Echo Statements": metrics.get("bladeEchos", 0),
            "Raw Echo Statements": metrics.get("bladeRawEchos", 0),
            "Blade Comments": metrics.get("bladeComments", 0),
        }
    }


PHP_LAYER = Layer("PHP", extract_php, php_sections)
BLADE_LAYER = Layer("Blade", extract_blade, blade_sections)

PHP = Driver(
    DriverDescriptor(
        name="PHP",
        extensions=frozenset({".php"}),
        exclude_patterns=(r"\.blade\.php$",),
        priority=10,
    ),
    layers=(PHP_LAYER,),
)

BLADE = PHP.specialize(
    "Blade",
    BLADE_LAYER,
    extensions=frozenset(),
    include_patterns=(r"\.blade\.php$",),
    exclude_patterns=(),
    priority=20,
)
