"""Vue single-file component driver.

The JavaScript layers run on the ``<script>`` block only; line counts,
logical lines and directive usage cover the whole file.
"""

import re

from ..metrics.record import MetricRecord
from .base import ExtractionContext, Layer, Sections
from .javascript import JAVASCRIPT
from .text import count, count_lines, count_logical_lines

TEMPLATE = re.compile(r"<template>([\s\S]*?)</template>")
SCRIPT = re.compile(r"<script.*?>([\s\S]*?)</script>")
STYLE = re.compile(r"<style.*?>([\s\S]*?)</style>")
SCRIPT_SETUP = re.compile(r"<script\s+setup")

OPTIONS_API = {
    "data": re.compile(r"\bdata\s*\(\s*\)\s*\{"),
    "methods": re.compile(r"\bmethods\s*:\s*\{"),
    "computed": re.compile(r"\bcomputed\s*:\s*\{"),
    "props": re.compile(r"\bprops\s*:\s*\{"),
    "watch": re.compile(r"\bwatch\s*:\s*\{"),
}
COMPOSITION_API = {
    "ref": re.compile(r"\bref\("),
    "reactive": re.compile(r"\breactive\("),
}
V_DIRECTIVE = re.compile(r"\bv-\w+")


def script_block(content: str) -> str:
    """Body of the first ``<script>`` block, or "" when there is none."""
    match = SCRIPT.search(content)
    return match.group(1) if match else ""


def only_script(ctx: ExtractionContext) -> ExtractionContext:
    return ctx.narrow(script_block(ctx.content))


def extract_vue(ctx: ExtractionContext) -> MetricRecord:
    content = ctx.content
    script = script_block(content)

    has_template = TEMPLATE.search(content) is not None
    has_script = SCRIPT.search(content) is not None
    has_style = STYLE.search(content) is not None
    setup = SCRIPT_SETUP.search(content) is not None

    record: MetricRecord = {
        **count_lines(content, content),
        "lloc": count_logical_lines(content),
        "components": 1,
        "hasTemplate": has_template,
        "hasScript": has_script,
        "hasStyle": has_style,
        "scriptSetup": setup,
        "templateBlocks": int(has_template),
        "scriptBlocks": int(has_script),
        "styleBlocks": int(has_style),
        "scriptSetupComponents": int(setup),
        "vDirectives": count(V_DIRECTIVE, content),
        "files": 1,
    }
    for name, pattern in {**OPTIONS_API, **COMPOSITION_API}.items():
        record[name] = count(pattern, script)
    return record


def vue_sections(metrics: MetricRecord) -> Sections:
    return {
        "Vue Components": {
            "Total Components": metrics.get("components", 0),
            "With Template": metrics.get("templateBlocks", 0),
            "With Script": metrics.get("scriptBlocks", 0),
            "With Style": metrics.get("styleBlocks", 0),
            "Script Setup": metrics.get("scriptSetupComponents", 0),
        },
        "Vue Options API": {
            "Data": metrics.get("data", 0),
            "Methods": metrics.get("methods", 0),
            "Computed": metrics.get("computed", 0),
            "Props": metrics.get("props", 0),
            "Watch": metrics.get("watch", 0),
        },
        "Vue Composition API": {
            "ref()": metrics.get("ref", 0),
            "reactive()": metrics.get("reactive", 0),
        },
        "Vue Directives": {
            "Directive Usage": metrics.get("vDirectives", 0),
        },
    }


VUE_LAYER = Layer("Vue", extract_vue, vue_sections)

VUE = JAVASCRIPT.specialize(
    "Vue", VUE_LAYER, narrow=only_script, extensions=frozenset({".vue"}), priority=20
)
