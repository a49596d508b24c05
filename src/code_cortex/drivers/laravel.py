"""Laravel driver: PHP metrics plus framework components and findings.

The driver only claims files when the run's :class:`ProjectContext` says the
project requires ``laravel/framework``. Dead-code and duplicate findings
come from the project-wide :class:`QualityReport` computed before traversal;
each file's record carries only the findings that concern it.
"""

import re
from typing import Dict, List, Optional, Tuple

from ..metrics.record import MetricRecord
from ..project import ProjectContext
from .base import ExtractionContext, Layer, Sections
from .php import PHP
from .text import count

Issue = Dict[str, object]

MODEL = re.compile(r"class\s+(\w+)\s+extends\s+(Model|Authenticatable)")
CONTROLLER = re.compile(r"class\s+(\w+)\s+extends\s+(Controller|BaseController)")
MIDDLEWARE = re.compile(r"class\s+(\w+)\s+implements\s+Middleware|class\s+(\w+)\s+extends\s+Middleware")
MIGRATION = re.compile(r"class\s+(\w+)\s+extends\s+Migration")
SEEDER = re.compile(r"class\s+(\w+)\s+extends\s+Seeder")
FACTORY = re.compile(r"class\s+(\w+)\s+extends\s+Factory")
JOB = re.compile(r"class\s+(\w+)\s+implements\s+ShouldQueue")
COMMAND = re.compile(r"class\s+(\w+)\s+extends\s+Command")
REQUEST = re.compile(r"class\s+(\w+)\s+extends\s+(FormRequest|Request)")
RESOURCE = re.compile(r"class\s+(\w+)\s+extends\s+JsonResource")
PROVIDER = re.compile(r"class\s+(\w+)\s+extends\s+ServiceProvider")
FACADE = re.compile(r"class\s+(\w+)\s+extends\s+Facade")
ANY_CLASS = re.compile(r"class\s+(\w+)")

ELOQUENT_METHOD = re.compile(r"(find|findOrFail|where|orWhere|first|get|all|create|update|delete|save)\s*\(")
ROUTE_DEFINITION = re.compile(r"Route::(get|post|put|patch|delete|resource|group)\s*\(")
VALIDATION = re.compile(r"validate\s*\(|\$this->validate\s*\(")

SQL_RAW = re.compile(r"DB::raw\s*\(|->raw\s*\(")
UNESCAPED_OUTPUT = re.compile(r"\{\{\{.*?\}\}\}|\{!!.*?!!\}")
N_PLUS_ONE = re.compile(r"foreach.*?->.*?->")
EAGER_LOADING = re.compile(r"->with\s*\(")

# (componentType, metric key, directory marker, declaration pattern).
# Events, listeners and policies have no distinguishing declaration and are
# recognised by directory only.
COMPONENTS: Tuple[Tuple[str, str, str, Optional["re.Pattern[str]"]], ...] = (
    ("model", "models", "/Models/", MODEL),
    ("controller", "controllers", "/Controllers/", CONTROLLER),
    ("middleware", "middleware", "/Middleware/", MIDDLEWARE),
    ("migration", "migrations", "/database/migrations/", MIGRATION),
    ("seeder", "seeders", "/database/seeders/", SEEDER),
    ("factory", "factories", "/database/factories/", FACTORY),
    ("job", "jobs", "/Jobs/", JOB),
    ("event", "events", "/Events/", None),
    ("listener", "listeners", "/Listeners/", None),
    ("command", "commands", "/Console/Commands/", COMMAND),
    ("request", "requests", "/Requests/", REQUEST),
    ("resource", "resources", "/Resources/", RESOURCE),
    ("policy", "policies", "/Policies/", None),
    ("provider", "providers", "/Providers/", PROVIDER),
    ("facade", "facades", "/Facades/", FACADE),
)

COMPONENT_LABELS = {
    "models": "Models",
    "controllers": "Controllers",
    "middleware": "Middleware",
    "migrations": "Migrations",
    "seeders": "Seeders",
    "factories": "Factories",
    "jobs": "Jobs",
    "events": "Events",
    "listeners": "Listeners",
    "commands": "Commands",
    "requests": "Form Requests",
    "resources": "API Resources",
    "policies": "Policies",
    "providers": "Service Providers",
    "facades": "Facades",
}

DEAD_CODE_ISSUES = (
    ("unusedClasses", "unused_classes", "medium", "Unused classes found"),
    ("unusedMethods", "unused_methods", "medium", "Unused methods found"),
    ("unusedImports", "unused_imports", "low", "Unused imports found"),
    ("unusedVariables", "unused_variables", "low", "Unused variables found"),
)


def is_laravel_project(project: ProjectContext) -> bool:
    return project.is_laravel


def detect_component_type(path: str, content: str) -> str:
    """First component whose directory or declaration matches, else ``php``."""
    for component, _, marker, pattern in COMPONENTS:
        if marker in path or (pattern is not None and pattern.search(content)):
            return component
    return "php"


def count_components(path: str, content: str) -> Dict[str, int]:
    counts = {}
    for _, key, marker, pattern in COMPONENTS:
        if pattern is not None:
            counts[key] = count(pattern, content)
        else:
            counts[key] = count(ANY_CLASS, content) if marker in path else 0
    return counts


def _issue(kind: str, severity: str, description: str, occurrences: Optional[int] = None, **extra) -> Issue:
    issue: Issue = {"type": kind}
    if occurrences is not None:
        issue["count"] = occurrences
    issue.update(severity=severity, description=description, **extra)
    return issue


# ── Security and performance ───────────────────────────────────


def security_issues(content: str) -> List[Issue]:
    issues = []

    raw_sql = count(SQL_RAW, content)
    if raw_sql:
        issues.append(
            _issue(
                "sql_injection_risk",
                "high",
                "Potential SQL injection vulnerability with DB::raw() usage",
                raw_sql,
            )
        )

    unescaped = count(UNESCAPED_OUTPUT, content)
    if unescaped:
        issues.append(
            _issue("xss_vulnerability", "medium", "Unescaped output that may be vulnerable to XSS", unescaped)
        )

    return issues


def performance_issues(content: str) -> List[Issue]:
    loops = count(N_PLUS_ONE, content)
    if loops and not EAGER_LOADING.search(content):
        return [
            _issue(
                "n_plus_one_query",
                "medium",
                "Potential N+1 query problem - consider using eager loading",
                loops,
            )
        ]
    return []


# ── Code quality ───────────────────────────────────────────────


def _model_quality(content: str) -> List[Issue]:
    issues = []
    if not re.search(r"protected\s+\$(?:fillable|guarded)\s*=\s*\[", content):
        issues.append(
            _issue(
                "mass_assignment_risk",
                "high",
                "Model missing $fillable or $guarded property - mass assignment vulnerability",
            )
        )

    has_relationships = re.search(r"belongsTo|hasOne|hasMany|belongsToMany|morphTo|morphMany", content)
    if re.search(r"protected\s+\$table", content) and not has_relationships:
        issues.append(
            _issue(
                "potential_missing_relationships",
                "low",
                "Model has table definition but no defined relationships",
            )
        )
    return issues


def _controller_quality(content: str) -> List[Issue]:
    issues = []

    methods = len(re.findall(r"public\s+function\s+\w+", content))
    if methods > 10:
        issues.append(
            _issue("fat_controller", "medium", "Controller has too many methods - consider refactoring", methods)
        )

    db_calls = len(re.findall(r"DB::|\\DB::", content))
    if db_calls:
        issues.append(
            _issue(
                "direct_db_access",
                "medium",
                "Direct database calls in controller - consider using repositories or services",
                db_calls,
            )
        )

    validates = re.search(r"validate\s*\(|\$this->validate\s*\(|\$request->validate\s*\(", content)
    if re.search(r"Request\s+\$\w+", content) and not validates:
        issues.append(
            _issue("missing_validation", "medium", "Controller uses Request but no validation found")
        )
    return issues


def _middleware_quality(content: str) -> List[Issue]:
    if re.search(r"public\s+function\s+handle\s*\(", content):
        return []
    return [_issue("missing_handle_method", "high", "Middleware missing handle() method")]


def _migration_quality(content: str) -> List[Issue]:
    has_up = re.search(r"public\s+function\s+up\s*\(", content)
    has_down = re.search(r"public\s+function\s+down\s*\(", content)
    if has_up and not has_down:
        return [
            _issue("missing_down_method", "medium", "Migration missing down() method - cannot rollback")
        ]
    return []


def _general_quality(content: str) -> List[Issue]:
    issues = []

    chains = len(re.findall(r"->\w+\([^)]*\)->\w+\([^)]*\)->\w+\([^)]*\)->", content))
    if chains:
        issues.append(
            _issue(
                "long_method_chains",
                "low",
                "Long method chains detected - consider breaking into smaller steps",
                chains,
            )
        )

    if re.search(r"all\s*\(\s*\)\s*->", content) and not re.search(r"chunk\s*\(|cursor\s*\(", content):
        issues.append(
            _issue(
                "potential_memory_leak",
                "medium",
                "Large dataset operations without chunking - potential memory issue",
            )
        )
    return issues


COMPONENT_CHECKS = {
    "model": _model_quality,
    "controller": _controller_quality,
    "middleware": _middleware_quality,
    "migration": _migration_quality,
}


def laravel_quality(component: str, content: str) -> List[Issue]:
    check = COMPONENT_CHECKS.get(component)
    issues = check(content) if check else []
    return issues + _general_quality(content)


def project_quality(project: Optional[ProjectContext], filepath: str) -> List[Issue]:
    """Findings of the project-wide quality pass that concern ``filepath``."""
    if project is None or project.quality is None:
        return []

    issues = []
    dead_code = project.quality.dead_code_for(filepath)
    for kind, issue_type, severity, description in DEAD_CODE_ISSUES:
        found = dead_code[kind]
        if found:
            issues.append(_issue(issue_type, severity, description, len(found), details=found))

    duplicates = project.quality.duplicates_for(filepath)
    if duplicates:
        issues.append(
            _issue(
                "duplicate_code",
                "medium",
                "Duplicate code blocks found",
                len(duplicates),
                details=duplicates,
            )
        )
    return issues


# ── Layer ──────────────────────────────────────────────────────


def extract_laravel(ctx: ExtractionContext) -> MetricRecord:
    content = ctx.content
    path = ctx.path.as_posix()
    component = detect_component_type(path, content)

    return {
        "componentType": component,
        **count_components(path, content),
        "eloquentMethods": count(ELOQUENT_METHOD, content),
        "routeDefinitions": count(ROUTE_DEFINITION, content),
        "validations": count(VALIDATION, content),
        "securityIssues": security_issues(content),
        "performanceIssues": performance_issues(content),
        "codeQuality": project_quality(ctx.project, str(ctx.path)) + laravel_quality(component, content),
    }


def format_detail(detail: dict) -> str:
    if "file1" in detail:
        blocks = len(detail.get("similarities", []))
        return f"{detail['file1']} <-> {detail['file2']} ({blocks} similar blocks)"
    if "name" in detail:
        return f"{detail['name']} at line {detail.get('line', '?')} in {detail.get('file', '?')}"
    return str(detail)


def _summarize(issues: List[Issue]) -> Dict[str, str]:
    """Total occurrences per (description, severity) across many files."""
    totals: Dict[Tuple[str, str], int] = {}
    for issue in issues:
        key = (str(issue.get("description")), str(issue.get("severity")))
        totals[key] = totals.get(key, 0) + int(issue.get("count", 1))
    return {description: f"{total} ({severity})" for (description, severity), total in totals.items()}


def laravel_sections(metrics: MetricRecord) -> Sections:
    sections: Sections = {
        "Laravel Components": {label: metrics.get(key, 0) for key, label in COMPONENT_LABELS.items()},
        "Laravel Features": {
            "Eloquent Method Calls": metrics.get("eloquentMethods", 0),
            "Route Definitions": metrics.get("routeDefinitions", 0),
            "Validation Calls": metrics.get("validations", 0),
        },
    }

    if metrics.get("securityIssues"):
        sections["Security Issues"] = _summarize(metrics["securityIssues"])
    if metrics.get("performanceIssues"):
        sections["Performance Issues"] = _summarize(metrics["performanceIssues"])

    quality = metrics.get("codeQuality") or []
    if quality:
        totals: Dict[str, int] = {}
        details: Dict[str, List[str]] = {}
        for issue in quality:
            key = f"{issue['type']} ({issue['severity']})"
            totals[key] = totals.get(key, 0) + int(issue.get("count", 1))
            details.setdefault(key, []).extend(format_detail(d) for d in issue.get("details", ()))

        section: Dict[str, object] = {}
        for key, total in totals.items():
            section[key] = f"{total} occurrences"
            for index, detail in enumerate(details[key], 1):
                section[f"  {key} {index}. {detail}"] = ""
        sections["Code Quality Issues"] = section

    return sections


LARAVEL_LAYER = Layer("Laravel", extract_laravel, laravel_sections)

LARAVEL = PHP.specialize("Laravel", LARAVEL_LAYER, requires=is_laravel_project, priority=30)
