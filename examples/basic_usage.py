#!/usr/bin/env python3
"""
Example: Basic usage of Code Cortex as a Python library
"""

from code_cortex import create_analyzer
from code_cortex.formatters import result_to_dict

# Analyze a codebase ("auto" picks the Laravel analyzer for Laravel projects)
result = create_analyzer("auto", root="/path/to/project").analyze("/path/to/project")

# Print per-driver totals
for name, metrics in result.driver_metrics.items():
    print(f"{name}: {metrics.get('files', 0)} files, {metrics.get('loc', 0)} lines")

stats = result.stats
print(f"Analysis complete: {stats.analyzed_files} of {stats.total_files} files "
      f"({stats.skipped_files} skipped, {stats.parse_errors} parse errors)")

if result.enhanced is not None:
    print(f"Code quality score: {result.enhanced.code_quality_score}/100")

# Plain data, ready for json.dumps
data = result_to_dict(result)
