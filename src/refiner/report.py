from __future__ import annotations

from refiner.models import AnalysisResult, CleanupResult

MB = 1024 * 1024
KB = 1024


def render_analysis(result: AnalysisResult) -> str:
    if result.is_clean:
        lines = ["", "Your project is clean! No unused dependencies or files found."]
        lines.extend(_render_unanalyzable(result))
        return "\n".join(lines)

    lines: list[str] = []
    if result.unused_dependencies:
        lines.extend(["", "Unused Dependencies:"])
        for dep in result.unused_dependencies:
            lines.append(f"  - {dep.name} ({dep.version})")
            if dep.size:
                lines.append(f"    Size: {dep.size / MB:.2f} MB")

    if result.unused_files:
        lines.extend(["", "Unused Files:"])
        for unused in result.unused_files:
            lines.append(f"  - {unused.path}")
            lines.append(f"    Last modified: {unused.last_modified}")
            lines.append(f"    Size: {unused.size / KB:.2f} KB")

    lines.extend(_render_unanalyzable(result))

    deps_total = sum(dep.size for dep in result.unused_dependencies)
    files_total = sum(unused.size for unused in result.unused_files)
    lines.extend(
        [
            "",
            "Potential savings:",
            f"  - {deps_total / MB:.2f} MB from dependencies",
            f"  - {files_total / KB:.2f} KB from files",
        ]
    )
    return "\n".join(lines)


def render_removal_preview(result: AnalysisResult) -> str:
    lines = ["", "Items to be removed:"]
    if result.unused_dependencies:
        lines.extend(["", "Dependencies:"])
        lines.extend(f"  - {dep.name}" for dep in result.unused_dependencies)
    if result.unused_files:
        lines.extend(["", "Files:"])
        lines.extend(f"  - {unused.path}" for unused in result.unused_files)
    return "\n".join(lines)


def render_cleanup(result: CleanupResult) -> str:
    lines = ["", "Cleanup Results:"]
    sections = [
        ("Removed Dependencies:", result.removed_dependencies),
        ("Removed Files:", result.removed_files),
        ("Removed Directories:", result.removed_dirs),
    ]
    for title, items in sections:
        lines.extend(["", title])
        if items:
            lines.extend(f"  - {item}" for item in items)
        else:
            lines.append("  - None")
    lines.extend(["", "Space freed:", f"  - {result.freed_space / MB:.2f} MB total"])
    return "\n".join(lines)


def _render_unanalyzable(result: AnalysisResult) -> list[str]:
    if not result.unanalyzable_files:
        return []
    lines = ["", "Files that could not be analyzed:"]
    for entry in result.unanalyzable_files:
        lines.append(f"  - {entry.path}")
        lines.append(f"    {entry.reason}")
    return lines
