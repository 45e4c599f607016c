"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from pubgate.output.console import create_console, get_output, style_for_score

if TYPE_CHECKING:
    from rich.console import Console

    from pubgate.services.result import ServiceResult

# Warnings shown per step (publish-prepare) or per post (validate-all).
_STEP_WARNING_LIMIT = 2
_POST_WARNING_LIMIT = 3


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render a single status line for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    data = result.data
    items = data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("slug", "")) for item in items if isinstance(item, dict))

    summary = data.get("summary")
    if isinstance(summary, dict):
        return (
            f"{result.op}: {summary.get('passed', 0)}/{summary.get('total', 0)} passed, "
            f"average score {summary.get('average_score', 0)}"
        )

    if "passed" in data and "score" in data:
        label = "PASSED" if data["passed"] else "FAILED"
        subject = data.get("slug") or result.op
        return f"{label} {subject} {data['score']}/100"

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _verdict(passed: bool) -> Text:
    return Text("PASS", style="pg.ok") if passed else Text("FAIL", style="pg.error")


def _score(score: Any) -> Text:
    value = int(score) if isinstance(score, (int, float)) else 0
    return Text(f"{value}/100", style=style_for_score(value))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pg.key")
    if key == "slug":
        v = Text(str(value), style="pg.slug")
    elif key.endswith("path"):
        v = Text(str(value), style="pg.path")
    elif key == "title":
        v = Text(str(value), style="pg.title")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _issue_line(console: Console, issue: dict[str, Any], *, indent: int, suggestion: bool) -> None:
    sev = str(issue.get("severity", "warning"))
    style = "pg.error" if sev == "error" else "pg.warning"
    pad = " " * indent
    where = f"/{issue['field']}" if issue.get("field") else ""
    line = Text(pad)
    line.append(sev, style=style)
    line.append(f" [{issue.get('category', '?')}{where}] ")
    line.append(str(issue.get("message", "")))
    console.print(line)
    if suggestion and issue.get("suggestion"):
        console.print(Text(f"{pad}  -> {issue['suggestion']}", style="pg.suggestion"))


def _render_grouped_issues(console: Console, issues: list[dict[str, Any]]) -> None:
    """Print issues grouped by category, errors before warnings."""
    by_category: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        by_category.setdefault(str(issue.get("category", "unknown")), []).append(issue)

    for cat, cat_issues in by_category.items():
        console.print()
        console.print(Text(cat, style="pg.category"))
        for issue in sorted(cat_issues, key=lambda i: i.get("severity") != "error"):
            _issue_line(console, issue, indent=2, suggestion=True)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pg.error")
    op = Text(f"  {result.op}", style="pg.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Single-post renderers ─────────────────────────────────────────────


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render one aggregate report: verdict, metrics, breakdown, findings."""
    d = result.data
    head = Text()
    head.append_text(_verdict(bool(d.get("passed"))))
    head.append(f"  {d.get('title') or d.get('slug', '?')} ", style="pg.title")
    head.append(f"({d.get('slug', '?')})", style="pg.slug")
    console.print(head)
    console.print(Text("  score: ", style="pg.key"), _score(d.get("score", 0)))

    metrics = d.get("metrics") or {}
    if d.get("breakdown"):
        _field(console, "words", metrics.get("word_count", 0))
        _field(console, "headings", metrics.get("heading_count", 0))
        _field(console, "code_blocks", metrics.get("code_block_count", 0))
        _field(console, "passive_voice", f"{metrics.get('passive_voice_percentage', 0.0):.1f}%")
        _field(console, "avg_sentence", f"{metrics.get('avg_sentence_length', 0.0):.1f} words")

        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("Validator")
        table.add_column("Score", justify="right")
        table.add_column("Result")
        table.add_column("Errors", justify="right")
        table.add_column("Warnings", justify="right")
        for name, step in d["breakdown"].items():
            table.add_row(
                name,
                _score(step.get("score", 0)),
                _verdict(bool(step.get("passed"))),
                str(len(step.get("issues", []))),
                str(len(step.get("warnings", []))),
            )
        console.print()
        console.print(table)

    findings = [*d.get("issues", []), *d.get("warnings", [])]
    if findings:
        _render_grouped_issues(console, findings)
    errors, warnings = len(d.get("issues", [])), len(d.get("warnings", []))
    console.print(f"\n{errors} errors, {warnings} warnings")
    if verbose:
        _render_meta(console, result)


def _render_brand_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(Text("Brand voice check", style="pg.op"))
    _field(console, "text", f'"{d.get("text", "")}"')
    console.print(
        Text("  score: ", style="pg.key"),
        _score(d.get("score", 0)),
        Text(f"  (min {d.get('min_score', 80)})", style="dim"),
    )
    console.print(Text("  result: ", style="pg.key"), _verdict(bool(d.get("passed"))))

    warnings = d.get("warnings", [])
    if warnings:
        console.print()
        for warning in warnings:
            _issue_line(console, warning, indent=2, suggestion=True)
    else:
        console.print("\n[pg.ok]OK[/pg.ok]  No brand voice issues detected.")
    if verbose:
        _render_meta(console, result)


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Slug", style="pg.slug", no_wrap=True)
    table.add_column("Title", style="pg.title")
    table.add_column("Status")
    table.add_column("Result")
    table.add_column("Score", justify="right")
    for item in items:
        table.add_row(
            str(item.get("slug", "")),
            str(item.get("title", "")),
            str(item.get("status", "")),
            _verdict(bool(item.get("passed"))),
            _score(item.get("score", 0)),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} posts")
    if verbose:
        _render_meta(console, result)


# ── Batch renderers ───────────────────────────────────────────────────


def _entry_header(console: Console, entry: dict[str, Any]) -> None:
    head = Text()
    head.append_text(_verdict(bool(entry.get("passed"))))
    head.append(f"  {entry.get('title', '')} ", style="pg.title")
    head.append(f"({entry.get('slug', '')})", style="pg.slug")
    console.print(head)
    line = Text("  score: ", style="pg.key")
    line.append_text(_score(entry.get("score", 0)))
    line.append(f" | issues: {entry.get('issueCount', 0)} | warnings: {entry.get('warningCount', 0)}")
    console.print(line)


def _more(console: Console, total: int, shown: int, indent: int) -> None:
    if total > shown:
        console.print(" " * indent + f"... and {total - shown} more warnings", style="dim")


def _render_pipeline_steps(console: Console, entry: dict[str, Any]) -> None:
    """Per-validator lines with errors and the first warnings of each step."""
    for step in entry.get("steps", []):
        warnings = step.get("warnings", [])
        line = Text("    ")
        line.append_text(_verdict(bool(step.get("passed"))))
        line.append(f" {step.get('name', '?')}: ")
        line.append_text(_score(step.get("score", 0)))
        if warnings:
            line.append(f" | {len(warnings)} warnings")
        if step.get("fix"):
            line.append(f" [FIX: {step['fix']}]", style="pg.ok")
        console.print(line)
        for issue in step.get("issues", []):
            _issue_line(console, issue, indent=6, suggestion=True)
        for warning in warnings[:_STEP_WARNING_LIMIT]:
            _issue_line(console, warning, indent=6, suggestion=False)
        _more(console, len(warnings), _STEP_WARNING_LIMIT, 6)

    calendar = (entry.get("fixes") or {}).get("calendar")
    if calendar:
        console.print(Text(f"    calendar: {calendar}", style="pg.ok"))


def _render_post_findings(console: Console, entry: dict[str, Any]) -> None:
    """Errors with suggestions, then the first warnings."""
    for issue in entry.get("issues", []):
        _issue_line(console, issue, indent=4, suggestion=True)
    warnings = entry.get("warnings", [])
    for warning in warnings[:_POST_WARNING_LIMIT]:
        _issue_line(console, warning, indent=4, suggestion=False)
    _more(console, len(warnings), _POST_WARNING_LIMIT, 4)
    metrics = entry.get("metrics") or {}
    if metrics.get("word_count"):
        console.print(
            f"    metrics: {metrics.get('word_count', 0)} words, "
            f"{metrics.get('heading_count', 0)} headings, "
            f"{metrics.get('code_block_count', 0)} code blocks",
            style="dim",
        )


def _render_batch(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render validate-all and publish-prepare runs."""
    d = result.data
    console.print(Text(str(d.get("pipeline", result.op)), style="pg.op"))
    _field(console, "mode", d.get("mode", ""))
    if result.op == "publish_prepare":
        _field(console, "fix_mode", "ON (blur inject + calendar sync)" if d.get("fix_mode") else "OFF")

    for entry in d.get("results", []):
        console.print()
        _entry_header(console, entry)
        if entry.get("error"):
            console.print(Text(f"    failed: {entry['error']}", style="pg.error"))
        if result.op == "publish_prepare" and entry.get("steps"):
            _render_pipeline_steps(console, entry)
        else:
            _render_post_findings(console, entry)

    summary = d.get("summary") or {}
    console.print()
    console.print(Text("Summary", style="pg.op"))
    line = Text(f"  total: {summary.get('total', 0)} | ")
    line.append(f"passed: {summary.get('passed', 0)}", style="pg.ok")
    line.append(" | ")
    line.append(f"failed: {summary.get('failed', 0)}", style="pg.error" if summary.get("failed") else "")
    line.append(f" | warnings: {summary.get('warnings', 0)}")
    console.print(line)
    console.print(Text("  average score: ", style="pg.key"), _score(summary.get("average_score", 0)))
    if d.get("report_path"):
        _field(console, "report_path", d["report_path"])
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    console.print(Text("OK", style="pg.ok"), Text(f"  {result.op}", style="pg.op"))
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "validate": _render_validate,
    "brand_check": _render_brand_check,
    "list_posts": _render_list,
    "validate_all": _render_batch,
    "publish_prepare": _render_batch,
}
