from __future__ import annotations

"""SUMMARY line rendering for the CLI."""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip('0').rstrip('.')
    return f"{value:.3f}".rstrip('0').rstrip('.')


def render_summary_line(action: str, table: str, rows: int, elapsed_seconds: float, status: str) -> str:
    """Render the closing SUMMARY line of a CLI run.

    >>> render_summary_line("import", "orders", 3, 2.0, "success")
    'SUMMARY action=import table=orders status=success rows=3 elapsed_sec=2'
    """
    return (
        f"SUMMARY action={action} "
        f"table={table} "
        f"status={status} "
        f"rows={rows} "
        f"elapsed_sec={_format_number(elapsed_seconds)}"
    )
