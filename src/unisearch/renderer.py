"""Rich terminal output for search results and statistics."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from unisearch.models import SearchResult, Source
from unisearch.statistics import StatisticsCache

console = Console()


def _badge(result: SearchResult) -> Text:
    style = result.source.badge_style if isinstance(result.source, Source) else "bold"
    return Text(f"[{result.source_display_name}]", style=style)


def render_results(
    results: list[SearchResult],
    *,
    summary: str = "",
    favorites: dict[str, bool] | None = None,
) -> None:
    """Render a result list, one entry per block, with favorite stars."""
    if summary:
        console.print(Text(summary))
        console.print()
    if not results:
        return

    favorites = favorites or {}
    for i, r in enumerate(results, 1):
        line = Text()
        line.append(f"[r{i}] ", style="bold cyan")
        line.append_text(_badge(r))
        line.append(" ")
        line.append(r.word, style="bold")
        if favorites.get(r.global_id):
            line.append(" *", style="bold yellow")
        console.print(line)

        if r.translation:
            console.print(Text(f"     {r.translation}"))

        meta_parts = []
        if r.type:
            meta_parts.append(r.type)
        meta_parts.append(r.match_display)
        if r.relevance_score:
            meta_parts.append(f"score: {r.relevance_score:.2f}")
        console.print(Text(f"     {' | '.join(meta_parts)}", style="dim"))

        if r.highlighted_text:
            console.print(Text(f"     {r.highlighted_text}", style="italic"))
        console.print()


def render_statistics(cache: StatisticsCache) -> None:
    """Render per-source entry counts and entry types."""
    stats = cache.statistics
    if stats is None:
        console.print("[yellow]Statistics unavailable.[/yellow]")
        return

    console.print(f"{cache.total_dictionary_entries()} dictionary entries", style="bold")
    console.print(f"{stats.total_entries:,} entries in total", style="dim")
    console.print()
    for name, count in stats.entries_by_source.items():
        console.print(Text(f"  {name}: {count:,}"))
        types = cache.available_types.get(name) or stats.available_types.get(name) or []
        if types:
            console.print(Text(f"    types: {', '.join(types)}", style="dim"))
