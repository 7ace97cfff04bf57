"""Display formatters for CLI."""

from rich.console import Console
from rich.table import Table

from ...core.sync import SyncStatistics

console = Console()


def display_sync_summary(stats: SyncStatistics, dry_run: bool = False) -> None:
    """Display summary of a rating sync run.

    Args:
        stats: Statistics returned by the orchestrator
        dry_run: Whether the run was a dry run
    """
    summary = stats.get_summary()

    console.print("\n[bold green]📊 Rating Sync Summary[/bold green]")
    console.print("=" * 60)

    summary_table = Table(show_header=False)
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", style="green", justify="right")

    summary_table.add_row("Albums Processed", str(summary["albums_processed"]))
    if summary["albums_skipped"] > 0:
        summary_table.add_row(
            "Albums Skipped (no title)",
            f"[yellow]{summary['albums_skipped']}[/yellow]",
        )
    summary_table.add_row("Tracks Processed", str(summary["tracks_processed"]))
    summary_table.add_row("Ratings Set", str(summary["ratings_set"]))
    summary_table.add_row("Ratings Overwritten", str(summary["ratings_overwritten"]))
    summary_table.add_row("Skipped (already rated)", str(summary["skipped_existing"]))
    summary_table.add_row("Skipped (unrated)", str(summary["skipped_unrated"]))
    summary_table.add_row("Skipped (same rating)", str(summary["skipped_same"]))
    summary_table.add_row("Duration", f"{round(summary['duration_seconds'])} sec")

    console.print(summary_table)

    if dry_run:
        console.print("  [yellow]⚠️  DRY RUN - No changes were made[/yellow]")
    console.print()
