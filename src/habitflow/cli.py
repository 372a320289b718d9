"""Flask CLI commands for Habitflow."""

from __future__ import annotations

import click

from .errors import ValidationError


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("habitflow-recompute")
    def habitflow_recompute() -> None:
        """Recompute every habit's streak from its completion history."""

        from .extensions import habit_service
        from .services.analytics import BatchFailure

        failures: list[BatchFailure] = []
        results = habit_service().recompute_all(failures=failures)
        for habit_id, state in results.items():
            click.echo(
                f"{habit_id}: current={state.current_streak} longest={state.longest_streak}"
            )
        for failure in failures:
            click.echo(f"{failure.key}: skipped ({failure.error})", err=True)
        click.echo(f"Recomputed {len(results)} habit(s).")

    @app.cli.command("habitflow-stats")
    @click.option("--start", "start", required=True, help="First day, YYYY-MM-DD")
    @click.option("--end", "end", required=True, help="Last day, YYYY-MM-DD")
    def habitflow_stats(start: str, end: str) -> None:
        """Print scheduled/completed counts for each day in a range."""

        from .extensions import habit_service

        try:
            stats = habit_service().daily_stats(start, end)
        except ValidationError as exc:
            raise click.BadParameter(exc.message, param_hint=exc.field) from exc
        for stat in stats:
            click.echo(
                f"{stat.date.isoformat()}  {stat.completed_habits}/{stat.total_habits}"
                f"  {stat.completion_rate:.1f}%"
            )
