"""Rich terminal renderer for verification outcomes.

Turns a ``VerificationOutcome`` into a Rich panel: the verdict, attempt
counts, the last observed stage states and the last endpoint response.

Color scheme
------------
- green     : Succeeded / Verified
- red       : Failed, Stopped, Cancelled / *Failed verdicts
- yellow    : InProgress, Stopping
- dim       : absent / Unknown
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from deploycheck.models.outcomes import PollOutcome
from deploycheck.models.pipeline import ExecutionStatus, PipelineStatus
from deploycheck.models.verification import VerificationOutcome, VerificationState


# ---------------------------------------------------------------------------
# Status -> Rich style mapping
# ---------------------------------------------------------------------------

_STATUS_STYLES: dict[ExecutionStatus, str] = {
    ExecutionStatus.SUCCEEDED: "bold green",
    ExecutionStatus.FAILED: "bold red",
    ExecutionStatus.STOPPED: "bold red",
    ExecutionStatus.CANCELLED: "bold red",
    ExecutionStatus.SUPERSEDED: "magenta",
    ExecutionStatus.IN_PROGRESS: "yellow",
    ExecutionStatus.STOPPING: "yellow",
    ExecutionStatus.UNKNOWN: "dim",
}

_VERDICT_STYLES: dict[VerificationState, tuple[str, str]] = {
    VerificationState.VERIFIED: ("[bold green]VERIFIED[/bold green]", "green"),
    VerificationState.PIPELINE_FAILED: ("[bold red]PIPELINE FAILED[/bold red]", "red"),
    VerificationState.ENDPOINT_FAILED: ("[bold red]ENDPOINT FAILED[/bold red]", "red"),
}


class OutcomeRenderer:
    """Renders ``VerificationOutcome`` as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_outcome(self, outcome: VerificationOutcome) -> Panel:
        """Render an outcome as a Rich Panel (printable or usable in Live)."""
        verdict, border = _VERDICT_STYLES.get(
            outcome.state, (f"[yellow]{outcome.state.value}[/yellow]", "yellow")
        )

        summary_parts = [
            f"[bold]Pipeline:[/bold] {escape(outcome.pipeline_id)}",
            f"[bold]Address:[/bold] {escape(outcome.address)}",
            f"[bold]Pipeline attempts:[/bold] {self._attempts(outcome.pipeline)}",
            f"[bold]Endpoint attempts:[/bold] {self._attempts(outcome.endpoint)}",
        ]
        if outcome.deadline_exceeded:
            summary_parts.append("[bold red]Deadline exceeded[/bold red]")

        body: list = [Text.from_markup(verdict)]
        if outcome.pipeline is not None and outcome.pipeline.last_status is not None:
            body += [Text(""), self._build_stage_table(outcome.pipeline.last_status)]
        if outcome.endpoint is not None:
            body += [Text(""), Text.from_markup(self._endpoint_line(outcome.endpoint))]
        if outcome.detail:
            body += [Text(""), Text(outcome.detail, style="dim")]
        body += [Text(""), Text.from_markup("  |  ".join(summary_parts))]

        return Panel(
            Group(*body),
            title="[bold]Deployment Verification[/bold]",
            border_style=border,
            padding=(1, 2),
        )

    def _build_stage_table(self, status: PipelineStatus) -> Table:
        """Build a Rich Table of the last observed stage states."""
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("#", style="dim", width=4, justify="right")
        table.add_column("Stage", min_width=20)
        table.add_column("Latest execution", min_width=14, justify="center")

        for i, stage in enumerate(status.stages):
            if stage.latest_status is None:
                state_display = "[dim]absent[/dim]"
            else:
                style = _STATUS_STYLES.get(stage.latest_status, "")
                state_display = f"[{style}]{stage.latest_status.value}[/{style}]"
            table.add_row(str(i), escape(stage.stage_name), state_display)

        return table

    @staticmethod
    def _endpoint_line(poll: PollOutcome) -> str:
        if poll.last_response is not None:
            color = "green" if poll.succeeded else "red"
            line = (
                f"[bold]Last response:[/bold] [{color}]{poll.last_response.status_code}"
                f"[/{color}] {escape(poll.last_response.snippet())}"
            )
        else:
            line = "[bold]Last response:[/bold] [dim]none[/dim]"
        if poll.last_error:
            line += f"\n[bold]Last error:[/bold] [red]{escape(poll.last_error)}[/red]"
        return line

    @staticmethod
    def _attempts(poll: PollOutcome | None) -> str:
        return str(poll.attempts) if poll is not None else "-"

    def print_outcome(self, outcome: VerificationOutcome) -> None:
        """Print a single outcome to the console."""
        self.console.print(self.render_outcome(outcome))
