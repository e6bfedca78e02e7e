"""Main execution logic for driving the claude CLI to produce a report.

One driver for every caller:
- prompt delivery chosen once through a transport strategy
- stdout decoded chunk by chunk into stream events
- events reflected on the terminal while the report is captured
- report persisted and acknowledged before control returns
"""

import asyncio
import codecs
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..ui import RULE, get_console
from .display import Display
from .errors import AbnormalExit, AgentRunError, ProcessTerminated, SpawnError
from .gate import wait_for_enter
from .logging import get_logger
from .models import ExecutionStats, ProcessResult
from .parser import EventParser
from .report import finalize_report, save_report
from .tracker import DriverState, EventTracker
from .transport import select_transport
from .utils import format_duration, format_size_kb, strip_ansi

_CHUNK_SIZE = 64 * 1024


def stats_lines(stats: ExecutionStats) -> list[Text]:
    """Terminal rendering of the execution statistics."""
    def row(label: str, value: str, value_style: str = "accent") -> Text:
        return Text.assemble((label, "muted"), (value, value_style))

    lines = [
        Text("📊 Execution Statistics:", style="highlight"),
        row("  ⏱️  Duration: ", format_duration(stats.duration_ms)),
        row("  🚀 API Time: ", format_duration(stats.duration_api_ms)),
        row("  🔄 Turns Used: ", str(stats.num_turns)),
        row("  💰 Cost: ", f"${stats.total_cost_usd:.4f}"),
    ]
    if stats.session_id:
        short_id = stats.session_id[:12] + "..." if len(stats.session_id) > 12 else stats.session_id
        lines.append(row("  🆔 Session: ", short_id, "dim"))

    if stats.subtype == "error_max_turns":
        lines.append(Text("  ⚠️  Status: Maximum turns reached", style="warning"))
    elif stats.subtype == "error_during_execution":
        lines.append(Text("  ❌ Status: Error during execution", style="error"))
    return lines


def print_error_block(console: Console, error: AgentRunError) -> None:
    console.print()
    console.print(Panel(Text(str(error), style="error"), title="Claude run failed", border_style="error"))


async def _pump_stdout(stdout: asyncio.StreamReader, parser: EventParser, tracker: EventTracker) -> None:
    """Feed stdout chunks through the parser until EOF."""
    try:
        while True:
            chunk = await stdout.read(_CHUNK_SIZE)
            if not chunk:
                break
            for event in parser.feed(chunk):
                tracker.handle(event)
    except (BrokenPipeError, ConnectionError, OSError) as e:
        get_logger().debug(f"stdout closed: {type(e).__name__}")
    for event in parser.flush():
        tracker.handle(event)


async def _pump_stderr(stderr: asyncio.StreamReader, tracker: EventTracker) -> None:
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    try:
        while True:
            chunk = await stderr.read(_CHUNK_SIZE)
            if not chunk:
                break
            text = decoder.decode(chunk)
            if text:
                tracker.handle_stderr(text)
    except (BrokenPipeError, ConnectionError, OSError) as e:
        get_logger().debug(f"stderr closed: {type(e).__name__}")


async def _abandon(process, *tasks: asyncio.Task) -> None:
    """Kill the child and reap it and its reader tasks."""
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    try:
        process.kill()
    except ProcessLookupError:
        pass
    await process.wait()


def _print_summary(console: Console, result: ProcessResult) -> None:
    if result.report_saved and result.report_path is not None:
        path = result.report_path
        console.print("✓ Report generation complete!", style="success")
        console.print(Text(f"📁 Report saved as: {path.name}", style="info"))
        console.print(Text(f"📂 Location: {path}", style="muted"))
        console.print()
        console.print("🌐 Open in browser:", style="highlight")
        uri = path.as_uri()
        console.print(Text(f"   {uri}", style=f"accent link {uri}"))
    else:
        console.print("⚠ Analysis complete but no report was generated", style="warning")
        console.print("Claude may not have output the report in the expected format", style="muted")

    if result.stats is not None:
        console.print()
        for line in stats_lines(result.stats):
            console.print(line)


def _has_artifact(result: ProcessResult, output_dir: Path) -> bool:
    if result.report_saved:
        return True
    return any(output_dir.glob("*.html"))


async def execute_claude_prompt(
    prompt: str,
    system_prompt: Optional[str] = None,
    cwd: Optional[str] = None,
    claude_path: str = "claude",
    output_dir: Optional[Path] = None,
    report_prefix: str = "vibe-log-report",
    site_url: str = "https://vibe-log.dev",
    debug: bool = False,
    console: Optional[Console] = None,
    transport=None,
    wait_for_key: bool = True,
    spinner_interval: float = 0.1,
    agent_role: str = "claude",
) -> ProcessResult:
    """Run claude on ``prompt`` and turn its streamed output into a report.

    Args:
        prompt: Main instruction payload.
        system_prompt: Appended to claude's system prompt when given.
        cwd: Working directory of the claude process.
        claude_path: Executable to run.
        output_dir: Where the report is written. Defaults to the current directory.
        report_prefix: Report file name prefix (``<prefix>-YYYY-MM-DD.html``).
        site_url: Site linked from the report footer.
        debug: Show diagnostic lines for otherwise silent events.
        console: Console to render on. Defaults to the shared console.
        transport: Prompt delivery strategy. Defaults to the platform's.
        wait_for_key: Block on Enter after a report was produced.
        spinner_interval: Seconds between spinner redraws.
        agent_role: Name used in log lines.

    Returns:
        ProcessResult of a run that exited with code 0.

    Raises:
        SpawnError: claude could not be started.
        AbnormalExit: claude exited non-zero (ProcessTerminated if killed).
    """
    logger = get_logger()
    console = console or get_console()
    transport = transport or select_transport()
    output_dir = Path(output_dir) if output_dir else Path.cwd()
    display = Display(console, interval=spinner_interval)

    console.print(f"Prompt length: {len(prompt)} characters", style="muted")
    console.print()
    console.print("Starting Claude analysis...", style="accent")
    console.print("This will take approximately 4-5 minutes.", style="muted")
    console.print()
    console.print(RULE, style="highlight")
    console.print()

    invocation = transport.prepare(claude_path, prompt, system_prompt)
    logger.info(
        f"[{agent_role}] 🚀 Starting | Prompt: {len(prompt)} chars | Delivery: {invocation.delivery}"
    )
    if debug:
        console.print(Text(f"[DEBUG] Executable: {invocation.program}", style="dim"))
        console.print(Text(f"[DEBUG] Working directory: {cwd or Path.cwd()}", style="dim"))
        console.print(Text(f"[DEBUG] Prompt delivery: {invocation.delivery}", style="dim"))
        for temp_file in invocation.temp_files:
            console.print(Text(f"[DEBUG] Temp prompt file: {temp_file}", style="dim"))

    state = DriverState()
    tracker = EventTracker(display, state, debug=debug, agent_role=agent_role)
    parser = EventParser(agent_role)

    try:
        try:
            process = await asyncio.create_subprocess_exec(
                *invocation.argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except OSError as e:
            error = SpawnError(invocation.program, e.strerror or str(e))
            logger.error(f"[{agent_role}] ❌ {error}")
            print_error_block(console, error)
            raise error from e

        if debug:
            console.print(Text(f"[DEBUG] Claude process spawned with PID: {process.pid}", style="dim"))

        stdout_task = asyncio.create_task(_pump_stdout(process.stdout, parser, tracker))
        stderr_task = asyncio.create_task(_pump_stderr(process.stderr, tracker))
        try:
            await stdout_task
            await stderr_task
        except BaseException:
            logger.error(f"[{agent_role}] Stream reading failed, stopping claude (PID {process.pid})")
            await _abandon(process, stdout_task, stderr_task)
            raise
        returncode = await process.wait()
    finally:
        display.stop_spinner()
        transport.cleanup(invocation)

    logger.debug(f"[{agent_role}] Exit code {returncode}, {len(state.events)} events, {parser.discarded} noise lines")

    result = ProcessResult(
        exit_code=returncode,
        stderr_text=state.stderr_text,
        stats=state.execution_stats,
        message_count=state.message_count,
        events=state.events,
    )

    if returncode is None or returncode < 0:
        error = ProcessTerminated(returncode, strip_ansi(result.stderr_text), transport.error_hints(result.stderr_text))
    elif returncode != 0:
        error = AbnormalExit(returncode, strip_ansi(result.stderr_text), transport.error_hints(result.stderr_text))
    else:
        error = None

    if error is not None:
        logger.error(f"[{agent_role}] ❌ Agent failed: {error}")
        print_error_block(console, error)
        raise error

    report = state.capture.take_report()
    if report:
        content = finalize_report(report, state.execution_stats, site_url)
        try:
            result.report_path = save_report(content, output_dir, report_prefix)
            result.report_saved = True
            console.print(Text(f"✅ Report saved as: {result.report_path.name}", style="success"))
            console.print(f"   Size: {format_size_kb(len(content.encode('utf-8')))}", style="muted")
        except OSError as e:
            logger.error(f"[{agent_role}] Failed to save report: {e}")
            console.print(Text(f"❌ Failed to save report: {e}", style="error"))

    console.print()
    console.print(RULE, style="highlight")
    console.print()
    _print_summary(console, result)
    logger.info(f"[{agent_role}] ✅ Agent completed (report saved: {result.report_saved})")

    if wait_for_key and _has_artifact(result, output_dir):
        console.print()
        console.print("Press Enter to continue...", style="muted")
        await wait_for_enter()

    return result
