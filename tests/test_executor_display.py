"""Tests for executor.display module."""

import asyncio

import pytest

from vibe_report.executor.display import ERASE_LINE, SPINNER_FRAMES, Display, Spinner


class TestSpinner:
    """Tests for Spinner class."""

    def test_cycles_frames(self):
        """Frames advance and wrap around."""
        spinner = Spinner("line", "Working")

        frames = [spinner.next() for _ in range(5)]

        assert frames[0] == "─ Working"
        assert frames[4] == frames[0]

    def test_unknown_style_falls_back(self):
        """An unknown style uses the dots frames."""
        assert Spinner("nope").next().startswith(SPINNER_FRAMES["dots"][0])

    def test_set_message(self):
        """The message can change between frames."""
        spinner = Spinner("dots2")
        spinner.set_message("Running Read...")

        assert spinner.next().endswith("Running Read...")


class TestDisplay:
    """Tests for Display class."""

    def test_print_without_spinner(self, capture_console, output):
        """Without a spinner lines are printed as-is."""
        display = Display(capture_console)

        display.print("hello")

        assert output.getvalue() == "hello\n"

    def test_stop_without_start(self, capture_console, output):
        """Stopping an idle spinner writes nothing."""
        Display(capture_console).stop_spinner()

        assert output.getvalue() == ""

    @pytest.mark.asyncio
    async def test_spinner_redraws(self, capture_console, output):
        """The running spinner redraws its row on every tick."""
        display = Display(capture_console, interval=0.01)
        display.start_spinner("Processing...")
        await asyncio.sleep(0.05)
        display.stop_spinner()

        text = output.getvalue()
        assert text.count("Processing...") >= 2
        assert text.endswith(ERASE_LINE)
        assert not display.spinner_running

    @pytest.mark.asyncio
    async def test_print_erases_and_redraws(self, capture_console, output):
        """A line printed under a running spinner is framed by erase and redraw."""
        display = Display(capture_console, interval=60)
        display.start_spinner("Waiting")
        mark = len(output.getvalue())

        display.print("line")
        display.stop_spinner()

        written = output.getvalue()[mark:]
        assert written.startswith(ERASE_LINE + "line\n\r")
        assert "Waiting" in written

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_task(self, capture_console):
        """Starting a running spinner is a no-op."""
        display = Display(capture_console, interval=60)
        display.start_spinner()
        task = display._task
        display.start_spinner()

        assert display._task is task
        display.stop_spinner()

    def test_print_closes_streamed_line(self, capture_console, output):
        """A printed line never continues an unfinished streamed line."""
        display = Display(capture_console)

        display.write_raw("partial")
        display.print("next")

        assert output.getvalue() == "partial\nnext\n"

    @pytest.mark.asyncio
    async def test_spinner_not_drawn_over_streamed_text(self, capture_console, output):
        """Redraws and stop leave an open streamed line intact."""
        display = Display(capture_console, interval=60)
        display.start_spinner("Working")

        display.write_raw("partial")
        display._draw()
        display.stop_spinner()

        assert output.getvalue() == ERASE_LINE + "partial"

    @pytest.mark.asyncio
    async def test_spinner_returns_after_end_line(self, capture_console, output):
        display = Display(capture_console, interval=60)
        display.start_spinner("Working")
        display.write_raw("partial")

        display.end_line()
        display._draw()
        display.stop_spinner()

        assert output.getvalue().startswith(ERASE_LINE + "partial\n\r")
        assert "Working" in output.getvalue()
