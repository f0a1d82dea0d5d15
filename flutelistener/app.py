"""Terminal interface: live note display, spectrum view and the practice tutor."""

from __future__ import annotations

import enum
import logging
import queue
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np

from flutelistener.audio import AudioListener, FreqData, get_note_from_frequency
from flutelistener.logsetup import LOGGER_NAME, initialize_logging
from flutelistener.music import CURRENT, UPCOMING, Tutor, load_tutor

TICK_RATE = 0.25
HISTORY_MAGNITUDE = 5.0
TUTOR_MAGNITUDE = 10.0
FREQ_CHART_MAX = 1500.0
FREQ_CHART_Y = (0.0, 40.0)
TIME_CHART_Y = (-50.0, 50.0)
HELP_LINES = ("h: help", "d: debug and visualization", "t: tutor", "q: quit")
NO_FILE_MESSAGE = "You need to pass a file as an argument to see the notes here."
CONGRATULATIONS = "Congratulations!! You have completed this.. let's gooo"

_log = logging.getLogger(LOGGER_NAME)

Segment = Tuple[str, str]
StyledRow = List[Segment]


class AppScreen(enum.Enum):
    """The screens the interface can show."""

    DEBUG = "debug"
    TUTOR = "tutor"
    HELP = "help"


@dataclass
class _HistoryItem:
    note: str
    frequency: float


def _fmt(value: float) -> str:
    text = str(np.float32(value))
    return text[:-2] if text.endswith(".0") else text


def _center(text: str, width: int) -> str:
    return " " * max((width - len(text)) // 2, 0) + text


def _centered_row(segments: StyledRow, width: int) -> StyledRow:
    length = sum(len(text) for text, _ in segments)
    pad = max((width - length) // 2, 0)
    return [(" " * pad, "")] + segments if pad else list(segments)


def _title_bar(title: str, inner: int) -> str:
    if not title:
        return "─" * inner
    title = title[:inner]
    left = (inner - len(title)) // 2
    return "─" * left + title + "─" * (inner - len(title) - left)


def _box(width: int, height: int, body: Sequence[str], title: str = "") -> List[str]:
    if height <= 0:
        return []
    if width < 2 or height < 2:
        return [" " * width] * height
    inner = width - 2
    rows = ["┌" + _title_bar(title, inner) + "┐"]
    for i in range(height - 2):
        text = body[i] if i < len(body) else ""
        rows.append("│" + text[:inner].ljust(inner) + "│")
    rows.append("└" + "─" * inner + "┘")
    return rows


def _plot(
    points: Sequence[Tuple[float, float]],
    x_bounds: Tuple[float, float],
    y_bounds: Tuple[float, float],
    width: int,
    height: int,
    title: str,
) -> List[str]:
    inner_w, inner_h = width - 2, height - 2
    if inner_w < 1 or inner_h < 2:
        return _box(width, height, [], title)
    grid_h = inner_h - 1
    grid = [[" "] * inner_w for _ in range(grid_h)]
    (x0, x1), (y0, y1) = x_bounds, y_bounds
    if x1 > x0 and y1 > y0:
        for x, y in points:
            if not (x0 <= x <= x1 and y0 <= y <= y1):
                continue
            col = round((x - x0) / (x1 - x0) * (inner_w - 1))
            row = grid_h - 1 - round((y - y0) / (y1 - y0) * (grid_h - 1))
            grid[row][col] = "•"
    left, right = f"{x0:.2f}", f"{x1:.2f}"
    gap = max(inner_w - len(left) - len(right), 1)
    body = ["".join(row) for row in grid] + [left + " " * gap + right]
    return _box(width, height, body, title)


class App:
    """State of the interface and the rules that update it."""

    def __init__(self, input_file_path=None) -> None:
        self.input_file_path: Optional[Path] = (
            Path(input_file_path) if input_file_path is not None else None
        )
        self.tutor: Optional[Tutor] = (
            load_tutor(self.input_file_path) if self.input_file_path else None
        )
        self.freq_data = FreqData.empty()
        self.screen = AppScreen.TUTOR if self.input_file_path else AppScreen.DEBUG
        self.note_history: List[_HistoryItem] = []

    def on_tick(self, data: FreqData) -> None:
        """Take the latest analysis: extend the note history and drive the tutor."""
        self.freq_data = data
        frequency = data.fundamental_frequency
        note = get_note_from_frequency(frequency)
        if note is None:
            return
        if data.max_magnitude > HISTORY_MAGNITUDE and (
            not self.note_history
            or note != get_note_from_frequency(self.note_history[-1].frequency)
        ):
            self.note_history.append(_HistoryItem(note, frequency))
        if data.max_magnitude > TUTOR_MAGNITUDE and self.tutor is not None:
            if self.tutor.advance(note):
                _log.debug("tutor advanced to %d", self.tutor.current_note_index)

    def set_screen(self, screen: AppScreen) -> None:
        """Switch screens; entering the tutor starts it over."""
        if screen is AppScreen.TUTOR:
            self.reset_tutor()
        self.screen = screen

    def reset_tutor(self) -> None:
        """Reload the note file, or drop the tutor when there is none."""
        self.tutor = load_tutor(self.input_file_path) if self.input_file_path else None

    def handle_key(self, key) -> bool:
        """Act on a key press; return False when the app should quit."""
        if isinstance(key, int):
            if not 0 <= key < 0x110000:
                return True
            key = chr(key)
        if key == "q":
            return False
        screens = {"d": AppScreen.DEBUG, "t": AppScreen.TUTOR, "h": AppScreen.HELP}
        if key in screens:
            self.set_screen(screens[key])
        return True

    def render(self, width: int, height: int) -> List[str]:
        """The screen as ``height`` plain text rows of at most ``width`` characters."""
        return [
            "".join(text for text, _ in row)[:width]
            for row in self._styled_rows(width, height)
        ]

    def _styled_rows(self, width: int, height: int) -> List[StyledRow]:
        if self.screen is AppScreen.TUTOR:
            rows = self._tutor_rows(width, height)
        elif self.screen is AppScreen.DEBUG:
            rows = self._debug_rows(width, height)
        else:
            rows = self._help_rows(width)
        rows = rows[:height]
        return rows + [[] for _ in range(height - len(rows))]

    def _help_rows(self, width: int) -> List[StyledRow]:
        return [[(_center(line, width), "")] for line in HELP_LINES]

    def _tutor_rows(self, width: int, height: int) -> List[StyledRow]:
        if self.tutor is None:
            top = height // 2
            rows = self._help_rows(width)[:top]
            rows += [[] for _ in range(top - len(rows))]
            return rows + [[(NO_FILE_MESSAGE, "")]]
        current = self.note_history[-1].note if self.note_history else "Unknown"
        rows: List[StyledRow] = [[(_center(f"Current note: {current}", width), "")]]
        styles = {CURRENT: "bold", UPCOMING: "dim"}
        for phrase in self.tutor.lines():
            segments = [(note, styles.get(status, "")) for note, status in phrase]
            rows.append(_centered_row(segments, width))
        if self.tutor.is_complete():
            rows.append([(CONGRATULATIONS, "")])
        return rows

    def _debug_rows(self, width: int, height: int) -> List[StyledRow]:
        data = self.freq_data
        note = get_note_from_frequency(data.fundamental_frequency)
        column = width // 3
        widths = (column, column, width - 2 * column)

        left = [
            f"Peak frequency: {_fmt(data.peak_frequency)}",
            f"Fundamental frequency (HPS): {_fmt(data.fundamental_frequency)}",
        ]
        left = [_center(line, widths[0] - 2) for line in left]
        middle = [_center(f"Note: {note}" if note else "Note: unknown", widths[1] - 2)]
        right = [
            f"Sample rate: {data.sample_rate}",
            f"Max Magnitude: {_fmt(data.max_magnitude)}",
        ]
        boxes = [_box(w, 4, body) for w, body in zip(widths, (left, middle, right))]
        rows: List[StyledRow] = [[("".join(parts), "")] for parts in zip(*boxes)]

        latest = (
            f"| {self.note_history[-1].note} | " if self.note_history else "| "
        )
        shown = self.note_history[: min(width // 3, len(self.note_history))]
        older = "|".join(f"{item.note} " for item in list(reversed(shown))[1:])
        rows.append([(latest, "bold"), (older, "")])

        remaining = max(height - len(rows), 0)
        middle_h = remaining // 2
        bottom_h = remaining - middle_h
        for line in self._freq_chart(width, middle_h):
            rows.append([(line, "cyan")])
        for line in self._time_chart(width, bottom_h):
            rows.append([(line, "cyan")])
        return rows

    def _freq_chart(self, width: int, height: int) -> List[str]:
        points = self.freq_data.data
        if not points or height <= 0:
            return [""] * max(height, 0)
        bounds = (points[0][0], FREQ_CHART_MAX)
        return _plot(points, bounds, FREQ_CHART_Y, width, height, "Frequencies")

    def _time_chart(self, width: int, height: int) -> List[str]:
        samples = self.freq_data.time_domain_samples
        if not samples or height <= 0:
            return [""] * max(height, 0)
        points = [(float(i), value * 1000.0) for i, value in enumerate(samples)]
        bounds = (0.0, float(len(samples)))
        return _plot(points, bounds, TIME_CHART_Y, width, height, "Time domain")

    def draw(self, stdscr) -> None:
        """Paint the current screen on a curses window."""
        import curses

        attrs = {
            "": curses.A_NORMAL,
            "bold": curses.A_BOLD,
            "dim": curses.A_DIM,
            "cyan": curses.A_NORMAL,
        }
        if curses.has_colors():
            try:
                curses.init_pair(1, curses.COLOR_CYAN, -1)
                attrs["cyan"] = curses.color_pair(1)
            except curses.error:
                pass
        stdscr.erase()
        height, width = stdscr.getmaxyx()
        for y, row in enumerate(self._styled_rows(width, height)):
            x = 0
            for text, style in row:
                if x >= width:
                    break
                try:
                    stdscr.addnstr(y, x, text, width - x, attrs.get(style, 0))
                except curses.error:
                    pass
                x += len(text)
        stdscr.refresh()

    def run(self, stdscr) -> None:
        """Run the event loop with audio capture in a background thread."""
        import curses

        try:
            curses.curs_set(0)
            curses.start_color()
            curses.use_default_colors()
        except curses.error:
            pass

        freq_queue: "queue.Queue[FreqData]" = queue.Queue()
        stop = threading.Event()
        listener = AudioListener(freq_queue, stop)
        failures: List[BaseException] = []

        def capture() -> None:
            try:
                listener.run()
            except BaseException as exc:  # re-raised on the UI thread after join
                _log.error("audio capture failed: %s", exc)
                failures.append(exc)

        thread = threading.Thread(target=capture, name="audio", daemon=True)
        thread.start()
        last_tick = time.monotonic()
        try:
            while True:
                self.draw(stdscr)
                remaining = max(TICK_RATE - (time.monotonic() - last_tick), 0.0)
                stdscr.timeout(int(remaining * 1000))
                key = stdscr.getch()
                if key != -1 and not self.handle_key(key):
                    break
                if time.monotonic() - last_tick >= TICK_RATE:
                    latest = None
                    while True:
                        try:
                            latest = freq_queue.get_nowait()
                        except queue.Empty:
                            break
                    if latest is not None:
                        self.on_tick(latest)
                    last_tick = time.monotonic()
        finally:
            stop.set()
            thread.join()
        if failures:
            raise failures[0]


def main(argv=None) -> int:
    """Start the interface, optionally with a note file for the tutor."""
    import curses

    args = list(sys.argv[1:] if argv is None else argv)
    file = args[0] if args else None
    initialize_logging()
    app = App(file)
    curses.wrapper(app.run)
    return 0