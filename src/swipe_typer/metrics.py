"""Prometheus-compatible metrics for the swipe engine.

Generates the text exposition format directly, no client library needed.

Tracked metrics:
- swipe_typer_letters_total (counter, by trigger)
- swipe_typer_letter_labels_total (counter, by label)
- swipe_typer_words_total (counter)
- swipe_typer_empty_words_total (counter)
- swipe_typer_rejected_presses_total (counter)
- swipe_typer_stale_dwell_fires_total (counter)
- swipe_typer_word_length (histogram)
- swipe_typer_gesture_duration_seconds (histogram)
"""

from __future__ import annotations

import threading
import time
from collections import Counter


class _Histogram:
    """Simple histogram with configurable buckets."""

    def __init__(self, buckets: list[float]):
        self.buckets = sorted(buckets)
        self.bucket_counts = [0] * len(self.buckets)
        self.count = 0
        self.sum = 0.0
        self._lock = threading.Lock()

    def observe(self, value: float):
        with self._lock:
            self.count += 1
            self.sum += value
            for i, b in enumerate(self.buckets):
                if value <= b:
                    self.bucket_counts[i] += 1
                    break

    def render(self, name: str, help_text: str) -> str:
        lines = [
            f"# HELP {name} {help_text}",
            f"# TYPE {name} histogram",
        ]
        with self._lock:
            cumulative = 0
            for i, b in enumerate(self.buckets):
                cumulative += self.bucket_counts[i]
                lines.append(f'{name}_bucket{{le="{b}"}} {cumulative}')
            lines.append(f'{name}_bucket{{le="+Inf"}} {self.count}')
            lines.append(f"{name}_sum {self.sum:.6f}")
            lines.append(f"{name}_count {self.count}")
        return "\n".join(lines)


class MetricsCollector:
    """Counts selections and gestures reported by a SwipeEngine."""

    def __init__(self):
        self._letters_by_trigger: Counter = Counter()
        self._letters_by_label: Counter = Counter()
        self._words_total = 0
        self._empty_words = 0
        self._rejected_presses = 0
        self._stale_fires = 0
        self._lock = threading.Lock()

        self._word_length = _Histogram([1, 2, 3, 4, 5, 6, 8, 10, 15])
        self._gesture_duration = _Histogram([0.25, 0.5, 1.0, 2.0, 4.0, 8.0])

        self._start_time = time.time()

    def record_letter(self, label: str, trigger: str):
        with self._lock:
            self._letters_by_trigger[trigger] += 1
            self._letters_by_label[label] += 1

    def record_word(self, word: str, duration: float):
        with self._lock:
            self._words_total += 1
            if not word:
                self._empty_words += 1
        self._word_length.observe(len(word))
        self._gesture_duration.observe(duration)

    def record_rejected_press(self):
        with self._lock:
            self._rejected_presses += 1

    def record_stale_fire(self):
        with self._lock:
            self._stale_fires += 1

    def render(self) -> str:
        """Render all metrics in Prometheus text exposition format."""
        lines: list[str] = []

        uptime = time.time() - self._start_time
        lines.append("# HELP swipe_typer_uptime_seconds Time since collector creation")
        lines.append("# TYPE swipe_typer_uptime_seconds gauge")
        lines.append(f"swipe_typer_uptime_seconds {uptime:.1f}")
        lines.append("")

        lines.append("# HELP swipe_typer_letters_total Letters selected by trigger")
        lines.append("# TYPE swipe_typer_letters_total counter")
        with self._lock:
            for trigger, count in sorted(self._letters_by_trigger.items()):
                lines.append(f'swipe_typer_letters_total{{trigger="{trigger}"}} {count}')
        lines.append("")

        lines.append("# HELP swipe_typer_letter_labels_total Letters selected by label")
        lines.append("# TYPE swipe_typer_letter_labels_total counter")
        with self._lock:
            for label, count in sorted(self._letters_by_label.items()):
                lines.append(f'swipe_typer_letter_labels_total{{label="{label}"}} {count}')
        lines.append("")

        with self._lock:
            counters = [
                ("swipe_typer_words_total", "Completed gestures", self._words_total),
                ("swipe_typer_empty_words_total", "Gestures that completed with no letters", self._empty_words),
                ("swipe_typer_rejected_presses_total", "Presses rejected while a gesture was active", self._rejected_presses),
                ("swipe_typer_stale_dwell_fires_total", "Dwell timers discarded at fire time", self._stale_fires),
            ]
        for name, help_text, value in counters:
            lines.append(f"# HELP {name} {help_text}")
            lines.append(f"# TYPE {name} counter")
            lines.append(f"{name} {value}")
            lines.append("")

        lines.append(self._word_length.render(
            "swipe_typer_word_length",
            "Letters per completed gesture",
        ))
        lines.append("")

        lines.append(self._gesture_duration.render(
            "swipe_typer_gesture_duration_seconds",
            "Time from press to completion",
        ))
        lines.append("")

        return "\n".join(lines) + "\n"

    @property
    def letter_counts(self) -> dict[str, int]:
        with self._lock:
            return dict(self._letters_by_trigger)

    @property
    def words_total(self) -> int:
        return self._words_total
