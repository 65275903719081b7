from __future__ import annotations

import math
from typing import Iterator

from freesip.page.dom import Element, Window, attach_once

DURATION_MS = 2000
STEP_MS = 16


def counter_frames(target: int, duration_ms: int = DURATION_MS, step_ms: int = STEP_MS) -> Iterator[str]:
    """Yield the text of each animation step, ending exactly on ``"<target>+"``."""
    increment = target / (duration_ms / step_ms)
    current = 0.0
    while True:
        current += increment
        if current >= target or increment <= 0:
            yield f"{target}+"
            return
        yield f"{math.floor(current)}+"


def _start_counter(window: Window, counter: Element, target: int) -> None:
    frames = counter_frames(target)
    final = f"{target}+"
    timer_id = 0

    def tick() -> None:
        text = next(frames)
        counter.text_content = text
        if text == final:
            window.clear_interval(timer_id)

    timer_id = window.set_interval(tick, STEP_MS)


@attach_once
def init_counters(window: Window) -> None:
    counters = window.document.query_selector_all(".stat-number")
    if not counters:
        return

    def on_intersect(entries, observer) -> None:
        for entry in entries:
            if not entry.is_intersecting:
                continue
            counter = entry.target
            observer.unobserve(counter)
            try:
                target = int(counter.dataset.get("count", ""))
            except ValueError:
                continue
            _start_counter(window, counter, target)

    observer = window.intersection_observer(on_intersect, threshold=0.5, root_margin="0px 0px -100px 0px")
    for counter in counters:
        observer.observe(counter)
