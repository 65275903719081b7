from __future__ import annotations

from typing import Optional

from freesip.page.dom import Element, Window, attach_once


class TestimonialSlider:
    """Keeps exactly one testimonial (and its dot) marked active."""

    def __init__(self, testimonials: list[Element], dots: list[Element]) -> None:
        if not testimonials:
            raise ValueError("slider needs at least one testimonial")
        self.testimonials = testimonials
        self.dots = dots
        self.index = 0

    @property
    def count(self) -> int:
        return len(self.testimonials)

    def show(self, i: int) -> None:
        i %= self.count
        for j, testimonial in enumerate(self.testimonials):
            testimonial.class_list.toggle("active", i == j)
        for j, dot in enumerate(self.dots):
            dot.class_list.toggle("active", i == j)
        self.index = i

    def next(self) -> None:
        self.show((self.index + 1) % self.count)

    def prev(self) -> None:
        self.show((self.index - 1 + self.count) % self.count)


@attach_once
def init_testimonial_slider(window: Window) -> Optional[TestimonialSlider]:
    document = window.document
    testimonials = document.query_selector_all(".testimonial-card")
    if not testimonials:
        return None

    dots = document.query_selector_all(".testimonial-dots .dot")
    slider = TestimonialSlider(testimonials, dots)

    prev_btn = document.query_selector(".testimonial-prev")
    next_btn = document.query_selector(".testimonial-next")
    if prev_btn is not None:
        prev_btn.add_event_listener("click", lambda event: slider.prev())
    if next_btn is not None:
        next_btn.add_event_listener("click", lambda event: slider.next())
    for i, dot in enumerate(dots):
        dot.add_event_listener("click", lambda event, i=i: slider.show(i))

    slider.show(slider.index)
    return slider
