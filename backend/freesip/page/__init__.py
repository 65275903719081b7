"""Behaviors of the marketing page, one ``init_*`` function per concern.

Each behavior looks up the elements it needs and does nothing when they are
absent. ``init_page`` attaches all of them to a window.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from freesip.page.config import PageConfig, resolve_submit_endpoint
from freesip.page.contact_form import ContactFormSubmitter, init_form_validation
from freesip.page.counters import counter_frames, init_counters
from freesip.page.dom import Document, Element, Event, Window, attach_once
from freesip.page.effects import (
    init_back_to_top_button,
    init_cta_buttons,
    init_image_fallback,
    init_keyboard_navigation,
    init_portfolio_hover_effects,
    init_responsive,
    init_scroll_effects,
    init_service_card_animations,
    init_social_links,
)
from freesip.page.navigation import init_mobile_menu, init_smooth_scrolling
from freesip.page.slider import TestimonialSlider, init_testimonial_slider


@dataclass
class Page:
    window: Window
    back_to_top: Element
    contact_form: Optional[ContactFormSubmitter] = None
    slider: Optional[TestimonialSlider] = None


def _hide_loader(window: Window) -> None:
    loader = window.document.query_selector(".loader")
    if loader is not None:
        loader.class_list.add("hidden")


@attach_once
def init_page(
    window: Window,
    config: Optional[PageConfig] = None,
    *,
    client: Optional[httpx.Client] = None,
) -> Page:
    config = config or PageConfig.for_hostname(window.hostname)

    window.set_timeout(lambda: _hide_loader(window), config.loader_delay_ms)

    init_mobile_menu(window)
    init_smooth_scrolling(window)
    init_counters(window)
    contact_form = init_form_validation(window, config, client)
    init_scroll_effects(window)
    init_service_card_animations(window)
    init_portfolio_hover_effects(window)
    back_to_top = init_back_to_top_button(window)
    slider = init_testimonial_slider(window)
    init_responsive(window)
    init_cta_buttons(window)
    init_social_links(window)
    init_image_fallback(window)
    init_keyboard_navigation(window)

    return Page(window=window, back_to_top=back_to_top, contact_form=contact_form, slider=slider)


__all__ = [
    "Document",
    "Element",
    "Event",
    "Page",
    "PageConfig",
    "TestimonialSlider",
    "Window",
    "counter_frames",
    "init_page",
    "resolve_submit_endpoint",
]
