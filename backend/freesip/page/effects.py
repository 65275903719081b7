"""Presentation-only behaviors: scroll styling, fade-ins, hovers and layout."""

from __future__ import annotations

from freesip.page.dom import Element, Event, Window, attach_once

FADE_IN_SELECTOR = ".service-card, .portfolio-item, .process-step, .testimonial-card"
HEADER_BLUR_OFFSET = 100
BACK_TO_TOP_OFFSET = 500
MOBILE_BREAKPOINT = 768
PLACEHOLDER_IMAGE = "https://placehold.co/600x400/2563eb/ffffff?text=Image+Placeholder"

KEYBOARD_NAV_CSS = """
.keyboard-nav button:focus, .keyboard-nav a:focus,
.keyboard-nav input:focus, .keyboard-nav textarea:focus {
    outline: 2px solid #2563eb; outline-offset: 2px;
}"""


def _hover(el: Element, enter: dict[str, str], leave: dict[str, str]) -> None:
    el.add_event_listener("mouseenter", lambda event: el.style.update(enter))
    el.add_event_listener("mouseleave", lambda event: el.style.update(leave))


@attach_once
def init_scroll_effects(window: Window) -> None:
    document = window.document
    header = document.query_selector("header")
    if header is None:
        return
    header.style["background"] = "white"
    header.style["backdrop-filter"] = "none"

    def on_scroll(event: Event) -> None:
        header.style["backdrop-filter"] = "blur(10px)" if window.page_y_offset > HEADER_BLUR_OFFSET else "none"

    window.add_event_listener("scroll", on_scroll)

    def on_intersect(entries, observer) -> None:
        for entry in entries:
            if entry.is_intersecting:
                entry.target.class_list.add("animate-in")
                observer.unobserve(entry.target)

    observer = window.intersection_observer(on_intersect, threshold=0.1, root_margin="0px 0px -50px 0px")
    for el in document.query_selector_all(FADE_IN_SELECTOR):
        observer.observe(el)


@attach_once
def init_service_card_animations(window: Window) -> None:
    for card in window.document.query_selector_all(".service-card"):
        _hover(card, {"transform": "translateY(-10px) scale(1.02)"}, {"transform": "translateY(0) scale(1)"})


@attach_once
def init_portfolio_hover_effects(window: Window) -> None:
    for item in window.document.query_selector_all(".portfolio-item"):
        img = item.query_selector("img")
        content = item.query_selector(".portfolio-content")

        def on_enter(event: Event, img=img, content=content) -> None:
            if img is not None:
                img.style["transform"] = "scale(1.05)"
            if content is not None:
                content.style["transform"] = "translateY(-5px)"

        def on_leave(event: Event, img=img, content=content) -> None:
            if img is not None:
                img.style["transform"] = "scale(1)"
            if content is not None:
                content.style["transform"] = "translateY(0)"

        item.add_event_listener("mouseenter", on_enter)
        item.add_event_listener("mouseleave", on_leave)


@attach_once
def init_cta_buttons(window: Window) -> None:
    raised = {"transform": "translateY(-3px) scale(1.05)"}
    for btn in window.document.query_selector_all(".cta-button"):
        _hover(btn, raised, {"transform": "translateY(0) scale(1)"})
        btn.add_event_listener("mousedown", lambda event, btn=btn: btn.style.update(transform="translateY(1px) scale(0.95)"))
        btn.add_event_listener("mouseup", lambda event, btn=btn: btn.style.update(raised))


@attach_once
def init_social_links(window: Window) -> None:
    for link in window.document.query_selector_all(".social-links a"):
        _hover(link, {"transform": "translateY(-3px) rotate(5deg)"}, {"transform": "translateY(0) rotate(0)"})


@attach_once
def init_back_to_top_button(window: Window) -> Element:
    document = window.document
    btn = document.create_element("button", class_="back-to-top")
    btn.inner_html = '<i class="fas fa-chevron-up"></i>'
    btn.style.update(
        {
            "position": "fixed",
            "bottom": "30px",
            "right": "30px",
            "opacity": "0",
            "transform": "translateY(20px)",
            "transition": "all 0.3s ease",
            "z-index": "1000",
        }
    )
    document.body.append_child(btn)

    btn.add_event_listener("click", lambda event: window.scroll_to(0, behavior="smooth"))

    def on_scroll(event: Event) -> None:
        visible = window.page_y_offset > BACK_TO_TOP_OFFSET
        btn.style["opacity"] = "1" if visible else "0"
        btn.style["transform"] = "translateY(0)" if visible else "translateY(20px)"

    window.add_event_listener("scroll", on_scroll)
    return btn


@attach_once
def init_image_fallback(window: Window) -> None:
    for img in window.document.query_selector_all("img"):

        def on_error(event: Event, img=img) -> None:
            img.set_attribute("src", PLACEHOLDER_IMAGE)
            img.set_attribute("alt", "Placeholder image")

        img.add_event_listener("error", on_error)


def handle_responsive_changes(window: Window) -> None:
    is_mobile = window.inner_width <= MOBILE_BREAKPOINT
    for stats in window.document.query_selector_all(".hero-stats"):
        stats.style["flex-direction"] = "column" if is_mobile else "row"
        stats.style["gap"] = "1.5rem" if is_mobile else "3rem"


@attach_once
def init_responsive(window: Window) -> None:
    handle_responsive_changes(window)
    window.add_event_listener("resize", lambda event: handle_responsive_changes(window))


@attach_once
def init_keyboard_navigation(window: Window) -> None:
    document = window.document

    def on_keydown(event: Event) -> None:
        if event.key == "Tab":
            document.body.class_list.add("keyboard-nav")

    document.add_event_listener("keydown", on_keydown)
    document.add_event_listener("mousedown", lambda event: document.body.class_list.remove("keyboard-nav"))

    style = document.create_element("style", text=KEYBOARD_NAV_CSS)
    document.head.append_child(style)
