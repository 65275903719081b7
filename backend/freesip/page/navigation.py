from __future__ import annotations

from freesip.page.dom import Element, Event, Window, attach_once

ICON_OPEN = "fas fa-times"
ICON_CLOSED = "fas fa-bars"


@attach_once
def init_mobile_menu(window: Window) -> None:
    document = window.document
    menu_btn = document.query_selector(".mobile-menu-btn")
    nav_links = document.query_selector(".nav-links")
    if menu_btn is None or nav_links is None:
        return
    body = document.body

    def sync_icon() -> None:
        icon = menu_btn.query_selector("i")
        if icon is not None:
            icon.class_name = ICON_OPEN if nav_links.class_list.contains("active") else ICON_CLOSED

    def close() -> None:
        nav_links.class_list.remove("active")
        menu_btn.class_list.remove("active")
        body.class_list.remove("no-scroll")
        sync_icon()

    def on_toggle(event: Event) -> None:
        nav_links.class_list.toggle("active")
        menu_btn.class_list.toggle("active")
        body.class_list.toggle("no-scroll")
        sync_icon()

    def on_outside_click(event: Event) -> None:
        if (
            not nav_links.contains(event.target)
            and not menu_btn.contains(event.target)
            and nav_links.class_list.contains("active")
        ):
            close()

    menu_btn.add_event_listener("click", on_toggle)
    for link in nav_links.query_selector_all("a"):
        link.add_event_listener("click", lambda event: close())
    document.add_event_listener("click", on_outside_click)


@attach_once
def init_smooth_scrolling(window: Window) -> None:
    document = window.document

    def scroll_handler(link: Element):
        def on_click(event: Event) -> None:
            event.prevent_default()
            target_id = link.get_attribute("href")
            if target_id == "#":
                return
            target = document.query_selector(target_id)
            if target is None:
                return
            header = document.query_selector("header")
            header_height = header.offset_height if header is not None else 0
            window.scroll_to(target.offset_top - header_height, behavior="smooth")

        return on_click

    for link in document.query_selector_all('a[href^="#"]'):
        link.add_event_listener("click", scroll_handler(link))
