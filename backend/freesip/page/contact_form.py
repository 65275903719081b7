"""Client-side contact form: inline validation and submission to the API."""

from __future__ import annotations

import logging
import re
from typing import Optional

import httpx

from freesip.page.config import PageConfig
from freesip.page.dom import Element, Event, Window, attach_once

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ERROR_COLOR = "#ef4444"

REQUIRED_MESSAGE = "This field is required"
INVALID_EMAIL_MESSAGE = "Please enter a valid email"
NETWORK_FAILURE_MESSAGE = "Something went wrong. Try again later."
BUSY_LABEL = "Sending..."


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


def highlight_error(el: Element, message: str) -> None:
    remove_error_highlight(el)
    div = Element("div", class_="error-message", text=message)
    div.style.update({"color": ERROR_COLOR, "font-size": "0.875rem", "margin-top": "0.5rem"})
    if el.parent is not None:
        el.parent.append_child(div)
    el.style["border-color"] = ERROR_COLOR


def remove_error_highlight(el: Element) -> None:
    if el.parent is not None:
        err = el.parent.query_selector(".error-message")
        if err is not None:
            err.remove()
    el.style["border-color"] = ""


def validate_form(form: Element) -> bool:
    """Mark every invalid required field; returns True when all are valid."""
    is_valid = True
    for el in form.elements:
        if el.type == "submit" or not el.has_attribute("required"):
            continue
        if not el.value.strip():
            is_valid = False
            highlight_error(el, REQUIRED_MESSAGE)
        elif el.type == "email" and not is_valid_email(el.value):
            is_valid = False
            highlight_error(el, INVALID_EMAIL_MESSAGE)
    return is_valid


class ContactFormSubmitter:
    def __init__(self, window: Window, form: Element, config: PageConfig, client: httpx.Client) -> None:
        self.window = window
        self.form = form
        self.config = config
        self.client = client

    def payload(self) -> dict[str, str]:
        data = self.form.form_data()
        return {
            "name": data.get("name", ""),
            "email": data.get("email", ""),
            "company": data.get("company") or "",
            "message": data.get("message", ""),
        }

    def on_submit(self, event: Event) -> None:
        event.prevent_default()
        if not validate_form(self.form):
            return

        submit_btn = self.form.query_selector('button[type="submit"]')
        original_text = submit_btn.text_content if submit_btn is not None else ""
        if submit_btn is not None:
            submit_btn.text_content = BUSY_LABEL
            submit_btn.disabled = True

        try:
            res = self.client.post(
                self.config.submit_endpoint,
                json=self.payload(),
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                timeout=self.config.request_timeout,
            )
            res.raise_for_status()
            result = res.json()
            if not isinstance(result, dict):
                raise ValueError("response body is not a JSON object")

            if result.get("success"):
                self.window.alert(result.get("message", ""))
                self.form.reset()
            else:
                self.window.alert(f"Error: {result.get('message', '')}")
        except Exception:
            logger.exception("Contact form submission failed")
            self.window.alert(NETWORK_FAILURE_MESSAGE)
        finally:
            if submit_btn is not None:
                submit_btn.text_content = original_text
                submit_btn.disabled = False


@attach_once
def init_form_validation(
    window: Window,
    config: PageConfig,
    client: Optional[httpx.Client] = None,
) -> Optional[ContactFormSubmitter]:
    form = window.document.query_selector(".contact-form")
    if form is None:
        return None

    submitter = ContactFormSubmitter(window, form, config, client or httpx.Client())
    form.add_event_listener("submit", submitter.on_submit)

    for field in form.query_selector_all("input, textarea"):
        field.add_event_listener("input", lambda event, field=field: remove_error_highlight(field))
    return submitter
