"""
Mail form for a member row: pre-filled fields and an HTML preview.

Nothing is delivered; the preview is what a mail service would be handed.
"""
from __future__ import annotations

import html
from dataclasses import asdict, dataclass

from sheetdesk.config import EMAIL_COLUMN, MEMBER_COLUMN, NAME_COLUMN
from sheetdesk.data.normalize import display_text
from sheetdesk.data.schemas import Record


@dataclass
class MailForm:
    to: str = ""
    sender: str = ""
    date: str = ""
    subject: str = ""
    message: str = ""
    attachment: str = ""
    member: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def mail_form_for(record: Record) -> MailForm:
    """Blank form addressed to the row's EMAIL and tagged with its MEMBER."""
    return MailForm(
        to=display_text(record.get(EMAIL_COLUMN, "")),
        member=display_text(record.get(MEMBER_COLUMN, "")),
    )


def render_mail_html(form: MailForm, record: Record) -> str:
    e = html.escape
    return (
        "<div>"
        "<h1>Email Template</h1>"
        f"<p>To: {e(form.to)}</p>"
        f"<p>From: {e(form.sender)}</p>"
        f"<p>Subject: {e(form.subject)}</p>"
        f"<p>Message: {e(form.message)}</p>"
        f"<p>Member: {e(display_text(record.get(NAME_COLUMN, '')))}</p>"
        "</div>"
    )
