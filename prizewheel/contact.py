"""Post-win contact message and messaging deep link."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

DEFAULT_CONTACT_URI_TEMPLATE = "whatsapp://send?text={text}"
DEFAULT_CONTACT_MESSAGE_TEMPLATE = (
    "Hello! My name is {name}, national ID {national_id}. "
    "I won: {prize}. I would like to redeem my prize."
)


@dataclass(frozen=True)
class ContactLink:
    """Prefilled message plus the deep link that carries it."""

    message: str
    uri: str


def build_contact_message(
    name: str,
    national_id: str,
    prize_label: str,
    template: str = DEFAULT_CONTACT_MESSAGE_TEMPLATE,
) -> str:
    """Fill ``template`` with the winner's details."""
    return template.format(name=name, national_id=national_id, prize=prize_label)


def build_contact_link(
    name: str,
    national_id: str,
    prize_label: str,
    *,
    uri_template: str = DEFAULT_CONTACT_URI_TEMPLATE,
    message_template: str = DEFAULT_CONTACT_MESSAGE_TEMPLATE,
) -> ContactLink:
    """Return the contact message and a deep link embedding it URL-encoded.

    ``uri_template`` must contain a ``{text}`` placeholder.
    """
    if "{text}" not in uri_template:
        raise ValueError("uri_template must contain a '{text}' placeholder")
    message = build_contact_message(name, national_id, prize_label, message_template)
    uri = uri_template.replace("{text}", quote(message, safe=""))
    return ContactLink(message=message, uri=uri)


__all__ = [
    "ContactLink",
    "DEFAULT_CONTACT_MESSAGE_TEMPLATE",
    "DEFAULT_CONTACT_URI_TEMPLATE",
    "build_contact_link",
    "build_contact_message",
]
