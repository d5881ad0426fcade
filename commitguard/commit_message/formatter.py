"""Canonical commit message serialization."""
from ..models import BREAKING_CHANGE, CommitMessage, Footer


def format_footer(footer: Footer) -> str:
    if footer.value.startswith("#") and footer.key != BREAKING_CHANGE:
        return f"{footer.key} {footer.value}"
    return f"{footer.key}: {footer.value}"


def format_message(message: CommitMessage) -> str:
    """Serialize a message in canonical layout.

    ``parse(format_message(m)) == m`` holds for any parsed message.
    """
    sections = [message.header]
    sections.extend(message.body)
    if message.footers:
        sections.append("\n".join(format_footer(f) for f in message.footers))
    return "\n\n".join(sections)
