"""
Hands a sent transmittal to whatever actually delivers it (email, courier
desk, ...). The transmittal log records intent-to-send; a delivery failure is
reported back to the caller and never un-sends the transmittal.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass
class DeliveryLine:
    drawing_no: str
    title: str
    revision_number: int | None
    purpose: str


@dataclass
class DeliveryMessage:
    transmittal_id: uuid.UUID
    transmittal_no: str
    method: str
    to_email: str
    to_name: str
    subject: str
    body: str
    lines: list[DeliveryLine] = field(default_factory=list)
    file_ids: list[uuid.UUID] = field(default_factory=list)


class Notifier(Protocol):
    async def deliver(self, message: DeliveryMessage) -> str | None:
        """Returns the provider's reference for the delivery, if any."""
        ...


class LogNotifier:
    """Default notifier: records the delivery request in the application log."""

    async def deliver(self, message: DeliveryMessage) -> str | None:
        logger.info(
            "transmittal %s via %s to %s <%s>: %s (%d drawings, %d files)",
            message.transmittal_no, message.method, message.to_name, message.to_email,
            message.subject, len(message.lines), len(message.file_ids),
            extra={"transmittal_id": message.transmittal_id, "transmittal_no": message.transmittal_no},
        )
        return None


def _purpose_label(purpose: str) -> str:
    return purpose.replace("_", " ").lower()


def build_subject(project_name: str, subject: str | None, item_count: int) -> str:
    if subject and subject.strip():
        return f"{project_name} — {subject.strip()}"
    return f"{project_name} — Drawing{'s' if item_count != 1 else ''}"


def build_body(
    project_name: str,
    recipient_name: str,
    lines: list[DeliveryLine],
    notes: str | None = None,
    company_name: str | None = None,
) -> str:
    first_name = recipient_name.split(" ")[0] if recipient_name.strip() else recipient_name
    purpose = _purpose_label(lines[0].purpose) if lines else ""
    if len(lines) == 1:
        intro = f"Here's a drawing{' ' + purpose if purpose else ''} for {project_name}."
    else:
        intro = f"Here are {len(lines)} drawings{' ' + purpose if purpose else ''} for {project_name}."

    out = [f"Hi {first_name}, {intro}", ""]
    if notes:
        out += [notes, ""]
    for line in lines:
        rev = f"Rev {line.revision_number}" if line.revision_number is not None else ""
        out.append(f"{line.drawing_no}\t{line.title}\t{rev}".rstrip())
    if company_name:
        out += ["", company_name]
    return "\n".join(out)
