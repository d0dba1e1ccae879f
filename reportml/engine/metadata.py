"""PDF document metadata.

Copies the template's descriptive metadata into the PDF document
information dictionary, where PDF viewers show it as document properties.
"""

import logging

from reportml.engine.canvas import ReportCanvas
from reportml.models.report import Metadata

logger = logging.getLogger(__name__)

PDF_CREATOR = "reportml"


def set_document_metadata(canvas: ReportCanvas, metadata: Metadata | None) -> None:
    """Set PDF document metadata properties via canvas.

    Sets title, author and subject from the template metadata and always
    records reportml as the creator. Missing fields are left unset.

    Args:
        canvas: Report canvas for the document being generated
        metadata: Template metadata (optional)
    """
    if metadata is None:
        canvas.set_document_info(creator=PDF_CREATOR)
        return

    canvas.set_document_info(
        title=metadata.name,
        author=metadata.author,
        subject=metadata.description,
        creator=PDF_CREATOR,
    )
    logger.debug(
        f"PDF metadata set: title='{metadata.name}', author='{metadata.author}'"
    )
