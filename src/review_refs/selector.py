"""Category -> reference document lookup."""

from __future__ import annotations

import logging

from .library import DEFAULT_LIBRARY, DocumentLibrary
from .models import Category, Document
from .templates import render_output_template

logger = logging.getLogger(__name__)

DOCUMENT_SEPARATOR = "\n\n---\n\n"


class ReferenceSelector:
    """Maps a request category to its reference documents and output template.

    The selector holds no state beyond a reference to a read-only library, so a
    single instance can be shared between any number of callers.
    """

    def __init__(self, library: DocumentLibrary | None = None) -> None:
        self._library = library or DEFAULT_LIBRARY

    def select(self, category: Category | str) -> tuple[Document, ...]:
        """Return the documents mapped to ``category`` in mapping order."""

        resolved = Category.parse(category)
        documents = tuple(self._library.get(doc_id) for doc_id in self._library.ids_for(resolved))
        if not documents:
            logger.warning("No reference documents mapped to category '%s'", resolved.value)
        else:
            logger.debug(
                "Selected %s for category '%s'",
                ", ".join(document.doc_id for document in documents),
                resolved.value,
            )
        return documents

    def template(self, category: Category | str) -> str:
        return render_output_template(Category.parse(category))

    def render(self, category: Category | str) -> str:
        """Return document bodies followed by the output template as one text block."""

        resolved = Category.parse(category)
        parts = [document.body.rstrip() for document in self.select(resolved)]
        parts.append(self.template(resolved))
        return DOCUMENT_SEPARATOR.join(parts)
