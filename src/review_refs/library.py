"""Load-once document library backing the reference selector."""

from __future__ import annotations

import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Sequence

from dotenv import load_dotenv

from .models import Category, Document, UnknownDocumentError

load_dotenv()

logger = logging.getLogger(__name__)

CATALOG_FILE = "catalog.json"
REFERENCES_PACKAGE_DIR = "references"

Reader = Callable[[str], str]


class DocumentLibrary:
    """Immutable store of reference documents and the category -> document mapping."""

    def __init__(
        self,
        documents: Iterable[Document],
        mapping: Mapping[Category, Sequence[str]],
    ) -> None:
        self._documents: dict[str, Document] = {}
        for document in documents:
            if document.doc_id in self._documents:
                raise ValueError(f"Duplicate document id '{document.doc_id}' in catalog")
            self._documents[document.doc_id] = document

        self._mapping: dict[Category, tuple[str, ...]] = {}
        for category, doc_ids in mapping.items():
            resolved = Category.parse(category)
            missing = [doc_id for doc_id in doc_ids if doc_id not in self._documents]
            if missing:
                raise UnknownDocumentError(
                    f"Category '{resolved.value}' references unknown document ids: {', '.join(missing)}"
                )
            self._mapping[resolved] = tuple(doc_ids)

    def documents(self) -> tuple[Document, ...]:
        return tuple(self._documents.values())

    def get(self, doc_id: str) -> Document:
        try:
            return self._documents[doc_id]
        except KeyError as exc:
            raise UnknownDocumentError(f"Document '{doc_id}' is not in the library") from exc

    def ids_for(self, category: Category) -> tuple[str, ...]:
        return self._mapping.get(category, ())

    def categories(self) -> set[Category]:
        return set(self._mapping)

    @classmethod
    def with_default_references(cls) -> "DocumentLibrary":
        """Load the corpus packaged with ``review_refs``."""

        root = resources.files(__package__).joinpath(REFERENCES_PACKAGE_DIR)

        def read(name: str) -> str:
            try:
                return root.joinpath(name).read_text(encoding="utf-8")
            except FileNotFoundError as exc:
                raise FileNotFoundError(f"Cannot locate reference resource '{name}'") from exc

        catalog = json.loads(read(CATALOG_FILE))
        return cls.from_catalog(catalog, read)

    @classmethod
    def from_directory(cls, path: str | os.PathLike[str]) -> "DocumentLibrary":
        """Load a corpus laid out like the packaged one from a directory on disk."""

        root = Path(path)
        catalog_path = root / CATALOG_FILE
        if not catalog_path.is_file():
            raise FileNotFoundError(f"Reference catalog '{catalog_path}' not found")

        def read(name: str) -> str:
            return (root / name).read_text(encoding="utf-8")

        with catalog_path.open("r", encoding="utf-8") as handle:
            catalog = json.load(handle)
        return cls.from_catalog(catalog, read)

    @classmethod
    def from_catalog(cls, catalog: Mapping[str, Any], reader: Reader) -> "DocumentLibrary":
        try:
            specs = catalog["documents"]
            raw_mapping = catalog["categories"]
        except (KeyError, TypeError) as exc:
            raise ValueError("Catalog must define 'documents' and 'categories'") from exc

        try:
            documents = [
                Document(doc_id=spec["id"], title=spec["title"], body=reader(spec["file"]))
                for spec in specs
            ]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Catalog document entries need 'id', 'title' and 'file': {exc!r}") from exc

        if not isinstance(raw_mapping, dict):
            raise ValueError("Catalog 'categories' must map category names to document id lists")
        mapping: dict[Category, list[str]] = {}
        for name, doc_ids in raw_mapping.items():
            if not isinstance(doc_ids, list):
                raise ValueError(f"Category {name!r} must list document ids, got {type(doc_ids).__name__}")
            mapping[Category.parse(name)] = list(doc_ids)

        library = cls(documents, mapping)
        logger.info(
            "Loaded %d reference documents for %d categories",
            len(documents),
            len(mapping),
        )
        return library


def load_default_library() -> DocumentLibrary:
    """Honour ``REVIEW_REFERENCES_DIR`` before falling back to the packaged corpus."""

    override = os.getenv("REVIEW_REFERENCES_DIR")
    if override:
        logger.info("Loading reference corpus from %s", override)
        return DocumentLibrary.from_directory(override)
    return DocumentLibrary.with_default_references()


DEFAULT_LIBRARY = load_default_library()
