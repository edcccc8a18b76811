import json

import pytest

from review_refs import Category, DocumentLibrary, InvalidCategory, UnknownDocumentError
from review_refs.library import DEFAULT_LIBRARY, load_default_library


def write_corpus(root, catalog, files):
    root.mkdir(parents=True, exist_ok=True)
    (root / "catalog.json").write_text(json.dumps(catalog), encoding="utf-8")
    for name, text in files.items():
        (root / name).write_text(text, encoding="utf-8")


def test_default_library_maps_every_category():
    assert DEFAULT_LIBRARY.categories() == set(Category)
    for category in Category:
        for doc_id in DEFAULT_LIBRARY.ids_for(category):
            assert DEFAULT_LIBRARY.get(doc_id).body.strip()


def test_from_directory_loads_documents(tmp_path):
    corpus = tmp_path / "corpus"
    write_corpus(
        corpus,
        {
            "documents": [{"id": "sec", "title": "Security", "file": "sec.md"}],
            "categories": {"security": ["sec"]},
        },
        {"sec.md": "# Security\n- no strcpy\n"},
    )

    library = DocumentLibrary.from_directory(corpus)

    assert library.ids_for(Category.SECURITY) == ("sec",)
    assert library.get("sec").body == "# Security\n- no strcpy\n"
    assert library.ids_for(Category.REVIEW) == ()


def test_missing_document_id_fails_to_load(tmp_path):
    corpus = tmp_path / "corpus"
    write_corpus(
        corpus,
        {
            "documents": [{"id": "sec", "title": "Security", "file": "sec.md"}],
            "categories": {"security": ["sec", "missing"]},
        },
        {"sec.md": "body"},
    )

    with pytest.raises(UnknownDocumentError, match="missing"):
        DocumentLibrary.from_directory(corpus)


def test_unknown_category_in_catalog_fails_to_load(tmp_path):
    corpus = tmp_path / "corpus"
    write_corpus(
        corpus,
        {
            "documents": [{"id": "a", "title": "A", "file": "a.md"}],
            "categories": {"style": ["a"]},
        },
        {"a.md": "body"},
    )

    with pytest.raises(InvalidCategory):
        DocumentLibrary.from_directory(corpus)


def test_duplicate_document_ids_are_rejected():
    catalog = {
        "documents": [
            {"id": "a", "title": "A", "file": "a.md"},
            {"id": "a", "title": "A again", "file": "a.md"},
        ],
        "categories": {},
    }

    with pytest.raises(ValueError, match="Duplicate"):
        DocumentLibrary.from_catalog(catalog, lambda name: "body")


def test_catalog_without_sections_is_rejected():
    with pytest.raises(ValueError, match="documents"):
        DocumentLibrary.from_catalog({"documents": []}, lambda name: "body")


def test_missing_catalog_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        DocumentLibrary.from_directory(tmp_path)


def test_get_unknown_document():
    with pytest.raises(UnknownDocumentError):
        DEFAULT_LIBRARY.get("nope")


def test_environment_override_directory(tmp_path, monkeypatch):
    corpus = tmp_path / "override"
    write_corpus(
        corpus,
        {
            "documents": [{"id": "perf", "title": "Perf", "file": "perf.md"}],
            "categories": {"performance": ["perf"]},
        },
        {"perf.md": "reserve vectors"},
    )
    monkeypatch.setenv("REVIEW_REFERENCES_DIR", str(corpus))

    library = load_default_library()

    assert library.categories() == {Category.PERFORMANCE}


def test_packaged_library_used_without_override(monkeypatch):
    monkeypatch.delenv("REVIEW_REFERENCES_DIR", raising=False)

    library = load_default_library()

    assert [document.doc_id for document in library.documents()] == [
        document.doc_id for document in DEFAULT_LIBRARY.documents()
    ]


def test_document_entry_without_file_is_rejected():
    catalog = {"documents": [{"id": "a", "title": "A"}], "categories": {}}

    with pytest.raises(ValueError, match="'file'"):
        DocumentLibrary.from_catalog(catalog, lambda name: "body")


def test_categories_given_as_list_are_rejected():
    catalog = {"documents": [], "categories": ["review"]}

    with pytest.raises(ValueError, match="categories"):
        DocumentLibrary.from_catalog(catalog, lambda name: "body")


def test_category_mapped_to_single_string_is_rejected():
    catalog = {
        "documents": [{"id": "security-checklist", "title": "Security", "file": "sec.md"}],
        "categories": {"security": "security-checklist"},
    }

    with pytest.raises(ValueError, match="must list document ids") as excinfo:
        DocumentLibrary.from_catalog(catalog, lambda name: "body")
    assert not isinstance(excinfo.value, UnknownDocumentError)
