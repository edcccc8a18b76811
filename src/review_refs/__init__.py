"""C/C++ review reference corpus and lookup helpers."""

from .descriptor import AgentDescriptor, load_descriptor
from .library import DEFAULT_LIBRARY, DocumentLibrary
from .models import Category, Document, InvalidCategory, Severity, UnknownDocumentError
from .selector import ReferenceSelector
from .templates import SEVERITY_GUIDE, format_findings, render_output_template
from .triggers import TRIGGER_KEYWORDS, infer_categories

__all__ = [
    "Category",
    "Document",
    "Severity",
    "InvalidCategory",
    "UnknownDocumentError",
    "DocumentLibrary",
    "DEFAULT_LIBRARY",
    "ReferenceSelector",
    "SEVERITY_GUIDE",
    "render_output_template",
    "format_findings",
    "TRIGGER_KEYWORDS",
    "infer_categories",
    "AgentDescriptor",
    "load_descriptor",
]
__version__ = "0.1.0"
