"""Static translation tables between resource-type vocabularies.

A work's kind is carried in up to six vocabularies at once:

* ``type``: a schema.org class name, used as the generic "kind" keyword and
  as the key of the main table below.
* ``resource_type``: the free-text, fine-grained type from the source.
* ``resource_type_general``: the DataCite resourceTypeGeneral enumeration.
* ``citeproc``: the CSL item type.
* ``bibtex``: the BibTeX entry type.
* ``ris``: the RIS reference type.

All tables are read-only and shared across conversions.
"""

from __future__ import annotations

from typing import NamedTuple

from frozendict import frozendict

RESOURCE_TYPE_GENERAL_FALLBACK = "Other"
CITEPROC_FALLBACK = "article"
BIBTEX_FALLBACK = "misc"
RIS_FALLBACK = "GEN"
KIND_FALLBACK = "CreativeWork"


class TypeProjection(NamedTuple):
    resource_type_general: str
    citeproc: str | None
    bibtex: str | None
    ris: str | None


# Keyed by kind. Every entry has a resource_type_general value.
KIND_PROJECTIONS: frozendict[str, TypeProjection] = frozendict(
    {
        "Article": TypeProjection("Text", "article", "article", None),
        "AudioObject": TypeProjection("Sound", "song", "misc", "SOUND"),
        "Blog": TypeProjection("Text", "report", "misc", None),
        "BlogPosting": TypeProjection("Text", "post-weblog", "article", None),
        "Book": TypeProjection("Text", "book", "book", "BOOK"),
        "Chapter": TypeProjection("Text", "chapter", "inbook", "CHAP"),
        "Collection": TypeProjection("Collection", None, "misc", None),
        "CreativeWork": TypeProjection("Other", None, "misc", None),
        "DataCatalog": TypeProjection("Dataset", "dataset", "misc", "CTLG"),
        "Dataset": TypeProjection("Dataset", "dataset", "misc", "DATA"),
        "Event": TypeProjection("Event", None, "misc", None),
        "ImageObject": TypeProjection("Image", "graphic", "misc", "FIGURE"),
        "Movie": TypeProjection("Audiovisual", "motion_picture", "misc", "MPCT"),
        "PublicationIssue": TypeProjection("Text", None, "misc", None),
        "Report": TypeProjection("Text", "report", "techreport", "RPRT"),
        "Review": TypeProjection("Text", "review", "misc", None),
        "ScholarlyArticle": TypeProjection("Text", "article-journal", "article", None),
        "Service": TypeProjection("Service", None, "misc", None),
        "SoftwareSourceCode": TypeProjection("Software", None, "misc", "COMP"),
        "Thesis": TypeProjection("Text", "thesis", "phdthesis", "THES"),
        "VideoObject": TypeProjection("Audiovisual", "broadcast", "misc", "VIDEO"),
        "WebPage": TypeProjection("Text", "webpage", "misc", "ELEC"),
        "WebSite": TypeProjection("Text", "webpage", "misc", "ELEC"),
    }
)

# resourceTypeGeneral -> kind. None means there is no schema.org equivalent.
GENERAL_TO_KIND: frozendict[str, str | None] = frozendict(
    {
        "Audiovisual": "VideoObject",
        "Collection": "Collection",
        "DataPaper": "ScholarlyArticle",
        "Dataset": "Dataset",
        "Event": "Event",
        "Image": "ImageObject",
        "InteractiveResource": None,
        "Model": None,
        "PhysicalObject": None,
        "Service": "Service",
        "Software": "SoftwareSourceCode",
        "Sound": "AudioObject",
        "Text": "ScholarlyArticle",
        "Workflow": None,
        "Other": "CreativeWork",
    }
)

GENERAL_TO_RIS: frozendict[str, str] = frozendict(
    {
        "Audiovisual": "MPCT",
        "Dataset": "DATA",
        "Image": "FIGURE",
        "Software": "COMP",
        "Sound": "SOUND",
        "Text": "RPRT",
    }
)

# Fine-grained resource types that carry more information than their
# resourceTypeGeneral.
RESOURCE_TYPE_TO_KIND: frozendict[str, str] = frozendict(
    {
        "Book": "Book",
        "BookChapter": "Chapter",
        "BookSection": "Chapter",
        "ConferencePaper": "ScholarlyArticle",
        "Dataset": "Dataset",
        "Dissertation": "Thesis",
        "EditedBook": "Book",
        "JournalArticle": "ScholarlyArticle",
        "Monograph": "Book",
        "ProceedingsArticle": "ScholarlyArticle",
        "ReferenceBook": "Book",
        "Report": "Report",
        "Software": "SoftwareSourceCode",
        "Thesis": "Thesis",
    }
)

RESOURCE_TYPE_TO_RIS: frozendict[str, str] = frozendict(
    {
        "Book": "BOOK",
        "BookChapter": "CHAP",
        "BookPart": "CHAP",
        "BookSection": "CHAP",
        "Dataset": "DATA",
        "Dissertation": "THES",
        "EditedBook": "BOOK",
        "JournalArticle": "JOUR",
        "Monograph": "BOOK",
        "ProceedingsArticle": "CPAPER",
        "ReferenceBook": "BOOK",
        "Report": "RPRT",
        "Standard": "STAND",
    }
)

BIBTEX_TO_KIND: frozendict[str, str] = frozendict(
    {
        "article": "ScholarlyArticle",
        "book": "Book",
        "booklet": "Book",
        "inbook": "Chapter",
        "incollection": "Chapter",
        "inproceedings": "ScholarlyArticle",
        "conference": "ScholarlyArticle",
        "manual": "Book",
        "mastersthesis": "Thesis",
        "phdthesis": "Thesis",
        "proceedings": "Book",
        "techreport": "Report",
        "misc": "CreativeWork",
        "unpublished": "CreativeWork",
    }
)


def _compact_key(value: str) -> str:
    """'book chapter', 'book-chapter' and 'BookChapter' share one key."""
    words = value.replace("-", " ").replace("_", " ").split()
    return "".join(word[:1].upper() + word[1:] for word in words)


def resource_type_general_for(kind: str | None) -> str:
    """Translate a kind into resourceTypeGeneral. Total: unknown kinds yield "Other"."""
    if kind and kind in KIND_PROJECTIONS:
        return KIND_PROJECTIONS[kind].resource_type_general
    return RESOURCE_TYPE_GENERAL_FALLBACK


def kind_for(
    resource_type: str | None = None, resource_type_general: str | None = None
) -> str | None:
    """Find the kind for a source that only speaks the DataCite vocabularies.

    A recognizable fine-grained resource type wins over the general one.
    An unrecognized type yields the generic kind. Returns None when neither
    value is given.
    """
    if resource_type:
        kind = RESOURCE_TYPE_TO_KIND.get(_compact_key(resource_type))
        if kind:
            return kind
    if resource_type_general:
        return GENERAL_TO_KIND.get(resource_type_general) or KIND_FALLBACK
    if resource_type:
        return KIND_FALLBACK
    return None


def kind_for_bibtex(entry_type: str | None) -> str | None:
    if not entry_type:
        return None
    return BIBTEX_TO_KIND.get(entry_type.lower(), KIND_FALLBACK)


def citeproc_for(kind: str | None) -> str:
    projection = KIND_PROJECTIONS.get(kind) if kind else None
    return (projection and projection.citeproc) or CITEPROC_FALLBACK


def bibtex_for(kind: str | None) -> str:
    projection = KIND_PROJECTIONS.get(kind) if kind else None
    return (projection and projection.bibtex) or BIBTEX_FALLBACK


def ris_for(
    kind: str | None,
    resource_type: str | None = None,
    resource_type_general: str | None = None,
) -> str:
    if resource_type:
        ris = RESOURCE_TYPE_TO_RIS.get(_compact_key(resource_type))
        if ris:
            return ris
    projection = KIND_PROJECTIONS.get(kind) if kind else None
    if projection and projection.ris:
        return projection.ris
    if resource_type_general and resource_type_general in GENERAL_TO_RIS:
        return GENERAL_TO_RIS[resource_type_general]
    return RIS_FALLBACK
