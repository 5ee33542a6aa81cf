from __future__ import annotations

from typing import Self

from crosswalk.core import vocabulary
from crosswalk.data_layer.base.frozen import BaseFrozenData


class ResourceTypesData(BaseFrozenData):
    """One resource type, projected onto every vocabulary we know.

    Each field is independent. Writers read only the field for their own
    vocabulary and never require the others.
    """

    type: str | None = None
    resource_type: str | None = None
    resource_type_general: str | None = None
    citeproc: str | None = None
    bibtex: str | None = None
    ris: str | None = None

    @property
    def is_empty(self) -> bool:
        return not any(self.model_dump().values())

    def backfilled(self) -> Self:
        """Fill missing projections from the translation tables.

        resource_type_general is only derived when the tables know the kind.
        The generic kind leaves it unset so the writer can apply its own
        fallback.
        """
        kind = self.type or vocabulary.kind_for(
            self.resource_type, self.resource_type_general
        )
        if kind is None:
            return self

        resource_type_general = self.resource_type_general
        if (
            resource_type_general is None
            and kind != vocabulary.KIND_FALLBACK
            and kind in vocabulary.KIND_PROJECTIONS
        ):
            resource_type_general = vocabulary.resource_type_general_for(kind)

        return self.model_copy(
            update=dict(
                type=kind,
                resource_type_general=resource_type_general,
                citeproc=self.citeproc or vocabulary.citeproc_for(kind),
                bibtex=self.bibtex or vocabulary.bibtex_for(kind),
                ris=self.ris
                or vocabulary.ris_for(
                    kind, self.resource_type, resource_type_general
                ),
            )
        )
