from __future__ import annotations

from crosswalk.data_layer.base.frozen import BaseFrozenData

# Relation types that describe a metadata record of the resource rather
# than a related resource. Only these carry the related-schema descriptor.
METADATA_RELATION_TYPES = frozenset({"HasMetadata", "IsMetadataFor"})


class AlternateIdentifierData(BaseFrozenData):
    value: str
    type: str | None = None


class RelatedIdentifierData(BaseFrozenData):
    value: str
    type: str | None = None
    relation_type: str | None = None
    resource_type_general: str | None = None
    related_metadata_scheme: str | None = None
    scheme_uri: str | None = None
    scheme_type: str | None = None

    @property
    def describes_metadata(self) -> bool:
        return self.relation_type in METADATA_RELATION_TYPES
