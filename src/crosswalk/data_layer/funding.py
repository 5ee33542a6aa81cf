from __future__ import annotations

from crosswalk.data_layer.base.frozen import BaseFrozenData


class FundingReferenceData(BaseFrozenData):
    funder_name: str | None = None
    funder_identifier: str | None = None
    funder_identifier_type: str | None = None
    award_number: str | None = None
    award_uri: str | None = None
    award_title: str | None = None
