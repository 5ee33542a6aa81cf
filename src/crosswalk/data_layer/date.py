from __future__ import annotations

from crosswalk.data_layer.base.frozen import BaseFrozenData

ISSUED = "Issued"


class DateData(BaseFrozenData):
    # Kept verbatim. Partial dates, ranges ("2011-10-01/2012-03-14") and
    # free text ("1970-04-01 / (:tba)") are all legal here.
    date: str
    # The writer emits "Issued" when this is unset.
    date_type: str | None = None
    date_information: str | None = None
