from pydantic import BaseModel, ConfigDict


class ListingRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str  # canonical: origin + /slnH<digits>, dedup key
    page: int = 1  # 1-based result page the listing came from


class DetailFields(BaseModel):
    model_config = ConfigDict(frozen=True)

    tel_mask: str | None = None  # masked number shown on the detail page
    address: str | None = None
    access: str | None = None
    business_hours: str | None = None
    holiday: str | None = None
    payment: str | None = None
    cut_price: str | None = None
    staff_count: str | None = None
    features: str | None = None
    remark: str | None = None
    others: str | None = None


class FullRecord(ListingRecord, DetailFields):
    resolved_phone: str | None = None  # from the /tel/ page


class JobCheckpoint(BaseModel):
    items: list[ListingRecord]
    cursor: int = 0


class ChunkResult(BaseModel):
    results: list[FullRecord] = []
    next_cursor: int | None = None  # None once the item list is exhausted
