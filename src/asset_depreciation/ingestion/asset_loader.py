from sqlalchemy import select
from sqlalchemy.orm import Session

from asset_depreciation.models.orm import Asset
from asset_depreciation.models.schemas import AssetRecord


def load_asset_records(
    session: Session,
    category: str | None = None,
    department: str | None = None,
    status: str | None = None,
) -> list[AssetRecord]:
    """Load asset snapshots, pushing equality filters down to SQL."""
    stmt = select(Asset)
    if category:
        stmt = stmt.where(Asset.category == category)
    if department:
        stmt = stmt.where(Asset.department == department)
    if status:
        stmt = stmt.where(Asset.status == status)
    stmt = stmt.order_by(Asset.category, Asset.name, Asset.id)
    return [AssetRecord.model_validate(a) for a in session.scalars(stmt).all()]


def get_asset_record(session: Session, asset_id: int) -> AssetRecord | None:
    asset = session.get(Asset, asset_id)
    if asset is None:
        return None
    return AssetRecord.model_validate(asset)
