from __future__ import annotations

from ..extensions import db
from stallpos.time_utils import to_utc_z, utcnow


class Snapshot(db.Model):
    """
    Whole-collection snapshot keyed by a fixed logical name.

    One row per collection ("catalog", "sales", "payouts"). The payload is
    the full JSON list; saves replace it. A missing row means the
    collection was never saved.
    """
    __tablename__ = "snapshots"

    key = db.Column(db.String(32), primary_key=True)
    payload = db.Column(db.JSON, nullable=False)
    record_count = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Snapshot key={self.key!r} records={self.record_count}>"

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "record_count": self.record_count,
            "updated_at": to_utc_z(self.updated_at),
        }
