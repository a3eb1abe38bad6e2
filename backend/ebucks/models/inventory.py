from __future__ import annotations

from ..extensions import db
from ebucks.money import cents_to_amount
from ebucks.time_utils import to_utc_z


class InventoryItem(db.Model):
    """
    Item on the classroom store shelf.

    WHY: Purchases decrement stock and price the cart.

    DESIGN:
    - price_cents is authoritative; client-declared cart totals are
      checked against it
    - stock is decremented with a conditional update (stock > 0) so a
      race between two registers cannot drive it negative
    - Items are deactivated rather than deleted; sales_log keeps a copy
      of name and price anyway
    """
    __tablename__ = "inventory"
    __table_args__ = (
        db.Index("ix_inventory_active_name", "is_active", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)

    # Scannable code, optional
    barcode = db.Column(db.String(64), nullable=True, index=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<InventoryItem id={self.id} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": cents_to_amount(self.price_cents),
            "price_cents": self.price_cents,
            "stock": self.stock,
            "barcode": self.barcode,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
        }
