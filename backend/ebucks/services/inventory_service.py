# Overview: Service-layer operations for store inventory.

from ..extensions import db
from ..models import InventoryItem
from ..validation import NotFoundError, MAX_QUANTITY, to_cents, to_int, to_text


def create_item(*, name: str, price, stock=0, barcode: str | None = None) -> InventoryItem:
    name = to_text(name, "name", max_length=255)
    if isinstance(barcode, int) and not isinstance(barcode, bool):
        barcode = str(barcode)

    item = InventoryItem(
        name=name,
        price_cents=to_cents(price, "price", allow_zero=True),
        stock=to_int(stock if stock is not None else 0, "stock", minimum=0, maximum=MAX_QUANTITY),
        barcode=to_text(barcode, "barcode", max_length=64, required=False),
        is_active=True,
    )
    db.session.add(item)
    db.session.commit()
    return item


def list_items(include_inactive: bool = False) -> list[InventoryItem]:
    query = db.session.query(InventoryItem)
    if not include_inactive:
        query = query.filter_by(is_active=True)
    return query.order_by(InventoryItem.name.asc()).all()


def get_item(item_id: int) -> InventoryItem:
    """Active item by id."""
    item = db.session.get(InventoryItem, item_id)
    if not item or not item.is_active:
        raise NotFoundError(f"Item {item_id} not found")
    return item


def find_by_barcode(barcode: str) -> InventoryItem:
    item = (
        db.session.query(InventoryItem)
        .filter_by(barcode=(barcode or "").strip(), is_active=True)
        .first()
    )
    if not item:
        raise NotFoundError(f"No item with barcode {barcode}")
    return item


def restock_item(item_id: int, quantity) -> InventoryItem:
    qty = to_int(quantity, "quantity", minimum=1, maximum=MAX_QUANTITY)
    item = get_item(item_id)
    db.session.query(InventoryItem).filter_by(id=item.id).update(
        {InventoryItem.stock: InventoryItem.stock + qty},
        synchronize_session=False,
    )
    db.session.commit()
    return get_item(item_id)


def deactivate_item(item_id: int) -> None:
    item = get_item(item_id)
    item.is_active = False
    db.session.commit()
