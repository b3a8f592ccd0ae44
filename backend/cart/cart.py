"""
Session-held cart. Nothing here touches the database; line items are
snapshots of the menu item taken when it was added.
"""
from dataclasses import asdict, dataclass

CART_SESSION_KEY = "cart"


@dataclass
class CartLineItem:
    food_item_id: str
    name: str
    price: int
    image_url: str
    preparation_time: int
    quantity: int = 1

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

    def as_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_food_item(cls, food_item, quantity=1):
        return cls(
            food_item_id=str(food_item.id),
            name=food_item.name,
            price=food_item.price,
            image_url=food_item.image_url,
            preparation_time=food_item.preparation_time,
            quantity=quantity,
        )


class Cart:
    def __init__(self, session):
        self.session = session
        stored = session.get(CART_SESSION_KEY) or []
        self._lines = [CartLineItem(**line) for line in stored]

    def __iter__(self):
        return iter(self._lines)

    def __len__(self):
        return len(self._lines)

    def _find(self, food_item_id):
        food_item_id = str(food_item_id)
        for line in self._lines:
            if line.food_item_id == food_item_id:
                return line
        return None

    def add(self, food_item, quantity=1):
        """Add `quantity` of a menu item; an existing line is incremented."""
        if quantity < 1:
            raise ValueError("Quantity must be at least 1.")
        line = self._find(food_item.id)
        if line is None:
            self._lines.append(CartLineItem.from_food_item(food_item, quantity))
        else:
            line.quantity += quantity
        self.save()

    def set_quantity(self, food_item_id, quantity):
        """Set a line's quantity. Zero or less removes the line."""
        line = self._find(food_item_id)
        if line is None:
            raise KeyError(str(food_item_id))
        if quantity <= 0:
            self._lines.remove(line)
        else:
            line.quantity = quantity
        self.save()

    def remove(self, food_item_id):
        line = self._find(food_item_id)
        if line is None:
            raise KeyError(str(food_item_id))
        self._lines.remove(line)
        self.save()

    def clear(self):
        self._lines = []
        self.save()

    @property
    def total(self) -> int:
        return sum(line.line_total for line in self._lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def line_items(self):
        return list(self._lines)

    def save(self):
        self.session[CART_SESSION_KEY] = [line.as_dict() for line in self._lines]
        self.session.modified = True

    def as_dict(self) -> dict:
        return {
            "items": [
                {**line.as_dict(), "line_total": line.line_total} for line in self._lines
            ],
            "total": self.total,
            "item_count": self.item_count,
        }
