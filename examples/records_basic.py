from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import structmap
from structmap import Config, Ref, field


@dataclass
class Audit:
    CreatedBy: str = field(tag="created_by")
    UpdatedBy: Optional[str] = field(tag="updated_by,omitNil", default=None)


class Money:
    def __init__(self, cents: int) -> None:
        self.cents = cents

    def marshal_map_value(self) -> Any:
        return f"{self.cents // 100}.{self.cents % 100:02d}"


@dataclass
class Order:
    ID: int = field(tag="id")
    Total: Money = field(tag="total")
    Notes: str = field(tag="notes,omitZero", default="")
    Audit: Audit = field(embedded=True, default_factory=lambda: Audit("system"))


def main() -> None:
    order = Order(1, Money(1999))
    # Embedded Audit fields are promoted; Money supplies its own value.
    print("marshal ->", structmap.marshal(order))
    print("marshal(Ref) ->", structmap.marshal(Ref(order)))

    orders = [order, Order(2, Money(5), "gift", Audit("alice", "bob"))]
    print("marshal_slice ->", structmap.marshal_slice(orders))

    # Same type, different tag namespace.
    print("db keyword ->", structmap.marshal(order, Config(tag_keyword="db")))

    payload = structmap.codec.packb(order)
    print("msgpack ->", payload.hex())


if __name__ == "__main__":
    main()
