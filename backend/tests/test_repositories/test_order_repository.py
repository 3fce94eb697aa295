"""
Tests for OrderRepository
"""
from decimal import Decimal

from garment_exchange.core.database import unit_of_work
from garment_exchange.domain.order import Order
from garment_exchange.repositories import OrderRepository


def _place(session_factory, retailer_name, lines):
    with unit_of_work(session_factory) as session:
        repo = OrderRepository(session)
        order_id = repo.create_order(retailer_name)
        for item_id, qty, price in lines:
            repo.append_line(order_id, item_id, qty, price)
    return order_id


class TestOrderRepository:

    def test_create_order_and_append_lines(self, session_factory, catalog):
        order_id = _place(session_factory, "RetailerX", [
            (catalog["A"], 2, Decimal("10.00")),
            (catalog["B"], 1, Decimal("899.00")),
        ])

        with unit_of_work(session_factory) as session:
            order = OrderRepository(session).find_by_id(order_id)

        assert isinstance(order, Order)
        assert order.retailer_name == "RetailerX"
        assert [(line.item_id, line.qty) for line in order.items] == [(catalog["A"], 2), (catalog["B"], 1)]
        assert all(line.order_id == order_id for line in order.items)
        assert order.total_quantity == 3
        assert order.total == Decimal("919.00")

    def test_find_by_id_returns_none_when_not_found(self, session_factory):
        with unit_of_work(session_factory) as session:
            repo = OrderRepository(session)
            assert repo.find_by_id(999) is None
            assert repo.find_by_id(2 ** 70) is None

    def test_find_all_newest_first_with_lines(self, session_factory, catalog):
        first = _place(session_factory, "RetailerX", [(catalog["A"], 1, Decimal("10.00"))])
        second = _place(session_factory, "RetailerY", [(catalog["B"], 2, Decimal("899.00"))])
        third = _place(session_factory, "RetailerX", [(catalog["A"], 3, Decimal("10.00"))])

        with unit_of_work(session_factory) as session:
            orders, total = OrderRepository(session).find_all()

        assert total == 3
        assert [o.id for o in orders] == [third, second, first]
        assert [o.items[0].qty for o in orders] == [3, 2, 1]

    def test_find_all_filters_and_paginates(self, session_factory, catalog):
        ids = [
            _place(session_factory, "RetailerX" if i % 2 == 0 else "RetailerY", [(catalog["A"], 1, Decimal("10.00"))])
            for i in range(5)
        ]

        with unit_of_work(session_factory) as session:
            repo = OrderRepository(session)
            x_orders, x_total = repo.find_all(retailer_name="RetailerX")
            page, total = repo.find_all(limit=2, offset=1)
            empty, _ = repo.find_all(offset=10)

        assert x_total == 3
        assert {o.retailer_name for o in x_orders} == {"RetailerX"}
        assert total == 5
        assert [o.id for o in page] == [ids[3], ids[2]]
        assert empty == []

    def test_to_dict_converts_decimals(self, session_factory, catalog):
        order_id = _place(session_factory, "RetailerX", [(catalog["A"], 2, Decimal("10.50"))])

        with unit_of_work(session_factory) as session:
            data = OrderRepository(session).find_by_id(order_id).to_dict()

        assert data["total"] == 21.0
        assert data["item_count"] == 1
        assert data["items"][0]["price_at_purchase"] == 10.5
        assert data["items"][0]["line_total"] == 21.0
        assert isinstance(data["created_at"], str)
