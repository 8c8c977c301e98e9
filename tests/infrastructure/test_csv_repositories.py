"""Tests for the CSV-file-backed stores."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from fulfillment.domain.exceptions import PersistenceError
from fulfillment.domain.model.order import Order, OrderLineItem, OrderStatus
from fulfillment.domain.model.promotion import ALL_ITEMS, Promotion, PromotionType
from fulfillment.domain.model.value_objects import Money, Quantity
from fulfillment.infrastructure.persistence.csv_catalog_repository import CsvCatalogRepository
from fulfillment.infrastructure.persistence.csv_order_repository import (
    CsvOrderRepository,
    parse_items,
)
from fulfillment.infrastructure.persistence.csv_promotion_repository import (
    CsvPromotionRepository,
)

T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
EPOCH_T0 = str(int(T0.timestamp()))


def _order(order_id: str = "ORDABC", address: str = "1 Main St, Springfield") -> Order:
    return Order.create(
        order_id=order_id,
        user_id="alice",
        items=[
            OrderLineItem("1", "Keyboard", Money.of("400.00"), Quantity(2)),
            OrderLineItem("3", "Note:book", Money.of("12.50"), Quantity(1)),
        ],
        shipping_address=address,
        at=T0,
    )


class TestCsvOrderRepository:

    def test_missing_file_reads_empty(self, tmp_path):
        assert CsvOrderRepository(tmp_path / "orders.csv").load_all() == []

    def test_write_then_read(self, tmp_path):
        path = tmp_path / "data" / "orders.csv"
        repo = CsvOrderRepository(path)
        order = _order()
        order.set_status(OrderStatus.SHIPPED, T0)

        repo.replace_all([order])
        loaded = repo.load_all()

        assert len(loaded) == 1
        got = loaded[0]
        assert got.order_id == "ORDABC"
        assert got.shipping_address == "1 Main St, Springfield"
        assert got.total_amount == Money.of("812.50")
        assert got.status == OrderStatus.SHIPPED
        assert got.order_time == T0
        assert [(i.item_id, i.item_name, i.quantity.value) for i in got.items] == [
            ("1", "Keyboard", 2),
            ("3", "Note:book", 1),
        ]

    def test_layout(self, tmp_path):
        path = tmp_path / "orders.csv"
        CsvOrderRepository(path).replace_all([_order(address="Home")])
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == (
            "order_id,user_id,items,order_time,total_amount,"
            "shipping_address,status,status_change_time"
        )
        assert lines[1] == (
            f"ORDABC,alice,1:Keyboard:400.00:2;3:Note:book:12.50:1,"
            f"{EPOCH_T0},812.50,Home,Pending,{EPOCH_T0}"
        )

    def test_bad_rows_skipped(self, tmp_path):
        path = tmp_path / "orders.csv"
        path.write_text(
            "order_id,user_id,items,order_time,total_amount,shipping_address,status,status_change_time\n"
            f"ORD1,alice,1:Keyboard:400:1,{EPOCH_T0},400,Home,Pending,{EPOCH_T0}\n"
            "ORD2,bob,too,short\n"
            f"ORD3,carol,1:Keyboard:400:1,{EPOCH_T0},400,Home,Lost,{EPOCH_T0}\n"
            f"ORD4,dave,1:Keyboard:400:1,notatime,400,Home,Pending,{EPOCH_T0}\n"
            "\n"
            f"ORD5,erin,1:Keyboard:400:1,{EPOCH_T0},400,Home,已签收,{EPOCH_T0}\n",
            encoding="utf-8",
        )
        loaded = CsvOrderRepository(path).load_all()
        assert [o.order_id for o in loaded] == ["ORD1", "ORD5"]
        assert loaded[1].status == OrderStatus.DELIVERED

    def test_stored_total_is_kept(self, tmp_path):
        path = tmp_path / "orders.csv"
        path.write_text(
            "header\n"
            f"ORD1,alice,1:Keyboard:400:1,{EPOCH_T0},350.00,Home,Pending,{EPOCH_T0}\n",
            encoding="utf-8",
        )
        assert CsvOrderRepository(path).load_all()[0].total_amount == Money.of("350.00")

    def test_write_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        repo = CsvOrderRepository(blocker / "orders.csv")
        with pytest.raises(PersistenceError, match="Cannot write"):
            repo.replace_all([_order()])


class TestParseItems:

    def test_malformed_entries_skipped(self):
        items = parse_items("1:Keyboard:400:2;garbage;2:Lamp:abc:1;3:Pen:1.50:0;4:Bag:300:1")
        assert [i.item_id for i in items] == ["1", "4"]

    def test_empty(self):
        assert parse_items("") == []


class TestCsvPromotionRepository:

    def _promotions(self):
        start = T0
        end = datetime(2026, 12, 31, tzinfo=timezone.utc)
        return [
            Promotion.discount("PROMO001", "Keyboard sale", Decimal("0.8"), start, end, "1"),
            Promotion.full_reduction(
                "PROMO002", "Big basket", Money.of("700"), Money.of("50"), start, end,
                is_active=False,
            ),
        ]

    def test_write_then_read(self, tmp_path):
        repo = CsvPromotionRepository(tmp_path / "promotions.csv")
        repo.replace_all(self._promotions())

        discount, reduction = repo.load_all()

        assert discount.kind == PromotionType.DISCOUNT
        assert discount.target_item_id == "1"
        assert discount.discount_rate == Decimal("0.8")
        assert discount.is_active
        assert reduction.kind == PromotionType.FULL_REDUCTION
        assert reduction.threshold == Money.of("700")
        assert reduction.reduction == Money.of("50")
        assert not reduction.is_active
        assert reduction.start_time == T0

    def test_every_row_has_ten_fields(self, tmp_path):
        path = tmp_path / "promotions.csv"
        CsvPromotionRepository(path).replace_all(self._promotions())
        lines = path.read_text(encoding="utf-8").splitlines()
        assert all(len(line.split(",")) == 10 for line in lines)
        assert lines[1].endswith(",1,0.8,,")
        assert ",,,700,50" in lines[2]

    def test_blank_target_means_all_items(self, tmp_path):
        path = tmp_path / "promotions.csv"
        path.write_text(
            "header\n"
            f"PROMO001,Sitewide,discount,true,{EPOCH_T0},{int(EPOCH_T0) + 60},,0.9,,\n",
            encoding="utf-8",
        )
        promo = CsvPromotionRepository(path).load_all()[0]
        assert promo.target_item_id == ALL_ITEMS
        assert promo.is_active

    def test_unknown_type_skipped(self, tmp_path):
        path = tmp_path / "promotions.csv"
        path.write_text(
            "header\n"
            f"PROMO001,Mystery,BOGO,1,{EPOCH_T0},{EPOCH_T0},-1,0.5,,\n"
            f"PROMO002,Tier,FULL_REDUCTION,1,{EPOCH_T0},{EPOCH_T0},,,300,50\n",
            encoding="utf-8",
        )
        assert [p.promotion_id for p in CsvPromotionRepository(path).load_all()] == ["PROMO002"]

    def test_non_finite_rate_skipped(self, tmp_path):
        path = tmp_path / "promotions.csv"
        path.write_text(
            "header\n"
            f"PROMO001,Broken,DISCOUNT,1,{EPOCH_T0},{EPOCH_T0},-1,NaN,,\n"
            f"PROMO002,Sale,DISCOUNT,1,{EPOCH_T0},{EPOCH_T0},-1,0.8,,\n",
            encoding="utf-8",
        )
        assert [p.promotion_id for p in CsvPromotionRepository(path).load_all()] == ["PROMO002"]


class TestCsvCatalogRepository:

    def test_reads_and_saves_stock(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text(
            "item_id,item_name,category,price,description,stock\n"
            "1,Keyboard,Electronics,400.00,\"Mechanical, 87 keys\",25\n"
            "# retired items below\n"
            "2,Lamp,Home,bad,LED,4\n",
            encoding="utf-8",
        )
        repo = CsvCatalogRepository(path)

        item = repo.get_by_id("1")
        assert item.price == Money.of("400.00")
        assert item.description == "Mechanical, 87 keys"
        assert repo.get_by_id("2") is None

        item.take_stock(5)
        repo.save()

        assert CsvCatalogRepository(path).get_by_id("1").stock == 20

    def test_same_object_handed_out(self, tmp_path):
        path = tmp_path / "items.csv"
        path.write_text("header\n1,Pen,Office,1.00,,3\n", encoding="utf-8")
        repo = CsvCatalogRepository(path)
        assert repo.get_by_id("1") is repo.get_by_id("1")
        assert len(repo.list_all()) == 1
