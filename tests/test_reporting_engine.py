"""Reporting engine unit tests."""

from bms.models.records import (
    DateRange,
    Platform,
    PostRecord,
    ProductRecord,
    SaleKind,
    SaleRecord,
)
from bms.reporting.engine import (
    active_product_count,
    build_report,
    group_by_platform,
    group_by_talent,
    product_performance,
    total_commission,
    total_revenue,
)


def _general(talent="Ana", gmv=0, commission=0, date="2024-01-05", **kwargs) -> SaleRecord:
    return SaleRecord(
        date=date,
        talent_name=talent,
        account_name=kwargs.pop("account_name", "ana.daily"),
        kind=SaleKind.GENERAL,
        gmv=gmv,
        commission=commission,
        **kwargs,
    )


def _content(talent="Ana", revenue=0, date="2024-01-05", **kwargs) -> SaleRecord:
    return SaleRecord(
        date=date,
        talent_name=talent,
        account_name=kwargs.pop("account_name", "ana.daily"),
        kind=SaleKind.PRODUCT_LINKED,
        revenue=revenue,
        **kwargs,
    )


def _post(post_id, product_id=None, platform=Platform.TIKTOK, date="2024-01-05") -> PostRecord:
    return PostRecord(
        id=post_id,
        date=date,
        talent_name="Ana",
        account_name="ana.daily",
        platform=platform,
        link=f"https://example.com/{post_id}",
        product_id=product_id,
    )


def _product(product_id, name=None, account_name=None) -> ProductRecord:
    return ProductRecord(id=product_id, name=name or product_id, account_name=account_name)


class TestTotals:
    def test_revenue_uses_gmv_for_general_and_revenue_for_content(self):
        sales = [_general(gmv=100000), _content(revenue=2500)]
        assert total_revenue(sales) == 102500

    def test_revenue_ignores_the_field_of_the_other_kind(self):
        sales = [_general(gmv=100, revenue=999), _content(revenue=50, gmv=999)]
        assert total_revenue(sales) == 150

    def test_unrelated_field_does_not_change_total(self):
        sale = _general(gmv=1000)
        before = total_revenue([sale])
        sale.quantity = 42
        sale.product_views = 7
        sale.talent_name = "Someone Else"
        assert total_revenue([sale]) == before

    def test_removing_a_record_subtracts_its_contribution(self):
        sales = [_general(gmv=1000), _content(revenue=300), _general(gmv=25)]
        full = total_revenue(sales)
        removed = sales.pop(1)
        assert total_revenue(sales) == full - removed.value

    def test_missing_values_count_as_zero(self):
        sales = [_general(gmv=None, commission=None), _content(revenue=None)]
        assert total_revenue(sales) == 0
        assert total_commission(sales) == 0

    def test_commission_sums_all_kinds(self):
        sales = [_general(commission=10000), _content(commission=500)]
        assert total_commission(sales) == 10500


class TestGroupByTalent:
    def test_keys_values_and_first_seen_order(self):
        sales = [
            _general(talent="Bima", gmv=100),
            _content(talent="Ana", revenue=50),
            _general(talent="Bima", gmv=25),
            _content(talent="Citra", revenue=5),
        ]
        grouped = group_by_talent(sales)
        assert [(g.name, g.value) for g in grouped] == [("Bima", 125), ("Ana", 50), ("Citra", 5)]

    def test_empty(self):
        assert group_by_talent([]) == []

    def test_talent_labels_merge_renamed_talent(self):
        sales = [
            _general(talent="Ana", gmv=100, talent_id="t1"),
            _general(talent="Ana Putri", gmv=50, talent_id="t1"),
            _general(talent="Bima", gmv=10),
        ]
        grouped = group_by_talent(sales, talent_labels={"t1": "Ana Putri"})
        assert [(g.name, g.value) for g in grouped] == [("Ana Putri", 150), ("Bima", 10)]

    def test_talent_labels_merge_records_without_id(self):
        sales = [
            _general(talent="Ana", gmv=100),
            _general(talent="Ana", gmv=50, talent_id="t1"),
        ]
        grouped = group_by_talent(sales, talent_labels={"t1": "Ana"})
        assert [(g.name, g.value) for g in grouped] == [("Ana", 150)]

    def test_talent_labels_keep_one_entry_per_name(self):
        sales = [
            _general(talent="Ana", gmv=10, talent_id="t1"),
            _content(talent="Bima", revenue=5),
            _content(talent="Ana", revenue=20),
            _general(talent="Bima", gmv=1, talent_id="t2"),
        ]
        grouped = group_by_talent(sales, talent_labels={"t1": "Ana", "t2": "Bima"})
        assert [(g.name, g.value) for g in grouped] == [("Ana", 30), ("Bima", 6)]


class TestGroupByPlatform:
    def test_counts_in_first_seen_order(self):
        posts = [
            _post("p1", platform=Platform.INSTAGRAM),
            _post("p2", platform=Platform.TIKTOK),
            _post("p3", platform=Platform.INSTAGRAM),
        ]
        grouped = group_by_platform(posts)
        assert [(g.name, g.count) for g in grouped] == [("Instagram", 2), ("TikTok", 1)]


class TestProductPerformance:
    def test_legacy_indirect_revenue_in_all_time_view(self):
        products = [_product("P")]
        posts = [_post("p1", product_id="P")]
        sales = [_content(revenue=1000, linked_post_id="p1")]
        rows = product_performance(products, posts, sales)
        assert rows[0].revenue == 1000
        assert rows[0].post_count == 1

    def test_direct_and_legacy_revenue_add_up(self):
        products = [_product("P")]
        posts = [_post("p1", product_id="P")]
        sales = [
            _content(revenue=1000, linked_post_id="p1"),
            _content(revenue=500, product_id="P"),
        ]
        rows = product_performance(products, posts, sales)
        assert rows[0].revenue == 1500

    def test_range_view_excludes_legacy_revenue(self):
        products = [_product("P")]
        posts = [_post("p1", product_id="P")]
        sales = [
            _content(revenue=1000, linked_post_id="p1"),
            _content(revenue=500, product_id="P"),
        ]
        rows = product_performance(products, posts, sales, ranged=True)
        assert rows[0].revenue == 500

    def test_legacy_sale_with_product_id_is_direct_only(self):
        products = [_product("P")]
        posts = [_post("p1", product_id="P")]
        sales = [_content(revenue=700, product_id="P", linked_post_id="p1")]
        rows = product_performance(products, posts, sales)
        assert rows[0].revenue == 700

    def test_general_sales_are_not_attributed(self):
        products = [_product("P")]
        sales = [_general(gmv=9999, product_id="P")]
        rows = product_performance(products, [], sales)
        assert rows[0].revenue == 0

    def test_top_ten_sorted_descending(self):
        products = [_product(f"P{i}") for i in range(15)]
        sales = [_content(revenue=(i + 1) * 100, product_id=f"P{i}") for i in range(15)]
        rows = product_performance(products, [], sales)
        assert len(rows) == 10
        revenues = [r.revenue for r in rows]
        assert revenues == sorted(revenues, reverse=True)
        assert revenues[0] == 1500

    def test_ties_keep_product_order(self):
        products = [_product("A"), _product("B"), _product("C")]
        sales = [_content(revenue=10, product_id="B"), _content(revenue=10, product_id="C")]
        rows = product_performance(products, [], sales)
        assert [r.product_id for r in rows] == ["B", "C", "A"]

    def test_range_view_drops_idle_products(self):
        products = [_product("idle"), _product("posted"), _product("sold")]
        posts = [_post("p1", product_id="posted")]
        sales = [_content(revenue=10, product_id="sold")]
        rows = product_performance(products, posts, sales, ranged=True)
        assert [r.product_id for r in rows] == ["sold", "posted"]

    def test_all_time_view_keeps_idle_products(self):
        rows = product_performance([_product("idle")], [], [])
        assert len(rows) == 1
        assert active_product_count(rows) == 0

    def test_owner_label_defaults_to_global(self):
        rows = product_performance([_product("P"), _product("Q", account_name="ana.beauty")], [], [])
        assert {r.product_id: r.owner_label for r in rows} == {"P": "Global", "Q": "ana.beauty"}

    def test_orphaned_references_are_ignored(self):
        posts = [_post("p1", product_id="deleted")]
        sales = [_content(revenue=100, product_id="deleted")]
        rows = product_performance([_product("P")], posts, sales)
        assert rows[0].revenue == 0
        assert rows[0].post_count == 0

    def test_idempotent(self):
        products = [_product("P"), _product("Q")]
        posts = [_post("p1", product_id="P")]
        sales = [_content(revenue=1000, linked_post_id="p1"), _content(revenue=5, product_id="Q")]
        assert product_performance(products, posts, sales) == product_performance(products, posts, sales)


class TestActiveProductCount:
    def test_counts_rows_with_posts_or_revenue(self):
        products = [_product("A"), _product("B"), _product("C")]
        posts = [_post("p1", product_id="A")]
        sales = [_content(revenue=1, product_id="B")]
        rows = product_performance(products, posts, sales)
        assert active_product_count(rows) == 2


class TestBuildReport:
    def test_empty_input(self):
        report = build_report([], [], [])
        assert report.total_revenue == 0
        assert report.total_commission == 0
        assert report.total_posts == 0
        assert report.sales_by_talent == []
        assert report.posts_by_platform == []
        assert report.top_products == []
        assert report.active_products == 0

    def test_date_range_filters_inputs_and_legacy(self):
        products = [_product("P")]
        posts = [_post("p1", product_id="P", date="2024-01-10")]
        sales = [
            _content(revenue=1000, linked_post_id="p1", date="2024-01-10"),
            _content(revenue=500, product_id="P", date="2024-01-10"),
            _general(gmv=700, date="2024-02-01"),
        ]
        report = build_report(sales, posts, products, date_range=DateRange("2024-01-01", "2024-01-31"))
        assert report.total_revenue == 1500
        assert report.top_products[0].revenue == 500
        assert report.total_posts == 1
        assert report.active_products == 1

    def test_all_time_report(self):
        products = [_product("P"), _product("Q")]
        posts = [_post("p1", product_id="P"), _post("p2", platform=Platform.SHOPEE)]
        sales = [_general(gmv=100, commission=10), _content(revenue=40, product_id="P", commission=4)]
        report = build_report(sales, posts, products)
        assert report.total_revenue == 140
        assert report.total_commission == 14
        assert report.total_posts == 2
        assert report.active_products == 1
        assert [p.name for p in report.posts_by_platform] == ["TikTok", "Shopee"]
        assert len(report.top_products) == 2
