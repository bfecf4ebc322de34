"""Sample data generation and table provisioning tests."""

from datetime import date
from unittest.mock import MagicMock

from botocore.exceptions import ClientError

from bms.config import Settings
from data_layer.generators.generators import PRODUCTS, TALENTS, generate_dataset
from data_layer.infrastructure.dynamodb_setup import (
    convert_floats,
    create_tables,
    delete_tables,
    load_data_to_table,
    table_definitions,
)

END = date(2024, 6, 30)


class TestGenerateDataset:
    def test_deterministic_for_seed(self):
        first = generate_dataset(seed=7, days=20, end_date=END)
        second = generate_dataset(seed=7, days=20, end_date=END)
        assert [s["id"] for s in first["sales"]] == [s["id"] for s in second["sales"]]

    def test_collection_sizes(self):
        dataset = generate_dataset(seed=1, days=10, end_date=END)
        assert len(dataset["talents"]) == len(TALENTS)
        assert len(dataset["products"]) == len(PRODUCTS)
        accounts = sum(len(t.accounts) for t in TALENTS)
        general = [s for s in dataset["sales"] if s["type"] == "general"]
        assert len(general) == accounts * 10

    def test_legacy_sales_only_when_old(self):
        dataset = generate_dataset(seed=3, days=120, end_date=END)
        legacy = [s for s in dataset["sales"] if s.get("linked_post_id")]
        assert legacy
        for sale in legacy:
            assert "product_id" not in sale
            assert (END - date.fromisoformat(sale["date"])).days > 60

    def test_posts_reference_known_products(self):
        dataset = generate_dataset(seed=5, days=15, end_date=END)
        product_ids = {p["id"] for p in dataset["products"]}
        for post in dataset["posts"]:
            if "product_id" in post:
                assert post["product_id"] in product_ids


class TestDynamoSetup:
    def test_table_definitions_follow_settings(self):
        settings = Settings(sales_table="s", posts_table="p", products_table="pr", talents_table="t")
        names = [d["TableName"] for d in table_definitions(settings)]
        assert names == ["s", "p", "pr", "t"]

    def test_create_tables_skips_existing(self):
        client = MagicMock()
        settings = Settings()

        def describe_table(TableName):
            if TableName == settings.posts_table:
                raise ClientError(
                    {"Error": {"Code": "ResourceNotFoundException", "Message": "no"}}, "DescribeTable"
                )
            return {}

        client.describe_table.side_effect = describe_table
        created = create_tables(settings, dynamodb_client=client)
        assert created == [settings.posts_table]
        client.create_table.assert_called_once()

    def test_delete_tables(self):
        client = MagicMock()
        assert len(delete_tables(Settings(), dynamodb_client=client)) == 4

    def test_convert_floats(self):
        converted = convert_floats({"a": 1.5, "b": [2.25], "c": 3})
        assert str(converted["a"]) == "1.5"
        assert str(converted["b"][0]) == "2.25"
        assert converted["c"] == 3

    def test_load_data_uses_batch_writer(self):
        resource = MagicMock()
        batch = resource.Table.return_value.batch_writer.return_value.__enter__.return_value
        items = [{"id": str(i), "gmv": 1.5} for i in range(3)]
        assert load_data_to_table("t", items, Settings(), dynamodb_resource=resource) == 3
        assert batch.put_item.call_count == 3
