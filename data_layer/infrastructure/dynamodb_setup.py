"""DynamoDB table provisioning and seed data loading.

4 tables: sales, posts, products, talent references (hash key ``id``).
Names come from ``bms.config.Settings`` so they follow the BMS_* env vars.
"""
import json
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal
import threading

import boto3
from botocore.exceptions import ClientError

from bms.config import Settings

DATA_FILES = {
    "sales": "sales.json",
    "posts": "posts.json",
    "products": "products.json",
    "talents": "talents.json",
}


def table_definitions(settings: Settings) -> list:
    return [
        {
            "TableName": name,
            "KeySchema": [{"AttributeName": "id", "KeyType": "HASH"}],
            "AttributeDefinitions": [{"AttributeName": "id", "AttributeType": "S"}],
            "BillingMode": "PAY_PER_REQUEST",
        }
        for name in settings.table_names.values()
    ]


def _client(settings: Settings, dynamodb_client=None):
    return dynamodb_client or boto3.client(
        "dynamodb", region_name=settings.region, endpoint_url=settings.endpoint_url
    )


def create_tables(settings: Settings, dynamodb_client=None) -> list:
    """Creates missing tables; existing ones are skipped. Returns created names."""
    dynamodb = _client(settings, dynamodb_client)
    created = []

    for table_def in table_definitions(settings):
        table_name = table_def["TableName"]
        try:
            dynamodb.describe_table(TableName=table_name)
            print(f"  ⏭️  {table_name} already exists, skipping")
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                print(f"  🔨 creating {table_name}...")
                dynamodb.create_table(**table_def)
                waiter = dynamodb.get_waiter("table_exists")
                waiter.wait(TableName=table_name)
                print(f"  ✓  {table_name} created")
                created.append(table_name)
            else:
                raise
    return created


def convert_floats(obj):
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: convert_floats(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [convert_floats(i) for i in obj]
    return obj


def load_data_to_table(
    table_name: str, data: list, settings: Settings, threads: int = 4, dynamodb_resource=None
) -> int:
    """Bulk loads items with batch_writer, one chunk per worker thread."""
    data = convert_floats(data)
    total = len(data)
    counter = {"done": 0}
    lock = threading.Lock()

    def upload_chunk(chunk):
        dynamodb = dynamodb_resource or boto3.resource(
            "dynamodb", region_name=settings.region, endpoint_url=settings.endpoint_url
        )
        table = dynamodb.Table(table_name)
        with table.batch_writer() as batch:
            for item in chunk:
                batch.put_item(Item=item)
        with lock:
            counter["done"] += len(chunk)

    chunk_size = 1000
    chunks = [data[i:i + chunk_size] for i in range(0, total, chunk_size)]

    with ThreadPoolExecutor(max_workers=threads) as executor:
        futures = [executor.submit(upload_chunk, chunk) for chunk in chunks]
        for future in as_completed(futures):
            future.result()  # re-raises upload errors

    print(f"  ✓  {table_name}: {counter['done']} records loaded")
    return counter["done"]


def _table_has_data(table_name: str, settings: Settings, dynamodb_client=None) -> bool:
    dynamodb = _client(settings, dynamodb_client)
    resp = dynamodb.scan(TableName=table_name, Limit=1, Select="COUNT")
    return resp.get("Count", 0) > 0


def load_all_data(settings: Settings, data_dir: str = "data_layer/data") -> dict:
    """Loads every collection's JSON file unless its table already holds data."""
    print("\n📤 Loading seed data into DynamoDB...\n")
    loaded = {}
    for collection, table_name in settings.table_names.items():
        path = os.path.join(data_dir, DATA_FILES[collection])
        if not os.path.exists(path):
            print(f"  ⏭️  {path} not found, skipping {table_name}")
            continue
        if _table_has_data(table_name, settings):
            print(f"  ⏭️  {table_name} already has data, skipping")
            continue
        with open(path, "r", encoding="utf-8") as f:
            loaded[table_name] = load_data_to_table(table_name, json.load(f), settings)
    return loaded


def delete_tables(settings: Settings, dynamodb_client=None) -> list:
    """Deletes all four tables (use with care)."""
    dynamodb = _client(settings, dynamodb_client)
    deleted = []
    for table_def in table_definitions(settings):
        table_name = table_def["TableName"]
        try:
            dynamodb.delete_table(TableName=table_name)
            print(f"  🗑️  {table_name} deleted")
            deleted.append(table_name)
        except ClientError:
            print(f"  ⏭️  {table_name} not found, skipping")
    return deleted
