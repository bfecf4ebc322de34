"""Persistence gateway over the four DynamoDB collections.

Reads come in two flavours:
- ``fetch_*`` raise ``GatewayUnavailable`` when DynamoDB cannot be reached.
- ``list_*`` wrap them and degrade to an empty list, logging the failure.

Writes return ``True``/``False``; failure detail only goes to the log.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Any, Callable, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from bms.config import Settings
from bms.errors import GatewayUnavailable
from bms.models.records import (
    DateRange,
    PostRecord,
    ProductRecord,
    SaleRecord,
    TalentReference,
)

logger = logging.getLogger(__name__)

CONDITION_FAILED = "ConditionalCheckFailedException"


def _to_native(obj):
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    if isinstance(obj, dict):
        return {k: _to_native(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_native(i) for i in obj]
    return obj


def _to_dynamo(obj):
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _to_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_dynamo(i) for i in obj]
    return obj


class DynamoGateway:
    """CRUD over sales, posts, products and talent references."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        dynamodb_resource: Optional[Any] = None,
    ):
        self.settings = settings or Settings.from_env()

        # Injectable so tests can pass a MagicMock resource
        self.dynamodb = dynamodb_resource or boto3.resource(
            "dynamodb",
            region_name=self.settings.region,
            endpoint_url=self.settings.endpoint_url,
        )

        self.sales_table = self.dynamodb.Table(self.settings.sales_table)
        self.posts_table = self.dynamodb.Table(self.settings.posts_table)
        self.products_table = self.dynamodb.Table(self.settings.products_table)
        self.talents_table = self.dynamodb.Table(self.settings.talents_table)

        logger.info("Gateway ready (region: %s)", self.settings.region)

    # --- Low level ---

    def _scan(self, table: Any, collection: str, **params: Any) -> list[dict]:
        """Full scan following LastEvaluatedKey pagination."""
        items: list[dict] = []
        try:
            resp = table.scan(**params)
            items.extend(resp.get("Items", []))
            while "LastEvaluatedKey" in resp:
                resp = table.scan(ExclusiveStartKey=resp["LastEvaluatedKey"], **params)
                items.extend(resp.get("Items", []))
        except (ClientError, BotoCoreError) as e:
            raise GatewayUnavailable("scan", collection, e) from e
        return [_to_native(item) for item in items]

    def _execute(
        self, operation: str, collection: str, call: Callable[..., Any], **params: Any
    ) -> Optional[dict]:
        """Runs a write; the response on success, None on failure."""
        try:
            resp = call(**params)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == CONDITION_FAILED:
                logger.warning("%s on %s rejected: record changed or missing", operation, collection)
            else:
                logger.error("Error during %s on %s: %s", operation, collection, e)
            return None
        except BotoCoreError as e:
            logger.error("Error during %s on %s: %s", operation, collection, e)
            return None
        logger.info("%s on %s succeeded", operation, collection)
        return resp if isinstance(resp, dict) else {}

    def _write(
        self, operation: str, collection: str, call: Callable[..., Any], **params: Any
    ) -> bool:
        return self._execute(operation, collection, call, **params) is not None

    @staticmethod
    def _range_filter(date_range: Optional[DateRange]) -> dict:
        if date_range is None:
            return {}
        return {"FilterExpression": Attr("date").between(date_range.start, date_range.end)}

    # --- Sales ---

    def fetch_sales(self, date_range: Optional[DateRange] = None) -> list[SaleRecord]:
        """Recent sales (unbounded) or every sale inside ``date_range``."""
        items = self._scan(self.sales_table, "sales", **self._range_filter(date_range))
        records = [SaleRecord.from_item(item) for item in items]
        records.sort(key=lambda r: (r.date, r.created_at), reverse=True)
        if date_range is None:
            records = records[: self.settings.recent_limit]
        return records

    def fetch_all_sales(self) -> list[SaleRecord]:
        """Every stored sale, undated ones included; no recent window."""
        records = [SaleRecord.from_item(item) for item in self._scan(self.sales_table, "sales")]
        records.sort(key=lambda r: (r.date, r.created_at), reverse=True)
        return records

    def list_sales(self, date_range: Optional[DateRange] = None) -> list[SaleRecord]:
        try:
            return self.fetch_sales(date_range)
        except GatewayUnavailable as e:
            logger.error("Error fetching sales: %s", e)
            return []

    def create_sale(self, sale: SaleRecord) -> bool:
        sale.id = sale.id or str(uuid.uuid4())
        return self._write(
            "create", "sales", self.sales_table.put_item, Item=_to_dynamo(sale.to_item())
        )

    def delete_sale(self, sale_id: str) -> bool:
        return self._write("delete", "sales", self.sales_table.delete_item, Key={"id": sale_id})

    def link_sale_to_product(
        self, sale_id: str, product_id: str, product_name: Optional[str] = None
    ) -> bool:
        """Sets a direct product link on a sale that has none yet."""
        expression = "SET product_id = :pid"
        values: dict[str, Any] = {":pid": product_id}
        if product_name:
            expression += ", product_name = :pname"
            values[":pname"] = product_name
        return self._write(
            "link",
            "sales",
            self.sales_table.update_item,
            Key={"id": sale_id},
            UpdateExpression=expression,
            ExpressionAttributeValues=values,
            ConditionExpression=Attr("id").exists() & Attr("product_id").not_exists(),
        )

    # --- Posts ---

    def fetch_posts(self, date_range: Optional[DateRange] = None) -> list[PostRecord]:
        items = self._scan(self.posts_table, "posts", **self._range_filter(date_range))
        records = [PostRecord.from_item(item) for item in items]
        records.sort(key=lambda r: (r.date, r.created_at), reverse=True)
        if date_range is None:
            records = records[: self.settings.recent_limit]
        return records

    def fetch_all_posts(self) -> list[PostRecord]:
        records = [PostRecord.from_item(item) for item in self._scan(self.posts_table, "posts")]
        records.sort(key=lambda r: (r.date, r.created_at), reverse=True)
        return records

    def list_posts(self, date_range: Optional[DateRange] = None) -> list[PostRecord]:
        try:
            return self.fetch_posts(date_range)
        except GatewayUnavailable as e:
            logger.error("Error fetching posts: %s", e)
            return []

    def create_post(self, post: PostRecord) -> bool:
        post.id = post.id or str(uuid.uuid4())
        return self._write(
            "create", "posts", self.posts_table.put_item, Item=_to_dynamo(post.to_item())
        )

    def delete_post(self, post_id: str) -> bool:
        return self._write("delete", "posts", self.posts_table.delete_item, Key={"id": post_id})

    # --- Products ---

    def fetch_products(self) -> list[ProductRecord]:
        items = self._scan(self.products_table, "products")
        records = [ProductRecord.from_item(item) for item in items]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def list_products(self) -> list[ProductRecord]:
        try:
            return self.fetch_products()
        except GatewayUnavailable as e:
            logger.error("Error fetching products: %s", e)
            return []

    def create_product(self, product: ProductRecord) -> bool:
        product.id = product.id or str(uuid.uuid4())
        return self._write(
            "create",
            "products",
            self.products_table.put_item,
            Item=_to_dynamo(product.to_item()),
        )

    def update_product(
        self, product: ProductRecord, expected_version: Optional[int] = None
    ) -> bool:
        """Replaces name, url and owner of an existing product.

        Only the editable attributes are written; ``created_at`` stays as
        stored and ``version`` is incremented server side. With
        ``expected_version`` the write only lands if the stored version still
        matches; a concurrent edit makes it return False.
        """
        if not product.id:
            logger.error("Cannot update a product without id: %s", product.name)
            return False

        condition = Attr("id").exists()
        if expected_version is not None:
            version_check = Attr("version").eq(expected_version)
            if expected_version == 0:
                version_check = version_check | Attr("version").not_exists()
            condition = condition & version_check

        fields = {
            "name": product.name,
            "url": product.url,
            "talent_name": product.talent_name,
            "account_name": product.account_name,
            "talent_id": product.talent_id,
        }
        # "name" and "url" are reserved words, so every attribute goes by alias
        names = {f"#{key}": key for key in fields}
        names["#version"] = "version"
        values: dict[str, Any] = {":one": 1}
        assignments, removals = [], []
        for key, value in fields.items():
            if value is None:
                removals.append(f"#{key}")
            else:
                assignments.append(f"#{key} = :{key}")
                values[f":{key}"] = value
        expression = "SET " + ", ".join(assignments) + " ADD #version :one"
        if removals:
            expression += " REMOVE " + ", ".join(removals)

        resp = self._execute(
            "update",
            "products",
            self.products_table.update_item,
            Key={"id": product.id},
            UpdateExpression=expression,
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
            ConditionExpression=condition,
            ReturnValues="ALL_NEW",
        )
        if resp is None:
            return False
        stored = _to_native(resp.get("Attributes") or {})
        if "version" in stored:
            product.version = stored["version"]
            product.created_at = stored.get("created_at", product.created_at)
        else:
            product.version = (expected_version if expected_version is not None else product.version) + 1
        return True

    def delete_product(self, product_id: str) -> bool:
        return self._write(
            "delete", "products", self.products_table.delete_item, Key={"id": product_id}
        )

    # --- Talents ---

    def fetch_talents(self) -> list[TalentReference]:
        items = self._scan(self.talents_table, "talents")
        return [TalentReference.from_item(item) for item in items]

    def list_talents(self) -> list[TalentReference]:
        try:
            return self.fetch_talents()
        except GatewayUnavailable as e:
            logger.error("Error fetching talents: %s", e)
            return []

    def create_talent(self, talent: TalentReference) -> bool:
        talent.id = talent.id or str(uuid.uuid4())
        return self._write(
            "create", "talents", self.talents_table.put_item, Item=talent.to_item()
        )

    def update_talent(self, talent: TalentReference) -> bool:
        """Name and account list are replaced wholesale."""
        if not talent.id:
            logger.error("Cannot update a talent without id: %s", talent.name)
            return False
        return self._write(
            "update",
            "talents",
            self.talents_table.put_item,
            Item=talent.to_item(),
            ConditionExpression=Attr("id").exists(),
        )

    def delete_talent(self, talent_id: str) -> bool:
        return self._write(
            "delete", "talents", self.talents_table.delete_item, Key={"id": talent_id}
        )
