from bms.gateway.dynamodb_gateway import DynamoGateway

__all__ = ["DynamoGateway"]
