"""Parse Server REST integration (document store, schemas, pay plans, wire encoding)."""

from cloudcode.infrastructure.parse._rest_client import ParseRESTClient
from cloudcode.infrastructure.parse._rest_encoding import (
    decode_document,
    encode_document,
    encode_value,
)
from cloudcode.infrastructure.parse.client import close_parse_client, create_parse_client
from cloudcode.infrastructure.parse.pay_plan_provider import ParsePayPlanProvider
from cloudcode.infrastructure.parse.schema_gateway import ParseSchemaGateway

__all__ = [
    "ParsePayPlanProvider",
    "ParseRESTClient",
    "ParseSchemaGateway",
    "close_parse_client",
    "create_parse_client",
    "decode_document",
    "encode_document",
    "encode_value",
]
