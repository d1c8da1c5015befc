"""Catalog API schemas.

字段名使用 lowerCamelCase（priceUsd / currencyCode），与商品 JSON 文件保持一致。
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MoneyResponse(_CamelModel):
    """Money response."""

    currency_code: str = Field(..., description="货币代码")
    units: int = Field(..., description="整数部分")
    nanos: int = Field(..., description="小数部分（10^-9 单位）")


class ProductResponse(_CamelModel):
    """Product response."""

    id: str = Field(..., description="商品ID")
    name: str = Field(..., description="商品名称")
    description: str = Field(..., description="商品描述")
    picture: str = Field(..., description="图片路径")
    price_usd: MoneyResponse = Field(..., description="价格")
    categories: list[str] = Field(..., description="分类")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "OLJCESPC7Z",
                "name": "National Park Foundation Explorascope",
                "description": "The National Park Foundation’s (NPF) Explorascope 60AZ "
                "is a manual alt-azimuth, refractor telescope.",
                "picture": "NationalParkFoundationExplorascope.jpg",
                "priceUsd": {"currencyCode": "USD", "units": 101, "nanos": 960000000},
                "categories": ["telescopes"],
            }
        },
    )


class ListProductsResponse(BaseModel):
    """List products response."""

    products: list[ProductResponse]


class SearchProductsResponse(BaseModel):
    """Search products response."""

    results: list[ProductResponse]
