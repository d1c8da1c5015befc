"""Catalog database models."""

from sqlalchemy import BigInteger, Integer, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlmodel import Field, SQLModel


class ProductModel(SQLModel, table=True):
    """Product database model (table is managed outside this service)."""

    __tablename__ = "products"

    id: str = Field(primary_key=True, sa_type=Text)
    name: str = Field(nullable=False, sa_type=Text, index=True)
    description: str = Field(default="", sa_type=Text, nullable=False)
    picture: str = Field(default="", sa_type=Text, nullable=False)
    price_currency_code: str = Field(default="USD", sa_type=Text, nullable=False)
    price_units: int = Field(default=0, sa_type=BigInteger, nullable=False)
    price_nanos: int = Field(default=0, sa_type=Integer, nullable=False)
    categories: list[str] = Field(
        default_factory=list,
        sa_type=ARRAY(Text),
        nullable=False,
    )
