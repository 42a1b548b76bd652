"""Pydantic models for product drafts, list rows and workflow results."""

import re
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, ConfigDict, field_validator

PRODUCT_GID_PREFIX = "gid://shopify/Product/"

_NON_NEGATIVE_INT = re.compile(r"[0-9]+")


def to_product_gid(product_id: str) -> str:
    """Turn a numeric product id into a product GID; GIDs pass through."""
    product_id = str(product_id).strip()
    if product_id.startswith("gid://"):
        return product_id
    return f"{PRODUCT_GID_PREFIX}{product_id}"


def legacy_id(gid: str) -> str:
    """Numeric tail of a GID, used in admin URLs."""
    return gid.rsplit("/", 1)[-1]


class ProductDraft(BaseModel):
    """Product data submitted by a merchant, unchecked until validate_fields()."""
    title: str = ""
    description_html: str = Field("", alias="descriptionHtml")
    price: str = ""
    quantity: Union[int, str] = ""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("title", "description_html", "price", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> Union[int, str]:
        if value is None:
            return ""
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return str(value)

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ProductDraft":
        """Build a draft from raw form fields, accepting either naming style."""
        return cls(
            title=form.get("title"),
            description_html=form.get("descriptionHtml", form.get("description_html")),
            price=form.get("price"),
            quantity=form.get("quantity"),
        )

    def validate_fields(self) -> int:
        """
        Check the draft and return the parsed quantity.

        Raises:
            ValidationError: listing every field that failed
        """
        from ..errors import ValidationError

        problems: Dict[str, str] = {}
        if not self.title.strip():
            problems["title"] = "Title is required"
        if not self.price.strip():
            problems["price"] = "Price is required"

        quantity: Optional[int] = None
        if isinstance(self.quantity, int):
            quantity = self.quantity
        elif _NON_NEGATIVE_INT.fullmatch(self.quantity.strip()):
            quantity = int(self.quantity.strip())

        if quantity is None or quantity < 0:
            problems["quantity"] = "Quantity must be a non-negative whole number"

        if problems:
            raise ValidationError(problems)
        return quantity


class ProductIdentity(BaseModel):
    """Identifiers collected while a product is created or updated."""
    product_id: str
    variant_id: str
    inventory_item_id: str

    model_config = ConfigDict(frozen=True)


class ProductSummary(BaseModel):
    """Row of the product list view."""
    id: str
    title: str
    price: str = ""
    quantity: int = 0

    @property
    def legacy_id(self) -> str:
        return legacy_id(self.id)


class ProductForm(BaseModel):
    """Values that pre-fill the create/edit form."""
    id: str = ""
    title: str = ""
    description_html: str = Field("", alias="descriptionHtml")
    price: str = ""
    quantity: str = ""

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def blank(cls) -> "ProductForm":
        return cls()

    @property
    def is_editing(self) -> bool:
        return bool(self.id)


class OrchestrationErrorInfo(BaseModel):
    """Serializable form of a workflow error."""
    kind: str
    message: str
    step: Optional[str] = None
    timed_out: bool = False
    fields: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_error(cls, error: Exception) -> "OrchestrationErrorInfo":
        return cls(
            kind=getattr(error, "kind", "orchestration_error"),
            message=getattr(error, "message", str(error)),
            step=getattr(error, "step", None),
            timed_out=getattr(error, "timed_out", False),
            fields=getattr(error, "fields", {}),
        )


class UpsertResult(BaseModel):
    """Outcome of a create-or-update run."""
    ok: bool
    identity: Optional[ProductIdentity] = None
    error: Optional[OrchestrationErrorInfo] = None
    completed_steps: List[str] = Field(default_factory=list)
    created: bool = False


class DeleteResult(BaseModel):
    """Outcome of a product deletion."""
    ok: bool
    deleted_product_id: Optional[str] = None
    error: Optional[str] = None
