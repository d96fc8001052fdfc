"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation of the remote emulator catalog at the edge, with the
  documentation living next to each field.
- These models describe *what* the tooling data is, not *how* it is fetched.
"""

from __future__ import annotations

from functools import cached_property, total_ordering
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict


@total_ordering
class SdkPackage(BaseModel):
    """One `sdkmanager` catalog entry (e.g. `system-images;android-30;google_apis;x86`)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SdkPackage):
            return NotImplemented
        return self.id < other.id

    def __str__(self) -> str:
        return self.id


class EmulatorProduct(BaseModel):
    """A device profile that can be turned into an AVD."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., min_length=1, description="Selection key, also used as the AVD name.")
    name: str = Field(default="", description="Marketing name of the device.")
    display: str = Field(default="", description="Screen size, e.g. '5.8\"'.")
    resolution: str = Field(
        ...,
        pattern=r"^\d+[xX]\d+$",
        description="Screen resolution as 'WIDTHxHEIGHT'; an upper-case X is normalized.",
    )
    skin: str = Field(..., min_length=1, description="Skin folder name under <sdk>/skins.")

    @field_validator("resolution")
    @classmethod
    def _lower_separator(cls, value: str) -> str:
        return value.lower()

    @property
    def width(self) -> str:
        return split_resolution(self.resolution)[0]

    @property
    def height(self) -> str:
        return split_resolution(self.resolution)[1]


class EmulatorVendor(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., min_length=1)
    products: list[EmulatorProduct] = Field(default_factory=list)


class EmulatorCatalog(BaseModel):
    """Vendors/products available for installation.

    Deserialized once from the remote JSON; the product-id index is built at
    construction and a duplicated id is rejected instead of silently picking
    the first match.
    """

    model_config = ConfigDict(extra="ignore")

    vendors: list[EmulatorVendor] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_product_ids(self) -> "EmulatorCatalog":
        seen: set[str] = set()
        for vendor in self.vendors:
            for product in vendor.products:
                if product.id in seen:
                    raise ValueError(f"duplicate emulator id '{product.id}' (vendor '{vendor.name}')")
                seen.add(product.id)
        return self

    @cached_property
    def products_by_id(self) -> dict[str, EmulatorProduct]:
        return {product.id: product for vendor in self.vendors for product in vendor.products}

    def find(self, product_id: str) -> EmulatorProduct | None:
        return self.products_by_id.get(product_id)

    def product_ids(self) -> list[str]:
        return sorted(self.products_by_id)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self.products_by_id


class ProcessOutcome(BaseModel):
    """Captured output of one external tool invocation.

    `failed` is the only place that decides whether a call failed. Today that
    means "anything on stderr"; the return code is kept for diagnostics.
    """

    model_config = ConfigDict(frozen=True)

    stdout: str = ""
    stderr: str = ""
    return_code: int | None = None

    @property
    def failed(self) -> bool:
        return bool(self.stderr.strip())


class HttpResult(BaseModel):
    """Result of a GET or a download, mirroring the HTTP status line."""

    model_config = ConfigDict(frozen=True)

    return_code: int
    status_text: str = ""
    body: str = ""
    payload_location: Path | None = None

    @property
    def ok(self) -> bool:
        return self.return_code == 200


def split_resolution(resolution: str) -> tuple[str, str]:
    """`'1080x2340'` -> `('1080', '2340')`; splits on the first `x` only."""

    width, _, height = resolution.partition("x")
    return width, height
