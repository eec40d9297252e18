"""Pydantic request schemas.

These describe what the API accepts and are kept apart from the
SQLAlchemy models so the wire contract and the tables can change
independently. Wire names are camelCase; Python attributes are snake_case.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from telcogrid.models import NetworkType, RegencyType, SubscriberStatus

PermissionName = Literal['read', 'write', 'admin']


class RequestSchema(BaseModel):
    """Base schema: camelCase aliases, snake_case accepted too, strings stripped."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
        use_enum_values=True,
    )

    def to_columns(self, exclude_unset: bool = False) -> dict:
        return self.model_dump(exclude_unset=exclude_unset)


# === AUTH ===

class LoginRequest(RequestSchema):
    email: str = Field(..., min_length=3, max_length=120)
    password: str = Field(..., min_length=1)


# === REGIONAL ===

class IslandCreate(RequestSchema):
    name: str = Field(..., min_length=1, max_length=120)
    alt_name: Optional[str] = Field(None, max_length=120)
    code: Optional[str] = Field(None, min_length=1, max_length=40)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    long: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator('code')
    @classmethod
    def upper_code(cls, value):
        return value.upper() if value else value


class ProvinceCreate(RequestSchema):
    name: str = Field(..., min_length=1, max_length=120)
    island_id: Optional[int] = Field(None, gt=0)
    capital: Optional[str] = Field(None, max_length=120)


class RegencyCreate(RequestSchema):
    name: str = Field(..., min_length=1, max_length=120)
    province_id: Optional[int] = Field(None, gt=0)
    type: RegencyType


class DistrictCreate(RequestSchema):
    name: str = Field(..., min_length=1, max_length=120)
    regency_id: Optional[int] = Field(None, gt=0)


class VillageCreate(RequestSchema):
    name: str = Field(..., min_length=1, max_length=120)
    district_id: Optional[int] = Field(None, gt=0)
    postal_code: Optional[str] = Field(None, max_length=10)


# === BTS TOWERS ===

class TowerCreate(RequestSchema):
    cell_id: str = Field(..., min_length=1, max_length=40)
    lac: str = Field(..., min_length=1, max_length=40)
    mcc: str = Field(..., min_length=1, max_length=3)
    mnc: str = Field(..., min_length=1, max_length=3)
    lat: float = Field(..., ge=-90, le=90)
    long: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None
    village_id: Optional[int] = Field(None, gt=0)
    operator: str = Field(..., min_length=1, max_length=60)
    network_type: NetworkType
    height: Optional[int] = Field(None, ge=0)
    coverage_radius: Optional[int] = Field(None, ge=0)


class TowerUpdate(RequestSchema):
    """Partial update; only fields present in the body are applied."""
    cell_id: Optional[str] = Field(None, min_length=1, max_length=40)
    lac: Optional[str] = Field(None, min_length=1, max_length=40)
    mcc: Optional[str] = Field(None, min_length=1, max_length=3)
    mnc: Optional[str] = Field(None, min_length=1, max_length=3)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    long: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = None
    village_id: Optional[int] = Field(None, gt=0)
    operator: Optional[str] = Field(None, min_length=1, max_length=60)
    network_type: Optional[NetworkType] = None
    height: Optional[int] = Field(None, ge=0)
    coverage_radius: Optional[int] = Field(None, ge=0)

    @model_validator(mode='after')
    def required_columns_not_null(self):
        for name in ('cell_id', 'lac', 'mcc', 'mnc', 'lat', 'long', 'operator', 'network_type'):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'{to_camel(name)} cannot be null')
        return self


# === MSISDN ===

class MsisdnCreate(RequestSchema):
    msisdn: str = Field(..., pattern=r'^\+?[0-9]{6,15}$')
    imsi: str = Field(..., pattern=r'^[0-9]{6,15}$')
    imei: str = Field(..., pattern=r'^[0-9]{14,16}$')
    iccid: Optional[str] = Field(None, pattern=r'^[0-9]{18,22}$')
    provider: str = Field(..., min_length=1, max_length=60)
    status: SubscriberStatus = SubscriberStatus.ACTIVE.value
    registered_name: Optional[str] = Field(None, max_length=120)
    registered_nik: Optional[str] = Field(None, max_length=20)
    last_bts_id: Optional[int] = Field(None, gt=0)


# === API KEYS ===

class ApiKeyCreate(RequestSchema):
    key: str = Field(..., min_length=8, max_length=128)
    owner: str = Field(..., min_length=1, max_length=120)
    expires_at: Optional[datetime] = None
    usage_limit: int = Field(1000, ge=0)
    permissions: List[PermissionName] = Field(default_factory=lambda: ['read'])

    @field_validator('expires_at')
    @classmethod
    def naive_utc(cls, value):
        if value is not None and value.tzinfo is not None:
            value = (value - value.utcoffset()).replace(tzinfo=None)
        return value

    @field_validator('permissions')
    @classmethod
    def unique_permissions(cls, value):
        return sorted(set(value))
