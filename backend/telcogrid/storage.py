"""Storage/query layer.

``Storage`` wraps a SQLAlchemy session and is the only component that reads
or writes persisted state. The application factory builds one and exposes it
as ``app.extensions['storage']``; routes never touch ``db.session`` directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Type

import pydantic
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from telcogrid.errors import InternalError, NotFound, ValidationError, first_error_message
from telcogrid.models import (
    ApiKey,
    ApiKeyStatus,
    BtsTower,
    District,
    Island,
    MsisdnRecord,
    Operator,
    Permission,
    Province,
    Regency,
    Village,
    utcnow,
)
from telcogrid.schemas import (
    ApiKeyCreate,
    DistrictCreate,
    IslandCreate,
    MsisdnCreate,
    ProvinceCreate,
    RegencyCreate,
    RequestSchema,
    TowerCreate,
    TowerUpdate,
    VillageCreate,
)

logger = logging.getLogger(__name__)

DEFAULT_MSISDN_PAGE_SIZE = 50

# Largest value an Integer primary key column holds (32-bit on Postgres).
MAX_ID = 2**31 - 1


@dataclass
class Page:
    items: list
    total: int


def _like_pattern(term: str) -> str:
    escaped = term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f'%{escaped}%'


def _id_in_range(value) -> bool:
    return isinstance(value, int) and 0 < value <= MAX_ID


def _coerce(schema: Type[RequestSchema], data: Any) -> RequestSchema:
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data or {})
    except pydantic.ValidationError as exc:
        raise ValidationError(first_error_message(exc)) from exc


class Storage:
    """Parameterized queries over the relational store."""

    def __init__(self, session):
        self.session = session

    # --- internals -------------------------------------------------------

    def _commit(self, conflict_message: str = 'Record violates a unique constraint'):
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.info("Integrity error on commit: %s", exc.orig)
            raise ValidationError(conflict_message) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Storage commit failed")
            raise InternalError() from exc

    def _scalar(self, stmt):
        try:
            return self.session.execute(stmt).scalar()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Storage query failed")
            raise InternalError() from exc

    def _scalars(self, stmt) -> list:
        try:
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Storage query failed")
            raise InternalError() from exc

    def _count(self, model, *conditions) -> int:
        stmt = select(func.count()).select_from(model)
        if conditions:
            stmt = stmt.where(*conditions)
        return int(self._scalar(stmt) or 0)

    def _get(self, model, record_id):
        """Primary-key fetch; ids the column cannot hold are simply absent."""
        if not _id_in_range(record_id):
            return None
        try:
            return self.session.get(model, record_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Storage query failed")
            raise InternalError() from exc

    def _require_parent(self, model, parent_id, field: str):
        if parent_id is None:
            return
        if self._get(model, parent_id) is None:
            raise ValidationError(f'{field}: referenced record {parent_id} does not exist')

    def _insert(self, obj, conflict_message: str):
        self.session.add(obj)
        self._commit(conflict_message)
        self.session.refresh(obj)
        return obj

    # === API KEYS ===

    def list_api_keys(self) -> list:
        stmt = select(ApiKey).order_by(ApiKey.created_at.desc(), ApiKey.id.desc())
        return self._scalars(stmt)

    def create_api_key(self, data) -> ApiKey:
        payload = _coerce(ApiKeyCreate, data)
        if self.get_api_key_by_token(payload.key) is not None:
            raise ValidationError('key: an API key with this value already exists')
        api_key = ApiKey(
            key=payload.key,
            owner=payload.owner,
            expires_at=payload.expires_at,
            status=ApiKeyStatus.ACTIVE.value,
            usage_limit=payload.usage_limit,
            usage_count=0,
            permission_bits=int(Permission.from_names(payload.permissions)),
        )
        api_key = self._insert(api_key, 'key: an API key with this value already exists')
        logger.info("Created API key %s for owner %r", api_key.id, api_key.owner)
        return api_key

    def revoke_api_key(self, key_id: int) -> ApiKey:
        api_key = self._get(ApiKey, key_id)
        if api_key is None:
            raise NotFound('Key not found')
        if api_key.status != ApiKeyStatus.REVOKED.value:
            api_key.status = ApiKeyStatus.REVOKED.value
            self._commit()
            logger.info("Revoked API key %s", key_id)
        return api_key

    def get_api_key_by_token(self, token: Optional[str]) -> Optional[ApiKey]:
        if not token:
            return None
        return self._scalar(select(ApiKey).where(ApiKey.key == token))

    def increment_usage(self, key_id: int) -> None:
        if not _id_in_range(key_id):
            raise NotFound('Key not found')
        # Single UPDATE so concurrent callers never lose an increment.
        stmt = (
            update(ApiKey)
            .where(ApiKey.id == key_id)
            .values(usage_count=ApiKey.usage_count + 1)
            .execution_options(synchronize_session=False)
        )
        try:
            self.session.execute(stmt)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Usage increment failed for API key %s", key_id)
            raise InternalError() from exc
        self._commit()

    # === BTS TOWERS ===

    def list_towers(self, search: Optional[str] = None, operator: Optional[str] = None,
                    limit: Optional[int] = None, offset: Optional[int] = None) -> Page:
        conditions = []
        if search:
            conditions.append(BtsTower.address.ilike(_like_pattern(search), escape='\\'))
        if operator:
            conditions.append(BtsTower.operator == operator)

        stmt = select(BtsTower).order_by(BtsTower.updated_at.desc(), BtsTower.id.desc())
        if conditions:
            stmt = stmt.where(*conditions)
        if limit:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)

        total = self._count(BtsTower, *conditions)
        return Page(items=self._scalars(stmt), total=total)

    def get_tower(self, tower_id: int) -> BtsTower:
        tower = self._get(BtsTower, tower_id)
        if tower is None:
            raise NotFound('BTS tower not found')
        return tower

    def create_tower(self, data) -> BtsTower:
        payload = _coerce(TowerCreate, data)
        self._require_parent(Village, payload.village_id, 'villageId')
        tower = BtsTower(**payload.to_columns(), updated_at=utcnow())
        tower = self._insert(tower, 'BTS tower violates a constraint')
        logger.info("Created BTS tower %s (cell %s, %s)", tower.id, tower.cell_id, tower.operator)
        return tower

    def update_tower(self, tower_id: int, data) -> BtsTower:
        payload = _coerce(TowerUpdate, data)
        tower = self.get_tower(tower_id)
        changes = payload.to_columns(exclude_unset=True)
        if 'village_id' in changes:
            self._require_parent(Village, changes['village_id'], 'villageId')
        for field, value in changes.items():
            setattr(tower, field, value)
        tower.updated_at = utcnow()
        self._commit('BTS tower violates a constraint')
        self.session.refresh(tower)
        logger.info("Updated BTS tower %s fields=%s", tower_id, sorted(changes))
        return tower

    def delete_tower(self, tower_id: int) -> None:
        tower = self._get(BtsTower, tower_id)
        if tower is None:
            return
        detach = (
            update(MsisdnRecord)
            .where(MsisdnRecord.last_bts_id == tower_id)
            .values(last_bts_id=None)
            .execution_options(synchronize_session=False)
        )
        try:
            self.session.execute(detach)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Detaching subscribers from BTS tower %s failed", tower_id)
            raise InternalError() from exc
        self.session.delete(tower)
        self._commit()
        logger.info("Deleted BTS tower %s", tower_id)

    # === MSISDN ===

    def get_msisdn(self, msisdn: str) -> MsisdnRecord:
        record = self._scalar(select(MsisdnRecord).where(MsisdnRecord.msisdn == msisdn))
        if record is None:
            raise NotFound('MSISDN not found in database')
        return record

    def lookup_msisdn_details(self, msisdn: str) -> dict:
        """Subscriber joined to its last tower and that tower's region chain.

        Every hop is a LEFT OUTER JOIN, so a missing link only nulls the
        parts of the response that depend on it.
        """
        stmt = (
            select(MsisdnRecord, BtsTower, Village, District, Regency, Province)
            .outerjoin(BtsTower, MsisdnRecord.last_bts_id == BtsTower.id)
            .outerjoin(Village, BtsTower.village_id == Village.id)
            .outerjoin(District, Village.district_id == District.id)
            .outerjoin(Regency, District.regency_id == Regency.id)
            .outerjoin(Province, Regency.province_id == Province.id)
            .where(MsisdnRecord.msisdn == msisdn)
        )
        try:
            row = self.session.execute(stmt).first()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("MSISDN lookup failed")
            raise InternalError() from exc
        if row is None:
            raise NotFound('MSISDN not found in database')

        record, tower, village, district, regency, province = row
        result = record.to_dict()
        result['location'] = None
        if tower is not None:
            result['location'] = {
                'lat': tower.lat,
                'long': tower.long,
                'address': tower.address,
                'towerInfo': {
                    'cellId': tower.cell_id,
                    'lac': tower.lac,
                    'mcc': tower.mcc,
                    'mnc': tower.mnc,
                    'operator': tower.operator,
                    'networkType': tower.network_type,
                },
            }
        result['region'] = {
            'village': village.name if village is not None else None,
            'district': district.name if district is not None else None,
            'regency': regency.name if regency is not None else None,
            'province': province.name if province is not None else None,
        }
        return result

    def list_msisdns(self, search: Optional[str] = None,
                     limit: Optional[int] = DEFAULT_MSISDN_PAGE_SIZE,
                     offset: Optional[int] = 0) -> Page:
        conditions = []
        if search:
            conditions.append(MsisdnRecord.msisdn.like(_like_pattern(search), escape='\\'))

        stmt = select(MsisdnRecord).order_by(MsisdnRecord.msisdn)
        if conditions:
            stmt = stmt.where(*conditions)
        stmt = stmt.limit(limit or DEFAULT_MSISDN_PAGE_SIZE).offset(offset or 0)

        return Page(items=self._scalars(stmt), total=self._count(MsisdnRecord, *conditions))

    def create_msisdn(self, data) -> MsisdnRecord:
        payload = _coerce(MsisdnCreate, data)
        self._require_parent(BtsTower, payload.last_bts_id, 'lastBtsId')
        if self._scalar(select(MsisdnRecord.id).where(MsisdnRecord.msisdn == payload.msisdn)) is not None:
            raise ValidationError('msisdn: this number is already registered')
        record = MsisdnRecord(**payload.to_columns(), last_active=utcnow())
        record = self._insert(record, 'msisdn: this number is already registered')
        logger.info("Created MSISDN record %s", record.id)
        return record

    # === REGIONAL ===

    def list_islands(self) -> list:
        return self._scalars(select(Island).order_by(Island.name))

    def create_island(self, data) -> Island:
        payload = _coerce(IslandCreate, data)
        if payload.code and self._scalar(select(Island.id).where(Island.code == payload.code)) is not None:
            raise ValidationError('code: an island with this code already exists')
        return self._insert(Island(**payload.to_columns()), 'code: an island with this code already exists')

    def list_provinces(self, island_id: Optional[int] = None) -> list:
        stmt = select(Province).order_by(Province.name)
        if island_id is not None:
            if not _id_in_range(island_id):
                return []
            stmt = stmt.where(Province.island_id == island_id)
        return self._scalars(stmt)

    def count_provinces(self) -> int:
        return self._count(Province)

    def create_province(self, data) -> Province:
        payload = _coerce(ProvinceCreate, data)
        self._require_parent(Island, payload.island_id, 'islandId')
        return self._insert(Province(**payload.to_columns()), 'Province violates a constraint')

    def create_regency(self, data) -> Regency:
        payload = _coerce(RegencyCreate, data)
        self._require_parent(Province, payload.province_id, 'provinceId')
        return self._insert(Regency(**payload.to_columns()), 'Regency violates a constraint')

    def create_district(self, data) -> District:
        payload = _coerce(DistrictCreate, data)
        self._require_parent(Regency, payload.regency_id, 'regencyId')
        return self._insert(District(**payload.to_columns()), 'District violates a constraint')

    def create_village(self, data) -> Village:
        payload = _coerce(VillageCreate, data)
        self._require_parent(District, payload.district_id, 'districtId')
        return self._insert(Village(**payload.to_columns()), 'Village violates a constraint')

    # === STATS ===

    def get_stats(self) -> dict:
        return {
            'totalBts': self._count(BtsTower),
            'totalMsisdn': self._count(MsisdnRecord),
            'activeKeys': self._count(ApiKey, ApiKey.status == ApiKeyStatus.ACTIVE.value),
            'regionsCovered': self._count(Province),
        }

    # === OPERATORS ===

    def get_operator(self, operator_id: int) -> Optional[Operator]:
        return self._get(Operator, operator_id)

    def get_operator_by_email(self, email: str) -> Optional[Operator]:
        return self._scalar(select(Operator).where(Operator.email == email.strip().lower()))

    def create_operator(self, email: str, name: str, password: str) -> Operator:
        operator = Operator(email=email.strip().lower(), name=name)
        operator.set_password(password)
        return self._insert(operator, 'email: an operator with this email already exists')

    def touch_operator_login(self, operator: Operator) -> None:
        operator.last_login = utcnow()
        self._commit()
