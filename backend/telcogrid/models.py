"""
Database models for TelcoGrid
"""
import enum
from datetime import datetime, timezone

import bcrypt

from telcogrid import db


def utcnow():
    """Naive UTC timestamp, matching what the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class Permission(enum.IntFlag):
    """Capabilities an API key can carry, stored as a bit set."""
    READ = 1
    WRITE = 2
    ADMIN = 4

    @classmethod
    def from_names(cls, names):
        bits = cls(0)
        for name in names or ():
            bits |= cls[str(name).upper()]
        return bits

    @classmethod
    def to_names(cls, bits):
        value = cls(bits or 0)
        return sorted(member.name.lower() for member in cls if member in value)


class NetworkType(str, enum.Enum):
    G2 = '2G'
    G3 = '3G'
    G4 = '4G'
    G5 = '5G'


class RegencyType(str, enum.Enum):
    KABUPATEN = 'KABUPATEN'
    KOTA = 'KOTA'


class SubscriberStatus(str, enum.Enum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    SUSPENDED = 'suspended'


class ApiKeyStatus(str, enum.Enum):
    ACTIVE = 'active'
    REVOKED = 'revoked'


# === REGIONAL DATA ===

class Island(db.Model):
    __tablename__ = 'islands'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    alt_name = db.Column(db.String(120))
    code = db.Column(db.String(40), unique=True)  # e.g. JAVA, SUMATRA
    lat = db.Column(db.Float)
    long = db.Column(db.Float)

    provinces = db.relationship('Province', backref='island', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'altName': self.alt_name,
            'code': self.code,
            'lat': self.lat,
            'long': self.long,
        }


class Province(db.Model):
    __tablename__ = 'provinces'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    island_id = db.Column(db.Integer, db.ForeignKey('islands.id'), index=True)
    capital = db.Column(db.String(120))

    regencies = db.relationship('Regency', backref='province', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'islandId': self.island_id,
            'capital': self.capital,
        }


class Regency(db.Model):
    __tablename__ = 'regencies'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    province_id = db.Column(db.Integer, db.ForeignKey('provinces.id'), index=True)
    type = db.Column(db.String(20), nullable=False)  # KABUPATEN or KOTA

    districts = db.relationship('District', backref='regency', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'provinceId': self.province_id,
            'type': self.type,
        }


class District(db.Model):
    __tablename__ = 'districts'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    regency_id = db.Column(db.Integer, db.ForeignKey('regencies.id'), index=True)

    villages = db.relationship('Village', backref='district', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'regencyId': self.regency_id,
        }


class Village(db.Model):
    __tablename__ = 'villages'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    district_id = db.Column(db.Integer, db.ForeignKey('districts.id'), index=True)
    postal_code = db.Column(db.String(10))

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'districtId': self.district_id,
            'postalCode': self.postal_code,
        }


# === TELECOM DATA ===

class BtsTower(db.Model):
    __tablename__ = 'bts_towers'

    id = db.Column(db.Integer, primary_key=True)
    cell_id = db.Column(db.String(40), nullable=False)
    lac = db.Column(db.String(40), nullable=False)
    mcc = db.Column(db.String(3), nullable=False)
    mnc = db.Column(db.String(3), nullable=False)
    lat = db.Column(db.Float, nullable=False)
    long = db.Column(db.Float, nullable=False)
    address = db.Column(db.Text)
    village_id = db.Column(db.Integer, db.ForeignKey('villages.id'), index=True)
    operator = db.Column(db.String(60), nullable=False, index=True)
    network_type = db.Column(db.String(3), nullable=False)  # 2G, 3G, 4G, 5G
    height = db.Column(db.Integer)  # meters
    coverage_radius = db.Column(db.Integer)  # meters
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False, index=True)

    village = db.relationship('Village')

    def to_dict(self):
        return {
            'id': self.id,
            'cellId': self.cell_id,
            'lac': self.lac,
            'mcc': self.mcc,
            'mnc': self.mnc,
            'lat': self.lat,
            'long': self.long,
            'address': self.address,
            'villageId': self.village_id,
            'operator': self.operator,
            'networkType': self.network_type,
            'height': self.height,
            'coverageRadius': self.coverage_radius,
            'updatedAt': _iso(self.updated_at),
        }


class MsisdnRecord(db.Model):
    __tablename__ = 'msisdn_data'

    id = db.Column(db.Integer, primary_key=True)
    msisdn = db.Column(db.String(20), unique=True, nullable=False, index=True)
    imsi = db.Column(db.String(20), nullable=False)
    imei = db.Column(db.String(20), nullable=False)
    iccid = db.Column(db.String(22))
    provider = db.Column(db.String(60), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=SubscriberStatus.ACTIVE.value)
    registered_name = db.Column(db.String(120))  # simulated KYC data
    registered_nik = db.Column(db.String(20))
    last_bts_id = db.Column(
        db.Integer,
        db.ForeignKey('bts_towers.id', ondelete='SET NULL'),
        index=True,
    )
    last_active = db.Column(db.DateTime, default=utcnow)

    last_bts = db.relationship('BtsTower')

    def to_dict(self):
        return {
            'id': self.id,
            'msisdn': self.msisdn,
            'imsi': self.imsi,
            'imei': self.imei,
            'iccid': self.iccid,
            'provider': self.provider,
            'status': self.status,
            'registeredName': self.registered_name,
            'registeredNik': self.registered_nik,
            'lastBtsId': self.last_bts_id,
            'lastActive': _iso(self.last_active),
        }


# === API MANAGEMENT ===

class ApiKey(db.Model):
    __tablename__ = 'api_keys'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), unique=True, nullable=False, index=True)
    owner = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    expires_at = db.Column(db.DateTime)
    status = db.Column(db.String(20), nullable=False, default=ApiKeyStatus.ACTIVE.value, index=True)
    usage_limit = db.Column(db.Integer, nullable=False, default=1000)
    usage_count = db.Column(db.Integer, nullable=False, default=0)
    permission_bits = db.Column(db.Integer, nullable=False, default=int(Permission.READ))

    @property
    def permissions(self):
        return Permission.to_names(self.permission_bits)

    def has_permission(self, permission):
        return Permission(permission) in Permission(self.permission_bits or 0)

    def is_expired(self, now=None):
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or utcnow())

    def is_usable(self, now=None):
        """Active and not past its expiry; usage_limit is checked by the caller."""
        return self.status == ApiKeyStatus.ACTIVE.value and not self.is_expired(now)

    def to_dict(self):
        return {
            'id': self.id,
            'key': self.key,
            'owner': self.owner,
            'createdAt': _iso(self.created_at),
            'expiresAt': _iso(self.expires_at),
            'status': self.status,
            'usageLimit': self.usage_limit,
            'usageCount': self.usage_count,
            'permissions': self.permissions,
        }


# === DASHBOARD ACCOUNTS ===

class Operator(db.Model):
    __tablename__ = 'operators'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    last_login = db.Column(db.DateTime)

    def set_password(self, password):
        """Hash and set password"""
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password):
        """Verify password"""
        if not self.password_hash:
            return False
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'isActive': self.is_active,
            'createdAt': _iso(self.created_at),
            'lastLogin': _iso(self.last_login),
        }
