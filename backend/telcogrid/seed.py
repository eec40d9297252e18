import logging
import secrets

logger = logging.getLogger(__name__)

DEFAULT_API_KEY = "sk_live_1234567890abcdef"


def seed_operator(storage, email, password=None):
    """Create the dashboard operator if missing. Returns the generated password, if any."""
    if storage.get_operator_by_email(email) is not None:
        return None
    generated = password or secrets.token_urlsafe(12)
    storage.create_operator(email=email, name="Operator Admin", password=generated)
    return None if password else generated


def seed_reference_data(storage):
    """Seeds the database with a small Indonesian reference dataset.

    Runs only while no province exists, so a partially seeded database is
    not repaired.
    """
    if storage.count_provinces() > 0:
        return False

    logger.info("Seeding database with Indonesian reference data...")

    java = storage.create_island({"name": "Java", "code": "JAVA", "lat": -7.6145, "long": 110.7122})
    storage.create_island({"name": "Sumatra", "code": "SUMATRA", "lat": -0.5897, "long": 101.3431})

    jakarta = storage.create_province({"name": "DKI Jakarta", "islandId": java.id, "capital": "Jakarta"})
    storage.create_province({"name": "West Java", "islandId": java.id, "capital": "Bandung"})

    central_jakarta = storage.create_regency(
        {"name": "Kota Jakarta Pusat", "provinceId": jakarta.id, "type": "KOTA"}
    )
    gambir_district = storage.create_district({"name": "Gambir", "regencyId": central_jakarta.id})
    gambir_village = storage.create_village(
        {"name": "Gambir", "districtId": gambir_district.id, "postalCode": "10110"}
    )

    # Monas
    tower = storage.create_tower({
        "cellId": "CID-12345",
        "lac": "LAC-777",
        "mcc": "510",
        "mnc": "10",
        "lat": -6.1754,
        "long": 106.8272,
        "address": "Gambir, Central Jakarta City, Jakarta",
        "villageId": gambir_village.id,
        "operator": "Telkomsel",
        "networkType": "5G",
        "height": 132,
        "coverageRadius": 5000,
    })

    storage.create_msisdn({
        "msisdn": "628120000001",
        "imsi": "510101234567890",
        "imei": "358921000000001",
        "provider": "Telkomsel",
        "status": "active",
        "registeredName": "Budi Santoso",
        "lastBtsId": tower.id,
    })
    storage.create_msisdn({
        "msisdn": "628120000002",
        "imsi": "510109876543210",
        "imei": "358921000000002",
        "provider": "Telkomsel",
        "status": "active",
        "registeredName": "Siti Aminah",
        "lastBtsId": tower.id,
    })

    storage.create_api_key({
        "key": DEFAULT_API_KEY,
        "owner": "System Admin",
        "usageLimit": 10000,
        "permissions": ["read"],
    })

    logger.info("Seeding complete!")
    return True
