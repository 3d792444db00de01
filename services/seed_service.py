"""Demo accounts and a sample shipment, loaded at startup when SEED_DEMO_DATA is set."""
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from models import (
    Address, ContactInfo, Coordinates, DeliveryInfo, DeliveryPriority, DeliveryType, Dimensions,
    Driver, DriverAvailability, PackageCategory, PackageCreateRequest, PackageDetails,
    PackageStatus, PaymentMethod, UserRole, VehicleCapacity, VehicleInfo, VehicleType,
)
from services import auth_service, package_service
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {"id": "1", "email": "customer@kingx.com", "name": "John Doe", "phone": "+1234567890", "role": UserRole.CUSTOMER},
    {"id": "2", "email": "driver@kingx.com", "name": "Mike Johnson", "phone": "+1234567891", "role": UserRole.DRIVER},
    {"id": "3", "email": "admin@kingx.com", "name": "Sarah Wilson", "phone": "+1234567892", "role": UserRole.ADMIN},
]

@lru_cache(maxsize=1)
def demo_password_hash():
    return auth_service.hash_password(DEMO_PASSWORD)

async def seed_demo_data(store):
    if store.users.get("1") is not None:
        return

    for user in DEMO_USERS:
        await auth_service.create_account(
            store, user["name"], user["email"], user["phone"], DEMO_PASSWORD,
            role=user["role"], user_id=user["id"], hashed_password=demo_password_hash(),
        )

    driver = Driver(
        id="2",
        vehicle=VehicleInfo(
            type=VehicleType.VAN,
            make="Ford",
            model="Transit",
            year=2022,
            licensePlate="KX-1024",
            capacity=VehicleCapacity(weight=1200, volume=10),
        ),
        license="DL-55501234",
        rating=4.8,
        availability=DriverAvailability(isOnline=True),
        currentLocation=Coordinates(lat=40.7128, lng=-74.0060),
    )
    store.drivers.set(driver.id, driver.model_dump(mode="json"))

    sample = PackageCreateRequest(
        sender=ContactInfo(
            name="Alice Johnson",
            phone="+1234567890",
            email="alice@example.com",
            address=Address(street="123 Main St", city="New York", state="NY", zipCode="10001",
                            coordinates=Coordinates(lat=40.7128, lng=-74.0060)),
        ),
        receiver=ContactInfo(
            name="Bob Smith",
            phone="+1234567891",
            email="bob@example.com",
            address=Address(street="456 Oak Ave", city="Brooklyn", state="NY", zipCode="11201",
                            coordinates=Coordinates(lat=40.6892, lng=-73.9442)),
        ),
        packageDetails=PackageDetails(
            category=PackageCategory.ELECTRONICS,
            weight=2.5,
            dimensions=Dimensions(length=30, width=20, height=10),
            value=299.99,
            description="Smartphone",
            fragile=True,
            insurance=True,
        ),
        delivery=DeliveryInfo(
            type=DeliveryType.EXPRESS,
            priority=DeliveryPriority.HIGH,
            scheduledDate=datetime.now(timezone.utc) + timedelta(days=1),
            instructions="Leave at front door",
        ),
        paymentMethod=PaymentMethod.CREDIT_CARD,
    )
    package = await package_service.create_package(store, sample)
    await package_service.assign_package_to_driver(store, package.id, driver.id)
    await package_service.update_package_status(store, package.id, PackageStatus.IN_TRANSIT, location="Queens, NY")
    logger.info("Demo data loaded")
