import random
import string
import time
import uuid
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException
from config import settings
from models import (
    Coordinates, DeliveryPriority, DeliveryProof, DeliveryType, NotificationType, Package,
    PackageStatus, PaymentInfo, PaymentMethod, PaymentStatus, StatusEvent, TrackingResponse, UserRole,
)
from services import driver_service, notification_service
from services.pricing_service import interpolate_location, quote_package
from services.status_service import get_package_progress, get_status_label
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

BASE36 = string.digits + string.ascii_uppercase

TRANSIT_TIMES = {
    DeliveryType.SAME_DAY: timedelta(hours=8),
    DeliveryType.EXPRESS: timedelta(days=1),
    DeliveryType.STANDARD: timedelta(days=3),
    DeliveryType.SCHEDULED: timedelta(days=3),
}

PRIORITY_ORDER = {
    DeliveryPriority.URGENT: 4,
    DeliveryPriority.HIGH: 3,
    DeliveryPriority.MEDIUM: 2,
    DeliveryPriority.LOW: 1,
}

# Statuses during which a package is physically moving
MOVING_STATUSES = {PackageStatus.PICKED_UP, PackageStatus.IN_TRANSIT, PackageStatus.OUT_FOR_DELIVERY}

OFF_PATH_STATUSES = {PackageStatus.FAILED_DELIVERY, PackageStatus.RETURNED, PackageStatus.CANCELLED}

def to_base36(number):
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36[remainder])
    return "".join(reversed(digits))

def generate_tracking_number():
    timestamp = to_base36(int(time.time() * 1000))
    suffix = "".join(random.choices(BASE36, k=4))
    return f"KX{timestamp}{suffix}"

def _now():
    return datetime.now(timezone.utc)

def _place(contact):
    return f"{contact.address.city}, {contact.address.state}"

def _save(store, package):
    try:
        store.packages.set(package.id, package.model_dump(mode="json"))
        return package
    except Exception as exc:
        logger.error(f"Error saving package {package.id}: {exc}")
        raise HTTPException(status_code=500, detail=f"Error saving package document: {exc}")

async def get_package(store, package_id):
    data = store.packages.get(package_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Package not found")
    return Package.model_validate(data)

async def find_by_tracking_number(store, tracking_number):
    wanted = tracking_number.strip().upper()
    for data in store.packages.stream():
        if data["trackingNumber"] == wanted:
            return Package.model_validate(data)
    raise HTTPException(status_code=404, detail="Package not found")

def _unique_tracking_number(store):
    taken = {data["trackingNumber"] for data in store.packages.stream()}
    tracking_number = generate_tracking_number()
    while tracking_number in taken:
        tracking_number = generate_tracking_number()
    return tracking_number

def estimate_delivery_date(delivery, created_at):
    if delivery.type == DeliveryType.SCHEDULED and delivery.scheduledDate is not None:
        return delivery.scheduledDate
    return created_at + TRANSIT_TIMES[delivery.type]

async def create_package(store, request):
    """Price and register a new package, then notify the sender"""
    now = _now()
    breakdown = quote_package(request.packageDetails, request.delivery, request.sender,
                              request.receiver, distance=request.distance)

    delivery = request.delivery.model_copy(deep=True)
    if delivery.scheduledDate is None:
        delivery.scheduledDate = now
    if delivery.estimatedDelivery is None:
        delivery.estimatedDelivery = estimate_delivery_date(delivery, now)
    delivery.actualDelivery = None
    delivery.proofOfDelivery = None

    package = Package(
        id=uuid.uuid4().hex,
        trackingNumber=_unique_tracking_number(store),
        sender=request.sender,
        receiver=request.receiver,
        packageDetails=request.packageDetails,
        delivery=delivery,
        payment=PaymentInfo(
            method=request.paymentMethod,
            amount=breakdown.total,
            currency=settings.CURRENCY,
            status=PaymentStatus.PENDING,
            breakdown=breakdown,
        ),
        status=PackageStatus.CREATED,
        timeline=[StatusEvent(
            id=uuid.uuid4().hex,
            status=PackageStatus.CREATED,
            timestamp=now,
            location=_place(request.sender),
            coordinates=request.sender.address.coordinates,
        )],
        createdAt=now,
        updatedAt=now,
    )
    _save(store, package)
    logger.info(f"Package created: {package.trackingNumber}")

    await notification_service.add_notification(
        store,
        package.sender.email,
        NotificationType.PACKAGE_UPDATE,
        "Package Created",
        f"Your package {package.trackingNumber} has been created and is awaiting pickup.",
        data={"packageId": package.id},
    )
    return package

def _append_event(package, status, location=None, notes=None, coordinates=None, when=None):
    when = when or _now()
    package.timeline.append(StatusEvent(
        id=uuid.uuid4().hex,
        status=status,
        timestamp=when,
        location=location,
        notes=notes,
        coordinates=coordinates,
    ))
    package.status = status
    package.updatedAt = when

def _paid_out(package):
    return any(event.status == PackageStatus.DELIVERED for event in package.timeline)

def _holds_pending(package):
    """Whether the assigned driver carries this package's payout as pending.

    A package pays out once: after its first delivery it never holds pending again.
    """
    if not package.driverId or _paid_out(package):
        return False
    return package.status not in OFF_PATH_STATUSES

async def _settle_earnings(store, package, held_before, paid_before):
    amount = package.payment.amount
    if package.status == PackageStatus.DELIVERED and not paid_before:
        await driver_service.credit_delivery(store, package.driverId, amount, from_pending=held_before)
    elif held_before and not _holds_pending(package):
        await driver_service.remove_pending_earnings(store, package.driverId, amount)
    elif not held_before and _holds_pending(package):
        await driver_service.add_pending_earnings(store, package.driverId, amount)

def can_update_status(user, package, status):
    if user.role == UserRole.ADMIN:
        return True
    if user.role == UserRole.DRIVER:
        return package.driverId == user.id
    return status == PackageStatus.CANCELLED and package.sender.email == user.email

async def update_package_status(store, package_id, status, location=None, notes=None, coordinates=None):
    """Set any status on a package and append the matching timeline event"""
    package = await get_package(store, package_id)
    status = PackageStatus(status)
    held_before = _holds_pending(package)
    paid_before = _paid_out(package)
    _append_event(package, status, location, notes, coordinates)

    if status == PackageStatus.DELIVERED:
        package.delivery.actualDelivery = package.updatedAt
        if package.payment.method == PaymentMethod.CASH_ON_DELIVERY:
            package.payment.status = PaymentStatus.COMPLETED
    elif status == PackageStatus.CANCELLED and package.payment.status == PaymentStatus.COMPLETED:
        package.payment.status = PaymentStatus.REFUNDED

    _save(store, package)
    logger.info(f"Package {package.trackingNumber} status -> {status.value}")

    await notification_service.add_notification(
        store,
        package.sender.email,
        NotificationType.PACKAGE_UPDATE,
        "Package Status Updated",
        f"Your package {package.trackingNumber} is now {get_status_label(status).lower()}.",
        data={"packageId": package.id, "status": status.value},
    )

    if package.driverId:
        await _settle_earnings(store, package, held_before, paid_before)

    if status == PackageStatus.DELIVERED and package.driverId and not paid_before:
        await notification_service.add_notification(
            store,
            package.driverId,
            NotificationType.DELIVERY_COMPLETED,
            "Delivery Completed",
            f"Package {package.trackingNumber} was delivered.",
            data={"packageId": package.id},
        )
    return package

async def assign_package_to_driver(store, package_id, driver_id):
    package = await get_package(store, package_id)
    driver = await driver_service.get_driver(store, driver_id)

    previous = package.driverId
    held_before = _holds_pending(package)

    package.driverId = driver.id
    _append_event(package, PackageStatus.PICKED_UP, location=_place(package.sender),
                  notes=f"Assigned to driver {driver.id}", coordinates=driver.currentLocation)
    _save(store, package)

    holds_now = _holds_pending(package)
    if held_before and (previous != driver.id or not holds_now):
        await driver_service.remove_pending_earnings(store, previous, package.payment.amount)
    if holds_now and (previous != driver.id or not held_before):
        await driver_service.add_pending_earnings(store, driver.id, package.payment.amount)
    logger.info(f"Package {package.trackingNumber} assigned to driver {driver.id}")

    await notification_service.add_notification(
        store,
        driver.id,
        NotificationType.DELIVERY_ASSIGNED,
        "New Delivery Assigned",
        f"You have been assigned package {package.trackingNumber}.",
        data={"packageId": package.id},
    )
    return package

async def record_proof_of_delivery(store, package_id, proof):
    package = await get_package(store, package_id)
    package.delivery.proofOfDelivery = DeliveryProof(
        signature=proof.signature,
        photo=proof.photo,
        notes=proof.notes,
        timestamp=_now(),
        coordinates=proof.coordinates,
    )
    package.updatedAt = package.delivery.proofOfDelivery.timestamp
    return _save(store, package)

async def list_packages(store):
    return [Package.model_validate(data) for data in store.packages.stream()]

async def get_packages_by_user(store, user):
    packages = await list_packages(store)
    if user.role == UserRole.CUSTOMER:
        return [p for p in packages if user.email in (p.sender.email, p.receiver.email)]
    if user.role == UserRole.DRIVER:
        return [p for p in packages if p.driverId == user.id]
    if user.role == UserRole.ADMIN:
        return packages
    return []

def can_view(user, package):
    if user.role == UserRole.ADMIN:
        return True
    if user.role == UserRole.DRIVER:
        return package.driverId == user.id
    return user.email in (package.sender.email, package.receiver.email)

def sort_packages(packages, sort_by="date"):
    if sort_by == "date":
        return sorted(packages, key=lambda p: p.createdAt, reverse=True)
    if sort_by == "status":
        return sorted(packages, key=lambda p: p.status.value)
    if sort_by == "priority":
        return sorted(packages, key=lambda p: PRIORITY_ORDER[p.delivery.priority], reverse=True)
    return list(packages)

def filter_packages(packages, status=None, priority=None, start=None, end=None, search=None):
    result = []
    for package in packages:
        if status and package.status not in status:
            continue
        if priority and package.delivery.priority not in priority:
            continue
        if start is not None and package.createdAt < start:
            continue
        if end is not None and package.createdAt > end:
            continue
        if search:
            haystack = " ".join([
                package.trackingNumber,
                package.sender.name,
                package.receiver.name,
                package.packageDetails.description,
            ]).lower()
            if search.lower() not in haystack:
                continue
        result.append(package)
    return result

async def estimate_current_location(store, package):
    origin = package.sender.address.coordinates
    destination = package.receiver.address.coordinates
    if package.status == PackageStatus.DELIVERED:
        return destination
    if package.status not in MOVING_STATUSES:
        return None
    if package.driverId:
        data = store.drivers.get(package.driverId)
        if data is not None and data.get("currentLocation"):
            return Coordinates.model_validate(data["currentLocation"])
    if origin is None or destination is None:
        return None
    progress = get_package_progress(package.status) / 100
    return Coordinates.model_validate(interpolate_location(origin, destination, progress))

async def tracking_view(store, tracking_number):
    package = await find_by_tracking_number(store, tracking_number)
    return TrackingResponse(
        trackingNumber=package.trackingNumber,
        status=package.status,
        statusLabel=get_status_label(package.status),
        progress=get_package_progress(package.status),
        timeline=package.timeline,
        estimatedDelivery=package.delivery.estimatedDelivery,
        actualDelivery=package.delivery.actualDelivery,
        origin=_place(package.sender),
        destination=_place(package.receiver),
        currentLocation=await estimate_current_location(store, package),
    )
