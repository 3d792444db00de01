from fastapi import HTTPException
from config import settings
from models import Driver, UserRole
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

async def get_driver(store, driver_id):
    data = store.drivers.get(driver_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Driver not found")
    return Driver.model_validate(data)

async def list_drivers(store, online_only=False):
    drivers = [Driver.model_validate(data) for data in store.drivers.stream()]
    if online_only:
        drivers = [d for d in drivers if d.availability.isOnline]
    return sorted(drivers, key=lambda d: d.id)

async def save_driver(store, driver):
    try:
        store.drivers.set(driver.id, driver.model_dump(mode="json"))
        return driver
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Error saving driver document: {exc}")

async def upsert_driver_profile(store, driver_id, profile):
    """Create or replace the vehicle/licence part of a driver profile.

    Ratings, deliveries and earnings survive a profile update.
    """
    user = store.users.get(driver_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if user["role"] != UserRole.DRIVER.value:
        raise HTTPException(status_code=400, detail="User is not a driver")

    existing = store.drivers.get(driver_id)
    if existing is None:
        driver = Driver(id=driver_id, vehicle=profile.vehicle, license=profile.license)
    else:
        driver = Driver.model_validate(existing)
        driver.vehicle = profile.vehicle
        driver.license = profile.license
    if profile.availability is not None:
        driver.availability = profile.availability
    logger.info(f"Driver profile saved: {driver_id}")
    return await save_driver(store, driver)

async def update_driver_location(store, driver_id, coordinates):
    driver = await get_driver(store, driver_id)
    driver.currentLocation = coordinates
    return await save_driver(store, driver)

async def update_availability(store, driver_id, update):
    driver = await get_driver(store, driver_id)
    if update.isOnline is not None:
        driver.availability.isOnline = update.isOnline
    if update.workingHours is not None:
        driver.availability.workingHours = update.workingHours
    if update.daysOfWeek is not None:
        if any(day < 0 or day > 6 for day in update.daysOfWeek):
            raise HTTPException(status_code=400, detail="daysOfWeek entries must be between 0 and 6")
        driver.availability.daysOfWeek = sorted(set(update.daysOfWeek))
    return await save_driver(store, driver)

def driver_payout(package_total):
    return round(package_total * settings.DRIVER_PAYOUT_RATE, 2)

async def add_pending_earnings(store, driver_id, package_total):
    driver = await get_driver(store, driver_id)
    driver.earnings.pending = round(driver.earnings.pending + driver_payout(package_total), 2)
    return await save_driver(store, driver)

async def remove_pending_earnings(store, driver_id, package_total):
    driver = await get_driver(store, driver_id)
    driver.earnings.pending = round(max(driver.earnings.pending - driver_payout(package_total), 0), 2)
    return await save_driver(store, driver)

async def credit_delivery(store, driver_id, package_total, from_pending=True):
    """Add the payout for a delivered package to the earned totals.

    With `from_pending` the same amount leaves the pending balance.
    """
    driver = await get_driver(store, driver_id)
    payout = driver_payout(package_total)
    earnings = driver.earnings
    if from_pending:
        earnings.pending = round(max(earnings.pending - payout, 0), 2)
    earnings.today = round(earnings.today + payout, 2)
    earnings.thisWeek = round(earnings.thisWeek + payout, 2)
    earnings.thisMonth = round(earnings.thisMonth + payout, 2)
    earnings.total = round(earnings.total + payout, 2)
    driver.totalDeliveries += 1
    logger.info(f"Driver {driver_id} credited {payout}")
    return await save_driver(store, driver)
