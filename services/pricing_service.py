"""Delivery pricing. This is the only place price constants live."""
import math
from models import DeliveryPriority, DeliveryType, PriceBreakdown

EARTH_RADIUS_KM = 6371
DEFAULT_DISTANCE_KM = 5.0

PRICING = {
    "basePrice": 10.00,
    "pricePerKm": 1.50,
    "pricePerKg": 2.00,
    "freeWeightKg": 1.0,
    "deliveryTypeMultipliers": {
        DeliveryType.STANDARD: 1.0,
        DeliveryType.EXPRESS: 1.5,
        DeliveryType.SAME_DAY: 2.0,
        DeliveryType.SCHEDULED: 1.2,
    },
    # Fraction of the unadjusted base price
    "priorityRates": {
        DeliveryPriority.LOW: 0.0,
        DeliveryPriority.MEDIUM: 0.0,
        DeliveryPriority.HIGH: 0.5,
        DeliveryPriority.URGENT: 1.0,
    },
    "insuranceRate": 0.02,
    "minInsuranceFee": 2.00,
    "serviceFee": 2.50,
    "taxRate": 0.08,
}

def _money(amount):
    return round(amount, 2)

def calculate_delivery_price(distance, weight, priority, delivery_type,
                             insurance=False, package_value=0, discount=0):
    """Return the itemised price for a delivery.

    Each fee is rounded to cents before it is summed, so the total always
    equals the sum of the displayed line items plus tax minus discount.
    """
    if distance < 0:
        raise ValueError("distance must be non-negative")
    if weight < 0:
        raise ValueError("weight must be non-negative")
    if package_value < 0:
        raise ValueError("package value must be non-negative")

    priority = DeliveryPriority(priority)
    delivery_type = DeliveryType(delivery_type)

    unadjusted_base = PRICING["basePrice"]
    base_price = _money(unadjusted_base * PRICING["deliveryTypeMultipliers"][delivery_type])
    distance_fee = _money(distance * PRICING["pricePerKm"])

    billable_weight = max(weight - PRICING["freeWeightKg"], 0)
    weight_fee = _money(billable_weight * PRICING["pricePerKg"])

    priority_fee = _money(unadjusted_base * PRICING["priorityRates"][priority])

    insurance_fee = 0.0
    if insurance:
        insurance_fee = _money(max(package_value * PRICING["insuranceRate"], PRICING["minInsuranceFee"]))

    service_fee = _money(PRICING["serviceFee"])

    subtotal = _money(base_price + distance_fee + weight_fee + priority_fee + insurance_fee + service_fee)
    tax = _money(subtotal * PRICING["taxRate"])
    discount = _money(min(max(discount, 0), subtotal + tax))
    total = _money(subtotal + tax - discount)

    return PriceBreakdown(
        basePrice=base_price,
        distanceFee=distance_fee,
        weightFee=weight_fee,
        priorityFee=priority_fee,
        insuranceFee=insurance_fee,
        serviceFee=service_fee,
        tax=tax,
        discount=discount,
        total=total,
    )

def calculate_distance(lat1, lng1, lat2, lng2):
    """Great-circle distance in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (math.sin(d_lat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c

def estimate_distance(origin, destination):
    """Distance between two coordinate pairs, or the default when either is unknown."""
    if origin is None or destination is None:
        return DEFAULT_DISTANCE_KM
    return round(calculate_distance(origin.lat, origin.lng, destination.lat, destination.lng), 2)

def quote_package(details, delivery, sender, receiver, distance=None):
    if distance is None:
        distance = estimate_distance(sender.address.coordinates, receiver.address.coordinates)
    return calculate_delivery_price(
        distance,
        details.weight,
        delivery.priority,
        delivery.type,
        insurance=details.insurance,
        package_value=details.value,
    )

def interpolate_location(start, end, progress):
    """Point a fraction `progress` (0..1) of the way from start to end."""
    progress = min(max(progress, 0.0), 1.0)
    return {
        "lat": start.lat + (end.lat - start.lat) * progress,
        "lng": start.lng + (end.lng - start.lng) * progress,
    }
