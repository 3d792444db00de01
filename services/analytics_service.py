from collections import defaultdict
from datetime import datetime, timedelta, timezone
from models import (
    Analytics, CustomerAnalytics, DriverAnalytics, PackageAnalytics, PackageStatus,
    PaymentMethodStats, RevenueAnalytics, UserRole,
)
from services.package_service import MOVING_STATUSES, list_packages
from services.driver_service import list_drivers
from services.user_service import list_users

PENDING_STATUSES = {PackageStatus.CREATED, PackageStatus.PAYMENT_PENDING, PackageStatus.CONFIRMED}
UNSUCCESSFUL_STATUSES = {PackageStatus.FAILED_DELIVERY, PackageStatus.RETURNED}
ACTIVE_CUSTOMER_WINDOW = timedelta(days=30)

def _pct(part, whole):
    return round(part / whole * 100, 1) if whole else 0.0

def package_analytics(packages):
    delivered = [p for p in packages if p.status == PackageStatus.DELIVERED]
    unsuccessful = [p for p in packages if p.status in UNSUCCESSFUL_STATUSES]
    durations = [
        (p.delivery.actualDelivery - p.createdAt).total_seconds() / 3600
        for p in delivered
        if p.delivery.actualDelivery is not None
    ]
    return PackageAnalytics(
        total=len(packages),
        delivered=len(delivered),
        inTransit=sum(1 for p in packages if p.status in MOVING_STATUSES),
        pending=sum(1 for p in packages if p.status in PENDING_STATUSES),
        cancelled=sum(1 for p in packages if p.status == PackageStatus.CANCELLED),
        averageDeliveryTime=round(sum(durations) / len(durations), 1) if durations else 0.0,
        deliverySuccessRate=_pct(len(delivered), len(delivered) + len(unsuccessful)),
    )

def driver_analytics(drivers, packages):
    busy = {p.driverId for p in packages if p.driverId and p.status in MOVING_STATUSES}
    online = [d for d in drivers if d.availability.isOnline]
    return DriverAnalytics(
        total=len(drivers),
        active=len(online),
        available=sum(1 for d in online if d.id not in busy),
        averageRating=round(sum(d.rating for d in drivers) / len(drivers), 2) if drivers else 0.0,
        totalDeliveries=sum(d.totalDeliveries for d in drivers),
    )

def revenue_analytics(packages, now):
    billable = [p for p in packages if p.status != PackageStatus.CANCELLED]

    def since(start):
        return round(sum(p.payment.amount for p in billable if p.createdAt >= start), 2)

    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week = today - timedelta(days=today.weekday())
    month = today.replace(day=1)
    year = month.replace(month=1)

    counts = defaultdict(int)
    revenue = defaultdict(float)
    for p in billable:
        counts[p.payment.method] += 1
        revenue[p.payment.method] += p.payment.amount
    total_revenue = sum(revenue.values())
    methods = [
        PaymentMethodStats(
            method=method,
            count=counts[method],
            revenue=round(revenue[method], 2),
            percentage=_pct(revenue[method], total_revenue),
        )
        for method in sorted(revenue, key=lambda m: revenue[m], reverse=True)
    ]
    return RevenueAnalytics(
        today=since(today),
        thisWeek=since(week),
        thisMonth=since(month),
        thisYear=since(year),
        averageOrderValue=round(total_revenue / len(billable), 2) if billable else 0.0,
        topPaymentMethods=methods[:3],
    )

def customer_analytics(customers, packages, now):
    cutoff = now - ACTIVE_CUSTOMER_WINDOW
    recent_senders = {p.sender.email for p in packages if p.createdAt >= cutoff}
    customer_emails = {c.email for c in customers}
    sent = sum(1 for p in packages if p.sender.email in customer_emails)
    return CustomerAnalytics(
        total=len(customers),
        active=sum(1 for c in customers if c.email in recent_senders),
        new=sum(1 for c in customers if c.createdAt >= cutoff),
        averageOrdersPerCustomer=round(sent / len(customers), 2) if customers else 0.0,
    )

async def compute_analytics(store, now=None):
    now = now or datetime.now(timezone.utc)
    packages = await list_packages(store)
    drivers = await list_drivers(store)
    customers = await list_users(store, role=UserRole.CUSTOMER)
    return Analytics(
        packages=package_analytics(packages),
        drivers=driver_analytics(drivers, packages),
        revenue=revenue_analytics(packages, now),
        customer=customer_analytics(customers, packages, now),
    )
