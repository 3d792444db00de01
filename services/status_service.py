"""Package status progression: ordering, labels and progress percentages.

Statuses are not guarded: any status may be applied to any package. The
happy path below only drives progress reporting and sorting.
"""
from models import PackageStatus

HAPPY_PATH = [
    PackageStatus.CREATED,
    PackageStatus.PAYMENT_PENDING,
    PackageStatus.CONFIRMED,
    PackageStatus.PICKED_UP,
    PackageStatus.IN_TRANSIT,
    PackageStatus.OUT_FOR_DELIVERY,
    PackageStatus.DELIVERED,
]

TERMINAL_STATUSES = {
    PackageStatus.DELIVERED,
    PackageStatus.FAILED_DELIVERY,
    PackageStatus.RETURNED,
    PackageStatus.CANCELLED,
}

PROGRESS = {
    PackageStatus.CREATED: 10,
    PackageStatus.PAYMENT_PENDING: 20,
    PackageStatus.CONFIRMED: 30,
    PackageStatus.PICKED_UP: 50,
    PackageStatus.IN_TRANSIT: 70,
    PackageStatus.OUT_FOR_DELIVERY: 90,
    PackageStatus.DELIVERED: 100,
    PackageStatus.FAILED_DELIVERY: 0,
    PackageStatus.RETURNED: 0,
    PackageStatus.CANCELLED: 0,
}

LABELS = {
    PackageStatus.CREATED: "Created",
    PackageStatus.PAYMENT_PENDING: "Payment Pending",
    PackageStatus.CONFIRMED: "Confirmed",
    PackageStatus.PICKED_UP: "Picked Up",
    PackageStatus.IN_TRANSIT: "In Transit",
    PackageStatus.OUT_FOR_DELIVERY: "Out for Delivery",
    PackageStatus.DELIVERED: "Delivered",
    PackageStatus.FAILED_DELIVERY: "Failed Delivery",
    PackageStatus.RETURNED: "Returned",
    PackageStatus.CANCELLED: "Cancelled",
}

def get_package_progress(status) -> int:
    return PROGRESS.get(PackageStatus(status), 0)

def get_status_label(status) -> str:
    return LABELS.get(PackageStatus(status), "Unknown")

def is_terminal(status) -> bool:
    return PackageStatus(status) in TERMINAL_STATUSES

def is_on_happy_path(status) -> bool:
    return PackageStatus(status) in HAPPY_PATH

def describe_statuses():
    return [
        {
            "status": status,
            "label": get_status_label(status),
            "progress": get_package_progress(status),
            "terminal": is_terminal(status),
        }
        for status in PackageStatus
    ]
