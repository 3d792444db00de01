from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal

class UserRole(str, Enum):
    CUSTOMER = "customer"
    DRIVER = "driver"
    ADMIN = "admin"

class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    PENDING = "pending"

class PackageStatus(str, Enum):
    CREATED = "created"
    PAYMENT_PENDING = "payment_pending"
    CONFIRMED = "confirmed"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    FAILED_DELIVERY = "failed_delivery"
    RETURNED = "returned"
    CANCELLED = "cancelled"

class PackageCategory(str, Enum):
    DOCUMENTS = "documents"
    ELECTRONICS = "electronics"
    CLOTHING = "clothing"
    FOOD = "food"
    FRAGILE = "fragile"
    BULK = "bulk"
    OTHER = "other"

class DeliveryType(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    SAME_DAY = "same_day"
    SCHEDULED = "scheduled"

class DeliveryPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    DIGITAL_WALLET = "digital_wallet"
    CASH_ON_DELIVERY = "cash_on_delivery"
    BANK_TRANSFER = "bank_transfer"

class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"

class VehicleType(str, Enum):
    MOTORCYCLE = "motorcycle"
    CAR = "car"
    VAN = "van"
    TRUCK = "truck"
    BICYCLE = "bicycle"

class RouteStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class StopStatus(str, Enum):
    PENDING = "pending"
    ARRIVED = "arrived"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"

class NotificationType(str, Enum):
    PACKAGE_UPDATE = "package_update"
    DELIVERY_ASSIGNED = "delivery_assigned"
    PAYMENT_PROCESSED = "payment_processed"
    DELIVERY_COMPLETED = "delivery_completed"
    SYSTEM_ALERT = "system_alert"
    PROMOTION = "promotion"

# --- Shared value objects ---

class Coordinates(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

class Address(BaseModel):
    street: str
    city: str
    state: str
    zipCode: str
    country: str = "USA"
    coordinates: Coordinates | None = None

class ContactInfo(BaseModel):
    name: str
    phone: str
    email: str
    address: Address

# --- Users ---

class User(BaseModel):
    id: str
    email: str
    name: str
    phone: str
    avatar: str | None = None
    role: UserRole = UserRole.CUSTOMER
    status: UserStatus = UserStatus.ACTIVE
    createdAt: datetime
    updatedAt: datetime

class SignupRequest(BaseModel):
    name: str
    email: str = Field(pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    phone: str = Field(pattern=r"^\+?[\d\s\-\(\)]{10,}$")
    password: str = Field(min_length=8)
    role: UserRole = UserRole.CUSTOMER

class LoginRequest(BaseModel):
    email: str
    password: str
    role: UserRole | None = None

class AuthResponse(BaseModel):
    token: str
    user: User

class ProfileUpdateRequest(BaseModel):
    name: str | None = None
    phone: str | None = Field(default=None, pattern=r"^\+?[\d\s\-\(\)]{10,}$")
    avatar: str | None = None

# --- Packages ---

class Dimensions(BaseModel):
    length: float = Field(gt=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)

class PackageDetails(BaseModel):
    category: PackageCategory = PackageCategory.OTHER
    weight: float = Field(gt=0)
    dimensions: Dimensions
    value: float = Field(default=0, ge=0)
    description: str = ""
    fragile: bool = False
    insurance: bool = False

class DeliveryProof(BaseModel):
    signature: str | None = None
    photo: str | None = None
    notes: str | None = None
    timestamp: datetime
    coordinates: Coordinates

class DeliveryInfo(BaseModel):
    type: DeliveryType = DeliveryType.STANDARD
    priority: DeliveryPriority = DeliveryPriority.MEDIUM
    scheduledDate: datetime | None = None
    scheduledTimeSlot: str | None = None
    estimatedDelivery: datetime | None = None
    actualDelivery: datetime | None = None
    instructions: str | None = None
    proofOfDelivery: DeliveryProof | None = None

class PriceBreakdown(BaseModel):
    basePrice: float
    distanceFee: float
    weightFee: float
    priorityFee: float
    insuranceFee: float
    serviceFee: float
    tax: float
    discount: float
    total: float

class PaymentInfo(BaseModel):
    method: PaymentMethod
    amount: float
    currency: str = "USD"
    status: PaymentStatus = PaymentStatus.PENDING
    transactionId: str | None = None
    breakdown: PriceBreakdown

class StatusEvent(BaseModel):
    id: str
    status: PackageStatus
    timestamp: datetime
    location: str | None = None
    notes: str | None = None
    coordinates: Coordinates | None = None

class Package(BaseModel):
    id: str
    trackingNumber: str
    sender: ContactInfo
    receiver: ContactInfo
    packageDetails: PackageDetails
    delivery: DeliveryInfo
    payment: PaymentInfo
    status: PackageStatus = PackageStatus.CREATED
    timeline: List[StatusEvent] = []
    driverId: str | None = None
    createdAt: datetime
    updatedAt: datetime

class PackageCreateRequest(BaseModel):
    sender: ContactInfo
    receiver: ContactInfo
    packageDetails: PackageDetails
    delivery: DeliveryInfo = Field(default_factory=DeliveryInfo)
    paymentMethod: PaymentMethod = PaymentMethod.CREDIT_CARD
    distance: float | None = Field(default=None, ge=0)

class StatusUpdateRequest(BaseModel):
    status: PackageStatus
    location: str | None = None
    notes: str | None = None
    coordinates: Coordinates | None = None

class AssignDriverRequest(BaseModel):
    driverId: str

class ProofRequest(BaseModel):
    signature: str | None = None
    photo: str | None = None
    notes: str | None = None
    coordinates: Coordinates

class TrackingResponse(BaseModel):
    trackingNumber: str
    status: PackageStatus
    statusLabel: str
    progress: int
    timeline: List[StatusEvent]
    estimatedDelivery: datetime | None = None
    actualDelivery: datetime | None = None
    origin: str
    destination: str
    currentLocation: Coordinates | None = None

# --- Pricing ---

class QuoteRequest(BaseModel):
    weight: float = Field(gt=0)
    distance: float | None = Field(default=None, ge=0)
    origin: Coordinates | None = None
    destination: Coordinates | None = None
    priority: DeliveryPriority = DeliveryPriority.MEDIUM
    deliveryType: DeliveryType = DeliveryType.STANDARD
    insurance: bool = False
    packageValue: float = Field(default=0, ge=0)

class StatusInfo(BaseModel):
    status: PackageStatus
    label: str
    progress: int
    terminal: bool

# --- Drivers ---

class VehicleCapacity(BaseModel):
    weight: float = Field(ge=0)
    volume: float = Field(ge=0)

class VehicleInfo(BaseModel):
    type: VehicleType = VehicleType.CAR
    make: str
    model: str
    year: int
    licensePlate: str
    capacity: VehicleCapacity

class DriverEarnings(BaseModel):
    today: float = 0
    thisWeek: float = 0
    thisMonth: float = 0
    total: float = 0
    pending: float = 0

class WorkingHours(BaseModel):
    start: str = "09:00"
    end: str = "17:00"

class DriverAvailability(BaseModel):
    isOnline: bool = False
    workingHours: WorkingHours = Field(default_factory=WorkingHours)
    daysOfWeek: List[int] = [1, 2, 3, 4, 5]

class Driver(BaseModel):
    id: str
    vehicle: VehicleInfo
    license: str
    rating: float = Field(default=5.0, ge=0, le=5)
    totalDeliveries: int = 0
    earnings: DriverEarnings = Field(default_factory=DriverEarnings)
    availability: DriverAvailability = Field(default_factory=DriverAvailability)
    currentLocation: Coordinates | None = None

class DriverProfileRequest(BaseModel):
    vehicle: VehicleInfo
    license: str
    availability: DriverAvailability | None = None

class AvailabilityUpdateRequest(BaseModel):
    isOnline: bool | None = None
    workingHours: WorkingHours | None = None
    daysOfWeek: List[int] | None = None

# --- Routes ---

class RouteStop(BaseModel):
    packageId: str
    address: Address
    coordinates: Coordinates
    estimatedArrival: datetime
    actualArrival: datetime | None = None
    status: StopStatus = StopStatus.PENDING
    order: int

class Route(BaseModel):
    id: str
    driverId: str
    packages: List[str]
    startLocation: Coordinates
    stops: List[RouteStop]
    status: RouteStatus = RouteStatus.PLANNED
    estimatedDuration: float
    actualDuration: float | None = None
    distance: float
    optimized: bool = True
    reasoning: str = ""
    createdAt: datetime

class OptimizeRouteRequest(BaseModel):
    driverId: str
    packageIds: List[str] = Field(min_length=1)
    vehicleType: VehicleType | None = None

class RouteStatusUpdateRequest(BaseModel):
    status: RouteStatus
    actualDuration: float | None = None

class StopStatusUpdateRequest(BaseModel):
    status: StopStatus

class DeliveryTimeRequest(BaseModel):
    distance: float = Field(ge=0)
    trafficFactor: float = Field(default=1.0, gt=0)
    weatherFactor: float = Field(default=1.0, gt=0)
    priority: DeliveryPriority = DeliveryPriority.MEDIUM

class DeliveryTimeEstimate(BaseModel):
    estimatedTime: float
    confidence: float
    factors: List[str]

# --- Notifications ---

class Notification(BaseModel):
    id: str
    userId: str
    type: NotificationType
    title: str
    message: str
    data: Dict[str, Any] | None = None
    read: bool = False
    createdAt: datetime

class NotificationList(BaseModel):
    notifications: List[Notification]
    unreadCount: int

# --- Analytics ---

class PackageAnalytics(BaseModel):
    total: int
    delivered: int
    inTransit: int
    pending: int
    cancelled: int
    averageDeliveryTime: float
    deliverySuccessRate: float

class DriverAnalytics(BaseModel):
    total: int
    active: int
    available: int
    averageRating: float
    totalDeliveries: int

class PaymentMethodStats(BaseModel):
    method: PaymentMethod
    count: int
    revenue: float
    percentage: float

class RevenueAnalytics(BaseModel):
    today: float
    thisWeek: float
    thisMonth: float
    thisYear: float
    averageOrderValue: float
    topPaymentMethods: List[PaymentMethodStats]

class CustomerAnalytics(BaseModel):
    total: int
    active: int
    new: int
    averageOrdersPerCustomer: float

class Analytics(BaseModel):
    packages: PackageAnalytics
    drivers: DriverAnalytics
    revenue: RevenueAnalytics
    customer: CustomerAnalytics

SortKey = Literal["date", "status", "priority"]
