"""
Application-wide constants
"""
from decimal import Decimal

# User roles
USER_ROLE_CUSTOMER = 'customer'
USER_ROLE_BARBER = 'barber'

USER_ROLES = [
    (USER_ROLE_CUSTOMER, 'Customer'),
    (USER_ROLE_BARBER, 'Barber'),
]

# Barber working statuses
BARBER_STATUS_AVAILABLE = 'available'
BARBER_STATUS_BUSY = 'busy'
BARBER_STATUS_BREAK = 'break'
BARBER_STATUS_OFFLINE = 'offline'

BARBER_STATUSES = [
    (BARBER_STATUS_AVAILABLE, 'Available'),
    (BARBER_STATUS_BUSY, 'Busy'),
    (BARBER_STATUS_BREAK, 'On Break'),
    (BARBER_STATUS_OFFLINE, 'Offline'),
]

# Join request statuses
JOIN_REQUEST_PENDING = 'pending'
JOIN_REQUEST_APPROVED = 'approved'
JOIN_REQUEST_REJECTED = 'rejected'

JOIN_REQUEST_STATUSES = [
    (JOIN_REQUEST_PENDING, 'Pending'),
    (JOIN_REQUEST_APPROVED, 'Approved'),
    (JOIN_REQUEST_REJECTED, 'Rejected'),
]

JOIN_REQUEST_ACTION_APPROVE = 'approve'
JOIN_REQUEST_ACTION_REJECT = 'reject'

# Booking statuses
BOOKING_STATUS_PENDING = 'pending'
BOOKING_STATUS_CONFIRMED = 'confirmed'
BOOKING_STATUS_COMPLETED = 'completed'
BOOKING_STATUS_CANCELLED = 'cancelled'

BOOKING_STATUSES = [
    (BOOKING_STATUS_PENDING, 'Pending'),
    (BOOKING_STATUS_CONFIRMED, 'Confirmed'),
    (BOOKING_STATUS_COMPLETED, 'Completed'),
    (BOOKING_STATUS_CANCELLED, 'Cancelled'),
]

# Bookings that still hold the barber's time
ACTIVE_BOOKING_STATUSES = [BOOKING_STATUS_PENDING, BOOKING_STATUS_CONFIRMED]
TERMINAL_BOOKING_STATUSES = [BOOKING_STATUS_COMPLETED, BOOKING_STATUS_CANCELLED]

# Booking payment statuses
BOOKING_PAYMENT_PENDING = 'pending'
BOOKING_PAYMENT_PAID = 'paid'

BOOKING_PAYMENT_STATUSES = [
    (BOOKING_PAYMENT_PENDING, 'Pending'),
    (BOOKING_PAYMENT_PAID, 'Paid'),
]

# Ledger transaction types
TRANSACTION_DEPOSIT = 'deposit'
TRANSACTION_WITHDRAWAL = 'withdrawal'
TRANSACTION_PAYMENT = 'payment'
TRANSACTION_REFUND = 'refund'

TRANSACTION_TYPES = [
    (TRANSACTION_DEPOSIT, 'Deposit'),
    (TRANSACTION_WITHDRAWAL, 'Withdrawal'),
    (TRANSACTION_PAYMENT, 'Payment'),
    (TRANSACTION_REFUND, 'Refund'),
]

# Ledger transaction statuses
TRANSACTION_PENDING = 'pending'
TRANSACTION_SUCCESSFUL = 'successful'
TRANSACTION_FAILED = 'failed'

TRANSACTION_STATUSES = [
    (TRANSACTION_PENDING, 'Pending'),
    (TRANSACTION_SUCCESSFUL, 'Successful'),
    (TRANSACTION_FAILED, 'Failed'),
]

# Gateway statuses that count as a settled charge
GATEWAY_SUCCESS_STATUSES = {'success', 'successful'}

# Minor units per Naira (kobo)
MINOR_UNITS_PER_UNIT = 100

# Days of week, used as keys of Shop.opening_hours
DAYS_OF_WEEK = [
    'monday',
    'tuesday',
    'wednesday',
    'thursday',
    'friday',
    'saturday',
    'sunday',
]

DEFAULT_TOTAL_SEATS = 4

DEFAULT_OPENING_HOURS = {
    'monday': {'open': '09:00', 'close': '18:00', 'closed': False},
    'tuesday': {'open': '09:00', 'close': '18:00', 'closed': False},
    'wednesday': {'open': '09:00', 'close': '18:00', 'closed': False},
    'thursday': {'open': '09:00', 'close': '18:00', 'closed': False},
    'friday': {'open': '09:00', 'close': '18:00', 'closed': False},
    'saturday': {'open': '09:00', 'close': '18:00', 'closed': False},
    'sunday': {'open': '10:00', 'close': '16:00', 'closed': False},
}

# Fallbacks when the matching setting is not configured
DEFAULT_BOOKING_SLOT_MINUTES = 30
DEFAULT_CANCELLATION_FEE_RATE = Decimal('0.20')
DEFAULT_CANCELLATION_FEE_WINDOW_HOURS = 2
DEFAULT_PLATFORM_FEE_RATE = Decimal('0.08')

# Earnings periods
EARNINGS_PERIOD_TODAY = 'today'
EARNINGS_PERIOD_WEEK = 'week'
EARNINGS_PERIOD_MONTH = 'month'

EARNINGS_PERIODS = [EARNINGS_PERIOD_TODAY, EARNINGS_PERIOD_WEEK, EARNINGS_PERIOD_MONTH]
