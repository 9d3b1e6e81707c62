from .common.role import Role
from .common.verification_code import VerificationCode, VerificationPurpose

from .users.user import User

from .teachers.teacher import Teacher
from .teachers.availability import Availability

from .students.student import Student

from .booking.bookings import Booking, BookingStatus, PaymentStatus, ACTIVE_BOOKING_STATUSES
from .booking.payment import Payment, ReceiptStatus
from .booking.review import Review

from .chat.message import Message
