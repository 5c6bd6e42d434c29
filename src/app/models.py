"""
Model registry.

Importing this module loads every mapped class so string relationship targets
resolve and `Base.metadata` holds all tables (alembic and the seed script rely
on it).
"""

from app.core.database import Base
from app.modules.applications.models import Application
from app.modules.auth.models import PasswordResetToken
from app.modules.blog.models import BlogCategory, BlogPost, BlogTag
from app.modules.chat.models import ChatConversation, ChatMessage
from app.modules.consultations.models import Consultation
from app.modules.courses.models import Course, CourseEnrollment
from app.modules.payments.models import Payment
from app.modules.programs.models import Program
from app.modules.scholarships.models import Scholarship
from app.modules.subscriptions.models import Subscription
from app.modules.support.models import SupportMessage, SupportTicket
from app.modules.universities.models import University
from app.modules.users.models import Document, User

__all__ = [
    "Base",
    "Application",
    "BlogCategory",
    "BlogPost",
    "BlogTag",
    "ChatConversation",
    "ChatMessage",
    "Consultation",
    "Course",
    "CourseEnrollment",
    "Document",
    "PasswordResetToken",
    "Payment",
    "Program",
    "Scholarship",
    "Subscription",
    "SupportMessage",
    "SupportTicket",
    "University",
    "User",
]
