from fastapi import APIRouter

from app.modules.admin.router import router as admin_jobs_router
from app.modules.applications.admin_router import router as admin_applications_router
from app.modules.applications.router import router as applications_router
from app.modules.auth.router import router as auth_router
from app.modules.blog.admin_router import router as blog_admin_router
from app.modules.blog.router import router as blog_router
from app.modules.chat.router import router as chat_router
from app.modules.consultations.router import router as consultations_router
from app.modules.courses.router import router as courses_router
from app.modules.payments.router import router as payments_router
from app.modules.programs.router import router as programs_router
from app.modules.scholarships.router import router as scholarships_router
from app.modules.subscriptions.router import router as subscriptions_router
from app.modules.support.router import router as support_router
from app.modules.universities.router import router as universities_router
from app.modules.users.router import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(universities_router, prefix="/universities", tags=["Universities"])
api_router.include_router(programs_router, prefix="/programs", tags=["Programs"])
api_router.include_router(applications_router, prefix="/applications", tags=["Applications"])
api_router.include_router(subscriptions_router, prefix="/subscriptions", tags=["Subscriptions"])
api_router.include_router(payments_router, prefix="/payments", tags=["Payments"])
api_router.include_router(scholarships_router, prefix="/scholarships", tags=["Scholarships"])
api_router.include_router(courses_router, prefix="/courses", tags=["Courses"])
api_router.include_router(consultations_router, prefix="/consultations", tags=["Consultations"])
api_router.include_router(support_router, prefix="/support", tags=["Support"])
api_router.include_router(chat_router, prefix="/chat", tags=["Chat"])
api_router.include_router(blog_router, prefix="/blog", tags=["Blog"])
api_router.include_router(blog_admin_router, prefix="/blog/admin", tags=["Admin - Blog"])

api_router.include_router(
    admin_applications_router,
    prefix="/admin/applications",
    tags=["Admin - Applications"],
)
api_router.include_router(admin_jobs_router, prefix="/admin", tags=["Admin - Jobs"])
