"""
Seed Sample Data

Populates a fresh database with the demo catalogue: universities, programs,
scholarships, courses and blog categories, plus an admin account on the
global plan and a demo student account.

Existing rows (matched by name, title, slug or email) are left untouched, so
the script can be re-run safely.

Usage:
    alembic upgrade head
    python scripts/seed_data.py

Environment:
    ADMIN_EMAIL     Admin login (default admin@studyproglobal.com.bd)
    ADMIN_PASSWORD  Admin password (required)
"""

import asyncio
import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import app.models  # noqa: F401 - needed for relationship resolution
from app.core.config import settings
from app.core.security import hash_password
from app.modules.blog.helpers import generate_slug
from app.modules.blog.models import BlogCategory
from app.modules.courses.models import Course, CourseType
from app.modules.programs.models import Program
from app.modules.scholarships.models import Scholarship
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.universities.models import University
from app.modules.users.models import User, UserRole

UNIVERSITIES = [
    {
        "name": "Harvard University",
        "country": "USA",
        "region": "North America",
        "description": "One of the world's most prestigious universities",
        "ranking": 1,
        "tuition_range": "$50,000 - $55,000",
        "website": "https://www.harvard.edu",
    },
    {
        "name": "University of Oxford",
        "country": "UK",
        "region": "UK",
        "description": "The oldest university in the English-speaking world",
        "ranking": 2,
        "tuition_range": "£30,000 - £40,000",
        "website": "https://www.ox.ac.uk",
    },
    {
        "name": "University of Toronto",
        "country": "Canada",
        "region": "North America",
        "description": "Canada's top research university",
        "ranking": 18,
        "tuition_range": "CAD 45,000 - 65,000",
        "website": "https://www.utoronto.ca",
    },
    {
        "name": "Technical University of Munich",
        "country": "Germany",
        "region": "Europe",
        "description": "Leading German technical university",
        "ranking": 50,
        "tuition_range": "Free - €200/semester",
        "website": "https://www.tum.de",
    },
    {
        "name": "University of Melbourne",
        "country": "Australia",
        "region": "Australia",
        "description": "Australia's leading university",
        "ranking": 33,
        "tuition_range": "AUD 35,000 - 45,000",
        "website": "https://www.unimelb.edu.au",
    },
    {
        "name": "National University of Singapore",
        "country": "Singapore",
        "region": "Asia",
        "description": "Asia's leading global university",
        "ranking": 11,
        "tuition_range": "SGD 30,000 - 40,000",
        "website": "https://www.nus.edu.sg",
    },
    {
        "name": "University of Tokyo",
        "country": "Japan",
        "region": "Asia",
        "description": "Japan's most prestigious university",
        "ranking": 23,
        "tuition_range": "¥535,800/year",
        "website": "https://www.u-tokyo.ac.jp",
    },
    {
        "name": "ETH Zurich",
        "country": "Switzerland",
        "region": "Europe",
        "description": "World-renowned science and technology university",
        "ranking": 8,
        "tuition_range": "CHF 1,460/year",
        "website": "https://ethz.ch",
    },
]

# (university name, program fields)
PROGRAMS = [
    (
        "Harvard University",
        {
            "name": "Computer Science",
            "field": "Computer Science",
            "level": "Master",
            "duration": "2 years",
            "tuition_fee": Decimal("52000"),
            "requirements": "Bachelor's degree, GRE, TOEFL 100+",
        },
    ),
    (
        "Harvard University",
        {
            "name": "Business Administration",
            "field": "Business",
            "level": "Master",
            "duration": "2 years",
            "tuition_fee": Decimal("55000"),
            "requirements": "Bachelor's degree, GMAT 700+, TOEFL 100+",
        },
    ),
    (
        "University of Oxford",
        {
            "name": "Mathematics",
            "field": "Mathematics",
            "level": "PhD",
            "duration": "3-4 years",
            "tuition_fee": Decimal("35000"),
            "requirements": "Master's degree, Research proposal, IELTS 7.5+",
        },
    ),
    (
        "University of Oxford",
        {
            "name": "Law",
            "field": "Law",
            "level": "Bachelor",
            "duration": "3 years",
            "tuition_fee": Decimal("32000"),
            "requirements": "A-Levels, LNAT, IELTS 7.0+",
        },
    ),
    (
        "University of Toronto",
        {
            "name": "Data Science",
            "field": "Computer Science",
            "level": "Master",
            "duration": "2 years",
            "tuition_fee": Decimal("45000"),
            "requirements": "Bachelor's in related field, Programming experience",
        },
    ),
    (
        "Technical University of Munich",
        {
            "name": "Mechanical Engineering",
            "field": "Engineering",
            "level": "Master",
            "duration": "2 years",
            "tuition_fee": Decimal("0"),
            "requirements": "Bachelor's in Engineering, German B1 or English C1",
        },
    ),
    (
        "University of Melbourne",
        {
            "name": "Medicine",
            "field": "Medicine",
            "level": "Bachelor",
            "duration": "6 years",
            "tuition_fee": Decimal("70000"),
            "requirements": "ATAR 99+, UCAT, Interview",
        },
    ),
    (
        "National University of Singapore",
        {
            "name": "Artificial Intelligence",
            "field": "Computer Science",
            "level": "Master",
            "duration": "2 years",
            "tuition_fee": Decimal("38000"),
            "requirements": "Bachelor's in CS/Math, Programming experience",
        },
    ),
]

SCHOLARSHIPS = [
    {
        "name": "Fulbright Scholarship",
        "country": "USA",
        "amount": "Full tuition + living expenses",
        "level": "Master",
        "eligibility": "Non-US citizens with bachelor's degree",
        "deadline": date(2026, 10, 1),
        "description": "Prestigious scholarship for international students",
        "link": "https://foreign.fulbrightonline.org",
    },
    {
        "name": "Chevening Scholarship",
        "country": "UK",
        "amount": "Full tuition + £12,000 stipend",
        "level": "Master",
        "eligibility": "Citizens of Chevening-eligible countries",
        "deadline": date(2026, 11, 5),
        "description": "UK government's global scholarship programme",
        "link": "https://www.chevening.org",
    },
    {
        "name": "DAAD Scholarship",
        "country": "Germany",
        "amount": "€934/month",
        "level": "Master",
        "eligibility": "Bachelor's degree with 2 years experience",
        "deadline": date(2026, 9, 30),
        "description": "German Academic Exchange Service scholarship",
        "link": "https://www.daad.de",
    },
    {
        "name": "Australia Awards",
        "country": "Australia",
        "amount": "Full tuition + living expenses",
        "level": "Master",
        "eligibility": "Citizens of participating countries",
        "deadline": date(2027, 4, 30),
        "description": "Australian government scholarships",
        "link": "https://www.dfat.gov.au/people-to-people/australia-awards",
    },
    {
        "name": "Singapore International Graduate Award",
        "country": "Singapore",
        "amount": "Full tuition + S$3,200/month",
        "level": "PhD",
        "eligibility": "Master's degree, Strong research background",
        "deadline": date(2027, 6, 1),
        "description": "For PhD studies in science and engineering",
        "link": "https://www.a-star.edu.sg/Scholarships/for-graduate-studies/singapore-international-graduate-award-singa",
    },
    {
        "name": "MEXT Scholarship",
        "country": "Japan",
        "amount": "Full tuition + ¥144,000/month",
        "level": "Master",
        "eligibility": "Under 35 years, Bachelor's degree",
        "deadline": date(2027, 4, 15),
        "description": "Japanese government scholarship",
        "link": "https://www.studyinjapan.go.jp",
    },
]

COURSES = [
    {
        "title": "Application Guide E-book",
        "type": CourseType.FREE,
        "price": Decimal("0"),
        "description": "Comprehensive guide to university applications",
        "duration": "Self-paced",
        "content": "E-book download",
    },
    {
        "title": "SOP Writing Templates",
        "type": CourseType.FREE,
        "price": Decimal("0"),
        "description": "Professional statement of purpose templates",
        "duration": "Self-paced",
        "content": "Template files",
    },
    {
        "title": "IELTS Preparation Course",
        "type": CourseType.PAID,
        "price": Decimal("49"),
        "description": "Complete IELTS preparation with practice tests",
        "duration": "4 weeks",
        "content": "Video lessons + practice tests",
    },
    {
        "title": "Interview Skills Mastery",
        "type": CourseType.PAID,
        "price": Decimal("39"),
        "description": "Master the art of university interviews",
        "duration": "2 weeks",
        "content": "Video lessons + mock interviews",
    },
    {
        "title": "GRE Prep Course",
        "type": CourseType.PAID,
        "price": Decimal("79"),
        "description": "Comprehensive GRE preparation",
        "duration": "6 weeks",
        "content": "Video lessons + practice tests",
    },
    {
        "title": "Visa Application Guide",
        "type": CourseType.FREE,
        "price": Decimal("0"),
        "description": "Step-by-step visa application guidance",
        "duration": "Self-paced",
        "content": "E-book + checklists",
    },
]

BLOG_CATEGORIES = [
    ("Study Abroad", "Guides for choosing and applying to universities abroad"),
    ("Scholarships", "Funding opportunities and how to win them"),
    ("Visa & Immigration", "Student visa requirements by country"),
    ("Test Preparation", "IELTS, TOEFL, GRE and GMAT preparation"),
    ("Student Life", "Living and studying in a new country"),
]

DEMO_EMAIL = "demo@studyproglobal.com.bd"
DEMO_PASSWORD = "DemoUser123!"


async def seed_universities(db: AsyncSession) -> dict[str, University]:
    by_name: dict[str, University] = {}
    created = 0
    for data in UNIVERSITIES:
        result = await db.execute(select(University).where(University.name == data["name"]))
        university = result.scalar_one_or_none()
        if university is None:
            university = University(has_scholarships=True, is_active=True, **data)
            db.add(university)
            created += 1
        by_name[data["name"]] = university
    await db.flush()
    print(f"  Universities: {created} created, {len(UNIVERSITIES) - created} existing")
    return by_name


async def seed_programs(db: AsyncSession, universities: dict[str, University]) -> None:
    created = 0
    for university_name, data in PROGRAMS:
        university = universities[university_name]
        result = await db.execute(
            select(Program.id).where(
                Program.university_id == university.id, Program.name == data["name"]
            )
        )
        if result.scalar_one_or_none() is None:
            db.add(Program(university_id=university.id, language="English", is_active=True, **data))
            created += 1
    print(f"  Programs: {created} created")


async def seed_scholarships(db: AsyncSession) -> None:
    created = 0
    for data in SCHOLARSHIPS:
        result = await db.execute(select(Scholarship.id).where(Scholarship.name == data["name"]))
        if result.scalar_one_or_none() is None:
            db.add(Scholarship(is_active=True, **data))
            created += 1
    print(f"  Scholarships: {created} created")


async def seed_courses(db: AsyncSession) -> None:
    created = 0
    for data in COURSES:
        result = await db.execute(select(Course.id).where(Course.title == data["title"]))
        if result.scalar_one_or_none() is None:
            db.add(Course(is_active=True, **data))
            created += 1
    print(f"  Courses: {created} created")


async def seed_blog_categories(db: AsyncSession) -> None:
    created = 0
    for name, description in BLOG_CATEGORIES:
        slug = generate_slug(name)
        result = await db.execute(select(BlogCategory.id).where(BlogCategory.slug == slug))
        if result.scalar_one_or_none() is None:
            db.add(BlogCategory(name=name, slug=slug, description=description))
            created += 1
    print(f"  Blog categories: {created} created")


async def seed_user(db: AsyncSession, email: str, password: str, **fields) -> None:
    result = await db.execute(select(User).where(User.email == email))
    existing_user = result.scalar_one_or_none()
    if existing_user:
        print(f"  User already exists: {email} ({existing_user.role.value})")
        return

    db.add(User(email=email, password_hash=hash_password(password), is_active=True, **fields))
    print(f"  User created: {email}")


async def seed() -> None:
    admin_email = os.environ.get("ADMIN_EMAIL", "admin@studyproglobal.com.bd")
    admin_password = os.environ.get("ADMIN_PASSWORD")
    if not admin_password:
        print("ADMIN_PASSWORD must be set")
        sys.exit(1)

    engine = create_async_engine(settings.database_url, echo=False)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    print("Seeding database...")
    try:
        async with async_session() as db:
            universities = await seed_universities(db)
            await seed_programs(db, universities)
            await seed_scholarships(db)
            await seed_courses(db)
            await seed_blog_categories(db)

            await seed_user(
                db,
                admin_email,
                admin_password,
                full_name="System Administrator",
                role=UserRole.ADMIN,
                subscription_type=SubscriptionPlan.GLOBAL,
            )
            await seed_user(
                db,
                DEMO_EMAIL,
                DEMO_PASSWORD,
                full_name="Demo Student",
                country="Bangladesh",
                academic_level="Bachelor",
                role=UserRole.STUDENT,
                subscription_type=SubscriptionPlan.FREE,
                profile_complete=60,
            )

            await db.commit()
    finally:
        await engine.dispose()

    print("Seeding complete.")
    print(f"  Admin: {admin_email}")
    print(f"  Demo:  {DEMO_EMAIL} / {DEMO_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(seed())
