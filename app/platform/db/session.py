import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.platform.config import settings
from app.platform.db.base import Base

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_STUDENT_ID = "ADMIN001"

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    pool_pre_ping=True,
)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False, autocommit=False)


async def get_db():
    async with SessionLocal() as session:
        yield session


async def init_db(bind=None, session_factory=None) -> None:
    """
    Create missing tables and make sure a super admin exists.

    An existing admin (the earliest one) is promoted before anything is
    inserted; the default account is only created when no admin exists.
    """
    from app.features.auth.models.user import User
    from app.features.auth.utils.security import hash_password

    bind = bind or engine
    session_factory = session_factory or SessionLocal

    async with bind.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    async with session_factory() as session:
        result = await session.execute(select(User).where(User.is_super_admin.is_(True)))
        if result.scalars().first() is not None:
            return

        result = await session.execute(
            select(User).where(User.is_admin.is_(True)).order_by(User.id).limit(1)
        )
        admin = result.scalar_one_or_none()
        if admin is None:
            # A plain account may already hold the default username, student ID or email
            result = await session.execute(
                select(User)
                .where(
                    or_(
                        User.username == settings.DEFAULT_ADMIN_USERNAME,
                        User.student_id == DEFAULT_ADMIN_STUDENT_ID,
                        User.email == settings.DEFAULT_ADMIN_EMAIL.lower(),
                    )
                )
                .order_by(User.id)
                .limit(1)
            )
            admin = result.scalar_one_or_none()

        if admin is not None:
            admin.is_admin = True
            admin.is_super_admin = True
            username = admin.username
            await session.commit()
            logger.info(f"Promoted '{username}' to super admin")
            return

        session.add(
            User(
                username=settings.DEFAULT_ADMIN_USERNAME,
                name="System Administrator",
                student_id=DEFAULT_ADMIN_STUDENT_ID,
                class_name="Administration",
                grade="-",
                email=settings.DEFAULT_ADMIN_EMAIL.lower(),
                phone="-",
                password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
                is_admin=True,
                is_super_admin=True,
                is_member=True,
                points=0,
            )
        )
        await session.commit()
        logger.info(f"Seeded default super admin '{settings.DEFAULT_ADMIN_USERNAME}'")
