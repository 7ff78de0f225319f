from sqlalchemy import Boolean, Column, Integer, String

from app.platform.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"
    username = Column(String(30), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    student_id = Column(String(50), unique=True, nullable=False, index=True)
    class_name = Column(String(100), nullable=False)
    grade = Column(String(20), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(20), nullable=False)
    password_hash = Column(String(255), nullable=False)

    is_admin = Column(Boolean, default=False, nullable=False)
    is_super_admin = Column(Boolean, default=False, nullable=False)
    is_member = Column(Boolean, default=True, nullable=False)
    points = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, email={self.email})>"
