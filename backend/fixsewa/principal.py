"""Authenticated caller passed explicitly into every core operation."""

from dataclasses import dataclass

from fixsewa.models.user import User, UserRole


@dataclass(frozen=True)
class Principal:
    id: int
    role: UserRole
    email: str
    name: str
    phone: str

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            id=user.id,
            role=user.role,
            email=user.email,
            name=user.name,
            phone=user.phone,
        )

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    @property
    def is_worker(self) -> bool:
        return self.role == UserRole.WORKER
