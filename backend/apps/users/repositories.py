from typing import Optional

from django.db.models import Q

from apps.common.repository import GenericRepository
from .models import User


class UserRepository(GenericRepository[User]):
    def __init__(self):
        super().__init__(User)

    def search(self, query: Optional[str] = None, role: Optional[str] = None):
        qs = self.model.objects.all()
        if role:
            qs = qs.filter(role=role)
        if query:
            qs = qs.filter(
                Q(username__icontains=query)
                | Q(email__icontains=query)
                | Q(name__icontains=query)
            )
        return qs.order_by("id")

    def create_user(self, **data) -> User:
        return User.objects.create_user(**data)
