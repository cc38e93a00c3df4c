"""
Repository pattern implementation.
Repositories own the queries; services never touch ``Model.objects`` directly.
"""
from typing import Generic, Iterable, List, TypeVar
from django.db.models import QuerySet, Model
from django.db import transaction

from core.exceptions import NotFoundError

T = TypeVar('T', bound=Model)


class BaseRepository(Generic[T]):
    """
    Base repository with the row operations shared by every model.
    """

    def __init__(self, model: type[T]):
        self.model = model

    def get_queryset(self) -> QuerySet[T]:
        return self.model.objects.all()

    def get_all(self, **filters) -> QuerySet[T]:
        return self.get_queryset().filter(**filters)

    def lock(self, id) -> T:
        """
        Fetch a row with SELECT ... FOR UPDATE.

        Must be called inside a transaction; the lock is held until it ends.

        Raises:
            NotFoundError: If no row has this id
        """
        instance = self.model.objects.select_for_update().filter(id=id).first()
        if instance is None:
            raise NotFoundError(resource_type=self.model.__name__, resource_id=id)
        return instance

    def create(self, **fields) -> T:
        return self.model.objects.create(**fields)

    def update(self, instance: T, **fields) -> T:
        """Set ``fields`` on the instance and save it"""
        for name, value in fields.items():
            setattr(instance, name, value)
        instance.save()
        return instance

    def delete(self, instance: T) -> None:
        instance.delete()

    @transaction.atomic
    def bulk_create(self, instances: Iterable[T]) -> List[T]:
        return self.model.objects.bulk_create(list(instances))
