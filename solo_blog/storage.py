"""
Storage port for django-solo-blog.

The managers only talk to records through the Storage contract, so the
persistence engine stays the host project's choice. ModelStorage implements
the contract on top of a Django model.

Every operation reports a lookup miss as NotFound. Any other database failure
is logged with context and re-raised as StorageError, with the original
exception chained but not exposed in the message.
"""
import abc
import logging
from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q

from .exceptions import DuplicateRecord, NotFound, StorageError

logger = logging.getLogger(__name__)


class Storage(abc.ABC):
    """CRUD contract the managers depend on."""

    @abc.abstractmethod
    def get_by_id(self, pk):
        """Return the record with primary key pk."""

    @abc.abstractmethod
    def get_by_unique_field(self, field, value):
        """Return the record whose unique field equals value."""

    @abc.abstractmethod
    def insert(self, **fields):
        """Create a record and return it."""

    @abc.abstractmethod
    def update_fields(self, pk, **fields):
        """Update fields of one record and return it as committed."""

    @abc.abstractmethod
    def delete(self, pk):
        """Permanently remove one record."""

    @abc.abstractmethod
    def list_filtered(self, predicate=None, order=()):
        """Return records matching predicate, sorted by order."""


class ModelStorage(Storage):
    """
    Storage backed by a Django model's default manager.

    A single-record update is one UPDATE statement and therefore atomic.
    Field values may be query expressions, e.g. F("view_count") + 1.
    """

    def __init__(self, model):
        self.model = model
        self.name = model._meta.label

    def __repr__(self):
        return f"<ModelStorage {self.name}>"

    @contextmanager
    def _translate_errors(self, action, **context):
        try:
            yield
        except IntegrityError as exc:
            logger.warning("%s %s rejected by constraint: %s", self.name, action, context)
            raise DuplicateRecord() from exc
        except DatabaseError as exc:
            logger.exception("%s %s failed: %s", self.name, action, context)
            raise StorageError() from exc

    def get_by_id(self, pk):
        with self._translate_errors("get", pk=pk):
            try:
                return self.model.objects.get(pk=pk)
            except self.model.DoesNotExist:
                raise NotFound(f"{self.model._meta.model_name} not found") from None

    def get_by_unique_field(self, field, value):
        with self._translate_errors("get", **{field: value}):
            try:
                return self.model.objects.get(**{field: value})
            except self.model.DoesNotExist:
                raise NotFound(f"{self.model._meta.model_name} not found") from None

    def insert(self, **fields):
        with self._translate_errors("insert"), transaction.atomic():
            return self.model.objects.create(**fields)

    def update_fields(self, pk, **fields):
        context = {"pk": pk, "fields": sorted(fields)}
        with self._translate_errors("update", **context), transaction.atomic():
            updated = self.model.objects.filter(pk=pk).update(**fields)
        if not updated:
            raise NotFound(f"{self.model._meta.model_name} not found")
        return self.get_by_id(pk)

    def delete(self, pk):
        with self._translate_errors("delete", pk=pk):
            deleted, _ = self.model.objects.filter(pk=pk).delete()
        if not deleted:
            raise NotFound(f"{self.model._meta.model_name} not found")

    def list_filtered(self, predicate=None, order=()):
        with self._translate_errors("list", order=list(order)):
            qs = self.model.objects.all()
            if predicate is not None:
                qs = qs.filter(predicate if isinstance(predicate, Q) else Q(**predicate))
            if order:
                qs = qs.order_by(*order)
            return list(qs)
