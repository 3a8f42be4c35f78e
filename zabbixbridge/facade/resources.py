"""Uniform get/create/update/delete verbs over one resource family."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from zabbixbridge.adapters.base import ResourceAdapter, ResourceType
from zabbixbridge.config.schema import ClientConfig
from zabbixbridge.session import Session
from zabbixbridge.utils.exceptions import CardinalityError, UnsupportedFeatureError, ValidationError


class ResourceFacade:
    """
    Verbs for one resource family.

    Every verb resolves the adapter through the session at call time, so a
    version change between two calls is picked up without rebuilding the facade.
    Feature-gated families fail before anything is sent.
    """

    def __init__(self, resource: ResourceType, session: Session, config: ClientConfig | None = None):
        self.resource = resource
        self.session = session
        self.config = config or ClientConfig()
        session.register(resource)

    @property
    def adapter(self) -> ResourceAdapter:
        return self.session.adapter_for(self.resource)

    def _check_feature(self) -> None:
        feature = self.resource.feature
        versions = self.session.versions
        if feature and not versions.is_feature_supported(feature):
            raise UnsupportedFeatureError(feature, versions.version)

    def _check_writable(self, verb: str) -> None:
        self._check_feature()
        if self.resource.read_only:
            raise ValidationError(f"{self.resource.name} is read-only; {verb} is not available", field=verb)

    def get(self, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run <resource>.get. A query without "output" gets the configured default."""
        self._check_feature()
        query = dict(params or {})
        if "output" not in query:
            query["output"] = self.config.output_for(self.resource.name)
        return self.adapter.get(query)

    def get_by_id(self, resource_id: str) -> dict[str, Any]:
        """Return the single resource with this id; anything else is a CardinalityError."""
        rows = self.get({self.resource.get_ids_param: str(resource_id)})
        if len(rows) != 1:
            raise CardinalityError(len(rows), resource=self.resource.name)
        return rows[0]

    def create(self, payloads: list[dict[str, Any]]) -> list[str]:
        """Create resources and store the assigned ids in the given payloads."""
        self._check_writable("create")
        if not payloads:
            return []
        ids = self.adapter.create(payloads)
        self._assign_ids(payloads, ids)
        return ids

    def update(self, payloads: list[dict[str, Any]]) -> list[str]:
        self._check_writable("update")
        if not payloads:
            return []
        ids = self.adapter.update(payloads)
        self._assign_ids(payloads, ids)
        return ids

    def delete(self, payloads: list[dict[str, Any]]) -> list[str]:
        """Delete by the payloads' ids, then remove the id field from each payload."""
        self._check_writable("delete")
        id_field = self.resource.id_field
        missing = [i for i, p in enumerate(payloads) if not p.get(id_field)]
        if missing:
            raise ValidationError(f"payloads at {missing} have no {id_field}", field=id_field)
        deleted = self.delete_by_ids([str(p[id_field]) for p in payloads])
        for payload in payloads:
            payload.pop(id_field, None)
        return deleted

    def delete_by_ids(self, ids: Iterable[str]) -> list[str]:
        self._check_writable("delete")
        wanted = [str(x) for x in ids]
        if not wanted:
            return []
        deleted = self.adapter.delete_by_ids(wanted)
        if len(deleted) != len(wanted):
            raise CardinalityError(len(deleted), expected=len(wanted), resource=self.resource.name)
        return deleted

    def _assign_ids(self, payloads: list[dict[str, Any]], ids: list[str]) -> None:
        if len(ids) != len(payloads):
            raise CardinalityError(len(ids), expected=len(payloads), resource=self.resource.name)
        for payload, new_id in zip(payloads, ids):
            payload[self.resource.id_field] = new_id
