"""
Validating admission strategy enforcing a per-namespace object quota.

On CREATE the strategy counts the custom objects of the configured resource
that already exist in the request namespace and rejects the request once the
quota is reached. The Kubernetes client is blocking, so the lookup runs in a
worker thread.
"""

import asyncio
import logging

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from admission_webhook.admission.strategy import AdmissionDecision
from admission_webhook.constants import (
    OPERATION_CREATE,
    ROUTEGROUP_GROUP,
    ROUTEGROUP_PLURAL,
    ROUTEGROUP_VERSION,
)
from admission_webhook.errors import AdmissionStrategyError, ConfigurationError
from admission_webhook.models.review import AdmissionRequest
from admission_webhook.utils.kubernetes import get_kubernetes_client

logger = logging.getLogger(__name__)


class NamespaceQuotaAdmitter:
    """Rejects creation of objects beyond a per-namespace limit."""

    name = "namespace-quota"

    def __init__(
        self,
        limit: int,
        group: str = ROUTEGROUP_GROUP,
        version: str = ROUTEGROUP_VERSION,
        plural: str = ROUTEGROUP_PLURAL,
        api: client.CustomObjectsApi | None = None,
    ):
        """
        Initialize the quota strategy.

        Args:
            limit: Maximum number of objects per namespace
            group: API group of the counted resource
            version: API version of the counted resource
            plural: Plural name of the counted resource
            api: CustomObjectsApi to query (built from the environment if omitted)
        """
        if limit <= 0:
            raise ConfigurationError(
                f"quota must be positive, got {limit}",
                setting="max_objects_per_namespace",
            )
        self._limit = limit
        self._group = group
        self._version = version
        self._plural = plural
        if api is None:
            try:
                api = client.CustomObjectsApi(get_kubernetes_client())
            except config.ConfigException as e:
                raise ConfigurationError(
                    f"cannot configure Kubernetes client: {e}",
                    setting="max_objects_per_namespace",
                ) from e
        self._api = api

    @property
    def limit(self) -> int:
        return self._limit

    def _count_objects(self, namespace: str) -> int:
        objects = self._api.list_namespaced_custom_object(
            group=self._group,
            version=self._version,
            namespace=namespace,
            plural=self._plural,
        )
        return len(objects.get("items", []))

    async def admit(self, request: AdmissionRequest) -> AdmissionDecision:
        # Only creation can exceed the quota; cluster scoped objects are not counted
        if request.operation != OPERATION_CREATE or not request.namespace:
            return AdmissionDecision.allow()

        try:
            count = await asyncio.to_thread(self._count_objects, request.namespace)
        except ApiException as e:
            raise AdmissionStrategyError(
                f"failed to count {self._plural} in namespace {request.namespace}: "
                f"{e.reason}",
                admitter=self.name,
                cause=e,
            ) from e

        logger.debug(
            f"Namespace {request.namespace} has {count}/{self._limit} {self._plural}"
        )

        if count >= self._limit:
            return AdmissionDecision.deny(
                f"Namespace quota exceeded: maximum {self._limit} {self._plural} "
                f"per namespace (currently {count})",
                reason="Forbidden",
            )

        return AdmissionDecision.allow()
