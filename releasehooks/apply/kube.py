"""Kubernetes-style REST API apply mechanism over httpx."""

import logging
from typing import Any, Mapping, Optional

import httpx

from ..hooks.annotations import describe_manifest, manifest_kind, manifest_name
from ..hooks.readiness import policy_for
from .base import BaseApplier, ResourceHandle, SubmitResult
from .registry import register_applier

logger = logging.getLogger(__name__)

# Kinds whose plural is not simply lowercase + "s".
_IRREGULAR_PLURALS = {
    "Endpoints": "endpoints",
    "Ingress": "ingresses",
    "NetworkPolicy": "networkpolicies",
    "PodSecurityPolicy": "podsecuritypolicies",
    "StorageClass": "storageclasses",
    "PriorityClass": "priorityclasses",
    "IngressClass": "ingressclasses",
}

_CLUSTER_SCOPED = frozenset({
    "Namespace",
    "Node",
    "PersistentVolume",
    "ClusterRole",
    "ClusterRoleBinding",
    "CustomResourceDefinition",
    "StorageClass",
    "PriorityClass",
    "IngressClass",
    "PodSecurityPolicy",
    "MutatingWebhookConfiguration",
    "ValidatingWebhookConfiguration",
})


def plural_for(kind: str) -> str:
    if kind in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[kind]
    lower = kind.lower()
    if lower.endswith("s"):
        return lower + "es"
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        return lower[:-1] + "ies"
    return lower + "s"


def collection_path(api_version: str, kind: str, namespace: Optional[str]) -> str:
    """Build the REST collection path for a kind.

    ``v1`` maps to the core group under ``/api``; ``group/version`` maps
    to ``/apis/group/version``.
    """
    prefix = f"/api/{api_version}" if "/" not in api_version else f"/apis/{api_version}"
    if kind in _CLUSTER_SCOPED or not namespace:
        return f"{prefix}/{plural_for(kind)}"
    return f"{prefix}/namespaces/{namespace}/{plural_for(kind)}"


@register_applier("kube")
class KubeApplier(BaseApplier):
    """Create, read and delete resources through an API server."""

    def __init__(
        self,
        server: str,
        token: str = "",
        namespace: str = "default",
        verify_tls: bool = True,
        client: Optional[httpx.Client] = None,
    ):
        self.server = server.rstrip("/")
        self.token = token
        self.namespace = namespace
        self.client = client or httpx.Client(timeout=30.0, verify=verify_tls)

    def _headers(self, content_type: str = "application/json") -> dict:
        headers = {
            "accept": "application/json",
            "content-type": content_type,
        }
        if self.token:
            headers["authorization"] = f"Bearer {self.token}"
        return headers

    def _object_path(self, manifest: Mapping[str, Any]) -> tuple[str, Optional[str]]:
        kind = manifest_kind(manifest)
        metadata = manifest.get("metadata") or {}
        namespace = metadata.get("namespace") or self.namespace
        if kind in _CLUSTER_SCOPED:
            namespace = None
        base = collection_path(str(manifest.get("apiVersion") or "v1"), kind, namespace)
        return base, namespace

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        message = body.get("message") if isinstance(body, dict) else None
        return f"HTTP {response.status_code}: {message or response.text.strip() or response.reason_phrase}"

    def submit(self, manifest: Mapping[str, Any]) -> SubmitResult:
        kind = manifest_kind(manifest)
        name = manifest_name(manifest)
        base, namespace = self._object_path(manifest)
        path = f"{base}/{name}"
        url = f"{self.server}{base}"

        try:
            response = self.client.post(url, json=dict(manifest), headers=self._headers())
            if response.status_code == 409 and policy_for(kind).requires_polling:
                # Run-to-completion hooks are only ever created fresh.
                return SubmitResult(accepted=False, error=f"{describe_manifest(manifest)} already exists")
            if response.status_code == 409:
                logger.debug("%s exists, patching", describe_manifest(manifest))
                response = self.client.patch(
                    f"{self.server}{path}",
                    json=dict(manifest),
                    headers=self._headers("application/merge-patch+json"),
                )
        except httpx.HTTPError as e:
            return SubmitResult(accepted=False, error=f"Request failed: {e}")

        if response.is_error:
            return SubmitResult(accepted=False, error=self._error_text(response))

        handle = ResourceHandle(kind=kind, name=name, namespace=namespace, path=path)
        return SubmitResult(accepted=True, handle=handle)

    def poll(self, handle: ResourceHandle) -> dict:
        response = self.client.get(f"{self.server}{handle.path}", headers=self._headers())
        response.raise_for_status()
        return response.json()

    def remove(self, manifest: Mapping[str, Any]) -> None:
        base, _ = self._object_path(manifest)
        url = f"{self.server}{base}/{manifest_name(manifest)}"
        response = self.client.delete(url, headers=self._headers())
        if response.status_code == 404:
            logger.debug("%s already gone", describe_manifest(manifest))
            return
        response.raise_for_status()

    def close(self) -> None:
        self.client.close()
