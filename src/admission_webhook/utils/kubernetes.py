"""
Kubernetes utilities for the admission webhook.

Strategies that enforce cross-resource constraints query the cluster
through the official client configured here.
"""

import logging

from kubernetes import client, config

logger = logging.getLogger(__name__)


def get_kubernetes_client() -> client.ApiClient:
    """
    Get configured Kubernetes API client.

    Tries the in-cluster service account first (when running in a pod) and
    falls back to the local kubeconfig for development.

    Returns:
        Configured Kubernetes API client

    Raises:
        kubernetes.config.ConfigException: If no configuration can be loaded
    """
    try:
        config.load_incluster_config()
        logger.debug("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        try:
            config.load_kube_config()
            logger.debug("Loaded kubeconfig from local environment")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise

    return client.ApiClient()
