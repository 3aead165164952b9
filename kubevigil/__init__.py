"""KubeVigil - workload state reconciliation for Kubernetes."""

__version__ = "0.1.0"
