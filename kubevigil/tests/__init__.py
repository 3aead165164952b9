"""KubeVigil test suite."""
