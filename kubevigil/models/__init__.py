"""Data models for KubeVigil."""
