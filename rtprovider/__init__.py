"""Declarative-tool provider for Artifactory repositories and Xray resources."""

__version__ = "2.6.10"
