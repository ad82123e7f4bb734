"""Build Kubernetes CustomResourceDefinitions and their OpenAPI v3 validation schemata."""

__version__ = "0.1.0"