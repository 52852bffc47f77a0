"""Concrete collaborators for the publish orchestrator."""

from .command_build import CommandBuildProvider, PrebuiltBuildProvider
from .gh_credentials import GhCredentialProvider
from .gh_directory import GhRepositoryDirectory
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .identity import ConfigIdentityProvider
from .storage_publisher import StoragePublisher

__all__ = [
    "CommandBuildProvider",
    "ConfigIdentityProvider",
    "GhCredentialProvider",
    "GhRepositoryDirectory",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "PrebuiltBuildProvider",
    "RealHttpClient",
    "StoragePublisher",
]
