"""tedium - a friendly bot for doing mass changes to many repositories."""

from tedium.analysis import AnalysisBridge, AnalysisResult, ImportGraphAnalyzer
from tedium.batch import Batch
from tedium.budget import PushBudget
from tedium.checkout import CheckoutManager
from tedium.config import Settings, load_token
from tedium.discovery import RepositoryDiscovery
from tedium.element import PushOutcome, RepositoryDescriptor, WorkingRepository
from tedium.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ErrorKind,
    GitCommandError,
    NotFoundError,
    OutcomeAlreadySetError,
    RateLimitedError,
    RepositoryError,
    ServerError,
    TediumError,
    ValidationError,
)
from tedium.git import Checkout, Credentials, GitHelper
from tedium.github import AsyncGitHubClient
from tedium.logging import configure_logging, get_logger
from tedium.publish import Publisher
from tedium.rate import RateGovernor
from tedium.report import BatchReporter
from tedium.transform import CleanupPipeline, TransformRunner
from tedium.transport import AsyncHTTPTransport, RetryConfig

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Batch engine
    "Batch",
    "RepositoryDiscovery",
    "CheckoutManager",
    "AnalysisBridge",
    "TransformRunner",
    "CleanupPipeline",
    "Publisher",
    "BatchReporter",
    "PushBudget",
    "RateGovernor",
    # Records
    "RepositoryDescriptor",
    "WorkingRepository",
    "PushOutcome",
    "AnalysisResult",
    # Adapters
    "AsyncGitHubClient",
    "AsyncHTTPTransport",
    "RetryConfig",
    "GitHelper",
    "Checkout",
    "Credentials",
    "ImportGraphAnalyzer",
    # Configuration
    "Settings",
    "load_token",
    # Exceptions
    "TediumError",
    "ConfigurationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "GitCommandError",
    "OutcomeAlreadySetError",
    "ErrorKind",
    "RepositoryError",
    # Logging
    "configure_logging",
    "get_logger",
]
