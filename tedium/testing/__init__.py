"""tedium testing utilities.

Provides in-memory collaborators and fixtures for testing the batch engine
without a network or git.
"""

from tedium.testing.fixtures import (
    create_descriptor,
    create_descriptors,
    create_working_repository,
)
from tedium.testing.mock import (
    MockAnalysisSession,
    MockAnalyzer,
    MockCall,
    MockHostingService,
    MockSourceControl,
    ScriptedPass,
)

__all__ = [
    # Mock collaborators
    "MockHostingService",
    "MockSourceControl",
    "MockAnalyzer",
    "MockAnalysisSession",
    "MockCall",
    "ScriptedPass",
    # Helper functions
    "create_descriptor",
    "create_descriptors",
    "create_working_repository",
]
