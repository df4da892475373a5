"""apianalyzer: API Definition Analyzer

Compiles API specifications held in an API Center registry, normalizes the
compiler diagnostics, and uploads the analysis report back to the registry.
"""

from apianalyzer.analysis import AnalysisRequest, analyze_and_upload
from apianalyzer.compiler import Compiler, CompilerError, TypeSpecCompiler
from apianalyzer.config import (
    CompilerConfig,
    Config,
    RegistryConfig,
    get_compiler_config,
    get_registry_config,
    load_config,
)
from apianalyzer.diagnostics import Diagnostic, Position, Range
from apianalyzer.registry_client import (
    AnalysisState,
    AnalysisStateResponse,
    AnalysisStateUpdate,
    ApiCenterClient,
    RegistryClient,
    RegistryError,
)
from apianalyzer.resource_ids import ApiDefinitionResource, parse_api_definition_resource_id
from apianalyzer.results import UniformAnalysisResult, to_uniform_results

__version__ = "0.1.0"

__all__ = [
    # Workflow
    "AnalysisRequest",
    "analyze_and_upload",
    # Configuration
    "Config",
    "load_config",
    "RegistryConfig",
    "CompilerConfig",
    "get_registry_config",
    "get_compiler_config",
    # Compiler
    "Compiler",
    "CompilerError",
    "TypeSpecCompiler",
    "Diagnostic",
    "Position",
    "Range",
    "UniformAnalysisResult",
    "to_uniform_results",
    # Registry
    "AnalysisState",
    "AnalysisStateUpdate",
    "AnalysisStateResponse",
    "RegistryClient",
    "RegistryError",
    "ApiCenterClient",
    "ApiDefinitionResource",
    "parse_api_definition_resource_id",
]
