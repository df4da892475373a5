"""
Analyze an API definition and upload the report to the registry.

apianalyzer/src/apianalyzer/analysis.py
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .compiler import Compiler
from .registry_client import AnalysisState, AnalysisStateUpdate, RegistryClient
from .resource_ids import ApiDefinitionResource
from .results import to_uniform_results

__all__ = ["AnalysisRequest", "analyze_and_upload"]


@dataclass(frozen=True)
class AnalysisRequest:
    """The API definition to analyze and the ruleset to apply."""

    api_definition: ApiDefinitionResource
    ruleset_path: Optional[Path] = None


def analyze_and_upload(
    request: AnalysisRequest,
    client: RegistryClient,
    compiler: Compiler,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Run the analysis of one API definition and report it to the registry.

    The registry sees `started` first, then exactly one of `completed` (with
    the results) or `failed`. Both carry the operation id returned for
    `started`, which is empty if the registry returned none or the `started`
    update itself failed.

    Any error is logged, reported as `failed`, and re-raised unchanged. An
    error from the `failed` update propagates in its place.
    """
    log = logger or logging.getLogger(__name__)
    operation_id = ""

    try:
        log.info(f"Starting API analysis for {request.api_definition.definition_name}")
        response = client.update_analysis_state(AnalysisStateUpdate(AnalysisState.STARTED))
        operation_id = response.operation_id or ""
        log.info(f"Operation ID: {operation_id or 'empty'}")

        log.info("Fetching specification file")
        content = client.get_api_specification_file_content()

        log.info(f"Compiling specification file using {compiler.analyzer_name}")
        diagnostics = compiler.compile_from_file(content, ruleset_path=request.ruleset_path)

        log.info("Transforming results")
        results = to_uniform_results(diagnostics, analyzer=compiler.analyzer_name)

        log.info(f"Uploading report with {len(results)} results")
        client.update_analysis_state(
            AnalysisStateUpdate(
                AnalysisState.COMPLETED,
                operation_id=operation_id,
                validation_results=results,
            )
        )

        log.info("API analysis complete")
    except Exception as e:
        log.error(f"Error occurred during API analysis: {e}")
        client.update_analysis_state(
            AnalysisStateUpdate(AnalysisState.FAILED, operation_id=operation_id)
        )
        raise
