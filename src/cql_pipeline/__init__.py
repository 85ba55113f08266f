"""
CQL Pipeline - Staged Clinical-Rule Evaluation for a Single Patient.

Fetches the clinical content a CQL rule needs (library, helper library,
value set) together with the patient's data bundle, normalizes the bundle
and hands everything to an external CQL evaluation engine. Progress and
outcome are reported as a lazy sequence of typed events.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Dependency Injection for testability
    - Linear state machine per run, one artifact store per run
    - Configuration-driven endpoints via YAML

Main Components:
    - domain: Request, artifact slots, events, result model, error taxonomy
    - interfaces: Protocols for fetcher, evaluator, audit logger, metrics
    - adapters: HTTP/static fetchers, remote/stub evaluators, loggers
    - processing: Patient bundle normalization
    - pipeline: Orchestrator, artifact store, address resolution
    - resilience: Retry policy wrapping a fetcher
    - config: Configuration models and loaders

Example:
    >>> from cql_pipeline.config.loader import load_config
    >>> from cql_pipeline.pipeline.factory import create_orchestrator
    >>> config = load_config("config/default.yaml")
    >>> orchestrator = create_orchestrator(config, evaluator=my_engine)
    >>> for event in orchestrator.run(config.evaluation.build_request(patient_id)):
    ...     print(event)

"""

import logging

__version__ = "0.4.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for CQL Pipeline.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import cql_pipeline
        >>> cql_pipeline.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("cql_pipeline").setLevel(level)
