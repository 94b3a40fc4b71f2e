"""Construct the pipeline selected by the settings."""

import importlib

import structlog

from rag_gateway.config import Settings

from .base import Pipeline, PipelineConfig
from .exceptions import PipelineLoadError
from .http import HTTPPipeline


logger = structlog.get_logger("pipeline")


def _import_object(path: str) -> object:
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        raise PipelineLoadError(path, "expected 'module:attribute'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise PipelineLoadError(path, str(e)) from e
    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise PipelineLoadError(path, f"module has no attribute '{attribute}'") from e


def load_pipeline(settings: Settings, config: PipelineConfig | None = None) -> Pipeline:
    """Build the pipeline handle. Nothing is contacted here.

    ``PIPELINE_CLASS`` selects an in-process implementation, called with the
    config as its only argument. Otherwise the HTTP adapter is used.

    Args:
        settings: Application settings.
        config: Pipeline config override; derived from settings when omitted.

    Returns:
        A pipeline satisfying the Pipeline protocol.

    Raises:
        PipelineLoadError: If the configured class cannot be imported or built.
    """
    config = config or PipelineConfig.from_settings(settings)

    if not settings.PIPELINE_CLASS:
        logger.info("pipeline_selected", kind="http", url=settings.PIPELINE_URL)
        return HTTPPipeline(
            config,
            base_url=settings.PIPELINE_URL,
            timeout=settings.PIPELINE_TIMEOUT_SECONDS,
        )

    factory = _import_object(settings.PIPELINE_CLASS)
    if not callable(factory):
        raise PipelineLoadError(settings.PIPELINE_CLASS, "not callable")
    try:
        pipeline = factory(config)
    except Exception as e:
        raise PipelineLoadError(settings.PIPELINE_CLASS, str(e)) from e

    if not isinstance(pipeline, Pipeline):
        raise PipelineLoadError(settings.PIPELINE_CLASS, "object does not implement the pipeline contract")

    logger.info("pipeline_selected", kind="in_process", target=settings.PIPELINE_CLASS)
    return pipeline
