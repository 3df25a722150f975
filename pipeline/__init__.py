"""Analysis pipeline: LangGraph orchestration of plan -> fetch -> analyse -> signal."""

from pipeline.graph import PipelineState, build_pipeline_graph, compile_pipeline_graph
from pipeline.runner import AnalysisPipeline, AnalysisRunner, build_pipeline

__all__ = [
    "AnalysisPipeline",
    "AnalysisRunner",
    "PipelineState",
    "build_pipeline",
    "build_pipeline_graph",
    "compile_pipeline_graph",
]
