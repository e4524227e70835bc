"""Pipeline package - Orchestration of annotation compositing and PDF assembly."""

from pdf2imagefill.pipeline.processor import AnnotationPipeline, AssemblyResult

__all__ = [
    "AnnotationPipeline",
    "AssemblyResult",
]
