"""
Orchestration.
Single pipeline: Figma components → capped table → Google Sheet overwrite.
"""

from .pipeline import PipelineResult, PublishConfig, Stage, run_pipeline

__all__ = ["run_pipeline", "PipelineResult", "PublishConfig", "Stage"]
