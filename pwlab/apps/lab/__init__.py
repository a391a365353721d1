from .pipeline import LabPipeline, LabRun
from .worksheet import render_worksheet

__all__ = ["LabPipeline", "LabRun", "render_worksheet"]
