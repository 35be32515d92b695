"""workflows — Multi-step operations composed from single OBS requests."""
from .recording import RecordingStartReport, RecordingWorkflow

__all__ = ["RecordingStartReport", "RecordingWorkflow"]
