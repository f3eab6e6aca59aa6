from .extraction_orchestrator import ExtractionOrchestrator, ExtractionState

__all__ = ["ExtractionOrchestrator", "ExtractionState"]
