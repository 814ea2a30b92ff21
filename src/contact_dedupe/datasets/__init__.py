from contact_dedupe.datasets.reference import ReferenceDatasetGenerator

__all__ = ["ReferenceDatasetGenerator"]
