from .load_founders import LoadFounderWindow
from .process_batches import ProcessFounderBatches
from .persist_outputs import PersistRunOutputs

__all__ = ["LoadFounderWindow", "ProcessFounderBatches", "PersistRunOutputs"]
