from .input_record import InputRecord, build_search_query
from .resolved_handle import ResolvedHandle
from .profile_data import ProfileData
from .classification_verdict import ClassificationVerdict
from .result_record import ResultRecord
from .checkpoint_state import CheckpointState
from .run_output import RunMetadata, RunOutput

__all__ = [
    "InputRecord",
    "build_search_query",
    "ResolvedHandle",
    "ProfileData",
    "ClassificationVerdict",
    "ResultRecord",
    "CheckpointState",
    "RunMetadata",
    "RunOutput",
]
