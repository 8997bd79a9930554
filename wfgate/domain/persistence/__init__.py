from wfgate.domain.persistence.record_store import RecordStore
from wfgate.domain.persistence.json_record_store import JsonRecordStore

__all__ = ["JsonRecordStore", "RecordStore"]
