import json
from pathlib import Path

from ..core.state import TelemetrySnapshot


class TelemetryLogger:
    def __init__(self, path: str | Path, every: int = 1):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.every = max(1, int(every))
        self.records = []

    def log_snapshot(self, snapshot: TelemetrySnapshot, request=None, marker=None, pov=None):
        if snapshot.frame % self.every:
            return
        entry = snapshot.to_dict()
        if request is not None:
            entry["formation"] = {
                "kind": request.kind.value,
                "count": request.count,
                "group_size": request.group_size,
            }
        if marker is not None:
            entry["marker"] = [float(v) for v in marker]
        if pov is not None:
            entry["pov_anchor"] = [float(v) for v in pov]
        self.records.append(entry)

    def flush(self):
        with self.path.open("w") as f:
            json.dump(self.records, f, indent=2)
