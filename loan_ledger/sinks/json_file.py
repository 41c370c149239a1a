"""JSON file sink for exporting events and batches to files."""

import json
from pathlib import Path
from typing import Any

from loan_ledger.sinks.serialization import to_dict


class JsonFileSink:
    """Append events to JSON Lines files and dump batches as JSON arrays.

    Events go to ``<topic>.jsonl`` (dots replaced by underscores), one
    object per line, so every published event is kept in order.
    """

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory to write JSON files.
        pretty : bool
            Pretty-print batch files (event lines are always compact).
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def _topic_path(self, topic: str, suffix: str) -> Path:
        return self.output_dir / (topic.replace(".", "_") + suffix)

    def send(self, topic: str, record: Any) -> None:
        """Append one record as a JSON line to the topic's file."""
        line = json.dumps(to_dict(record), ensure_ascii=False, default=str)
        with open(self._topic_path(topic, ".jsonl"), "a", encoding="utf-8") as f:
            f.write(line + "\n")
        self._counts[topic] = self._counts.get(topic, 0) + 1

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Write a batch of records to ``<topic>.json``, replacing it."""
        data = [to_dict(record) for record in records]

        with open(self._topic_path(topic, ".json"), "w", encoding="utf-8") as f:
            if self.pretty:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            else:
                json.dump(data, f, ensure_ascii=False, default=str)

        self._counts[topic] = len(records)

    def close(self) -> None:
        """Print summary."""
        print(f"JSON files written to: {self.output_dir}")
        for topic, count in self._counts.items():
            print(f"  {topic}: {count} records")
