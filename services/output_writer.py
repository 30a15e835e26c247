from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from models import RunOutput
from services.reporting import filter_processed_founders, render_founders_text

logger = logging.getLogger(__name__)


class OutputWriter:
    """Writes run outputs under a single directory, batch-numbered so runs never overwrite each other."""

    def __init__(self, output_dir: Union[str, Path]) -> None:
        self.output_dir = Path(output_dir)

    def _write_json(self, name: str, data: Dict[str, Any]) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / name
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        return path

    def write_run(self, output: RunOutput, batch_number: int) -> Path:
        path = self._write_json(f"batch{batch_number}_output.json", output.to_output())
        logger.info(f"Full results saved to {path}", extra={"step": "persist"})
        return path

    def write_filtered(self, output: RunOutput, batch_number: int) -> Tuple[Path, Path]:
        filtered = filter_processed_founders(output.to_output(), batch_number=batch_number)
        json_path = self._write_json(f"batch{batch_number}.json", filtered)
        txt_path = self.output_dir / f"batch{batch_number}.txt"
        txt_path.write_text(render_founders_text(filtered), encoding="utf-8")
        logger.info(f"Filtered founders saved to {json_path} and {txt_path}", extra={"step": "persist"})
        return json_path, txt_path

    def write_partial(self, output: RunOutput, batch_number: Optional[int] = None) -> Path:
        name = f"batch{batch_number}_partial_output.json" if batch_number is not None else "partial_output.json"
        path = self._write_json(name, output.to_output())
        logger.info(f"Partial results saved to {path}", extra={"step": "shutdown", "status": "partial_results"})
        return path


def write_founder_profiles(source: Union[str, Path], output_dir: Union[str, Path]) -> Tuple[Path, Path]:
    """Derive founder_profiles.json/.txt from an existing run output file."""
    data = json.loads(Path(source).read_text(encoding="utf-8"))
    filtered = filter_processed_founders(data)
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    json_path = out / "founder_profiles.json"
    txt_path = out / "founder_profiles.txt"
    json_path.write_text(json.dumps(filtered, indent=2, ensure_ascii=False), encoding="utf-8")
    txt_path.write_text(render_founders_text(filtered), encoding="utf-8")
    return json_path, txt_path
