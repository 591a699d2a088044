from __future__ import annotations
import subprocess
import tempfile
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence, Tuple
from ..ctype import EncodingKind
from ..errors import KnowledgeWarning

# (rows, system dict dir, rows encoding, binary encoding) -> success
DictIndexer = Callable[[bytes, Path, EncodingKind, EncodingKind], bool]


@dataclass(frozen=True)
class MecabDictIndex:
    """
    hand compiled user dictionary rows to mecab-dict-index:
      mecab-dict-index -d SYSDIR -u OUTPUT -f FROM -t TO user.csv
    """
    output: Path
    command: Tuple[str, ...] = ("mecab-dict-index",)

    def build_args(self, csv_path: Path, system_dir: Path, src: EncodingKind, dst: EncodingKind) -> Sequence[str]:
        return [
            *self.command,
            "-d", str(system_dir),
            "-u", str(self.output),
            "-f", src.value,
            "-t", dst.value,
            str(csv_path),
        ]

    def __call__(self, rows: bytes, system_dir: Path, src: EncodingKind, dst: EncodingKind) -> bool:
        with tempfile.TemporaryDirectory(prefix="jpk-") as tmp:
            csv_path = Path(tmp) / "user.csv"
            csv_path.write_bytes(rows)
            args = self.build_args(csv_path, system_dir, src, dst)
            try:
                proc = subprocess.run(args, capture_output=True, check=False)
            except OSError as e:
                warnings.warn(f"cannot run {self.command[0]}: {e}", KnowledgeWarning, stacklevel=2)
                return False
        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            warnings.warn(
                f"fail to compile user dictionary (exit {proc.returncode}): {stderr}",
                KnowledgeWarning,
                stacklevel=2,
            )
            return False
        return True
