from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import typer
from rich import print as rprint
from rich.table import Table
from .config import DictConfig
from .dict.pos_table import POSFormat
from .knowledge import Knowledge


app = typer.Typer(add_completion=False)


def _knowledge(system_dir: Path, encoding: str) -> Knowledge:
    kn = Knowledge(dict_cfg=DictConfig(system_dir=system_dir))
    if not kn.set_encoding(encoding):
        rprint(f"[red]ERROR[/red] unsupported encoding: {encoding}")
        raise typer.Exit(code=1)
    return kn


@app.command("compile-user-dict")
def compile_user_dict(
    system_dir: Path,
    user_dicts: List[Path],
    encoding: str = typer.Option("EUC-JP", help="EUC-JP, SHIFT-JIS or UTF-8"),
    out: Optional[Path] = typer.Option(None, help="write the csv rows here"),
) -> None:
    kn = _knowledge(system_dir, encoding)
    for p in user_dicts:
        kn.add_user_dict(p)
    if not kn.load_dict() or kn.user_dict is None:
        rprint("[red]ERROR[/red] fail to compile user dictionary")
        raise typer.Exit(code=1)

    res = kn.user_dict
    if out is not None:
        out.write_bytes(res.to_bytes())
    rprint(f"[green]OK[/green] {res.entry_count} entries compiled")
    if res.decomp_map:
        table = Table("word", "decomposition")
        for word, morphs in res.decomp_map.items():
            table.add_row(word, " ".join(m.lexicon if m.read_form is None else f"{m.lexicon}/{m.read_form}" for m in morphs))
        rprint(table)


@app.command("pos")
def pos(
    system_dir: Path,
    code: str,
    encoding: str = typer.Option("EUC-JP", help="EUC-JP, SHIFT-JIS or UTF-8"),
) -> None:
    kn = _knowledge(system_dir, encoding)
    if not kn.load_dict():
        rprint(f"[red]ERROR[/red] fail to load dictionary from {system_dir}")
        raise typer.Exit(code=1)
    index = kn.pos_table.get_index_from_alpha_pos(code)
    if index == -1:
        rprint(f"[red]ERROR[/red] unknown POS code: {code}")
        raise typer.Exit(code=1)
    rprint(f"{index:>4} {code:<10} {kn.pos_table.get_pos(index, POSFormat.FULL_CATEGORY)}")


if __name__ == "__main__":
    app()
