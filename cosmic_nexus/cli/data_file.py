"""读取图谱数据文件（JSON：{"nodes": [...], "connections": [...]}）"""

import json
from pathlib import Path

import typer
from rich.console import Console

console_stderr = Console(stderr=True)


def load_graph_file(path: Path) -> dict:
    """读取 JSON 数据文件；文件缺失或格式错误时以退出码 1 结束"""
    if not path.exists():
        console_stderr.print(f"[red]✗ 文件不存在: {path}[/red]")
        raise typer.Exit(1)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console_stderr.print(f"[red]✗ JSON 格式错误: {path}: {e}[/red]")
        raise typer.Exit(1)

    if not isinstance(data, dict):
        console_stderr.print(f"[red]✗ 顶层必须是对象（包含 nodes / connections）: {path}[/red]")
        raise typer.Exit(1)
    return data
