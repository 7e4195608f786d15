"""
cosmic-nexus insights - 生成连接建议和探索提示
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from cosmic_nexus.cli.data_file import load_graph_file
from cosmic_nexus.services.insight_service import InsightError, get_insight_service

console = Console()


def insights_command(
    file: Path = typer.Argument(..., help="图谱数据文件（JSON）"),
    seed: Optional[int] = typer.Option(
        None,
        "--seed", "-s",
        help="随机种子（结果可复现）",
    ),
):
    """
    生成连接建议和探索提示

    每一对节点生成一条建议连接；至少需要两个节点。
    """
    data = load_graph_file(file)
    nodes = data.get("nodes")
    if not isinstance(nodes, list):
        console.print("[red]✗ Invalid nodes data format.[/red]")
        raise typer.Exit(1)

    try:
        report = get_insight_service().generate(nodes, seed=seed)
    except InsightError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="💡 建议连接", show_header=True)
    table.add_column("源", style="cyan")
    table.add_column("目标", style="cyan")
    table.add_column("强度", justify="right")
    table.add_column("描述", overflow="fold")

    for conn in report.connections:
        table.add_row(conn.source_name, conn.target_name, str(conn.strength), conn.description)

    console.print(table)
    console.print()

    console.print("[bold]🧭 探索提示[/bold]")
    for i, prompt in enumerate(report.discovery_prompts, 1):
        console.print(f"  {i}. {prompt.content}")


if __name__ == "__main__":
    typer.run(insights_command)
