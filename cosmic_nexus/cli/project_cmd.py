"""
cosmic-nexus project - 投影并布局图谱

读取包含 nodes / connections 的 JSON 文件，输出节点和边的表格。
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cosmic_nexus.cli.data_file import load_graph_file
from cosmic_nexus.models.graph import GraphLayout, ProjectionStatus
from cosmic_nexus.services.visual_encoder import strength_stars
from cosmic_nexus.view.snapshot import build_snapshot

console = Console()


def _fmt(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.1f}"


def project_command(
    file: Path = typer.Argument(..., help="图谱数据文件（JSON）"),
    layout: Optional[GraphLayout] = typer.Option(
        None,
        "--layout", "-l",
        help="布局: force / cluster（默认取配置）",
    ),
):
    """
    投影并布局知识图谱

    显示每个节点的分类颜色、图标、连接数和布局坐标，以及每条边的关系和强度。
    """
    data = load_graph_file(file)
    snapshot = build_snapshot(data.get("nodes"), data.get("connections"), layout)

    console.print(Panel.fit(
        f"[bold blue]Cosmic Nexus[/bold blue] - 知识图谱\n\n"
        f"[bold]布局:[/bold] {snapshot.layout.value}\n"
        f"[bold]状态:[/bold] {snapshot.status.value}",
        border_style="blue",
    ))
    console.print()

    if snapshot.status != ProjectionStatus.OK:
        console.print(f"[yellow]{snapshot.message}[/yellow]")
        raise typer.Exit(0 if snapshot.status == ProjectionStatus.EMPTY else 1)

    # 1. 节点
    node_table = Table(title="🌌 节点", show_header=True)
    node_table.add_column("ID", style="cyan")
    node_table.add_column("名称")
    node_table.add_column("分类")
    node_table.add_column("图标")
    node_table.add_column("连接", justify="right")
    node_table.add_column("x", justify="right")
    node_table.add_column("y", justify="right")

    for node in snapshot.nodes:
        node_table.add_row(
            node.id,
            node.label,
            f"[{node.color}]{node.category}[/]",
            f"{node.symbol} {node.icon}",
            str(node.connection_count),
            _fmt(node.x),
            _fmt(node.y),
        )

    console.print(node_table)
    console.print()

    # 2. 边
    edge_table = Table(title="🔗 连接", show_header=True)
    edge_table.add_column("源", style="cyan")
    edge_table.add_column("目标", style="cyan")
    edge_table.add_column("关系")
    edge_table.add_column("强度")
    edge_table.add_column("颜色", overflow="fold")

    for edge in snapshot.edges:
        edge_table.add_row(
            edge.source,
            edge.target,
            edge.relationship,
            "".join("★" if lit else "☆" for lit in strength_stars(edge.value)),
            edge.color,
        )

    console.print(edge_table)
    console.print(
        f"[dim]共 {snapshot.node_count} 个节点，{snapshot.edge_count} 条连接"
        f"（丢弃 {snapshot.dropped_links} 条悬空连接）[/dim]"
    )


if __name__ == "__main__":
    typer.run(project_command)
