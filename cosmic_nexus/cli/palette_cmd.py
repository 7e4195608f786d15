"""
cosmic-nexus palette - 查看视觉编码表
"""

import typer
from rich.console import Console
from rich.table import Table

from cosmic_nexus.models.knowledge import Category, RelationshipType
from cosmic_nexus.services import visual_encoder as encoder

console = Console()


def palette_command():
    """
    查看视觉编码表

    分类 -> 颜色 / 图标；关系类型 -> 显示文本 / 图标。
    """
    category_table = Table(title="🎨 分类", show_header=True)
    category_table.add_column("分类", style="cyan")
    category_table.add_column("颜色")
    category_table.add_column("图标")

    for category in Category:
        color = encoder.category_color(category.value)
        icon = encoder.category_icon(category.value)
        category_table.add_row(
            category.value,
            f"[{color}]■[/] {color}",
            f"{encoder.icon_symbol(icon)} {icon}",
        )

    console.print(category_table)
    console.print()

    relationship_table = Table(title="🔗 关系类型", show_header=True)
    relationship_table.add_column("类型", style="cyan")
    relationship_table.add_column("显示")
    relationship_table.add_column("图标")

    for rel in RelationshipType:
        relationship_table.add_row(
            rel.value,
            encoder.relationship_label(rel.value),
            encoder.relationship_icon(rel.value),
        )

    console.print(relationship_table)
    console.print(
        f"[dim]未知分类: {encoder.FALLBACK_COLOR} / {encoder.FALLBACK_ICON}；"
        f"端点无法解析的边: {encoder.UNRESOLVED_LINK_COLOR}[/dim]"
    )


if __name__ == "__main__":
    typer.run(palette_command)
