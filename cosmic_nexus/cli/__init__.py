"""
Cosmic Nexus CLI - 命令行工具

提供主要命令：
- cosmic-nexus project: 投影并布局图谱
- cosmic-nexus palette: 查看视觉编码表
- cosmic-nexus insights: 生成连接建议
- cosmic-nexus serve: 启动 HTTP API 服务
"""

import logging

import typer

from cosmic_nexus.cli.insights_cmd import insights_command
from cosmic_nexus.cli.palette_cmd import palette_command
from cosmic_nexus.cli.project_cmd import project_command
from cosmic_nexus.cli.serve_cmd import serve_command
from cosmic_nexus.config import get_config

app = typer.Typer(
    name="cosmic-nexus",
    help="Cosmic Nexus - 知识图谱 CLI\n\n把兴趣节点和连接投影为可交互的知识图谱。",
    add_completion=False,
    rich_markup_mode="rich",
)

# 注册子命令
app.command(name="project", help="投影并布局知识图谱")(project_command)
app.command(name="palette", help="查看视觉编码表")(palette_command)
app.command(name="insights", help="生成连接建议和探索提示")(insights_command)
app.command(name="serve", help="启动 HTTP API 服务")(serve_command)


def _setup_logging() -> None:
    logging.basicConfig(
        level=get_config().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    """CLI 入口点"""
    _setup_logging()
    app()


if __name__ == "__main__":
    main()


__all__ = ["app", "main"]
