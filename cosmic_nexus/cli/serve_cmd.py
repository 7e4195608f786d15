"""
cosmic-nexus serve - 启动 HTTP API 服务
"""

import typer
from rich.console import Console
from rich.panel import Panel

console = Console()


def serve_command(
    host: str = typer.Option(
        "127.0.0.1",
        "--host", "-h",
        help="监听地址",
    ),
    port: int = typer.Option(
        8000,
        "--port",
        help="监听端口",
    ),
    reload: bool = typer.Option(
        False,
        "--reload", "-r",
        help="开发模式（自动重载）",
    ),
):
    """
    启动 Cosmic Nexus HTTP 服务
    """
    import uvicorn

    console.print(
        Panel.fit(
            "[bold blue]Cosmic Nexus[/bold blue] - 启动服务",
            border_style="blue",
        )
    )
    console.print()
    console.print(f"[green]✓ 启动 HTTP Server: http://{host}:{port}[/green]")
    console.print()
    console.print(f"[dim]API 文档: http://{host}:{port}/docs[/dim]")
    console.print("[dim]按 Ctrl+C 停止服务[/dim]")
    console.print()

    uvicorn.run(
        "cosmic_nexus.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    typer.run(serve_command)
