"""
Cosmic Nexus Configuration - 配置管理模块

支持四种配置来源（优先级从高到低）：
1. 环境变量（CN_ 前缀，覆盖所有配置）
2. 项目配置文件（.cosmic-nexus/config.yaml）
3. 全局配置文件（~/.cosmic-nexus/config.yaml）
4. 默认值

用法：
    from cosmic_nexus.config import get_config
    config = get_config()
    print(config.cluster_radius)
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, get_args

import yaml

logger = logging.getLogger(__name__)

# 默认全局配置目录
DEFAULT_GLOBAL_CONFIG_DIR = Path.home() / ".cosmic-nexus"
DEFAULT_PROJECT_CONFIG_DIR = Path(".cosmic-nexus")

ENV_PREFIX = "CN_"


class ConfigLoadError(Exception):
    """配置加载错误"""

    pass


@dataclass
class NexusConfig:
    """Cosmic Nexus 图谱视图配置"""

    # === 节点尺寸 ===
    base_node_val: float = 3.0
    hover_factor: float = 1.5  # 悬停节点放大
    neighbor_factor: float = 1.2  # 相邻节点放大
    dim_factor: float = 0.6  # 非相邻节点缩小

    # === 布局 ===
    default_layout: str = "force"  # force | cluster
    cluster_radius: float = 250.0
    cluster_base_radius: float = 30.0
    cluster_member_spacing: float = 5.0
    force_charge: float = -180.0
    force_link_distance: float = 120.0
    collision_factor: float = 1.5
    layout_iterations: int = 50
    layout_seed: int = 42

    # === 相机 ===
    focus_duration_ms: int = 400
    pan_step: float = 50.0
    zoom_in_factor: float = 1.2
    zoom_out_factor: float = 0.8
    viewport_width: float = 800.0
    viewport_height: float = 600.0
    fit_padding: float = 10.0

    # === 视图生命周期 ===
    ready_delay_ms: int = 500  # 等待渲染库就绪的固定延迟

    # === 默认显示开关 ===
    show_labels: bool = True
    show_arrows: bool = True
    highlight_connections: bool = True
    dark_mode: bool = True

    # === 洞察生成 ===
    insight_seed: Optional[int] = None

    # === 日志 ===
    log_level: str = "INFO"

    @property
    def ready_delay_seconds(self) -> float:
        return self.ready_delay_ms / 1000


def _load_yaml_config(path: Path) -> dict:
    """
    加载 YAML 配置文件。

    Args:
        path: 配置文件路径

    Returns:
        配置字典，如果文件不存在则返回空字典

    Raises:
        ConfigLoadError: YAML 解析失败或其他错误
    """
    if not path.exists():
        logger.debug(f"Config file not found: {path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        # 文件在 exists() 检查后被删除（罕见情况）
        logger.debug(f"Config file disappeared: {path}")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML in {path}: {e}")
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e
    except Exception as e:
        logger.error(f"Failed to load config from {path}: {e}")
        raise ConfigLoadError(f"Failed to load config from {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigLoadError(f"Config root must be a mapping in {path}")
    return content


def _coerce(value: str, target_type: type):
    """把环境变量字符串转换为字段类型"""
    if target_type is bool:
        return value.lower() in ("true", "1", "yes")
    if target_type is int:
        return int(value)
    if target_type is float:
        return float(value)
    return value


def _env_overrides() -> dict:
    """读取 CN_ 前缀的环境变量覆盖"""
    overrides = {}
    for f in fields(NexusConfig):
        env_key = f"{ENV_PREFIX}{f.name.upper()}"
        raw = os.getenv(env_key)
        if raw is None:
            continue
        field_type = f.type
        if not isinstance(field_type, type):
            # Optional[int] 取第一个非 None 类型
            args = [a for a in get_args(field_type) if a is not type(None)]
            field_type = args[0] if args else str
        try:
            overrides[f.name] = _coerce(raw, field_type)
        except ValueError:
            logger.warning(f"Invalid value for {env_key}: {raw}")
    return overrides


def load_config(
    config_dir: Optional[Path] = None,
    project_dir: Optional[Path] = None,
) -> NexusConfig:
    """
    加载配置

    Args:
        config_dir: 全局配置目录（默认 ~/.cosmic-nexus）
        project_dir: 项目配置目录（默认 ./.cosmic-nexus）

    Returns:
        配置对象
    """
    global_dir = config_dir or DEFAULT_GLOBAL_CONFIG_DIR
    local_dir = project_dir or DEFAULT_PROJECT_CONFIG_DIR

    # 1. 全局配置 2. 项目配置（项目覆盖全局）
    global_cfg = _load_yaml_config(global_dir / "config.yaml")
    project_cfg = _load_yaml_config(local_dir / "config.yaml")
    merged = {**global_cfg, **project_cfg}

    # 3. 环境变量覆盖
    merged.update(_env_overrides())

    known = {f.name for f in fields(NexusConfig)}
    unknown = set(merged) - known
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")

    config = NexusConfig(**{k: v for k, v in merged.items() if k in known})

    if config.default_layout not in ("force", "cluster"):
        logger.warning(f"Unknown default_layout '{config.default_layout}', using 'force'")
        config.default_layout = "force"

    return config


# === 全局单例 ===
_config: Optional[NexusConfig] = None


def get_config(force_reload: bool = False) -> NexusConfig:
    """
    获取配置单例

    Args:
        force_reload: 强制重新加载

    Returns:
        配置对象
    """
    global _config

    if _config is None or force_reload:
        _config = load_config()

    return _config


def reset_config():
    """重置配置单例（用于测试）"""
    global _config
    _config = None


__all__ = [
    "NexusConfig",
    "ConfigLoadError",
    "get_config",
    "load_config",
    "reset_config",
]
