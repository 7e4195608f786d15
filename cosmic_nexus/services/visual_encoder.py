"""Visual Encoder - 视觉编码

领域属性（分类、关系类型、强度、悬停状态）到视觉属性（颜色、图标、
尺寸、箭头、粒子）的纯函数映射。所有函数对任意输入都有定义好的兜底值。

编码器只读取节点当前的显示尺寸，从不决定尺寸。
"""

from dataclasses import dataclass
from datetime import datetime

from cosmic_nexus.models.graph import RenderLink, RenderNode
from cosmic_nexus.models.knowledge import Category, RelationshipType

# 分类颜色映射（8 色 + 灰色兜底）
CATEGORY_COLORS = {
    Category.ART.value: "#f43f5e",  # rose-500
    Category.SCIENCE.value: "#3b82f6",  # blue-500
    Category.HISTORY.value: "#f59e0b",  # amber-500
    Category.MUSIC.value: "#a855f7",  # purple-500
    Category.LITERATURE.value: "#10b981",  # emerald-500
    Category.PHILOSOPHY.value: "#6366f1",  # indigo-500
    Category.TECHNOLOGY.value: "#06b6d4",  # cyan-500
    Category.HOBBY.value: "#ec4899",  # pink-500
}
FALLBACK_COLOR = "#6b7280"  # gray-500

# 分类图标
CATEGORY_ICONS = {
    Category.ART.value: "bi-palette",
    Category.SCIENCE.value: "bi-atom",
    Category.HISTORY.value: "bi-hourglass-split",
    Category.MUSIC.value: "bi-music-note-beamed",
    Category.LITERATURE.value: "bi-book",
    Category.PHILOSOPHY.value: "bi-lightbulb",
    Category.TECHNOLOGY.value: "bi-cpu",
    Category.HOBBY.value: "bi-controller",
}
FALLBACK_ICON = "bi-tag"

# 画布文字绘制用的图标符号
ICON_SYMBOLS = {
    "bi-palette": "\U0001f3a8",
    "bi-atom": "⚛️",
    "bi-hourglass-split": "⏳",
    "bi-music-note-beamed": "\U0001f3b5",
    "bi-book": "\U0001f4da",
    "bi-lightbulb": "\U0001f4a1",
    "bi-cpu": "\U0001f5a5️",
    "bi-controller": "\U0001f3ae",
    "bi-tag": "\U0001f3f7️",
}
FALLBACK_SYMBOL = "•"

# 关系类型图标
RELATIONSHIP_ICONS = {
    RelationshipType.INFLUENCES.value: "bi-arrow-right",
    RelationshipType.INSPIRES.value: "bi-lightbulb",
    RelationshipType.CONTRASTS.value: "bi-shuffle",
    RelationshipType.BUILDS_ON.value: "bi-layers",
    RelationshipType.COMPLEMENTS.value: "bi-puzzle",
}
FALLBACK_RELATIONSHIP_ICON = "bi-link"

# 端点无法解析时的边颜色
UNRESOLVED_LINK_COLOR = "rgba(100, 116, 139, 0.3)"

# 临时边
TRANSIENT_LINK_COLOR = "rgba(74, 222, 128, 0.6)"
TRANSIENT_PARTICLE_COLOR = "rgba(74, 222, 128, 0.9)"
TRANSIENT_DASH = (5, 5)

# 阈值（随缩放级别显示）
LABEL_MIN_SCALE = 0.7
ICON_MIN_SCALE = 0.5

DARK_BACKGROUND = "#1a1a2e"


def category_color(category: str | None) -> str:
    """分类 -> 颜色（未知分类返回灰色）"""
    return CATEGORY_COLORS.get(category or "", FALLBACK_COLOR)


def category_icon(category: str | None) -> str:
    """分类 -> 图标名（未知分类返回通用 tag 图标）"""
    return CATEGORY_ICONS.get(category or "", FALLBACK_ICON)


def icon_symbol(icon: str | None) -> str:
    """图标名 -> Unicode 符号（未映射的图标返回圆点）"""
    return ICON_SYMBOLS.get(icon or "", FALLBACK_SYMBOL)


def relationship_icon(relationship_type: str | None) -> str:
    """关系类型 -> 图标名"""
    return RELATIONSHIP_ICONS.get(relationship_type or "", FALLBACK_RELATIONSHIP_ICON)


def relationship_label(relationship_type: str | None) -> str:
    """关系类型 -> 显示文本（空值为 related，下划线替换为空格）"""
    if not relationship_type:
        return RelationshipType.RELATED.value
    return relationship_type.replace("_", " ")


def gradient_id(source_category: str | None, target_category: str | None) -> str:
    """按端点分类生成渐变 ID（未知分类归为 other）"""
    source = Category.normalize(source_category).value
    target = Category.normalize(target_category).value
    return f"{source}-{target}-gradient"


def link_color(link: RenderLink, node_index: dict[str, RenderNode]) -> str:
    """边颜色：端点分类对应的渐变；端点无法解析时使用半透明中性色"""
    if not link.source or not link.target:
        return UNRESOLVED_LINK_COLOR

    source_node = node_index.get(link.source)
    target_node = node_index.get(link.target)
    if source_node is None or target_node is None:
        return UNRESOLVED_LINK_COLOR

    return f"url(#{gradient_id(source_node.category, target_node.category)})"


@dataclass(frozen=True)
class GradientDefinition:
    """渐变定义（两端颜色，透明度 0.8）"""

    gradient_id: str
    start_color: str
    stop_color: str
    opacity: float = 0.8


def gradient_definitions() -> list[GradientDefinition]:
    """所有分类组合的渐变定义"""
    categories = [c.value for c in Category]
    return [
        GradientDefinition(
            gradient_id=f"{a}-{b}-gradient",
            start_color=category_color(a),
            stop_color=category_color(b),
        )
        for a in categories
        for b in categories
    ]


@dataclass(frozen=True)
class NodeStyle:
    """单个节点的绘制属性"""

    size: float
    color: str
    icon: str
    symbol: str
    border_color: str
    border_width: float
    glow_color: str | None
    show_label: bool
    show_icon: bool
    label_background: str
    label_color: str
    badge: int | None  # 连接数角标


@dataclass(frozen=True)
class LinkStyle:
    """单条边的绘制属性"""

    color: str
    width: float
    curvature: float
    arrow_length: float
    particles: int
    particle_speed: float
    particle_width: float
    particle_color: str
    dash: tuple[int, int] | None
    label: str


def node_style(
    node: RenderNode,
    size: float,
    *,
    hovered: bool = False,
    dark_mode: bool = True,
    show_labels: bool = True,
    global_scale: float = 1.0,
) -> NodeStyle:
    """
    节点绘制属性

    Args:
        node: 渲染节点
        size: 当前显示尺寸（由交互状态决定）
        hovered: 是否为悬停节点
        dark_mode: 深色模式
        show_labels: 是否显示标签
        global_scale: 当前缩放级别
    """
    color = category_color(node.category)
    icon = category_icon(node.category)

    if dark_mode:
        border = "#ffffff" if hovered else "rgba(255, 255, 255, 0.6)"
        label_bg = "rgba(30, 41, 59, 0.95)" if hovered else "rgba(30, 41, 59, 0.8)"
        label_color = "#ffffff"
    else:
        border = "#ffffff" if hovered else "rgba(255, 255, 255, 0.8)"
        label_bg = "rgba(255, 255, 255, 0.95)" if hovered else "rgba(255, 255, 255, 0.8)"
        label_color = "#333333"

    return NodeStyle(
        size=size,
        color=color,
        icon=icon,
        symbol=icon_symbol(icon),
        border_color=border,
        border_width=(2 if hovered else 1.5) / global_scale,
        glow_color=f"{color}33" if hovered else None,  # 20% 透明度
        show_label=show_labels and global_scale >= LABEL_MIN_SCALE,
        show_icon=global_scale >= ICON_MIN_SCALE,
        label_background=label_bg,
        label_color=color if hovered else label_color,
        badge=node.connection_count if node.connection_count > 0 else None,
    )


def link_style(
    link: RenderLink,
    node_index: dict[str, RenderNode],
    *,
    hovered: bool = False,
    show_arrows: bool = True,
    has_reverse: bool = False,
) -> LinkStyle:
    """持久边的绘制属性"""
    return LinkStyle(
        color=link_color(link, node_index),
        width=4 if hovered else link.value * 0.8,
        curvature=0.3 if has_reverse else 0.0,
        arrow_length=5 if show_arrows else 0,
        particles=3,
        particle_speed=link.value * 0.01,
        particle_width=4 if hovered else link.value * 0.8,
        particle_color="#ffffff" if hovered else "rgba(255, 255, 255, 0.7)",
        dash=None,
        label=link.description,
    )


def transient_link_style(show_arrows: bool = True) -> LinkStyle:
    """连接模式临时边的绘制属性"""
    return LinkStyle(
        color=TRANSIENT_LINK_COLOR,
        width=3,
        curvature=0.0,
        arrow_length=5 if show_arrows else 0,
        particles=5,
        particle_speed=0.05,
        particle_width=3,
        particle_color=TRANSIENT_PARTICLE_COLOR,
        dash=TRANSIENT_DASH,
        label="",
    )


def background_color(dark_mode: bool) -> str | None:
    return DARK_BACKGROUND if dark_mode else None


def strength_stars(value: int | None, total: int = 5) -> list[bool]:
    """强度 -> 星级（点亮 / 未点亮）"""
    filled = value or 0
    return [i < filled for i in range(total)]


def format_date(value: datetime | str | None) -> str:
    """格式化日期，如 'Dec 28, 2025'"""
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return ""
    return f"{value:%b} {value.day}, {value.year}"


__all__ = [
    "CATEGORY_COLORS",
    "CATEGORY_ICONS",
    "ICON_SYMBOLS",
    "RELATIONSHIP_ICONS",
    "FALLBACK_COLOR",
    "FALLBACK_ICON",
    "FALLBACK_SYMBOL",
    "FALLBACK_RELATIONSHIP_ICON",
    "UNRESOLVED_LINK_COLOR",
    "category_color",
    "category_icon",
    "icon_symbol",
    "relationship_icon",
    "relationship_label",
    "gradient_id",
    "link_color",
    "gradient_definitions",
    "GradientDefinition",
    "NodeStyle",
    "LinkStyle",
    "node_style",
    "link_style",
    "transient_link_style",
    "background_color",
    "strength_stars",
    "format_date",
]
