"""Layout helpers - 布局计算

聚簇布局：分类中心均匀分布在大圆上，分类成员分布在分类中心周围的小圆上。
力导向布局：只给出参数，由画布驱动执行模拟；模拟结束后做一次碰撞分离。
"""

import math
from collections.abc import Collection
from dataclasses import dataclass

from cosmic_nexus.config import NexusConfig, get_config
from cosmic_nexus.models.graph import RenderNode

DEFAULT_CHARGE = -180.0


@dataclass(frozen=True)
class ForceParameters:
    """力导向参数"""

    charge: float = DEFAULT_CHARGE  # 斥力
    link_distance: float = 120.0  # 边长
    collision_factor: float = 1.5  # 碰撞半径 = val * factor
    center: bool = True  # 居中力

    @classmethod
    def from_config(cls, config: NexusConfig | None = None) -> "ForceParameters":
        config = config or get_config()
        return cls(
            charge=config.force_charge,
            link_distance=config.force_link_distance,
            collision_factor=config.collision_factor,
        )

    def collision_radius(self, node: RenderNode) -> float:
        return node.val * self.collision_factor

    def spring_distance(self) -> float:
        """弹簧模型的理想节点间距

        以默认斥力为基准：斥力越强，节点间距越大。
        """
        strength = math.sqrt(max(abs(self.charge), 1.0) / abs(DEFAULT_CHARGE))
        return max(self.link_distance, 1.0) * strength


def resolve_collisions(
    positions: dict[str, tuple[float, float]],
    radii: dict[str, float],
    fixed: Collection[str] = (),
    passes: int = 3,
) -> dict[str, tuple[float, float]]:
    """
    分离重叠节点

    两个节点间距小于半径之和时沿连线方向推开；固定节点不动，
    另一个节点承担全部位移。

    Args:
        positions: 节点 ID -> (x, y)
        radii: 节点 ID -> 碰撞半径
        fixed: 固定节点 ID
        passes: 迭代次数

    Returns:
        新的坐标字典
    """
    result = dict(positions)
    ids = list(result)

    for _ in range(passes):
        moved = False
        for i, a in enumerate(ids):
            for b in ids[i + 1:]:
                if a in fixed and b in fixed:
                    continue
                (ax, ay), (bx, by) = result[a], result[b]
                min_dist = radii.get(a, 0.0) + radii.get(b, 0.0)
                dx, dy = bx - ax, by - ay
                dist = math.hypot(dx, dy)
                if dist >= min_dist:
                    continue
                overlap = min_dist - dist
                if dist == 0:
                    # 完全重合：沿 x 轴分开
                    ux, uy = 1.0, 0.0
                else:
                    ux, uy = dx / dist, dy / dist

                if a in fixed:
                    share_a, share_b = 0.0, 1.0
                elif b in fixed:
                    share_a, share_b = 1.0, 0.0
                else:
                    share_a = share_b = 0.5
                result[a] = (ax - ux * overlap * share_a, ay - uy * overlap * share_a)
                result[b] = (bx + ux * overlap * share_b, by + uy * overlap * share_b)
                moved = True
        if not moved:
            break

    return result


def clear_pins(nodes: list[RenderNode]) -> None:
    """清除所有节点的固定坐标"""
    for node in nodes:
        node.clear_pin()


def group_by_category(nodes: list[RenderNode]) -> dict[str, list[RenderNode]]:
    """按分类分组（保持首次出现顺序）"""
    groups: dict[str, list[RenderNode]] = {}
    for node in nodes:
        groups.setdefault(node.category, []).append(node)
    return groups


def cluster_positions(
    nodes: list[RenderNode],
    radius: float = 250.0,
    base_radius: float = 30.0,
    spacing: float = 5.0,
    center: tuple[float, float] = (0.0, 0.0),
) -> dict[str, tuple[float, float]]:
    """
    计算聚簇布局坐标

    Args:
        nodes: 渲染节点
        radius: 分类中心所在圆的半径
        base_radius: 分类内小圆的基础半径
        spacing: 每个成员增加的半径
        center: 画布中心

    Returns:
        节点 ID -> (x, y)
    """
    groups = group_by_category(nodes)
    if not groups:
        return {}

    positions = {}
    cx, cy = center
    num_categories = len(groups)

    for i, members in enumerate(groups.values()):
        angle = (i / num_categories) * 2 * math.pi
        cluster_x = cx + radius * math.cos(angle)
        cluster_y = cy + radius * math.sin(angle)

        cluster_radius = base_radius + len(members) * spacing
        for j, node in enumerate(members):
            node_angle = (j / len(members)) * 2 * math.pi
            positions[node.id] = (
                cluster_x + cluster_radius * math.cos(node_angle) * 0.5,
                cluster_y + cluster_radius * math.sin(node_angle) * 0.5,
            )

    return positions


def apply_cluster_layout(
    nodes: list[RenderNode], config: NexusConfig | None = None
) -> dict[str, tuple[float, float]]:
    """把聚簇坐标写入节点的固定坐标 fx/fy"""
    config = config or get_config()
    positions = cluster_positions(
        nodes,
        radius=config.cluster_radius,
        base_radius=config.cluster_base_radius,
        spacing=config.cluster_member_spacing,
    )
    for node in nodes:
        node.fx, node.fy = positions[node.id]
    return positions
