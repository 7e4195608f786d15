"""
Cosmic Nexus - 知识图谱视图核心

图谱数据投影、视觉编码与交互状态机。
"""

__version__ = "0.1.0"
